"""Curriculum Platform - curriculum seeding backend."""
