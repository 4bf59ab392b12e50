"""Curriculum Platform - Operator scripts."""
