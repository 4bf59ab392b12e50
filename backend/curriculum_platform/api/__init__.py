"""Curriculum Platform - HTTP API."""
