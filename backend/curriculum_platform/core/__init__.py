"""Curriculum Platform - Core configuration, database and security."""
