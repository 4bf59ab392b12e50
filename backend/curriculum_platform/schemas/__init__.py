"""Curriculum Platform - Pydantic schemas."""
