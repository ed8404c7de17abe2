"""Shared pydantic schemas."""
