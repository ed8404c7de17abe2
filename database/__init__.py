"""Persistence layer: ORM models, sessions, task store and queries."""
