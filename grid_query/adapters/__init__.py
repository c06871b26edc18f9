"""Execution backends: raw SQL and SQLAlchemy ORM."""
