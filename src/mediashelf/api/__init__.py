"""API layer: canonical read surface for presentation code.

Key rules:

1. No SQLAlchemy imports - only call repo functions
2. Return Pydantic records or composition wrappers only
3. Scoping (library, soft-delete) is enforced by the repos, never re-derived here
"""
