"""Test fixture package for the enricher.

Contains fixtures for:
- In-memory SQLite sessions with the enricher schema
- Asset stubs and repository mocks for service tests
"""
