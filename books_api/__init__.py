"""
FastAPI REST API for the book catalogue.

This package provides:
- CRUD endpoints for book records
- Duplicate detection on (title, author)
- Uniform JSON error responses
"""
