"""
Shared utilities for the Book Catalogue API.
"""
