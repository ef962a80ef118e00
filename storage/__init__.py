"""
MongoDB storage layer for book records.

This package provides:
- Book models and field validation
- The BookRepository CRUD operations
- Connection management for the books collection
- The error taxonomy shared with the HTTP layer
"""
