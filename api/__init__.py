"""
FastAPI REST API for the Bookstore service.

This module provides:
- CRUD routes for book records
- Pagination and sorting of book listings
- Uniform JSON envelopes for results and errors
"""
