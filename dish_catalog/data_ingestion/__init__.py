"""
Catalog import package.

Responsibilities:
- Read the raw dish CSV.
- Normalize it into the canonical Dish schema.
- Replace the processed catalog file served by the API.
"""
