"""
Dish catalog API.

Responsibilities:
- Serve the dish catalog over HTTP (listing, search, lookup).
- Match a pantry of ingredients against the catalog.
- Import the raw dish CSV into the canonical catalog file.
"""
