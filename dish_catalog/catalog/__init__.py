"""
Dish catalog package.

Responsibilities:
- Hold the dish collection loaded from the processed catalog file.
- Filter, sort and paginate dishes for listing.
- Run free-text search and ingredient matching.
"""
