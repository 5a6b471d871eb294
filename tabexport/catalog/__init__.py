"""Field catalog: which fields of a record type become columns.

- fields.py: explicit field declaration (dataclasses, registration) and the cached catalog
- selector.py: case-insensitive column allow-list
"""
