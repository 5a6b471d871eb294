"""Column titles from label references.

Resolvers may fail; `resolve_label` falls back to the raw field name.
"""
