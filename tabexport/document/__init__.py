"""Tabular document assembly.

- builder.py: records -> TabularDocument (header + body rows of typed cells)
- errors.py: failures that end up as diagnostics at the export boundary
"""
