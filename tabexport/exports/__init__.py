"""Exports: tabular documents to bytes.

- writers.py: delimited text and SpreadsheetML 2003 encoders
- workbook.py: xlsx encoder (openpyxl)
- pdf.py: paginated table encoder (reportlab)
- exporters.py: per-format export functions returning (payload, diagnostic)
- payload.py: JSON request bodies -> record type + records
- cli.py: command-line front end
"""
