"""openpyxl workbook helpers."""
