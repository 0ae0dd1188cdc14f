"""Services for the Excel file manager engine.

Modules:
- date_heuristic: serial and formatted date conversion
- normalizer: ragged rows to rectangular sheets
- format_detector: container sniffing
- excel_parser: byte buffers to workbooks
- sorter, merger, table_editor: pure sheet transforms
"""
