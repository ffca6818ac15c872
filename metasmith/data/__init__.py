"""
CSV handling for the Metasmith enhancer: parsing, column detection,
row building and export.
"""

from .columns import ColumnDetectionResult, ColumnDetector, detect_meta_columns
from .export import export_csv, to_dataframe
from .parser import ParsedCSV, parse_csv_text, parse_headers, parse_line
from .rows import build_rows

__all__ = [
    'parse_line',
    'parse_headers',
    'parse_csv_text',
    'ParsedCSV',
    'ColumnDetector',
    'ColumnDetectionResult',
    'detect_meta_columns',
    'build_rows',
    'export_csv',
    'to_dataframe',
]
