"""
DC Hygiene Toolkit - Report Writers
"""

from .reporter import ReportGenerator, open_in_viewer
from .exporter import CsvExporter

__all__ = [
    'ReportGenerator',
    'open_in_viewer',
    'CsvExporter'
]
