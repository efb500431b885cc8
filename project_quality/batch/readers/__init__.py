"""
Batch data source readers.
"""

from .csv_reader import CSVReader
from .file_reader import FileReader
from .project_loader import RAW_PROJECT_SCHEMA, SERVICE_LINE_SCHEMA, ProjectRecordLoader

__all__ = [
    "CSVReader",
    "FileReader",
    "ProjectRecordLoader",
    "RAW_PROJECT_SCHEMA",
    "SERVICE_LINE_SCHEMA",
]
