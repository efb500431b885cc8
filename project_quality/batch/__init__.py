"""
Spark batch processing module.
"""

from .pipeline import DataQualityPipeline, PipelineResult
from .readers import CSVReader, FileReader, ProjectRecordLoader
from .writers import CleanRecordWriter, QuarantineWriter

__all__ = [
    "DataQualityPipeline",
    "PipelineResult",
    "CSVReader",
    "FileReader",
    "ProjectRecordLoader",
    "CleanRecordWriter",
    "QuarantineWriter",
]
