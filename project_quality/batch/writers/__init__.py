"""
Batch data sink writers.
"""

from .clean_writer import CleanRecordWriter
from .quarantine_writer import QuarantineWriter

__all__ = [
    "CleanRecordWriter",
    "QuarantineWriter",
]
