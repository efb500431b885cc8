"""
Data-quality remediation pipeline for consulting project records.
"""

__version__ = "0.1.0"
