"""
Clean record writer.

Writes the remediated dataset as JSON lines (default), or as a flat CSV or
Parquet table through Spark with the quality trail rendered as one column.
"""

from pathlib import Path
from typing import Iterable, Optional

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StringType, StructField, StructType

from project_quality.batch.readers.project_loader import RAW_PROJECT_SCHEMA
from project_quality.core.models import CleanProjectRecord
from project_quality.observability.logger import get_logger

logger = get_logger(__name__)

CLEAN_TABLE_SCHEMA = StructType(
    RAW_PROJECT_SCHEMA.fields + [StructField("data_quality_note", StringType(), False)]
)


class CleanRecordWriter:
    """
    Writes CleanProjectRecords to disk.
    """

    def __init__(self, spark: Optional[SparkSession] = None):
        """
        Initialize clean record writer.

        Args:
            spark: Spark session, only needed for csv and parquet output
        """
        self.spark = spark

    def write(self, records: Iterable[CleanProjectRecord], path: str, file_format: str = "jsonl") -> int:
        """
        Write clean records.

        Args:
            records: Clean records in output order
            path: Destination file (jsonl) or directory (csv, parquet)
            file_format: jsonl, csv or parquet

        Returns:
            Number of records written

        Raises:
            ValueError: If the format is unsupported or needs a Spark session
        """
        records = list(records)

        if file_format == "jsonl":
            count = self.write_json_lines(records, path)
        elif file_format in ("csv", "parquet"):
            if self.spark is None:
                raise ValueError(f"Writing {file_format} output requires a Spark session")
            df = self.to_dataframe(records)
            writer = df.coalesce(1).write.mode("overwrite")
            if file_format == "csv":
                writer.option("header", "true").option("nullValue", "NULL").csv(path)
            else:
                writer.parquet(path)
            count = len(records)
        else:
            raise ValueError(f"Unsupported output format: {file_format}")

        logger.info(f"Wrote {count} clean records to {path}", extra={"path": path, "format": file_format})
        return count

    @staticmethod
    def write_json_lines(records: list[CleanProjectRecord], path: str) -> int:
        """One JSON object per line, quality trail kept as a list."""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for record in records:
                f.write(record.model_dump_json())
                f.write("\n")
        return len(records)

    def to_dataframe(self, records: list[CleanProjectRecord]) -> DataFrame:
        """
        Convert clean records into a flat Spark DataFrame.

        The quality trail becomes a single text column ("RULE: reason. ...").
        """
        rows = []
        for record in records:
            values = record.model_dump(exclude={"data_quality_note"})
            rows.append(tuple(values[field.name] for field in RAW_PROJECT_SCHEMA.fields) + (record.note_text(),))
        return self.spark.createDataFrame(rows, schema=CLEAN_TABLE_SCHEMA)
