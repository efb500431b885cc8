"""
Loads raw project rows and the service-line reference table through Spark.

Rows are read with an explicit schema so that absent values arrive as None
and costs keep their exact decimal value, then converted to models.
"""

from pyspark.sql import SparkSession
from pyspark.sql.types import (
    DateType,
    DecimalType,
    IntegerType,
    StringType,
    StructField,
    StructType,
)
from pydantic import ValidationError

from project_quality.core.models import QuarantineRecord, RawProjectRecord, ServiceLine
from project_quality.observability.logger import get_logger

from .file_reader import FileReader

logger = get_logger(__name__)

CORRUPT_RECORD_COLUMN = "_corrupt_record"
PARSE_ERROR_RULE = "PARSE_ERROR"

RAW_PROJECT_SCHEMA = StructType([
    StructField("project_id", StringType(), True),
    StructField("project_name", StringType(), True),
    StructField("service_line_id", IntegerType(), True),
    StructField("client_name", StringType(), True),
    StructField("start_date", DateType(), True),
    StructField("planned_end_date", DateType(), True),
    StructField("actual_end_date", DateType(), True),
    StructField("planned_duration_months", IntegerType(), True),
    StructField("team_size", IntegerType(), True),
    StructField("planned_cost_eur", DecimalType(12, 2), True),
    StructField("actual_cost_eur", DecimalType(12, 2), True),
    StructField("cost_overrun_pct", DecimalType(6, 2), True),
    StructField("utilization_pct", DecimalType(6, 2), True),
    StructField("delay_days", IntegerType(), True),
    StructField("status", StringType(), True),
])

SERVICE_LINE_SCHEMA = StructType([
    StructField("service_line_id", IntegerType(), False),
    StructField("service_line_name", StringType(), False),
    StructField("complexity_level", StringType(), False),
    StructField("typical_duration_months", IntegerType(), True),
    StructField("typical_team_size", IntegerType(), True),
])


def _with_corrupt_column(schema: StructType) -> StructType:
    return StructType(schema.fields + [StructField(CORRUPT_RECORD_COLUMN, StringType(), True)])


class ProjectRecordLoader:
    """
    Converts source files into RawProjectRecord and ServiceLine models.

    Rows that cannot be parsed are not dropped: they are collected in
    ``unparseable`` as QuarantineRecords so the caller can report them next
    to the rows the remediation engine rejects.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize the loader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark
        self.file_reader = FileReader(spark)
        self.unparseable: list[QuarantineRecord] = []

    def load_projects(self, file_path: str, file_format: str | None = None, **read_options) -> list[RawProjectRecord]:
        """
        Read raw project rows in file order.

        Args:
            file_path: Path to CSV, JSON or Parquet file
            file_format: Format; detected from the extension when omitted
            **read_options: Additional reader options

        Returns:
            List of RawProjectRecord (duplicates kept as received)
        """
        schema = RAW_PROJECT_SCHEMA
        if (file_format or self.file_reader.detect_format(file_path)) == "csv":
            schema = _with_corrupt_column(RAW_PROJECT_SCHEMA)

        df = self.file_reader.read(file_path, file_format=file_format, schema=schema, **read_options)
        rows = df.collect()

        records: list[RawProjectRecord] = []
        self.unparseable = []

        for position, row in enumerate(rows, start=1):
            row_dict = row.asDict()
            corrupt_line = row_dict.pop(CORRUPT_RECORD_COLUMN, None)
            project_id = row_dict.get("project_id") or f"<row {position}>"

            if corrupt_line is not None:
                self._reject(project_id, row_dict, f"row {position} could not be parsed: {corrupt_line}")
                continue

            try:
                records.append(RawProjectRecord(**row_dict))
            except ValidationError as e:
                self._reject(project_id, row_dict, f"row {position} is not a valid project record: {e}")

        logger.info(
            f"Loaded {len(records)} project rows from {file_path}",
            extra={"file_path": file_path, "rows": len(rows), "unparseable": len(self.unparseable)},
        )
        return records

    def load_service_lines(self, file_path: str, file_format: str | None = None, **read_options) -> dict[int, ServiceLine]:
        """
        Read the service-line reference table.

        Returns:
            Service lines keyed by id

        Raises:
            ValueError: If a row is invalid or an id appears twice
        """
        df = self.file_reader.read(file_path, file_format=file_format, schema=SERVICE_LINE_SCHEMA, **read_options)

        service_lines: dict[int, ServiceLine] = {}
        for row in df.collect():
            try:
                line = ServiceLine(**row.asDict())
            except ValidationError as e:
                raise ValueError(f"Invalid service line row in {file_path}: {e}")
            if line.service_line_id in service_lines:
                raise ValueError(f"Duplicate service_line_id {line.service_line_id} in {file_path}")
            service_lines[line.service_line_id] = line

        logger.info(f"Loaded {len(service_lines)} service lines from {file_path}")
        return service_lines

    def _reject(self, project_id: str, row_dict: dict, message: str) -> None:
        logger.warning(message, extra={"project_id": project_id})
        self.unparseable.append(QuarantineRecord(
            project_id=project_id,
            raw_payload={key: (str(value) if value is not None else None) for key, value in row_dict.items()},
            failed_rules=[PARSE_ERROR_RULE],
            error_messages=[message],
            error_type="ParseError",
        ))
