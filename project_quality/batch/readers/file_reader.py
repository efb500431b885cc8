"""
Generic file reader for multiple formats (CSV, JSON, Parquet).
"""


from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StructType

from .csv_reader import CSVReader

SUPPORTED_FORMATS = ("csv", "json", "parquet")


class FileReader:
    """
    Generic file reader supporting multiple formats.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize file reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark
        self.csv_reader = CSVReader(spark)

    @staticmethod
    def detect_format(file_path: str) -> str:
        """
        Guess the file format from the extension.

        Raises:
            ValueError: If the extension is not a supported format
        """
        suffix = file_path.rsplit(".", 1)[-1].lower() if "." in file_path else ""
        if suffix == "jsonl":
            suffix = "json"
        if suffix not in SUPPORTED_FORMATS:
            raise ValueError(f"Cannot detect file format of '{file_path}', pass one of {SUPPORTED_FORMATS}")
        return suffix

    def read(
        self,
        file_path: str,
        file_format: str | None = None,
        schema: StructType | None = None,
        **options
    ) -> DataFrame:
        """
        Read file into Spark DataFrame.

        Args:
            file_path: Path to file
            file_format: Format (csv, json, parquet); detected from the extension when omitted
            schema: Optional explicit schema
            **options: Format-specific options

        Returns:
            Spark DataFrame

        Raises:
            ValueError: If file format is unsupported
        """
        file_format = (file_format or self.detect_format(file_path)).lower()

        if file_format == "csv":
            return self.csv_reader.read(
                file_path,
                schema=schema,
                **options
            )
        elif file_format == "json":
            reader = self.spark.read
            if schema:
                reader = reader.schema(schema)
            return reader.option("dateFormat", options.get("date_format", "yyyy-MM-dd")).json(file_path)
        elif file_format == "parquet":
            df = self.spark.read.parquet(file_path)
            if schema:
                df = df.select([df[field.name].cast(field.dataType).alias(field.name) for field in schema.fields])
            return df
        else:
            raise ValueError(f"Unsupported file format: {file_format}")
