"""
File reader for nested record inputs (JSON lines, Parquet).
"""

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StructType

SUPPORTED_FORMATS = ("json", "parquet")


class FileReader:
    """
    Reads record files into DataFrames shaped by an explicit schema.

    CSV is not supported: it cannot carry the nested acl, legal and data structs.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize file reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark

    def read(
        self,
        file_path: str,
        schema: StructType,
        file_format: str = "json",
        multi_line: bool = False,
    ) -> DataFrame:
        """
        Read file into Spark DataFrame.

        Args:
            file_path: Path to file or directory
            schema: Row schema; input columns are projected onto it
            file_format: Format (json, parquet)
            multi_line: Whether JSON documents span multiple lines

        Returns:
            Spark DataFrame

        Raises:
            ValueError: If file format is unsupported
        """
        file_format = file_format.lower()
        if file_format == "json":
            return self.spark.read \
                .schema(schema) \
                .option("mode", "FAILFAST") \
                .option("multiLine", str(multi_line).lower()) \
                .json(file_path)
        elif file_format == "parquet":
            return self.spark.read.schema(schema).parquet(file_path)
        else:
            raise ValueError(
                f"Unsupported file format: {file_format} (expected one of {', '.join(SUPPORTED_FORMATS)})"
            )
