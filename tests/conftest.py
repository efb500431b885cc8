"""
Pytest configuration and fixtures for project-quality tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import csv
import os
import shutil
from typing import Callable, Generator

import pytest

from project_quality.core.models import RawProjectRecord

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
RAW_PROJECTS_CSV = os.path.join(DATA_DIR, "raw_projects.csv")
SERVICE_LINES_CSV = os.path.join(DATA_DIR, "service_lines.csv")


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require a local Spark session"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session():
    """
    Create a Spark session for testing with local mode

    Skips the requesting test when no Java runtime is available.

    Yields:
        SparkSession configured for local testing
    """
    if shutil.which("java") is None and not os.environ.get("JAVA_HOME"):
        pytest.skip("Spark tests require a Java runtime")

    from pyspark.sql import SparkSession

    spark = (
        SparkSession.builder
        .appName("project-quality-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")  # Disable UI for tests
        .config("spark.sql.warehouse.dir", "/tmp/spark-warehouse")
        .getOrCreate()
    )

    # Set log level to WARN to reduce test output noise
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    # Cleanup
    spark.stop()


# =======================
# DATA FIXTURES
# =======================

def _read_reference_rows() -> list[RawProjectRecord]:
    with open(RAW_PROJECTS_CSV, newline="", encoding="utf-8") as f:
        return [
            RawProjectRecord(**{key: (None if value == "NULL" else value) for key, value in row.items()})
            for row in csv.DictReader(f)
        ]


@pytest.fixture(scope="session")
def reference_records() -> list[RawProjectRecord]:
    """
    The 26-row reference dataset (25 projects, PRJ_008 entered twice)

    Returns:
        Raw records in file order
    """
    return _read_reference_rows()


@pytest.fixture(scope="session")
def reference_by_id(reference_records) -> dict[str, RawProjectRecord]:
    """First occurrence of every reference project keyed by project_id"""
    by_id: dict[str, RawProjectRecord] = {}
    for record in reference_records:
        by_id.setdefault(record.project_id, record)
    return by_id


@pytest.fixture
def make_record() -> Callable[..., RawProjectRecord]:
    """
    Factory for a valid raw record that needs no correction

    Keyword arguments override individual fields.
    """
    def _make(**overrides) -> RawProjectRecord:
        values = {
            "project_id": "PRJ_100",
            "project_name": "Pricing Analytics",
            "service_line_id": 2,
            "client_name": "Client_Test",
            "start_date": "2024-01-01",
            "planned_end_date": "2024-05-01",
            "actual_end_date": "2024-05-01",
            "planned_duration_months": 4,
            "team_size": 4,
            "planned_cost_eur": "200000.00",
            "actual_cost_eur": "220000.00",
            "cost_overrun_pct": "10.00",
            "utilization_pct": "80.00",
            "delay_days": 0,
            "status": "On-Time",
        }
        values.update(overrides)
        return RawProjectRecord(**values)

    return _make


@pytest.fixture
def raw_csv_path() -> str:
    return RAW_PROJECTS_CSV


@pytest.fixture
def service_lines_csv_path() -> str:
    return SERVICE_LINES_CSV


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_env_vars() -> Generator[None, None, None]:
    """
    Set test environment variables

    This fixture loads config/test.env and sets environment variables
    """
    from dotenv import load_dotenv

    env_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)),
        "config",
        "test.env"
    )

    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)
    yield
