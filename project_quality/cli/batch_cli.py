"""
Command-line interface for the data-quality pipeline.

Usage:
    python -m project_quality.cli.batch_cli clean --input <file_path> [options]
    python -m project_quality.cli.batch_cli audit --input <file_path> [options]
    python -m project_quality.cli.batch_cli validate --input <clean_jsonl>
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from pyspark.sql import SparkSession

from project_quality.batch.pipeline import DataQualityPipeline
from project_quality.core.models import CleanProjectRecord
from project_quality.core.rules import RemediationConfigLoader
from project_quality.observability.logger import get_logger
from project_quality.observability.metrics import write_metrics

logger = get_logger(__name__)


def create_spark_session(app_name: str = "ProjectQuality") -> SparkSession:
    """
    Create Spark session for batch processing.

    Args:
        app_name: Application name

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master("local[*]") \
        .config("spark.sql.adaptive.enabled", "true") \
        .config("spark.ui.enabled", "false") \
        .getOrCreate()

    return spark


def build_pipeline(args, spark: SparkSession) -> DataQualityPipeline:
    settings = RemediationConfigLoader(args.config).load_settings() if args.config else None
    return DataQualityPipeline(settings=settings, spark=spark)


def clean_command(args):
    """
    Execute the clean command.

    Args:
        args: Command-line arguments
    """
    logger.info(f"Cleaning input file: {args.input}")

    spark = create_spark_session("ProjectQuality-clean")
    try:
        pipeline = build_pipeline(args, spark)
        result = pipeline.process_file(
            file_path=args.input,
            file_format=args.format,
            service_lines_path=args.service_lines,
            output_path=args.output,
            output_format=args.output_format,
            quarantine_path=args.quarantine_output,
        )
    except Exception as e:
        logger.error(f"Error during data-quality processing: {e}", exc_info=True)
        sys.exit(1)
    finally:
        spark.stop()

    summary = result.summary()
    print(json.dumps(summary, indent=2))

    if args.metrics_file:
        write_metrics(args.metrics_file)

    failed = False
    if not result.analysis_ready:
        for violation in result.violations:
            logger.error(f"{violation.kind} violated by {violation.project_id}: {violation.detail}")
        failed = True

    if result.cleaning.quarantined:
        print(f"\n{len(result.cleaning.quarantined)} records could not be cleaned:")
        for rejected in result.cleaning.quarantined:
            for rule, message in zip(rejected.failed_rules, rejected.error_messages):
                print(f"{rejected.project_id:<10} {rule:<25} {message}")
        if not args.allow_rejects:
            logger.error(f"{len(result.cleaning.quarantined)} records could not be cleaned")
            failed = True

    if failed:
        sys.exit(1)


def audit_command(args):
    """
    Execute the audit command (detect only, nothing is written).

    Args:
        args: Command-line arguments
    """
    logger.info(f"Auditing input file: {args.input}")

    spark = create_spark_session("ProjectQuality-audit")
    try:
        pipeline = build_pipeline(args, spark)
        raw_records, loader = pipeline.load(args.input, args.format, args.service_lines)
        issues = pipeline.audit(raw_records)
    except Exception as e:
        logger.error(f"Error during audit: {e}", exc_info=True)
        sys.exit(1)
    finally:
        spark.stop()

    for rejected in loader.unparseable:
        print(f"{rejected.project_id:<10} PARSE_ERROR               {rejected.error_messages[0]}")
    for issue in issues:
        print(f"{issue.project_id:<10} {issue.issue_type:<25} {issue.description}")
    print(f"\n{len(issues)} issues found ({sum(1 for i in issues if i.severity == 'warning')} advisory)")


def validate_command(args):
    """
    Execute the validate command on a clean JSON lines file.

    Args:
        args: Command-line arguments
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)

    try:
        with open(input_path, encoding="utf-8") as f:
            records = [CleanProjectRecord.model_validate_json(line) for line in f if line.strip()]
        settings = RemediationConfigLoader(args.config).load_settings() if args.config else None
        violations = DataQualityPipeline(settings=settings).validate(records)
    except Exception as e:
        logger.error(f"Error during validation: {e}", exc_info=True)
        sys.exit(1)

    for violation in violations:
        print(f"{violation.project_id:<10} {violation.kind:<25} {violation.detail}")

    if violations:
        print(f"\n{len(violations)} invariant violations; dataset is not analysis-ready")
        sys.exit(1)
    print(f"All invariants hold for {len(records)} records")


def add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        required=True,
        help="Path to raw projects file"
    )
    parser.add_argument(
        "--format",
        default=None,
        choices=["csv", "json", "parquet"],
        help="Input file format (default: detected from extension)"
    )
    parser.add_argument(
        "--service-lines",
        default=None,
        help="Path to service-line reference file (default: built-in table)"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to remediation settings YAML file"
    )


def main(argv=None):
    """Main CLI entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Project data-quality remediation pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Clean a CSV export
  python -m project_quality.cli.batch_cli clean --input data/raw_projects.csv \\
      --output out/clean_projects.jsonl --quarantine-output out/quarantine.jsonl

  # Clean with custom settings and service-line table
  python -m project_quality.cli.batch_cli clean --input data/raw_projects.csv \\
      --config config/remediation.yaml --service-lines data/service_lines.csv

  # List every issue without correcting anything
  python -m project_quality.cli.batch_cli audit --input data/raw_projects.csv

  # Re-check a cleaned dataset
  python -m project_quality.cli.batch_cli validate --input out/clean_projects.jsonl
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Clean command
    clean_parser = subparsers.add_parser("clean", help="Clean a raw projects file")
    add_input_arguments(clean_parser)
    clean_parser.add_argument(
        "--output",
        default=None,
        help="Path for clean records (not written when omitted)"
    )
    clean_parser.add_argument(
        "--output-format",
        default="jsonl",
        choices=["jsonl", "csv", "parquet"],
        help="Clean output format (default: jsonl)"
    )
    clean_parser.add_argument(
        "--quarantine-output",
        default=None,
        help="Path for quarantined records as JSON lines"
    )
    clean_parser.add_argument(
        "--metrics-file",
        default=None,
        help="Write Prometheus metrics to this file after the run"
    )
    clean_parser.add_argument(
        "--allow-rejects",
        action="store_true",
        help="Exit successfully even when some records are quarantined"
    )

    # Audit command
    audit_parser = subparsers.add_parser("audit", help="Report data-quality issues without correcting them")
    add_input_arguments(audit_parser)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check a clean JSON lines file against the invariants")
    validate_parser.add_argument(
        "--input",
        required=True,
        help="Path to clean records (JSON lines)"
    )
    validate_parser.add_argument(
        "--config",
        default=None,
        help="Path to remediation settings YAML file"
    )

    # Parse arguments
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    if args.command == "clean":
        clean_command(args)
    elif args.command == "audit":
        audit_command(args)
    elif args.command == "validate":
        validate_command(args)


if __name__ == "__main__":
    main()
