"""
Quarantine writer for rejected records.

Writes rows the remediation engine could not repair as JSON lines, one
QuarantineRecord per line, with every error that rejected the row.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List

from project_quality.core.models import QuarantineRecord
from project_quality.observability.logger import get_logger

logger = get_logger(__name__)


class QuarantineWriter:
    """
    Appends quarantined records to a JSON lines file.
    """

    def __init__(self, path: str):
        """
        Initialize quarantine writer.

        Args:
            path: Quarantine file; created (with parent directories) on first write
        """
        self.path = Path(path)

    def write_batch(self, records: Iterable[QuarantineRecord]) -> int:
        """
        Write quarantine records.

        Args:
            records: Records rejected in this run

        Returns:
            Number of records quarantined
        """
        records = list(records)
        if not records:
            return 0

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            for record in records:
                f.write(record.model_dump_json())
                f.write("\n")

        logger.warning(
            f"Quarantined {len(records)} records to {self.path}",
            extra={"path": str(self.path), "project_ids": [record.project_id for record in records]},
        )
        return len(records)

    def read_all(self) -> List[QuarantineRecord]:
        """
        Read every record in the quarantine file.

        Returns:
            List of QuarantineRecord, oldest first (empty when the file does not exist)
        """
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            return [QuarantineRecord.model_validate_json(line) for line in f if line.strip()]

    def summarize(self) -> Dict[str, Any]:
        """
        Count quarantined records per failed rule.

        Returns:
            Dictionary with total count and per-rule counts
        """
        by_rule: Dict[str, int] = {}
        records = self.read_all()
        for record in records:
            for rule in record.failed_rules:
                by_rule[rule] = by_rule.get(rule, 0) + 1
        return {"total": len(records), "by_rule": dict(sorted(by_rule.items()))}
