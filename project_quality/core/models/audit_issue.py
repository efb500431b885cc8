"""
AuditIssue model representing one finding of the detect-only audit pass.
"""

from typing import Literal

from pydantic import BaseModel


class AuditIssue(BaseModel):
    """
    A defect or advisory finding in the raw data.

    Attributes:
        issue_type: Rule id or advisory check name that detected the issue
        project_id: Affected project
        description: What was found
        severity: "error" for defects the engine corrects, "warning" for
                  advisory findings that are only reported
    """

    issue_type: str
    project_id: str
    description: str
    severity: Literal["error", "warning"] = "error"

    class Config:
        frozen = True
