"""Compliance Engine — check memorial text against CB-PI technical instructions."""

from cbpi.compliance.engine import ComplianceEngine
from cbpi.compliance.errors import (
    ComplianceAnalysisError,
    ComplianceError,
    InputError,
)
from cbpi.compliance.models import (
    ComplianceAnalysisResult,
    ComplianceSummary,
    Severity,
    VerificationItem,
    VerificationResult,
)
from cbpi.compliance.report import render_markdown
from cbpi.compliance.rules import ComplianceRule

__all__ = [
    "ComplianceAnalysisError",
    "ComplianceAnalysisResult",
    "ComplianceEngine",
    "ComplianceError",
    "ComplianceRule",
    "ComplianceSummary",
    "InputError",
    "Severity",
    "VerificationItem",
    "VerificationResult",
    "render_markdown",
]
