"""Verification items and analysis result models.

Field names are Pythonic; aliases carry the JSON shape the web layer
expects (``resultado``, ``itReferencia``, ``criticalIssues`` ...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerificationResult(str, Enum):
    """Verdict for a single checked requirement."""

    CONFORME = "CONFORME"
    NAO_CONFORME = "NAO_CONFORME"
    PARCIAL = "PARCIAL"
    NAO_APLICAVEL = "NAO_APLICAVEL"
    PENDENTE = "PENDENTE"


class Severity(str, Enum):
    """Fixed per rule; never computed from the text."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RuleOutcome(BaseModel):
    """What a rule reports before the engine numbers it."""

    model_config = ConfigDict(frozen=True)

    item: str
    result: VerificationResult
    observation: str
    reference_code: str
    severity: Severity
    suggestion: str | None = None


class VerificationItem(BaseModel):
    """One checked requirement inside an analysis run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    item: str
    result: VerificationResult = Field(alias="resultado")
    observation: str = Field(alias="observacao")
    reference_code: str = Field(alias="itReferencia")
    severity: Severity = Field(alias="severidade")
    suggestion: str | None = Field(default=None, alias="sugestao")
    analysis_id: str = Field(default="current", alias="analiseId")
    """Owning analysis; ``'current'`` until a stored record claims it."""

    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    @property
    def is_critical_issue(self) -> bool:
        return (
            self.severity is Severity.CRITICAL
            and self.result is VerificationResult.NAO_CONFORME
        )


class ComplianceSummary(BaseModel):
    """Item counts per verdict."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: int = 0
    conforme: int = 0
    nao_conforme: int = Field(default=0, alias="naoConforme")
    nao_aplicavel: int = Field(default=0, alias="naoAplicavel")
    parcial: int = 0
    pendente: int = 0

    @classmethod
    def from_items(cls, items: list[VerificationItem]) -> ComplianceSummary:
        counts = {result: 0 for result in VerificationResult}
        for item in items:
            counts[item.result] += 1
        return cls(
            total=len(items),
            conforme=counts[VerificationResult.CONFORME],
            nao_conforme=counts[VerificationResult.NAO_CONFORME],
            nao_aplicavel=counts[VerificationResult.NAO_APLICAVEL],
            parcial=counts[VerificationResult.PARCIAL],
            pendente=counts[VerificationResult.PENDENTE],
        )

    @property
    def satisfied(self) -> int:
        """Items that raise no objection: compliant or not applicable."""
        return self.conforme + self.nao_aplicavel


class ComplianceAnalysisResult(BaseModel):
    """Structured verdict for one memorial text."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    items: list[VerificationItem] = Field(default_factory=list)
    """In rule evaluation order."""

    summary: ComplianceSummary = Field(default_factory=ComplianceSummary)
    recommendations: list[str] = Field(default_factory=list)
    critical_issues: list[VerificationItem] = Field(
        default_factory=list, alias="criticalIssues"
    )
    conformity: int = Field(default=0, alias="conformidade")
    """Percentage of items found compliant or not applicable."""

    def with_analysis_id(self, analysis_id: str) -> ComplianceAnalysisResult:
        """Return a copy whose items are attributed to *analysis_id*."""
        items = [i.model_copy(update={"analysis_id": analysis_id}) for i in self.items]
        by_id = {i.id: i for i in items}
        critical = [by_id[i.id] for i in self.critical_issues]
        return self.model_copy(update={"items": items, "critical_issues": critical})

    def items_with(self, result: VerificationResult) -> list[VerificationItem]:
        return [i for i in self.items if i.result is result]

    def to_json_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON shape."""
        return self.model_dump(mode="json", by_alias=True)
