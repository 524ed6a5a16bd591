"""ComplianceEngine — main entry point for memorial compliance checking.

Usage::

    from cbpi.compliance import ComplianceEngine

    engine = ComplianceEngine()
    result = engine.analyze_compliance(memorial_text)
"""

from __future__ import annotations

import logging
import math
from typing import Any

from cbpi.compliance.errors import ComplianceAnalysisError, InputError
from cbpi.compliance.models import (
    ComplianceAnalysisResult,
    ComplianceSummary,
    RuleOutcome,
    VerificationItem,
    VerificationResult,
)
from cbpi.compliance.rules import ComplianceRule, default_rules

logger = logging.getLogger(__name__)

URGENT_RECOMMENDATION = "URGENTE: Corrigir itens críticos antes da submissão do projeto"
POSITIVE_RECOMMENDATION = "Projeto apresenta boa conformidade com as normas do CB-PI"


def build_recommendations(items: list[VerificationItem]) -> list[str]:
    """Derive the ordered recommendation list from item verdicts."""
    recommendations: list[str] = []

    if any(i.is_critical_issue for i in items):
        recommendations.append(URGENT_RECOMMENDATION)

    non_compliant = sum(1 for i in items if i.result is VerificationResult.NAO_CONFORME)
    if non_compliant:
        recommendations.append(
            f"Revisar {non_compliant} item(ns) não conforme(s) identificado(s)"
        )

    partial = sum(1 for i in items if i.result is VerificationResult.PARCIAL)
    if partial:
        recommendations.append(
            f"Complementar informações de {partial} item(ns) parcialmente conforme(s)"
        )

    if not recommendations:
        recommendations.append(POSITIVE_RECOMMENDATION)

    return recommendations


def conformity_score(summary: ComplianceSummary) -> int:
    """Percentage of items that are compliant or not applicable.

    Halves round up; an empty summary scores 0.
    """
    if summary.total <= 0:
        return 0
    return math.floor(100 * summary.satisfied / summary.total + 0.5)


class ComplianceEngine:
    """Run the rule battery over memorial text.

    Parameters
    ----------
    rules:
        Rules to evaluate, in order.  Defaults to the built-in battery
        (exits, extinguishers, lighting, hydrants, general).
    """

    def __init__(self, rules: list[ComplianceRule] | None = None) -> None:
        self.rules: list[ComplianceRule] = (
            list(rules) if rules is not None else default_rules()
        )

    def add_rule(self, rule: ComplianceRule) -> None:
        """Register an additional rule, evaluated after the existing ones."""
        self.rules.append(rule)

    def analyze_compliance(self, text: Any) -> ComplianceAnalysisResult:
        """Check *text* against every registered rule.

        A rule that raises is reported as a single ``PENDENTE`` item and
        the remaining rules still run.

        Raises
        ------
        InputError
            If *text* is not a string.
        ComplianceAnalysisError
            If every rule failed, or the result could not be assembled.
        """
        if not isinstance(text, str):
            raise InputError(f"Expected memorial text as str, got {type(text).__name__}")

        outcomes: list[RuleOutcome] = []
        failures = 0
        for rule in self.rules:
            try:
                outcome = rule.evaluate(text)
            except Exception as exc:
                failures += 1
                logger.warning("Rule %s failed: %r", rule.name, exc, exc_info=True)
                outcome = rule.pending_outcome()
            else:
                logger.debug("Rule %s -> %s", rule.name, outcome.result.value)
            outcomes.append(outcome)

        if self.rules and failures == len(self.rules):
            logger.error("All %d compliance rules failed", failures)
            raise ComplianceAnalysisError()

        try:
            return self._build_result(outcomes)
        except Exception as exc:
            logger.exception("Failed to assemble compliance result")
            raise ComplianceAnalysisError() from exc

    @staticmethod
    def _build_result(outcomes: list[RuleOutcome]) -> ComplianceAnalysisResult:
        items = [
            VerificationItem(id=f"item_{n}", **outcome.model_dump())
            for n, outcome in enumerate(outcomes, start=1)
        ]
        summary = ComplianceSummary.from_items(items)
        return ComplianceAnalysisResult(
            items=items,
            summary=summary,
            recommendations=build_recommendations(items),
            critical_issues=[i for i in items if i.is_critical_issue],
            conformity=conformity_score(summary),
        )
