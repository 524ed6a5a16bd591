"""Memorial compliance rules.

Each rule inspects the plain text of a memorial and reports a single
:class:`RuleOutcome`.  Rules are independent of each other and hold no
state between calls; the engine owns ordering and numbering.
"""

from __future__ import annotations

import abc
import re
from typing import ClassVar

from cbpi.compliance.models import RuleOutcome, Severity, VerificationResult
from cbpi.config import (
    MAX_EXTINGUISHER_DISTANCE_M,
    MIN_EXIT_WIDTH_M,
    MIN_LIGHTING_AUTONOMY_H,
)


def parse_decimal(raw: str) -> float:
    """Parse a number written with either a comma or a dot as decimal mark."""
    return float(raw.strip().replace(",", "."))


class ComplianceRule(abc.ABC):
    """Base class for all compliance rules."""

    name: ClassVar[str] = ""
    """Short rule identifier, used in logs."""

    item: ClassVar[str] = ""
    """Human-readable requirement name shown in the report."""

    reference_code: ClassVar[str] = ""
    severity: ClassVar[Severity] = Severity.MEDIUM
    suggestion: ClassVar[str | None] = None

    @abc.abstractmethod
    def evaluate(self, text: str) -> RuleOutcome:
        """Check *text* and return the verdict for this requirement."""

    def outcome(self, result: VerificationResult, observation: str) -> RuleOutcome:
        return RuleOutcome(
            item=self.item,
            result=result,
            observation=observation,
            reference_code=self.reference_code,
            severity=self.severity,
            suggestion=self.suggestion,
        )

    def pending_outcome(self) -> RuleOutcome:
        """Outcome reported when the rule itself broke."""
        return self.outcome(
            VerificationResult.PENDENTE,
            "Verificação não concluída devido a erro interno; revisar manualmente",
        )


class KeywordRule(ComplianceRule):
    """Passes when the memorial mentions the required terms.

    With ``match_any`` set, one of the terms is enough; otherwise all of
    them must appear.  Matching is case-insensitive.
    """

    keywords: ClassVar[tuple[str, ...]] = ()
    match_any: ClassVar[bool] = False
    missing_result: ClassVar[VerificationResult] = VerificationResult.NAO_CONFORME
    found_observation: ClassVar[str] = ""
    missing_observation: ClassVar[str] = ""

    def evaluate(self, text: str) -> RuleOutcome:
        lowered = text.lower()
        hits = [kw in lowered for kw in self.keywords]
        found = any(hits) if self.match_any else bool(hits) and all(hits)
        if found:
            return self.outcome(VerificationResult.CONFORME, self.found_observation)
        return self.outcome(self.missing_result, self.missing_observation)


class MeasurementRule(ComplianceRule):
    """Passes when any measurement quoted in the memorial is within limit.

    ``pattern`` must capture the number in its first group.  Every match
    is considered; ``check_type`` is ``'min_value'`` or ``'max_value'``.
    """

    pattern: ClassVar[re.Pattern[str]]
    check_type: ClassVar[str] = "min_value"
    limit: ClassVar[float] = 0.0
    fallback_result: ClassVar[VerificationResult] = VerificationResult.NAO_CONFORME
    found_label: ClassVar[str] = ""
    missing_observation: ClassVar[str] = ""

    def measurements(self, text: str) -> list[tuple[str, float]]:
        """Return ``(excerpt, value)`` for every match in *text*."""
        return [
            (m.group(0).strip(), parse_decimal(m.group(1)))
            for m in self.pattern.finditer(text)
        ]

    def accepts(self, value: float) -> bool:
        if self.check_type == "max_value":
            return value <= self.limit
        return value >= self.limit

    def evaluate(self, text: str) -> RuleOutcome:
        found = self.measurements(text)
        if not found:
            return self.outcome(self.fallback_result, self.missing_observation)

        excerpts = ", ".join(excerpt for excerpt, _ in found)
        observation = f"{self.found_label}: {excerpts}"
        if any(self.accepts(value) for _, value in found):
            return self.outcome(VerificationResult.CONFORME, observation)
        return self.outcome(self.fallback_result, observation)


# ---------------------------------------------------------------------------
# IT-008: Saídas de emergência
# ---------------------------------------------------------------------------


class ExitPresence(KeywordRule):
    name = "exits.presence"
    item = "Presença de saídas de emergência"
    reference_code = "IT-008/2019"
    severity = Severity.CRITICAL
    suggestion = "Verificar dimensionamento e quantidade adequada conforme IT-008"
    keywords = ("saída", "emergência")
    found_observation = "Saídas de emergência identificadas no projeto"
    missing_observation = "Não foi possível identificar saídas de emergência no memorial"


class ExitWidth(MeasurementRule):
    name = "exits.width"
    item = "Largura mínima das saídas"
    reference_code = "IT-008/2019"
    severity = Severity.HIGH
    suggestion = "Largura mínima de 1,20m para escadas de emergência"
    pattern = re.compile(r"largura.*?(\d+(?:[.,]\d+)?)\s*m", re.IGNORECASE)
    check_type = "min_value"
    limit = MIN_EXIT_WIDTH_M
    found_label = "Largura encontrada"
    missing_observation = "Largura das saídas não especificada"


class SafetyExitRules:
    """Emergency exit presence and width."""

    @staticmethod
    def all_rules() -> list[ComplianceRule]:
        return [ExitPresence(), ExitWidth()]


# ---------------------------------------------------------------------------
# IT-021: Extintores
# ---------------------------------------------------------------------------


class ExtinguisherPresence(KeywordRule):
    name = "extinguishers.presence"
    item = "Sistema de extintores portáteis"
    reference_code = "IT-021/2019"
    severity = Severity.HIGH
    suggestion = "Verificar tipos adequados e posicionamento conforme IT-021"
    keywords = ("extintor",)
    found_observation = "Sistema de extintores previsto no projeto"
    missing_observation = "Sistema de extintores não identificado"


class ExtinguisherDistance(MeasurementRule):
    """Out-of-limit or unstated distances are only partially compliant."""

    name = "extinguishers.distance"
    item = "Distância máxima entre extintores"
    reference_code = "IT-021/2019"
    severity = Severity.MEDIUM
    suggestion = "Distância máxima de 25m entre extintores para área comercial"
    pattern = re.compile(r"distância.*?(\d+)\s*m", re.IGNORECASE)
    check_type = "max_value"
    limit = MAX_EXTINGUISHER_DISTANCE_M
    fallback_result = VerificationResult.PARCIAL
    found_label = "Distância encontrada"
    missing_observation = "Distância entre extintores não especificada claramente"


class ExtinguisherRules:
    """Portable extinguisher presence and spacing."""

    @staticmethod
    def all_rules() -> list[ComplianceRule]:
        return [ExtinguisherPresence(), ExtinguisherDistance()]


# ---------------------------------------------------------------------------
# IT-018: Iluminação de emergência
# ---------------------------------------------------------------------------


class LightingPresence(KeywordRule):
    name = "lighting.presence"
    item = "Iluminação de emergência"
    reference_code = "IT-018/2019"
    severity = Severity.HIGH
    suggestion = "Verificar autonomia mínima e níveis de iluminamento conforme IT-018"
    keywords = ("iluminação", "emergência")
    found_observation = "Sistema de iluminação de emergência previsto"
    missing_observation = "Sistema de iluminação de emergência não identificado"


class LightingAutonomy(MeasurementRule):
    name = "lighting.autonomy"
    item = "Autonomia da iluminação de emergência"
    reference_code = "IT-018/2019"
    severity = Severity.MEDIUM
    suggestion = "Autonomia mínima de 1 hora conforme IT-018"
    pattern = re.compile(r"autonomia.*?(\d+)\s*hora", re.IGNORECASE)
    check_type = "min_value"
    limit = MIN_LIGHTING_AUTONOMY_H
    found_label = "Autonomia especificada"
    missing_observation = "Autonomia da iluminação não especificada"


class LightingRules:
    """Emergency lighting presence and battery autonomy."""

    @staticmethod
    def all_rules() -> list[ComplianceRule]:
        return [LightingPresence(), LightingAutonomy()]


# ---------------------------------------------------------------------------
# IT-022: Hidrantes
# ---------------------------------------------------------------------------


class HydrantPresence(KeywordRule):
    """Absence reads as not applicable, never as non-compliant."""

    name = "hydrants.presence"
    item = "Sistema de hidrantes"
    reference_code = "IT-022/2019"
    severity = Severity.MEDIUM
    suggestion = "Verificar pressão e vazão adequadas conforme IT-022"
    keywords = ("hidrante",)
    missing_result = VerificationResult.NAO_APLICAVEL
    found_observation = "Sistema de hidrantes previsto no projeto"
    missing_observation = "Sistema de hidrantes não aplicável ou não especificado"


class HydrantRules:
    @staticmethod
    def all_rules() -> list[ComplianceRule]:
        return [HydrantPresence()]


# ---------------------------------------------------------------------------
# IT-001: Requisitos gerais do memorial
# ---------------------------------------------------------------------------


class ProjectData(KeywordRule):
    name = "general.project_data"
    item = "Identificação dos dados do projeto"
    reference_code = "IT-001/2019"
    severity = Severity.LOW
    suggestion = "Incluir todos os dados técnicos conforme IT-001"
    keywords = ("área", "pavimento")
    missing_result = VerificationResult.PARCIAL
    found_observation = "Dados básicos do projeto identificados no memorial"
    missing_observation = "Área e número de pavimentos não identificados no memorial"


class RegulatoryReference(KeywordRule):
    name = "general.regulatory_reference"
    item = "Referência às normas técnicas"
    reference_code = "IT-001/2019"
    severity = Severity.MEDIUM
    suggestion = "Citar todas as ITs aplicáveis ao projeto"
    keywords = ("it-", "cb-pi")
    match_any = True
    found_observation = "Referências às normas do CB-PI identificadas"
    missing_observation = "Faltam referências às instruções técnicas do CB-PI"


class GeneralRules:
    """Document-level requirements: project data and cited ITs."""

    @staticmethod
    def all_rules() -> list[ComplianceRule]:
        return [ProjectData(), RegulatoryReference()]


def default_rules() -> list[ComplianceRule]:
    """The built-in battery, in evaluation order."""
    rules: list[ComplianceRule] = []
    rules.extend(SafetyExitRules.all_rules())
    rules.extend(ExtinguisherRules.all_rules())
    rules.extend(LightingRules.all_rules())
    rules.extend(HydrantRules.all_rules())
    rules.extend(GeneralRules.all_rules())
    return rules
