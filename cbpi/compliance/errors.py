"""Exceptions raised by the compliance engine."""

from __future__ import annotations


class ComplianceError(Exception):
    """Base class for compliance analysis failures."""


class InputError(ComplianceError):
    """The engine was handed something other than a text string."""


class ComplianceAnalysisError(ComplianceError):
    """The analysis as a whole could not be produced.

    Callers surface the message as-is.
    """

    def __init__(self, message: str = "Erro na análise de conformidade") -> None:
        super().__init__(message)

