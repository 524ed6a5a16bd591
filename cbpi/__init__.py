"""CB-PI — compliance checking of fire-safety memorials against the Piauí technical instructions."""

__version__ = "1.0.0"

from cbpi.cache import TTLCache
from cbpi.compliance.engine import ComplianceEngine
from cbpi.compliance.errors import ComplianceAnalysisError, ComplianceError, InputError
from cbpi.compliance.models import (
    ComplianceAnalysisResult,
    Severity,
    VerificationItem,
    VerificationResult,
)
from cbpi.compliance.report import render_markdown
from cbpi.extraction.extractor import TextExtractor
from cbpi.instructions.catalog import Instruction, InstructionCatalog
from cbpi.persistence.models import AnalysisRecord, AnalysisStatus
from cbpi.persistence.store import AnalysisStore
from cbpi.service import (
    AccessDeniedError,
    AnalysisService,
    InsufficientTextError,
    InvalidFileError,
)

__all__ = [
    "AccessDeniedError",
    "AnalysisRecord",
    "AnalysisService",
    "AnalysisStatus",
    "AnalysisStore",
    "ComplianceAnalysisError",
    "ComplianceAnalysisResult",
    "ComplianceEngine",
    "ComplianceError",
    "InputError",
    "InsufficientTextError",
    "Instruction",
    "InstructionCatalog",
    "InvalidFileError",
    "Severity",
    "TTLCache",
    "TextExtractor",
    "VerificationItem",
    "VerificationResult",
    "render_markdown",
]
