"""Storage of analysis records."""

from cbpi.persistence.models import AnalysisRecord, AnalysisStatus
from cbpi.persistence.store import AnalysisStore

__all__ = ["AnalysisRecord", "AnalysisStatus", "AnalysisStore"]
