"""Stored analysis record."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from cbpi.compliance.models import ComplianceAnalysisResult
from cbpi.config import ALGORITHM_VERSION


class AnalysisStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class AnalysisRecord(BaseModel):
    """One analysed memorial, as persisted."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    file_name: str = ""
    file_size: int = 0
    file_hash: str = ""
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    conformity: int = 0
    status: AnalysisStatus = AnalysisStatus.PENDING
    notes: str = ""
    processing_ms: int = 0
    algorithm_version: str = ALGORITHM_VERSION
    user_id: str | None = None
    result: ComplianceAnalysisResult | None = None
