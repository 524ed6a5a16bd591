"""AnalysisService — the single entry point for analysing memorials.

Usage::

    from cbpi.service import AnalysisService

    service = AnalysisService()
    record = service.analyze_document("memorial.txt", data, user_id="u1")
    service.history(user_id="u1")
    service.analytics()
"""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

from cbpi.cache import TTLCache
from cbpi.compliance.engine import ComplianceEngine
from cbpi.compliance.errors import ComplianceAnalysisError
from cbpi.compliance.models import ComplianceAnalysisResult
from cbpi.config import MIN_TEXT_LENGTH
from cbpi.extraction.extractor import TextExtractor
from cbpi.persistence.models import AnalysisRecord, AnalysisStatus
from cbpi.persistence.store import AnalysisStore

logger = logging.getLogger(__name__)


class InvalidFileError(Exception):
    """The uploaded file was rejected; the message is user-facing."""


class InsufficientTextError(InvalidFileError):
    """The document holds too little text to be analysed."""

    def __init__(self, message: str = "Documento não contém texto suficiente para análise") -> None:
        super().__init__(message)


class AccessDeniedError(Exception):
    """The analysis belongs to another user."""

    def __init__(self, message: str = "Acesso negado") -> None:
        super().__init__(message)


def _cache_key(file_hash: str, user_id: str | None) -> str:
    return f"analysis:{user_id or ''}:{file_hash}"


def _notes_for(result: ComplianceAnalysisResult) -> str:
    if result.critical_issues:
        return f"{len(result.critical_issues)} problema(s) crítico(s) encontrado(s)"
    if result.summary.nao_conforme:
        return "Algumas não conformidades encontradas"
    return "Análise concluída com sucesso"


class AnalysisService:
    """Wire extraction, the compliance engine, storage and caching together.

    Any collaborator not given is created with in-memory defaults.
    """

    def __init__(
        self,
        engine: ComplianceEngine | None = None,
        extractor: TextExtractor | None = None,
        store: AnalysisStore | None = None,
        cache: TTLCache | None = None,
    ) -> None:
        self.engine = engine or ComplianceEngine()
        self.extractor = extractor or TextExtractor()
        self.store = store or AnalysisStore()
        self.cache = cache or TTLCache()

    # -- Analysis ------------------------------------------------------------

    def analyze_document(
        self,
        filename: str,
        data: bytes,
        *,
        user_id: str | None = None,
    ) -> AnalysisRecord:
        """Validate, extract and analyse an uploaded file.

        Identical content uploaded by the same user is served from the
        cache while the entry lives.

        Raises
        ------
        InvalidFileError
            If the file fails validation or holds too little text.
        ComplianceAnalysisError
            If the analysis could not be produced.
        """
        validation = self.extractor.validate(filename, data)
        if not validation.valid:
            raise InvalidFileError(validation.error)

        meta = self.extractor.metadata(filename, data)
        cache_key = _cache_key(meta.sha256, user_id)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for %s (%s)", filename, meta.sha256[:12])
            return cached.model_copy(deep=True)

        text = self.extractor.extract_text(filename, data)
        record = self._run(
            text,
            file_name=meta.name,
            file_size=meta.size,
            file_hash=meta.sha256,
            user_id=user_id,
        )
        self.cache.set(cache_key, record.model_copy(deep=True))
        return record

    def analyze_text(self, text: str, *, user_id: str | None = None) -> AnalysisRecord:
        """Analyse memorial text that was extracted elsewhere."""
        file_hash = hashlib.sha256(text.encode("utf-8")).hexdigest()
        return self._run(text, file_hash=file_hash, file_size=len(text), user_id=user_id)

    def _run(self, text: str, **fields: Any) -> AnalysisRecord:
        if len(text.strip()) < MIN_TEXT_LENGTH:
            logger.info("Rejected text with %d character(s)", len(text.strip()))
            raise InsufficientTextError()

        record = AnalysisRecord(status=AnalysisStatus.PROCESSING, **fields)
        start = time.perf_counter()
        try:
            result = self.engine.analyze_compliance(text)
        except Exception as exc:
            record.status = AnalysisStatus.FAILED
            record.notes = "Erro na análise do documento"
            record.processing_ms = int((time.perf_counter() - start) * 1000)
            self.store.save(record)
            if isinstance(exc, ComplianceAnalysisError):
                raise
            logger.exception("Analysis %s failed", record.id)
            raise ComplianceAnalysisError() from exc

        record.result = result.with_analysis_id(record.id)
        record.conformity = result.conformity
        record.status = AnalysisStatus.COMPLETED
        record.notes = _notes_for(result)
        record.processing_ms = int((time.perf_counter() - start) * 1000)
        self.store.save(record)
        logger.info(
            "Analysis %s completed: %d%% conformity, %d critical issue(s)",
            record.id, record.conformity, len(result.critical_issues),
        )
        return record

    # -- Records -------------------------------------------------------------

    def get_analysis(self, analysis_id: str) -> AnalysisRecord | None:
        return self.store.get(analysis_id)

    def history(
        self,
        *,
        user_id: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> dict[str, Any]:
        """One page of past analyses with the total count."""
        records, total = self.store.find_by_user(user_id=user_id, limit=limit, offset=offset)
        return {"analyses": records, "total": total, "limit": limit, "offset": offset}

    def delete_analysis(self, analysis_id: str, *, user_id: str | None = None) -> bool:
        """Delete a stored analysis and any cached copy of it.

        With *user_id* given, only that user's analyses may be deleted.

        Raises
        ------
        AccessDeniedError
            If the analysis belongs to someone else.
        """
        record = self.store.get(analysis_id)
        if record is None:
            return False
        if user_id is not None and record.user_id != user_id:
            raise AccessDeniedError()
        if record.file_hash:
            self.cache.delete(_cache_key(record.file_hash, record.user_id))
        return self.store.delete(analysis_id)

    def analytics(self, *, user_id: str | None = None) -> dict[str, Any]:
        return self.store.analytics(user_id=user_id)
