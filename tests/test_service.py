"""Tests for the analysis service: upload to stored record."""

from __future__ import annotations

import time

import pytest

from cbpi.cache import TTLCache
from cbpi.compliance import (
    ComplianceAnalysisError,
    ComplianceEngine,
    ComplianceRule,
    Severity,
)
from cbpi.config import MIN_TEXT_LENGTH
from cbpi.persistence import AnalysisStatus
from cbpi.service import (
    AccessDeniedError,
    AnalysisService,
    InsufficientTextError,
    InvalidFileError,
)

MEMORIAL_TXT = """\
Memorial descritivo - Área total 300 m², 1 pavimento.
Saída de emergência com largura de 1,20m conforme IT-008.
Extintores com distância máxima de 15m.
Iluminação de emergência com autonomia de 2 horas.
""".encode("utf-8")

INCOMPLETE_TXT = (
    "Memorial descritivo do galpão de armazenagem, com área construída de "
    "500 m² distribuída em 1 pavimento térreo, sem outras informações de projeto."
)


class _ExplodingRule(ComplianceRule):
    name = "test.exploding"
    item = "Regra instável"
    reference_code = "IT-000/2019"
    severity = Severity.LOW

    def evaluate(self, text: str):
        raise ValueError("boom")


@pytest.fixture
def service() -> AnalysisService:
    return AnalysisService()


@pytest.fixture
def stepping_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make every perf_counter() call advance by 250 ms."""
    now = [0.75]

    def clock() -> float:
        now[0] += 0.25
        return now[0]

    monkeypatch.setattr(time, "perf_counter", clock)


class TestAnalyzeDocument:
    def test_text_upload(self, service: AnalysisService) -> None:
        record = service.analyze_document("memorial.txt", MEMORIAL_TXT, user_id="u1")
        assert record.status is AnalysisStatus.COMPLETED
        assert record.file_name == "memorial.txt"
        assert record.file_size == len(MEMORIAL_TXT)
        assert record.user_id == "u1"
        assert record.result is not None
        assert record.result.summary.conforme == 8
        assert record.result.summary.nao_aplicavel == 1
        assert record.conformity == 100
        assert all(i.analysis_id == record.id for i in record.result.items)
        assert service.get_analysis(record.id) is not None

    def test_pdf_upload_uses_sample(self, service: AnalysisService) -> None:
        record = service.analyze_document("memorial.pdf", b"%PDF" + b"0" * 4096)
        assert record.conformity == 100
        assert record.notes == "Análise concluída com sucesso"

    def test_invalid_file(self, service: AnalysisService) -> None:
        with pytest.raises(InvalidFileError, match="pequeno"):
            service.analyze_document("memorial.pdf", b"%PDF")
        assert service.store.count() == 0

    def test_critical_notes(self, service: AnalysisService) -> None:
        record = service.analyze_document("galpao.txt", INCOMPLETE_TXT.encode("utf-8"))
        assert record.conformity == 22
        assert record.result.critical_issues
        assert record.notes == "1 problema(s) crítico(s) encontrado(s)"

    def test_total_failure_is_recorded(self, stepping_clock: None) -> None:
        engine = ComplianceEngine(rules=[_ExplodingRule()])
        service = AnalysisService(engine=engine)
        with pytest.raises(ComplianceAnalysisError):
            service.analyze_document("m.txt", MEMORIAL_TXT)
        records, total = service.store.find_by_user()
        assert total == 1
        assert records[0].status is AnalysisStatus.FAILED
        assert records[0].processing_ms == 250

    def test_unexpected_engine_error_is_recorded(
        self,
        service: AnalysisService,
        monkeypatch: pytest.MonkeyPatch,
        stepping_clock: None,
    ) -> None:
        def broken(text: str):
            raise RuntimeError("disk full")

        monkeypatch.setattr(service.engine, "analyze_compliance", broken)
        with pytest.raises(ComplianceAnalysisError) as excinfo:
            service.analyze_document("m.txt", MEMORIAL_TXT)
        assert str(excinfo.value) == "Erro na análise de conformidade"
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        records, _ = service.store.find_by_user()
        assert records[0].status is AnalysisStatus.FAILED
        assert records[0].notes == "Erro na análise do documento"
        assert records[0].processing_ms == 250


# ---------------------------------------------------------------------------
# Minimum text
# ---------------------------------------------------------------------------


class TestTextGuard:
    @pytest.mark.parametrize("text", ["", "   \n\t ", "saída de emergência"])
    def test_short_text_is_rejected(self, service: AnalysisService, text: str) -> None:
        with pytest.raises(InsufficientTextError, match="texto suficiente"):
            service.analyze_text(text)
        assert service.store.count() == 0

    def test_short_upload_is_rejected(self, service: AnalysisService) -> None:
        with pytest.raises(InvalidFileError, match="texto suficiente"):
            service.analyze_document("curto.txt", b"memorial incompleto")
        assert service.store.count() == 0
        assert service.cache.size() == 0

    def test_surrounding_whitespace_does_not_count(self, service: AnalysisService) -> None:
        padded = " " * 200 + "x" * (MIN_TEXT_LENGTH - 1) + "\n" * 50
        with pytest.raises(InsufficientTextError):
            service.analyze_text(padded)

    def test_minimum_length_is_accepted(self, service: AnalysisService) -> None:
        record = service.analyze_text("x" * MIN_TEXT_LENGTH)
        assert record.status is AnalysisStatus.COMPLETED


# ---------------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------------


class TestCaching:
    def test_same_content_is_cached(self, service: AnalysisService) -> None:
        first = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u1")
        second = service.analyze_document("b.txt", MEMORIAL_TXT, user_id="u1")
        assert second.id == first.id
        assert service.store.count() == 1

    def test_cache_is_per_user(self, service: AnalysisService) -> None:
        first = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u1")
        second = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u2")
        assert second.id != first.id
        assert second.user_id == "u2"
        assert service.history(user_id="u1")["total"] == 1
        assert service.history(user_id="u2")["total"] == 1
        again = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u2")
        assert again.id == second.id

    def test_cached_record_is_not_shared(self, service: AnalysisService) -> None:
        first = service.analyze_document("a.txt", MEMORIAL_TXT)
        first.notes = "alterado"
        second = service.analyze_document("a.txt", MEMORIAL_TXT)
        assert second.notes == "Análise concluída com sucesso"
        second.status = AnalysisStatus.FAILED
        third = service.analyze_document("a.txt", MEMORIAL_TXT)
        assert third.status is AnalysisStatus.COMPLETED

    def test_expired_cache_runs_again(self) -> None:
        now = [0.0]
        service = AnalysisService(cache=TTLCache(default_ttl=5, clock=lambda: now[0]))
        first = service.analyze_document("a.txt", MEMORIAL_TXT)
        now[0] = 6.0
        second = service.analyze_document("a.txt", MEMORIAL_TXT)
        assert second.id != first.id
        assert service.store.count() == 2


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class TestRecords:
    def test_analyze_text(self, service: AnalysisService) -> None:
        record = service.analyze_text(INCOMPLETE_TXT, user_id="u9")
        assert record.file_name == ""
        assert record.file_hash
        assert service.history(user_id="u9")["total"] == 1

    def test_history_pagination(self, service: AnalysisService) -> None:
        for n in range(3):
            service.analyze_text(f"{INCOMPLETE_TXT} Revisão {n}.", user_id="u1")
        page = service.history(user_id="u1", limit=2)
        assert page["total"] == 3
        assert len(page["analyses"]) == 2
        assert page["limit"] == 2
        assert page["offset"] == 0

    def test_delete_invalidates_cache(self, service: AnalysisService) -> None:
        first = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u1")
        assert service.delete_analysis(first.id, user_id="u1") is True
        assert service.get_analysis(first.id) is None
        second = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u1")
        assert second.id != first.id

    def test_delete_someone_elses_analysis(self, service: AnalysisService) -> None:
        record = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u1")
        with pytest.raises(AccessDeniedError, match="Acesso negado"):
            service.delete_analysis(record.id, user_id="u2")
        assert service.get_analysis(record.id) is not None
        cached = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u1")
        assert cached.id == record.id

    def test_delete_without_owner_check(self, service: AnalysisService) -> None:
        record = service.analyze_document("a.txt", MEMORIAL_TXT, user_id="u1")
        assert service.delete_analysis(record.id) is True

    def test_delete_unknown(self, service: AnalysisService) -> None:
        assert service.delete_analysis("nope") is False
        assert service.delete_analysis("nope", user_id="u1") is False

    def test_analytics(self, service: AnalysisService) -> None:
        service.analyze_document("a.txt", MEMORIAL_TXT)
        service.analyze_text(INCOMPLETE_TXT)
        stats = service.analytics()
        assert stats["total_analyses"] == 2
        assert stats["avg_conformity"] == 61.0
