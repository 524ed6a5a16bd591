"""Tests for the technical instruction catalog.

All tests use an in-memory SQLite database.
"""

from __future__ import annotations

import pytest

from cbpi.compliance.rules import default_rules
from cbpi.instructions import Instruction, InstructionCatalog
from cbpi.instructions.seed_data import SEED_INSTRUCTIONS


@pytest.fixture
def catalog() -> InstructionCatalog:
    cat = InstructionCatalog(":memory:")
    yield cat
    cat.close()


class TestSeedData:
    def test_every_cited_instruction_is_seeded(self) -> None:
        seeded = {i.code for i in SEED_INSTRUCTIONS}
        cited = {rule.reference_code for rule in default_rules()}
        assert cited <= seeded

    def test_auto_seed(self, catalog: InstructionCatalog) -> None:
        assert catalog.count() == len(SEED_INSTRUCTIONS)

    def test_no_seed(self) -> None:
        cat = InstructionCatalog(":memory:", auto_seed=False)
        assert cat.count() == 0
        cat.close()


class TestCatalog:
    def test_get(self, catalog: InstructionCatalog) -> None:
        it = catalog.get("IT-018/2019")
        assert it is not None
        assert it.title == "Iluminação de Emergência"
        assert "autonomia" in it.keywords

    def test_get_unknown(self, catalog: InstructionCatalog) -> None:
        assert catalog.get("IT-999/2019") is None

    def test_add_replaces_by_code(self, catalog: InstructionCatalog) -> None:
        catalog.add(Instruction(code="IT-001/2019", title="Procedimentos revisados"))
        assert catalog.count() == len(SEED_INSTRUCTIONS)
        assert catalog.get("IT-001/2019").title == "Procedimentos revisados"

    def test_increment_views(self, catalog: InstructionCatalog) -> None:
        before = catalog.get("IT-022/2019").views
        assert catalog.increment_views("IT-022/2019") is True
        assert catalog.get("IT-022/2019").views == before + 1
        assert catalog.increment_views("IT-999/2019") is False


class TestSearch:
    def test_term_matches_title_case_insensitively(self, catalog: InstructionCatalog) -> None:
        codes = [i.code for i in catalog.search("SAÍDAS")]
        assert codes == ["IT-008/2019"]

    def test_term_matches_keywords(self, catalog: InstructionCatalog) -> None:
        codes = [i.code for i in catalog.search("pó químico")]
        assert codes == ["IT-021/2019"]

    def test_category(self, catalog: InstructionCatalog) -> None:
        found = catalog.search(category="Hidrantes")
        assert [i.code for i in found] == ["IT-022/2019"]

    def test_tags_overlap(self, catalog: InstructionCatalog) -> None:
        codes = {i.code for i in catalog.search(tags=["emergência"])}
        assert codes == {"IT-008/2019", "IT-018/2019"}

    def test_pagination(self, catalog: InstructionCatalog) -> None:
        everything = catalog.search(limit=100)
        page = catalog.search(limit=2, offset=1)
        assert [i.code for i in page] == [i.code for i in everything[1:3]]

    def test_no_match(self, catalog: InstructionCatalog) -> None:
        assert catalog.search("sprinkler") == []

    def test_popular_ordered_by_views(self, catalog: InstructionCatalog) -> None:
        popular = catalog.popular()
        assert popular
        assert all(i.popular for i in popular)
        views = [i.views for i in popular]
        assert views == sorted(views, reverse=True)

    def test_categories_and_tags(self, catalog: InstructionCatalog) -> None:
        assert "Extintores" in catalog.categories()
        tags = catalog.tags()
        assert "segurança" in tags
        assert tags == sorted(tags)
