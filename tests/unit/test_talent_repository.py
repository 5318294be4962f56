"""
Unit tests for the owner-scoped talent catalog.
"""

import threading

import pytest
from sqlalchemy import event

from talentledger.errors import NotFoundError, ValidationError
from talentledger.storage import (
    AdjustmentRepository,
    ScoreAggregator,
    TalentRepository,
    UserRepository,
)


class TestCreateAndGet:

    def test_create_then_get(self, catalog, owner):
        talent_id = catalog.create(owner, "山田花子", "Sakura Productions", 5, 6, 7)

        talent = catalog.get(talent_id, owner)

        assert talent.id == talent_id
        assert talent.user_id == owner
        assert talent.name == "山田花子"
        assert talent.affiliation == "Sakura Productions"
        assert (talent.beauty, talent.cuteness, talent.talent) == (5, 6, 7)
        assert (talent.total_beauty, talent.total_cuteness, talent.total_talent) == (5, 6, 7)
        assert talent.is_favorite is False
        assert talent.created_at is not None

    @pytest.mark.parametrize("affiliation", [None, "", "   "])
    def test_empty_affiliation_stored_as_none(self, catalog, owner, affiliation):
        talent_id = catalog.create(owner, "A", affiliation, 5, 5, 5)

        assert catalog.get(talent_id, owner).affiliation is None

    @pytest.mark.parametrize("scores", [(0, 5, 5), (5, 11, 5), (5, 5, -1), (5, 5, True)])
    def test_scores_out_of_range_rejected(self, catalog, owner, scores):
        with pytest.raises(ValidationError):
            catalog.create(owner, "A", None, *scores)

        assert catalog.list_by_owner(owner) == []

    @pytest.mark.parametrize("scores", [(1, 1, 1), (10, 10, 10)])
    def test_score_bounds_accepted(self, catalog, owner, scores):
        talent_id = catalog.create(owner, "A", None, *scores)

        assert catalog.get(talent_id, owner).beauty == scores[0]

    def test_blank_name_rejected(self, catalog, owner):
        with pytest.raises(ValidationError):
            catalog.create(owner, "  ", None, 5, 5, 5)

    def test_unknown_owner_rejected(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.create(9999, "A", None, 5, 5, 5)

    def test_get_missing_raises(self, catalog, owner):
        with pytest.raises(NotFoundError):
            catalog.get(9999, owner)

    def test_get_includes_ledger_totals(self, catalog, ledger, owner):
        talent_id = catalog.create(owner, "A", None, 5, 5, 5)
        ledger.record(talent_id, "beauty", 3, "x")
        ledger.record(talent_id, "cuteness", -2, "y")

        talent = catalog.get(talent_id, owner)

        assert talent.total_beauty == 8
        assert talent.total_cuteness == 3
        assert talent.total_talent == 5


class TestUpdate:

    def test_replaces_base_fields(self, catalog, owner):
        talent_id = catalog.create(owner, "A", "Old", 5, 5, 5)

        catalog.update(talent_id, owner, "B", "New", 1, 2, 3)
        talent = catalog.get(talent_id, owner)

        assert talent.name == "B"
        assert talent.affiliation == "New"
        assert (talent.beauty, talent.cuteness, talent.talent) == (1, 2, 3)

    def test_keeps_favorite_and_ledger(self, catalog, ledger, owner):
        talent_id = catalog.create(owner, "A", None, 5, 5, 5)
        catalog.toggle_favorite(talent_id, owner)
        ledger.record(talent_id, "beauty", 2, "x")

        catalog.update(talent_id, owner, "A", None, 6, 5, 5)
        talent = catalog.get(talent_id, owner)

        assert talent.is_favorite is True
        assert talent.total_beauty == 8

    def test_missing_raises(self, catalog, owner):
        with pytest.raises(NotFoundError):
            catalog.update(9999, owner, "A", None, 5, 5, 5)

    def test_invalid_scores_leave_row_untouched(self, catalog, owner):
        talent_id = catalog.create(owner, "A", None, 5, 5, 5)

        with pytest.raises(ValidationError):
            catalog.update(talent_id, owner, "A", None, 11, 5, 5)

        assert catalog.get(talent_id, owner).beauty == 5


class TestOwnershipIsolation:

    @pytest.fixture
    def foreign_id(self, catalog, other_owner):
        return catalog.create(other_owner, "Bob's", None, 5, 5, 5)

    def test_get(self, catalog, owner, foreign_id):
        with pytest.raises(NotFoundError):
            catalog.get(foreign_id, owner)

    def test_update(self, catalog, owner, other_owner, foreign_id):
        with pytest.raises(NotFoundError):
            catalog.update(foreign_id, owner, "Mine", None, 1, 1, 1)

        assert catalog.get(foreign_id, other_owner).name == "Bob's"

    def test_delete_is_noop(self, catalog, owner, other_owner, foreign_id):
        catalog.delete(foreign_id, owner)

        assert catalog.get(foreign_id, other_owner).id == foreign_id

    def test_toggle(self, catalog, owner, other_owner, foreign_id):
        with pytest.raises(NotFoundError):
            catalog.toggle_favorite(foreign_id, owner)

        assert catalog.get(foreign_id, other_owner).is_favorite is False

    def test_exists(self, catalog, owner, other_owner, foreign_id):
        assert catalog.exists(foreign_id, other_owner) is True
        assert catalog.exists(foreign_id, owner) is False

    def test_lists(self, catalog, owner, foreign_id):
        catalog.create(owner, "Mine", None, 5, 5, 5)

        assert [t.name for t in catalog.list_by_owner(owner)] == ["Mine"]
        assert catalog.search(owner, "Bob") == []


class TestDelete:

    def test_cascades_to_ledger(self, catalog, ledger, owner):
        talent_id = catalog.create(owner, "A", None, 5, 5, 5)
        ledger.record(talent_id, "beauty", 1, "x")
        ledger.record(talent_id, "talent", 2, "y")

        catalog.delete(talent_id, owner)

        assert catalog.exists(talent_id, owner) is False
        assert ledger.history(talent_id) == []

    def test_idempotent(self, catalog, owner):
        talent_id = catalog.create(owner, "A", None, 5, 5, 5)

        catalog.delete(talent_id, owner)
        catalog.delete(talent_id, owner)
        catalog.delete(9999, owner)

        assert catalog.list_by_owner(owner) == []


class TestListing:

    def test_favorites_first_then_newest(self, catalog, owner):
        first = catalog.create(owner, "first", None, 5, 5, 5)
        second = catalog.create(owner, "second", None, 5, 5, 5)
        third = catalog.create(owner, "third", None, 5, 5, 5)
        catalog.toggle_favorite(first, owner)

        ids = [t.id for t in catalog.list_by_owner(owner)]

        assert ids == [first, third, second]

    def test_list_totals_match_get(self, catalog, ledger, owner):
        ids = [catalog.create(owner, f"T{i}", None, 3, 4, 5) for i in range(3)]
        ledger.record(ids[0], "beauty", 4, "x")
        ledger.record(ids[2], "talent", -3, "y")

        for talent in catalog.list_by_owner(owner):
            single = catalog.get(talent.id, owner)
            assert talent.total_beauty == single.total_beauty
            assert talent.total_cuteness == single.total_cuteness
            assert talent.total_talent == single.total_talent

    def test_empty_owner(self, catalog, owner):
        assert catalog.list_by_owner(owner) == []
        assert catalog.list_favorites(owner) == []

    def test_list_favorites(self, catalog, owner):
        a = catalog.create(owner, "a", None, 5, 5, 5)
        catalog.create(owner, "b", None, 5, 5, 5)
        c = catalog.create(owner, "c", None, 5, 5, 5)
        catalog.toggle_favorite(a, owner)
        catalog.toggle_favorite(c, owner)

        assert [t.id for t in catalog.list_favorites(owner)] == [c, a]


class TestSearch:

    @pytest.fixture
    def seeded(self, catalog, owner):
        return {
            name: catalog.create(owner, name, affiliation, 5, 5, 5)
            for name, affiliation in [
                ("山田花子", None),
                ("佐藤太郎", "Hoshi Agency"),
                ("田中次郎", None),
            ]
        }

    def test_substring_in_name(self, catalog, owner, seeded):
        names = {t.name for t in catalog.search(owner, "田")}

        assert names == {"山田花子", "田中次郎"}

    def test_substring_in_affiliation(self, catalog, owner, seeded):
        results = catalog.search(owner, "Hoshi")

        assert [t.name for t in results] == ["佐藤太郎"]

    def test_case_sensitive(self, catalog, owner, seeded):
        assert catalog.search(owner, "hoshi") == []
        assert catalog.search(owner, "HOSHI") == []

    def test_no_match(self, catalog, owner, seeded):
        assert catalog.search(owner, "鈴木") == []

    def test_percent_matches_everything(self, catalog, owner, seeded):
        assert len(catalog.search(owner, "%")) == 3

    def test_ordering_matches_listing(self, catalog, owner, seeded):
        catalog.toggle_favorite(seeded["山田花子"], owner)

        names = [t.name for t in catalog.search(owner, "田")]

        assert names == ["山田花子", "田中次郎"]


class TestToggleFavorite:

    def test_flips(self, catalog, owner):
        talent_id = catalog.create(owner, "A", None, 5, 5, 5)

        catalog.toggle_favorite(talent_id, owner)
        assert catalog.get(talent_id, owner).is_favorite is True

        catalog.toggle_favorite(talent_id, owner)
        assert catalog.get(talent_id, owner).is_favorite is False

    def test_missing_raises(self, catalog, owner):
        with pytest.raises(NotFoundError):
            catalog.toggle_favorite(9999, owner)

    @pytest.mark.parametrize("toggles", [7, 8])
    def test_concurrent_toggles_keep_parity(self, file_db, toggles):
        owner_id = UserRepository(file_db).create("carol", "not-a-real-hash")
        catalog = TalentRepository(file_db, ScoreAggregator(file_db))
        talent_id = catalog.create(owner_id, "A", None, 5, 5, 5)

        errors = []

        def toggle():
            try:
                catalog.toggle_favorite(talent_id, owner_id)
            except Exception as e:  # collected and asserted below
                errors.append(e)

        threads = [threading.Thread(target=toggle) for _ in range(toggles)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert catalog.get(talent_id, owner_id).is_favorite is (toggles % 2 == 1)


class TestCatalogWithoutAdjustments:

    def test_fresh_talent_totals_equal_base(self, db, owner):
        catalog = TalentRepository(db, ScoreAggregator(db))
        talent_id = catalog.create(owner, "A", None, 2, 3, 4)

        talent = catalog.list_by_owner(owner)[0]

        assert talent.id == talent_id
        assert (talent.total_beauty, talent.total_cuteness, talent.total_talent) == (2, 3, 4)
        assert AdjustmentRepository(db).history(talent_id) == []


class TestListQueryCount:
    """List views must not issue one query per talent."""

    @pytest.fixture
    def statements(self, db):
        executed = []

        def count(conn, cursor, statement, parameters, context, executemany):
            executed.append(statement)

        event.listen(db.engine, "before_cursor_execute", count)
        yield executed
        event.remove(db.engine, "before_cursor_execute", count)

    def _add_talent(self, catalog, ledger, owner, name):
        talent_id = catalog.create(owner, name, "Hoshi Agency", 5, 5, 5)
        catalog.toggle_favorite(talent_id, owner)
        ledger.record(talent_id, "beauty", 1, "x")
        ledger.record(talent_id, "talent", -1, "y")

    @pytest.mark.parametrize("view", [
        lambda catalog, owner: catalog.list_by_owner(owner),
        lambda catalog, owner: catalog.search(owner, "Hoshi"),
        lambda catalog, owner: catalog.list_favorites(owner),
    ], ids=["list_by_owner", "search", "list_favorites"])
    def test_statement_count_independent_of_size(
        self, catalog, ledger, owner, statements, view
    ):
        self._add_talent(catalog, ledger, owner, "T0")
        statements.clear()
        single = view(catalog, owner)
        queries_for_one = len(statements)

        for i in range(1, 8):
            self._add_talent(catalog, ledger, owner, f"T{i}")
        statements.clear()
        many = view(catalog, owner)
        queries_for_many = len(statements)

        assert len(single) == 1
        assert len(many) == 8
        assert all(t.total_beauty == 6 and t.total_talent == 4 for t in many)
        assert queries_for_many == queries_for_one
        assert queries_for_one <= 2
