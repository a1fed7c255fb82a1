"""
Tests for CustomVerbListStore: list CRUD, verb add/remove and resolution
into vocabulary configs.
"""

import json
import logging
import random

import pytest

from verb_trainer.core.models.config import VocabConfig
from verb_trainer.ledger.ledger import NotFoundError
from verb_trainer.ledger.storage import JsonFileStore, MemoryStore
from verb_trainer.ledger.verb_lists import CustomVerbList, CustomVerbListStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def lists(store, clock):
    return CustomVerbListStore(store, clock=clock, rng=random.Random(3))


class TestCustomVerbList:
    """Tests for the CustomVerbList record."""

    def test_init_when_repeats_and_blanks_then_unique_in_order(self, fixed_now):
        verb_list = CustomVerbList("list_1", "Exam", "", ("gehen", " ", "sehen", "gehen"), fixed_now, fixed_now)

        assert verb_list.verb_infinitives == ("gehen", "sehen")
        assert len(verb_list) == 2

    def test_init_when_blank_name_then_raises(self, fixed_now):
        with pytest.raises(ValueError, match="name"):
            CustomVerbList("list_1", "  ", "", (), fixed_now, fixed_now)

    def test_from_dict_when_round_tripped_then_equal(self, fixed_now):
        verb_list = CustomVerbList("list_1", "Exam", "Unit 3", ("gehen",), fixed_now, fixed_now)

        assert CustomVerbList.from_dict(verb_list.to_dict()) == verb_list
        assert verb_list.to_dict()["verbInfinitives"] == ["gehen"]


class TestListCrud:
    """Tests for create/get/update/delete."""

    def test_create_when_named_then_persisted_with_timestamps(self, lists, store, fixed_now):
        # Act
        created = lists.create("Exam verbs", "Unit 3", ["gehen", "machen"])

        # Assert
        assert created.id.startswith("list_")
        assert created.created_at == created.updated_at > fixed_now
        assert lists.get(created.id) == created
        assert json.loads(store.get(lists.lists_key))[0]["name"] == "Exam verbs"

    def test_create_when_name_blank_then_raises_and_nothing_stored(self, lists, store):
        with pytest.raises(ValueError):
            lists.create("   ")

        assert store.get(lists.lists_key) is None

    def test_all_lists_when_several_then_creation_order(self, lists):
        first = lists.create("A")
        second = lists.create("B")

        assert [item.id for item in lists.all_lists()] == [first.id, second.id]

    def test_get_when_unknown_then_none(self, lists):
        assert lists.get("list_missing") is None

    def test_update_when_renamed_then_changed_and_created_at_kept(self, lists):
        created = lists.create("Old", verb_infinitives=["gehen"])

        assert lists.update(created.id, name="New", description="Revised")

        updated = lists.get(created.id)
        assert (updated.name, updated.description) == ("New", "Revised")
        assert updated.verb_infinitives == ("gehen",)
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at

    def test_update_when_unknown_then_false(self, lists):
        assert lists.update("list_missing", name="x") is False

    def test_delete_when_present_then_removed(self, lists):
        keep = lists.create("Keep")
        drop = lists.create("Drop")

        assert lists.delete(drop.id)

        assert [item.id for item in lists.all_lists()] == [keep.id]

    def test_delete_when_unknown_then_false_and_no_write(self, lists, store):
        lists.create("Keep")
        writes_before = store.write_count

        assert lists.delete("list_missing") is False
        assert store.write_count == writes_before


class TestListVerbs:
    """Tests for add_verbs() / remove_verbs()."""

    def test_add_verbs_when_some_present_then_only_new_appended(self, lists):
        created = lists.create("Exam", verb_infinitives=["gehen"])

        assert lists.add_verbs(created.id, ["machen", "gehen", "können"])

        assert lists.get(created.id).verb_infinitives == ("gehen", "machen", "können")

    def test_remove_verbs_when_listed_then_removed(self, lists):
        created = lists.create("Exam", verb_infinitives=["gehen", "machen", "können"])

        assert lists.remove_verbs(created.id, ["machen", "sehen"])

        assert lists.get(created.id).verb_infinitives == ("gehen", "können")

    def test_add_and_remove_when_unknown_list_then_false(self, lists):
        assert lists.add_verbs("list_missing", ["gehen"]) is False
        assert lists.remove_verbs("list_missing", ["gehen"]) is False


class TestListResolution:
    """Tests for resolving lists against the catalog."""

    def test_verbs_for_list_when_some_unknown_then_skipped(self, lists, catalog):
        created = lists.create("Exam", verb_infinitives=["gehen", "sehen", "können"])

        verbs = lists.verbs_for_list(created.id, catalog)

        assert [v.infinitive for v in verbs] == ["gehen", "können"]

    def test_verbs_for_list_when_unknown_list_then_empty(self, lists, catalog):
        assert lists.verbs_for_list("list_missing", catalog) == []

    def test_random_verbs_when_count_below_size_then_distinct_subset(self, lists, catalog):
        created = lists.create("All", verb_infinitives=["gehen", "machen", "können"])

        verbs = lists.random_verbs(created.id, 2, catalog)

        assert len(verbs) == 2
        assert {v.infinitive for v in verbs} <= {"gehen", "machen", "können"}
        assert len({v.infinitive for v in verbs}) == 2

    def test_random_verbs_when_count_exceeds_size_then_all(self, lists, catalog):
        created = lists.create("Two", verb_infinitives=["gehen", "machen"])

        verbs = lists.random_verbs(created.id, 10, catalog)

        assert sorted(v.infinitive for v in verbs) == ["gehen", "machen"]

    def test_vocab_config_when_resolved_then_specific_verbs_and_no_limits(self, lists):
        # Arrange
        created = lists.create("Exam", verb_infinitives=["gehen", "können"])
        base = VocabConfig(verb_count=5, difficulty_levels=[1], verb_types=["weak"])

        # Act
        config = lists.vocab_config(created.id, base)

        # Assert
        assert config.specific_verbs == ("gehen", "können")
        assert config.verb_count == 5
        assert config.difficulty_levels == ()
        assert config.verb_types is None

    def test_vocab_config_when_unknown_then_not_found(self, lists):
        with pytest.raises(NotFoundError):
            lists.vocab_config("list_missing")

    def test_vocab_config_when_list_empty_then_raises(self, lists):
        created = lists.create("Empty")

        with pytest.raises(ValueError, match="no verbs"):
            lists.vocab_config(created.id)


class TestListStorage:
    """Tests for corrupt data and file persistence."""

    def test_all_lists_when_blob_corrupt_then_empty_and_logged(self, lists, store, caplog):
        store.set(lists.lists_key, "[{broken")

        with caplog.at_level(logging.ERROR):
            assert lists.all_lists() == []

        assert "corrupt" in caplog.text

    def test_all_lists_when_one_record_malformed_then_skipped(self, lists, store):
        good = lists.create("Good")
        records = json.loads(store.get(lists.lists_key)) + [{"id": "list_bad"}]
        store.set(lists.lists_key, json.dumps(records))

        assert [item.id for item in lists.all_lists()] == [good.id]

    def test_create_when_file_store_then_survives_reopen(self, tmp_path):
        created = CustomVerbListStore(JsonFileStore(tmp_path)).create("Exam", verb_infinitives=["gehen"])

        reopened = CustomVerbListStore(JsonFileStore(tmp_path))

        assert reopened.get(created.id) == created
