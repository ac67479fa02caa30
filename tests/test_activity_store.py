"""Tests for the date-keyed store and its staged result set."""

from __future__ import annotations

from datetime import date

import pytest

from calorie_diary.activity_store import ActivityStore, split_tags
from calorie_diary.errors import (
    EmptyResultSetError,
    IndexOutOfRangeError,
    MissingDateError,
    NoMatchError,
)
from calorie_diary.model import exercise, food

D1 = date(2020, 10, 11)
D2 = date(2020, 10, 12)


def _store() -> ActivityStore:
    store = ActivityStore()
    store.add_activity(D1, food("apple", 50, D1))
    store.add_activity(D1, food("banana bread", 300, D1))
    store.add_activity(D1, exercise("jogging", 60, D1))
    store.add_activity(D2, food("apple pie", 400, D2))
    store.add_activity(D2, exercise("pushup", 50, D2))
    return store


def _descriptions(records: tuple) -> list[str]:
    return [record.description for record in records]


def test_net_calorie_sums_signed_deltas_per_date() -> None:
    store = _store()
    assert store.net_calorie(D1) == 50 + 300 - 60
    assert store.net_calorie(D2) == 400 - 50
    assert store.dates() == [D1, D2]
    assert len(store) == 2


def test_add_activity_creates_bucket_and_issues_handles() -> None:
    store = ActivityStore()
    assert store.get_bucket(D1) is None
    first = store.add_activity(D1, food("apple", 50, D1))
    second = store.add_activity(D1, food("apple", 50, D1))
    bucket = store.get_bucket(D1)
    assert bucket is not None
    assert len(bucket) == 2
    assert first.entry_id is not None
    assert first.entry_id != second.entry_id


def test_add_activity_redates_record_to_key() -> None:
    store = ActivityStore()
    stored = store.add_activity(D2, food("apple", 50, D1))
    assert stored.day == D2
    assert D2 in store
    assert D1 not in store


def test_net_calorie_missing_date() -> None:
    with pytest.raises(MissingDateError):
        ActivityStore().net_calorie(D1)


def test_find_by_description_stages_matches_in_date_order() -> None:
    store = _store()
    found = store.find_by_description("apple")
    assert _descriptions(found) == ["apple", "apple pie"]
    assert store.result_set == found


def test_find_by_calorie_matches_magnitude_token() -> None:
    store = _store()
    found = store.find_by_calorie(" 50 ")
    assert _descriptions(found) == ["apple", "pushup"]
    assert _descriptions(store.find_by_calorie(300)) == ["banana bread"]


def test_find_all_tags_is_subset_of_any_tag() -> None:
    store = _store()
    both = store.find_matching_all(["apple", "pie"])
    assert _descriptions(both) == ["apple pie"]
    either = store.find_matching_any(["banana", "pie"])
    assert _descriptions(either) == ["banana bread", "apple pie"]
    assert set(_descriptions(both)) <= set(_descriptions(either))


def test_tag_search_scans_text_form() -> None:
    store = _store()
    assert _descriptions(store.find_matching_all("/[E]/jog")) == ["jogging"]
    assert _descriptions(store.find_matching_any("/[E]/nothing")) == [
        "jogging",
        "pushup",
    ]


def test_no_match_resets_result_set_and_keeps_buckets() -> None:
    store = _store()
    store.find_by_description("apple")
    with pytest.raises(NoMatchError):
        store.find_by_description("pizza")
    assert store.result_set == ()
    assert store.net_calorie(D1) == 290
    assert store.net_calorie(D2) == 350


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("/fruit/ apple banana ", ["fruit", "apple banana"]),
        ("/a/b/c", ["a", "b", "c"]),
        ("/single", ["single"]),
        ("  no slash  ", ["no slash"]),
    ],
)
def test_split_tags(text: str, expected: list[str]) -> None:
    assert split_tags(text) == expected


def test_delete_only_record_drops_date() -> None:
    store = ActivityStore()
    store.add_activity(D1, food("apple", 50, D1))
    store.list_day(D1)
    removed = store.delete_from_result_set(0)
    assert removed.description == "apple"
    assert D1 not in store
    assert store.result_set == ()
    with pytest.raises(MissingDateError):
        store.net_calorie(D1)


def test_delete_uses_identity_for_duplicate_values() -> None:
    store = ActivityStore()
    first = store.add_activity(D1, food("apple", 50, D1))
    second = store.add_activity(D1, food("apple", 50, D1))
    store.find_by_description("apple")
    store.delete_from_result_set(1)
    bucket = store.get_bucket(D1)
    assert bucket is not None
    assert [record.entry_id for record in bucket] == [first.entry_id]
    assert second.entry_id not in [record.entry_id for record in bucket]


def test_delete_falls_back_to_value_match_without_handle() -> None:
    store = _store()
    store.find_by_description("pushup")
    store.insert_record_at(0, food("apple pie", 400, D2))
    store.delete_from_result_set(0)
    bucket = store.get_bucket(D2)
    assert bucket is not None
    assert _descriptions(bucket.records) == ["pushup"]


def test_delete_errors_do_not_mutate() -> None:
    store = _store()
    with pytest.raises(EmptyResultSetError):
        store.delete_from_result_set(0)
    store.find_by_description("apple")
    with pytest.raises(IndexOutOfRangeError):
        store.delete_from_result_set(2)
    assert len(store.result_set) == 2
    assert store.net_calorie(D1) == 290


def test_move_within_result_set() -> None:
    store = _store()
    before = store.find_matching_any(["a"])
    assert _descriptions(before) == ["apple", "banana bread", "apple pie"]
    store.move_within_result_set(0, 2)
    assert store.result_at(2) == before[0]
    assert _descriptions(store.result_set) == ["banana bread", "apple pie", "apple"]
    bucket = store.get_bucket(D1)
    assert bucket is not None
    assert _descriptions(bucket.records) == ["apple", "banana bread", "jogging"]


def test_move_errors() -> None:
    store = ActivityStore()
    with pytest.raises(EmptyResultSetError):
        store.move_within_result_set(0, 0)
    store.add_activity(D1, food("apple", 50, D1))
    store.list_day(D1)
    with pytest.raises(IndexOutOfRangeError):
        store.move_within_result_set(0, 1)
    assert len(store.result_set) == 1


def test_list_day_stages_bucket_or_raises() -> None:
    store = _store()
    listed = store.list_day(D2)
    assert _descriptions(listed) == ["apple pie", "pushup"]
    with pytest.raises(NoMatchError):
        store.list_day(date(2030, 1, 1))
    assert store.result_set == ()


def test_insert_record_at_only_touches_result_set() -> None:
    store = _store()
    store.list_day(D1)
    store.insert_record_at(0, food("melon", 80, D1))
    assert store.result_at(0).description == "melon"
    assert store.net_calorie(D1) == 290
    with pytest.raises(IndexOutOfRangeError):
        store.insert_record_at(3, food("melon", 80, D1))


def test_edit_record_updates_bucket_and_result_set() -> None:
    store = _store()
    store.find_by_description("banana")
    updated = store.edit_record(0, description="rye bread", calories=200)
    assert store.result_at(0) == updated
    assert store.net_calorie(D1) == 50 + 200 - 60
    bucket = store.get_bucket(D1)
    assert bucket is not None
    assert bucket[1].description == "rye bread"
    assert bucket[1].entry_id == updated.entry_id
