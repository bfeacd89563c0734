"""
Unit tests for ClickLedger.

Covers:
    - INSERTED on first click, ALREADY_CLICKED on repeats
    - Day key taken from the click instant (UTC+3)
    - clicked_links for the current day only
"""

from datetime import datetime, timedelta, timezone

import pytest

from click_tracker.daykey import NAIROBI
from click_tracker.ledger.ledger import ClickLedger, RecordResult


@pytest.fixture
def ledger(storage):
    return ClickLedger(storage)


def test_first_click_inserted(ledger, storage, noon):
    assert ledger.record_click("v1", "apk", "https://a.example", noon) is RecordResult.INSERTED
    record = storage.clicks[("v1", "apk", "2024-05-01")]
    assert record.link_url == "https://a.example"
    assert record.created_at == noon


def test_repeat_click_same_day_already_clicked(ledger, noon, last_second):
    ledger.record_click("v1", "apk", "https://a.example", noon)
    assert ledger.record_click("v1", "apk", "https://a.example", last_second) is RecordResult.ALREADY_CLICKED


def test_rollover_is_a_new_day(ledger, storage, last_second, next_day_start):
    assert ledger.record_click("v1", "apk", "https://a.example", last_second) is RecordResult.INSERTED
    assert ledger.record_click("v1", "apk", "https://a.example", next_day_start) is RecordResult.INSERTED
    assert storage.count_clicks("apk") == 2


def test_record_click_does_not_touch_counters(ledger, storage, noon):
    ledger.record_click("v1", "apk", "https://a.example", noon)
    assert storage.get_counters() == {}


def test_clicked_links_today(ledger, noon, next_day_start):
    ledger.record_click("v1", "apk", "https://a.example", noon)
    ledger.record_click("v1", "ios", "https://i.example", noon)
    ledger.record_click("v2", "web", "https://w.example", noon)
    assert ledger.clicked_links("v1", noon) == {"apk", "ios"}
    assert ledger.clicked_links("v1", next_day_start) == set()


def test_record_click_defaults_to_now(ledger):
    assert ledger.record_click("v1", "apk", "https://a.example") is RecordResult.INSERTED
    assert ledger.clicked_links("v1") == {"apk"}


def test_naive_now_stored_as_aware_utc(ledger, storage):
    naive = datetime(2024, 5, 1, 21, 0, 1)
    ledger.record_click("v1", "apk", "https://a.example", naive)
    record = storage.clicks[("v1", "apk", "2024-05-02")]
    assert record.created_at.tzinfo is not None
    assert record.created_at == naive.replace(tzinfo=timezone.utc)


def test_aware_now_normalized_to_utc(ledger, storage):
    nairobi_evening = datetime(2024, 5, 1, 23, 59, 59, tzinfo=NAIROBI)
    ledger.record_click("v1", "apk", "https://a.example", nairobi_evening)
    record = storage.clicks[("v1", "apk", "2024-05-01")]
    assert record.created_at.utcoffset() == timedelta(0)
    assert record.created_at == nairobi_evening
