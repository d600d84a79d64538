"""Tests for the MongoDB symptom store, against a mocked collection."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from database.mongo_client import SymptomStore
from shifai.models import TriageLevel
from shifai.triage import classify


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def store(collection):
    return SymptomStore.from_collection(collection)


def stored_docs():
    return [
        {
            "userId": "u1",
            "symptoms": "chest pain",
            "triageLevel": "urgent",
            "language": "en",
            "timestamp": datetime(2025, 3, 9, tzinfo=timezone.utc),
        },
        {
            "userId": "u1",
            "symptoms": "mild cough",
            "triageLevel": "safe",
            "language": "en",
            "timestamp": datetime(2025, 3, 1, tzinfo=timezone.utc),
        },
    ]


class TestSaveEntry:
    def test_inserts_classified_entry(self, store, collection):
        collection.insert_one.return_value.inserted_id = "abc123"
        result = classify("severe chest pain", "en")

        entry_id = store.save_entry("u1", "severe chest pain", "en", result, age=50, gender="male")

        assert entry_id == "abc123"
        doc = collection.insert_one.call_args[0][0]
        assert doc["userId"] == "u1"
        assert doc["symptoms"] == "severe chest pain"
        assert doc["triageLevel"] == "urgent"
        assert doc["triageResult"]["color"] == "red"
        assert doc["age"] == 50
        assert doc["timestamp"].tzinfo is not None

    def test_database_error_returns_none(self, store, collection):
        collection.insert_one.side_effect = PyMongoError("write failed")
        assert store.save_entry("u1", "fever", "en", classify("fever")) is None

    def test_not_connected(self):
        offline = SymptomStore(uri="")
        assert not offline.connected
        assert offline.save_entry("u1", "fever", "en", classify("fever")) is None


class TestQueries:
    def test_entries_for_user_most_recent_first(self, store, collection):
        collection.find.return_value.sort.return_value = stored_docs()

        entries = store.get_entries_for_user("u1")

        collection.find.assert_called_once_with({"userId": "u1"})
        collection.find.return_value.sort.assert_called_once_with("timestamp", DESCENDING)
        assert [e.text for e in entries] == ["chest pain", "mild cough"]
        assert entries[0].triage_level == TriageLevel.URGENT

    def test_limit_applied(self, store, collection):
        cursor = collection.find.return_value.sort.return_value
        cursor.limit.return_value = stored_docs()[:1]
        assert len(store.get_entries_for_user("u1", limit=1)) == 1
        cursor.limit.assert_called_once_with(1)

    def test_entries_by_level(self, store, collection):
        collection.find.return_value.sort.return_value = stored_docs()[:1]
        store.get_entries_by_level("URGENT")
        collection.find.assert_called_once_with({"triageLevel": "urgent"})

    def test_all_level_returns_everything(self, store, collection):
        collection.find.return_value.sort.return_value = stored_docs()
        assert len(store.get_entries_by_level("all")) == 2
        collection.find.assert_called_once_with({})

    def test_query_error_returns_empty(self, store, collection):
        collection.find.side_effect = PyMongoError("read failed")
        assert store.get_all_entries() == []

    def test_not_connected_returns_empty(self):
        assert SymptomStore(uri="").get_all_entries() == []


class TestDashboardStats:
    def test_counts(self, store, collection):
        collection.distinct.return_value = ["u1", "u2", "u3"]
        counts = {"urgent": 1, "monitor": 4, "safe": 7}
        collection.count_documents.side_effect = lambda query: counts[query["triageLevel"]]

        assert store.get_dashboard_stats() == {
            "totalPatients": 3,
            "urgentCases": 1,
            "monitorCases": 4,
            "safeCases": 7,
        }

    def test_not_connected(self):
        assert SymptomStore(uri="").get_dashboard_stats()["totalPatients"] == 0
