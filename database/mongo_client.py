"""
MongoDB Client for Symptom Entry Storage.

Handles all database operations:
  - Connection management with graceful fallback
  - Symptom entry creation
  - Read accessors that feed the chat context and clinical reports
  - Dashboard statistics
"""

import logging
from datetime import datetime, timezone

from pymongo import DESCENDING, MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

import config
from shifai.models import SymptomEntry, TriageLevel, TriageResult

logger = logging.getLogger(__name__)


class SymptomStore:
    """Manages MongoDB connections and symptom entry operations."""

    def __init__(
        self,
        uri: str | None = None,
        db_name: str | None = None,
        collection_name: str | None = None,
    ):
        self.uri = uri if uri is not None else config.MONGODB_URI
        self.db_name = db_name or config.MONGODB_DB_NAME
        self.collection_name = collection_name or config.MONGODB_COLLECTION
        self.client = None
        self.db = None
        self.collection = None
        self.connected = False

        if self.uri:
            self._connect()

    def _connect(self):
        """Establish MongoDB connection."""
        try:
            self.client = MongoClient(
                self.uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
            )
            # Test the connection
            self.client.admin.command("ping")
            self.db = self.client[self.db_name]
            self.collection = self.db[self.collection_name]
            self.connected = True
            logger.info("Connected to MongoDB database: %s", self.db_name)
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error("MongoDB connection failed: %s", e)
            self.connected = False
        except Exception as e:
            logger.error("Unexpected MongoDB error: %s", e)
            self.connected = False

    @classmethod
    def from_collection(cls, collection) -> "SymptomStore":
        """Wrap an existing collection (used by tests and embedding apps)."""
        store = cls(uri="")
        store.collection = collection
        store.connected = True
        return store

    def save_entry(
        self,
        user_id: str,
        text: str,
        language: str,
        result: TriageResult,
        age: int | None = None,
        gender: str | None = None,
    ) -> str | None:
        """
        Save a classified symptom entry.

        Returns:
            Entry ID string if successful, None if failed.
        """
        if not self.connected:
            logger.warning("MongoDB not connected — cannot save symptom entry")
            return None

        entry_doc = {
            "userId": user_id,
            "symptoms": text,
            "age": age,
            "gender": gender,
            "language": language,
            "triageLevel": result.level.value,
            "triageResult": result.to_dict(),
            "timestamp": datetime.now(timezone.utc),
        }

        try:
            inserted = self.collection.insert_one(entry_doc)
            entry_id = str(inserted.inserted_id)
            logger.info("Symptom entry saved — ID: %s (%s)", entry_id, result.level.value)
            return entry_id
        except PyMongoError as e:
            logger.error("Failed to save symptom entry: %s", e)
            return None

    def _find(self, query: dict, limit: int = 0) -> list[SymptomEntry]:
        if not self.connected:
            return []
        try:
            cursor = self.collection.find(query).sort("timestamp", DESCENDING)
            if limit:
                cursor = cursor.limit(limit)
            return [SymptomEntry.from_dict(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to retrieve symptom entries: %s", e)
            return []

    def get_entries_for_user(self, user_id: str, limit: int = 0) -> list[SymptomEntry]:
        """A patient's entries, most recent first."""
        return self._find({"userId": user_id}, limit)

    def get_all_entries(self, limit: int = 0) -> list[SymptomEntry]:
        """Every entry (doctor dashboard), most recent first."""
        return self._find({}, limit)

    def get_entries_by_level(self, level: TriageLevel | str) -> list[SymptomEntry]:
        """Entries of one triage tier; "all" returns everything."""
        if str(getattr(level, "value", level)).lower() == "all":
            return self.get_all_entries()
        return self._find({"triageLevel": TriageLevel.parse(level).value})

    def get_dashboard_stats(self) -> dict:
        """Distinct patients and per-tier case counts."""
        stats = {"totalPatients": 0, "urgentCases": 0, "monitorCases": 0, "safeCases": 0}
        if not self.connected:
            return stats
        try:
            stats["totalPatients"] = len(self.collection.distinct("userId"))
            for level in TriageLevel:
                stats[f"{level.value}Cases"] = self.collection.count_documents(
                    {"triageLevel": level.value}
                )
        except PyMongoError as e:
            logger.error("Failed to compute dashboard stats: %s", e)
        return stats

    def close(self):
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()
            self.connected = False
            logger.info("MongoDB connection closed.")
