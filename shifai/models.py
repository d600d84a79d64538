"""
Value objects shared by the triage core.

Everything here is immutable and built fresh per request. The ``from_dict``
constructors accept the record shapes produced by the patient app and the
document store (camelCase keys, ISO timestamps).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class TriageLevel(str, Enum):
    """Symptom urgency tiers, lowest first."""

    SAFE = "safe"
    MONITOR = "monitor"
    URGENT = "urgent"

    @classmethod
    def parse(cls, value: Any) -> "TriageLevel":
        """Coerce a stored tier string; anything unknown counts as safe."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.SAFE


TRIAGE_COLORS: dict[TriageLevel, str] = {
    TriageLevel.URGENT: "red",
    TriageLevel.MONITOR: "yellow",
    TriageLevel.SAFE: "green",
}


EPOCH_MILLIS_THRESHOLD = 1e11


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept a datetime, an ISO-8601 string, or epoch seconds or milliseconds."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # Browser clients send Date.now() milliseconds
        seconds = value / 1000 if abs(value) > EPOCH_MILLIS_THRESHOLD else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _as_list(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value if v)


@dataclass(frozen=True)
class SymptomEntry:
    text: str
    triage_level: TriageLevel = TriageLevel.SAFE
    language: str = "en"
    timestamp: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> "SymptomEntry":
        return cls(
            text=str(data.get("text") or data.get("symptoms") or ""),
            triage_level=TriageLevel.parse(
                data.get("triage_level", data.get("triageLevel"))
            ),
            language=data.get("language") or "en",
            timestamp=parse_timestamp(data.get("timestamp")),
        )

    def to_dict(self) -> dict:
        return {
            "symptoms": self.text,
            "triageLevel": self.triage_level.value,
            "language": self.language,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass(frozen=True)
class PatientProfile:
    display_name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    conditions: tuple[str, ...] = ()
    allergies: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "PatientProfile":
        if isinstance(data, cls):
            return data
        data = data or {}
        age = data.get("age")
        try:
            age = int(age) if age not in (None, "") else None
        except (TypeError, ValueError):
            age = None
        return cls(
            display_name=data.get("display_name") or data.get("displayName") or data.get("name"),
            age=age,
            gender=data.get("gender") or None,
            conditions=_as_list(data.get("conditions") or data.get("medicalConditions")),
            allergies=_as_list(data.get("allergies")),
            medications=_as_list(data.get("medications")),
        )

    @property
    def is_empty(self) -> bool:
        return not (
            self.age or self.gender or self.conditions or self.allergies or self.medications
        )


@dataclass(frozen=True)
class PatientContext:
    """Per-request view of a patient used to personalise chat replies."""

    identifier: str = ""
    display_name: str = ""
    language: str = "en"
    recent_entries: tuple[SymptomEntry, ...] = ()  # most recent first
    profile: Optional[PatientProfile] = None

    @classmethod
    def from_dict(cls, data: dict) -> "PatientContext":
        """Build from the chat request body (uid, patientName, profileData, recentSymptoms)."""
        profile = data.get("profileData")
        return cls(
            identifier=str(data.get("uid") or data.get("identifier") or ""),
            display_name=data.get("patientName") or data.get("display_name") or "",
            language=data.get("language") or "en",
            recent_entries=tuple(
                SymptomEntry.from_dict(e) for e in (data.get("recentSymptoms") or [])
            ),
            profile=PatientProfile.from_dict(profile) if profile is not None else None,
        )

    @property
    def first_name(self) -> str:
        parts = (self.display_name or "").split()
        return parts[0] if parts else ""

    @property
    def latest_entry(self) -> Optional[SymptomEntry]:
        return self.recent_entries[0] if self.recent_entries else None


@dataclass(frozen=True)
class ConversationMessage:
    role: str
    text: str
    timestamp: Optional[datetime] = None
    language: str = "en"

    def __post_init__(self):
        # The chat widget stores patient turns as "user"
        if self.role == "user":
            object.__setattr__(self, "role", "patient")

    @property
    def is_patient(self) -> bool:
        return self.role == "patient"


@dataclass(frozen=True)
class TriageResult:
    """Classification outcome. ``color`` always follows ``level``."""

    level: TriageLevel
    title: str
    description: str
    advice: str

    @property
    def color(self) -> str:
        return TRIAGE_COLORS[self.level]

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "color": self.color,
            "title": self.title,
            "description": self.description,
            "advice": self.advice,
        }


@dataclass(frozen=True)
class PatientData:
    """Snapshot of a patient's history handed to the report synthesizer."""

    patient_id: str = ""
    profile: PatientProfile = field(default_factory=PatientProfile)
    entries: tuple[SymptomEntry, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "PatientData":
        if not isinstance(data, dict):
            raise TypeError(f"patient data must be a dict, got {type(data).__name__}")
        entries = data.get("entries", [])
        if entries is None:
            entries = []
        if not isinstance(entries, (list, tuple)):
            raise TypeError(f"entries must be a list, got {type(entries).__name__}")
        profile = data.get("profile") or {}
        uid = profile.get("uid") if isinstance(profile, dict) else None
        return cls(
            patient_id=str(data.get("patient_id") or data.get("patientId") or uid or ""),
            profile=PatientProfile.from_dict(profile),
            entries=tuple(
                e if isinstance(e, SymptomEntry) else SymptomEntry.from_dict(e)
                for e in entries
            ),
        )


@dataclass(frozen=True)
class ClinicalReport:
    patient_id: str
    summary: str
    timeline: str
    risk_analysis: str
    recommendations: str
    generated_at: datetime
    source: str = "fallback"

    def to_dict(self) -> dict:
        return {
            "patientId": self.patient_id,
            "summary": self.summary,
            "timeline": self.timeline,
            "riskAnalysis": self.risk_analysis,
            "recommendations": self.recommendations,
            "generatedAt": self.generated_at.isoformat(),
        }
