"""Test configuration and fixtures"""

from datetime import datetime, timezone

import pytest

from shifai.llm_engine import RemoteGenerationError
from shifai.models import (
    ConversationMessage,
    PatientContext,
    PatientProfile,
    SymptomEntry,
    TriageLevel,
)

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class FakeClient:
    """Remote client double that returns a canned completion."""

    def __init__(self, completion="", error=None):
        self.completion = completion
        self.error = error
        self.calls = []

    def complete(self, prompt, params):
        self.calls.append((prompt, params))
        if self.error is not None:
            raise self.error
        return self.completion


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def failing_client():
    return FakeClient(error=RemoteGenerationError("connection timed out"))


@pytest.fixture
def empty_client():
    return FakeClient(completion="   \n ")


@pytest.fixture
def make_client():
    return FakeClient


@pytest.fixture
def recent_entries():
    return (
        SymptomEntry(
            text="lower back pain after lifting",
            triage_level=TriageLevel.MONITOR,
            timestamp=datetime(2025, 3, 8, 9, 30, tzinfo=timezone.utc),
        ),
        SymptomEntry(
            text="mild cough",
            triage_level=TriageLevel.SAFE,
            timestamp=datetime(2025, 2, 20, 18, 0, tzinfo=timezone.utc),
        ),
    )


@pytest.fixture
def patient_context(recent_entries):
    return PatientContext(
        identifier="uid-123",
        display_name="Sam Rivera",
        language="en",
        recent_entries=recent_entries,
        profile=PatientProfile(
            age=42,
            gender="female",
            conditions=("asthma",),
            allergies=("penicillin",),
            medications=("salbutamol",),
        ),
    )


@pytest.fixture
def empty_context():
    return PatientContext()


@pytest.fixture
def chat_history():
    return [
        ConversationMessage(role="patient", text="My back has been sore."),
        ConversationMessage(role="assistant", text="How long has it been sore?"),
        ConversationMessage(role="patient", text="About three days."),
        ConversationMessage(role="assistant", text="Have you tried resting it?"),
        ConversationMessage(role="patient", text="Yes, a little."),
        ConversationMessage(role="assistant", text="Good, keep resting."),
    ]
