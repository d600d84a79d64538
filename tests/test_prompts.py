"""Tests for chat and report prompt composition."""

from datetime import datetime, timedelta, timezone

from shifai.models import (
    PatientContext,
    PatientData,
    PatientProfile,
    SymptomEntry,
    TriageLevel,
)
from shifai.prompts import (
    ASSISTANT_TURN_MARKER,
    compose,
    compose_report_prompt,
    describe_recency,
)

from conftest import NOW


class TestChatPrompt:
    def test_ends_with_message_and_turn_marker(self, patient_context):
        prompt = compose("Is it safe to jog?", patient_context, now=NOW)
        assert prompt.endswith(f"User: Is it safe to jog?\n{ASSISTANT_TURN_MARKER}")

    def test_profile_fields_rendered(self, patient_context):
        prompt = compose("hello", patient_context, now=NOW)
        assert "- Age: 42" in prompt
        assert "- Gender: female" in prompt
        assert "asthma" in prompt
        assert "penicillin" in prompt
        assert "salbutamol" in prompt

    def test_absent_profile_fields_omitted(self):
        context = PatientContext(display_name="Lee", profile=PatientProfile(age=30))
        prompt = compose("hello", context, now=NOW)
        assert "- Age: 30" in prompt
        assert "Gender" not in prompt
        assert "Allergies" not in prompt

    def test_missing_profile_not_specified(self, empty_context):
        prompt = compose("hello", empty_context, now=NOW)
        assert "PATIENT PROFILE: not specified" in prompt
        assert "No recent symptoms reported" in prompt

    def test_symptom_history_with_tier_and_recency(self, patient_context):
        prompt = compose("hello", patient_context, now=NOW)
        assert "lower back pain after lifting (monitor priority, 2 days ago)" in prompt

    def test_symptom_history_is_bounded(self):
        entries = tuple(
            SymptomEntry(text=f"entry {i}", triage_level=TriageLevel.SAFE)
            for i in range(6)
        )
        prompt = compose("hello", PatientContext(recent_entries=entries), symptom_limit=3, now=NOW)
        assert "entry 2" in prompt
        assert "entry 3" not in prompt

    def test_conversation_window_keeps_latest_oldest_first(self, patient_context, chat_history):
        prompt = compose("ok", patient_context, chat_history, history_window=4, now=NOW)
        assert "My back has been sore." not in prompt
        assert "How long has it been sore?" not in prompt
        first = prompt.index("About three days.")
        last = prompt.index("Good, keep resting.")
        assert first < last
        assert "User: About three days." in prompt
        assert "Assistant: Good, keep resting." in prompt
        assert "Sam Rivera:" not in prompt
        assert "ShifAI:" not in prompt

    def test_no_conversation_section_without_history(self, patient_context):
        assert "RECENT CONVERSATION" not in compose("hi", patient_context, [], now=NOW)

    def test_response_language(self):
        assert "Respond in French." in compose("salut", PatientContext(language="fr"))
        assert "Respond in Arabic." in compose("مرحبا", PatientContext(language="ar"))
        assert "Respond in English." in compose("hola", PatientContext(language="es"))

    def test_never_raises_on_missing_inputs(self):
        prompt = compose(None, None, None)
        assert prompt.endswith(ASSISTANT_TURN_MARKER)


class TestRecency:
    def test_today(self):
        assert describe_recency(NOW - timedelta(hours=2), NOW) == "today"

    def test_days_ago(self):
        assert describe_recency(NOW - timedelta(days=5), NOW) == "5 days ago"

    def test_naive_timestamp(self):
        naive = datetime(2025, 3, 9, 8, 0)
        assert describe_recency(naive, NOW) == "1 day ago"

    def test_unknown(self):
        assert describe_recency(None, NOW) == "date unknown"


class TestReportPrompt:
    def test_contains_history_and_sections(self):
        data = PatientData(
            patient_id="p1",
            profile=PatientProfile(display_name="Ana", age=70, conditions=("diabetes",)),
            entries=(
                SymptomEntry(
                    text="back pain",
                    triage_level=TriageLevel.MONITOR,
                    timestamp=datetime(2025, 3, 1, tzinfo=timezone.utc),
                ),
            ),
        )
        prompt = compose_report_prompt(data)
        assert "1. 2025-03-01 - back pain (Triage: monitor)" in prompt
        assert "- Name: Ana" in prompt
        assert "- Conditions: diabetes" in prompt
        assert "- Allergies: None reported" in prompt
        for header in ("CLINICAL SUMMARY", "TIMELINE ANALYSIS", "RISK ASSESSMENT", "RECOMMENDATIONS"):
            assert header in prompt

    def test_empty_history(self):
        prompt = compose_report_prompt(PatientData())
        assert "Symptom History (0 entries)" in prompt
        assert "- Age: Not specified" in prompt
