"""
Prompt Composer.

Builds the text prompts sent to the remote model:
  - chat prompt: persona, patient profile, recent symptom history, recent
    conversation, then the new message after a fixed turn marker
  - clinical report prompt: demographics, dated symptom history, medical
    background and the four labelled sections the report parser expects

Composition never fails. Missing optional fields are omitted or rendered as
"not specified".
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

from shifai.localization import LANGUAGE_NAMES, resolve_language
from shifai.models import ConversationMessage, PatientContext, PatientData, SymptomEntry

PERSONA_NAME = "ShifAI"
USER_TURN_MARKER = "User:"
ASSISTANT_TURN_MARKER = "Assistant:"

DEFAULT_HISTORY_WINDOW = 4
DEFAULT_SYMPTOM_LIMIT = 3

# (section name, header) in the order the model is asked to write them
REPORT_SECTIONS: tuple[tuple[str, str], ...] = (
    ("summary", "CLINICAL SUMMARY"),
    ("timeline", "TIMELINE ANALYSIS"),
    ("risk", "RISK ASSESSMENT"),
    ("recommendations", "RECOMMENDATIONS"),
)


def _aware(ts: datetime) -> datetime:
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def describe_recency(timestamp: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human-readable age of an entry ("today", "3 days ago")."""
    if timestamp is None:
        return "date unknown"
    now = now or datetime.now(timezone.utc)
    days = (_aware(now).date() - _aware(timestamp).date()).days
    if days <= 0:
        return "today"
    if days == 1:
        return "1 day ago"
    return f"{days} days ago"


def format_date(timestamp: Optional[datetime]) -> str:
    return timestamp.strftime("%Y-%m-%d") if timestamp else "Unknown date"


def _join(items: Sequence[str], empty: str) -> str:
    return ", ".join(items) if items else empty


def _profile_section(context: PatientContext) -> str:
    profile = context.profile
    if profile is None or profile.is_empty:
        return "PATIENT PROFILE: not specified"

    lines = ["PATIENT PROFILE:"]
    if profile.age:
        lines.append(f"- Age: {profile.age}")
    if profile.gender:
        lines.append(f"- Gender: {profile.gender}")
    if profile.conditions:
        lines.append(f"- Medical conditions: {', '.join(profile.conditions)}")
    if profile.allergies:
        lines.append(f"- Allergies: {', '.join(profile.allergies)}")
    if profile.medications:
        lines.append(f"- Current medications: {', '.join(profile.medications)}")
    return "\n".join(lines)


def _symptom_section(
    entries: Sequence[SymptomEntry], limit: int, now: Optional[datetime]
) -> str:
    if not entries:
        return "RECENT SYMPTOM HISTORY: No recent symptoms reported"

    lines = ["RECENT SYMPTOM HISTORY (most recent first):"]
    for entry in list(entries)[:limit]:
        lines.append(
            f"- {entry.text} ({entry.triage_level.value} priority, "
            f"{describe_recency(entry.timestamp, now)})"
        )
    return "\n".join(lines)


def _conversation_section(history: Sequence[ConversationMessage], window: int) -> str:
    if not history or window <= 0:
        return ""

    # History uses the same turn labels as the new message
    lines = ["RECENT CONVERSATION:"]
    for msg in list(history)[-window:]:
        marker = USER_TURN_MARKER if msg.is_patient else ASSISTANT_TURN_MARKER
        lines.append(f"{marker} {msg.text}")
    return "\n".join(lines)


def compose(
    message: str,
    context: PatientContext,
    history: Sequence[ConversationMessage] = (),
    *,
    history_window: int = DEFAULT_HISTORY_WINDOW,
    symptom_limit: int = DEFAULT_SYMPTOM_LIMIT,
    now: Optional[datetime] = None,
) -> str:
    """
    Build the chat prompt for one conversation turn.

    Args:
        message: The patient's new message.
        context: Patient context (profile, recent entries, language).
        history: Previous messages, oldest first.
        history_window: How many of the most recent messages to include.
        symptom_limit: How many recent symptom entries to summarise.
        now: Reference time for recency wording.

    Returns:
        A single prompt string ending with the assistant turn marker.
    """
    context = context or PatientContext()
    language_name = LANGUAGE_NAMES[resolve_language(context.language)]
    patient = context.display_name or "the patient"

    preamble = (
        f"You are {PERSONA_NAME}, a careful medical AI assistant with access to "
        f"{patient}'s health profile. Give personalised, practical guidance like a "
        "knowledgeable physician who knows them well.\n\n"
        "INSTRUCTIONS:\n"
        "1. Take the patient's allergies, medications and conditions into account.\n"
        "2. Explain what each suggestion targets and why.\n"
        "3. Advise urgent in-person care for any red-flag symptom.\n"
        "4. Be direct, warm and concise.\n"
        f"5. Respond in {language_name}."
    )

    sections = [
        preamble,
        _profile_section(context),
        _symptom_section(context.recent_entries, symptom_limit, now),
        _conversation_section(history or (), history_window),
    ]
    body = "\n\n".join(s for s in sections if s)
    return f"{body}\n\n{USER_TURN_MARKER} {message or ''}\n{ASSISTANT_TURN_MARKER}"


def compose_report_prompt(patient_data: PatientData) -> str:
    """Build the clinician report prompt from a patient snapshot."""
    profile = patient_data.profile
    entries = patient_data.entries

    history_lines = "\n".join(
        f"{i}. {format_date(e.timestamp)} - {e.text} (Triage: {e.triage_level.value})"
        for i, e in enumerate(entries, start=1)
    ) or "No symptom entries recorded."

    return f"""Generate a comprehensive clinical summary for this patient:

Patient Information:
- Name: {profile.display_name or 'Unknown'}
- Age: {profile.age or 'Not specified'}
- Gender: {profile.gender or 'Not specified'}

Symptom History ({len(entries)} entries):
{history_lines}

Medical Background:
- Conditions: {_join(profile.conditions, 'None reported')}
- Allergies: {_join(profile.allergies, 'None reported')}
- Medications: {_join(profile.medications, 'None reported')}

Analyze this patient's data and write exactly these four sections, each starting with its header on its own line:

CLINICAL SUMMARY: current health status, key symptoms and overall condition in 2-3 sentences.

TIMELINE ANALYSIS: patterns in symptom progression, frequency and severity changes over time.

RISK ASSESSMENT: current risk level rated LOW/MODERATE/HIGH with justification.

RECOMMENDATIONS: immediate actions, follow-up care, diagnostic tests to consider and treatment modifications.

Write in professional medical language suitable for healthcare providers. Be specific and actionable."""
