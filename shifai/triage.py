"""
Triage Classifier.

Keyword-based triage policy shared by the symptom form and the request
handlers, so the client and server can never disagree on a tier:

  urgent keyword present   →  urgent  (red)
  monitor keyword present  →  monitor (yellow)
  otherwise                →  safe    (green)

Pure and deterministic: no network or storage access.
"""

from shifai.localization import triage_message
from shifai.medical_knowledge import check_monitor_keywords, check_urgent_keywords
from shifai.models import TriageLevel, TriageResult


def classify_level(text: str) -> TriageLevel:
    """Return only the tier for a symptom description."""
    if check_urgent_keywords(text):
        return TriageLevel.URGENT
    if check_monitor_keywords(text):
        return TriageLevel.MONITOR
    return TriageLevel.SAFE


def classify(text: str, language: str = "en") -> TriageResult:
    """
    Classify a free-text symptom description.

    Args:
        text: Symptom description as typed by the patient. Empty text is
            classified as safe; minimum-length checks belong to the caller.
        language: Language for the title, description and advice.

    Returns:
        TriageResult with localized text.
    """
    level = classify_level(text or "")
    message = triage_message(level, language)
    return TriageResult(
        level=level,
        title=message["title"],
        description=message["description"],
        advice=message["advice"],
    )


def matched_keywords(text: str) -> dict[str, list[str]]:
    """Keywords that drove a classification, for logging at the boundary."""
    return {
        "urgent": check_urgent_keywords(text),
        "monitor": check_monitor_keywords(text),
    }
