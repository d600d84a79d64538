"""
Report Synthesizer — clinician summaries from a patient's symptom history.

Primary path asks the remote model for four labelled sections and parses
them. When the model is unavailable or answers with nothing, the report is
computed locally from the entries: tier counts, most frequent symptom
categories, a risk tier, recommendations and a short timeline. The local
analysis is deterministic for a given snapshot.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence, Union

from shifai.llm_engine import REPORT_PARAMS, GenerationParams, TextGenerationClient
from shifai.medical_knowledge import categorize_symptoms
from shifai.models import ClinicalReport, PatientData, PatientProfile, SymptomEntry, TriageLevel
from shifai.prompts import REPORT_SECTIONS, compose_report_prompt, format_date
from shifai.report_parser import parse_sections

logger = logging.getLogger(__name__)

TIMELINE_LIMIT = 5
TOP_SYMPTOM_LIMIT = 3
ELDERLY_AGE = 65

SECTION_DEFAULTS: dict[str, str] = {
    "summary": "Unable to generate summary at this time.",
    "timeline": "Timeline analysis unavailable.",
    "risk": "Risk assessment pending.",
    "recommendations": "Please review patient history manually.",
}

NO_SYMPTOMS = "No symptoms reported to date."

# ── Risk Tiers ─────────────────────────────────────────────────────────────

RISK_HIGH = "HIGH"
RISK_MODERATE = "MODERATE"
RISK_LOW = "LOW"

RECOMMENDATIONS: dict[str, str] = {
    RISK_HIGH: (
        "IMMEDIATE: Schedule urgent medical evaluation. Consider emergency care if "
        "symptoms worsen. Follow up within 24-48 hours."
    ),
    RISK_MODERATE: (
        "Schedule medical appointment within 1-2 weeks. Monitor symptom progression. "
        "Provide patient education on warning signs."
    ),
    RISK_LOW: (
        "Routine follow-up recommended. Lifestyle modifications and symptomatic "
        "treatment as appropriate."
    ),
}


@dataclass(frozen=True)
class SymptomAnalysis:
    """Deterministic aggregation of a patient's entries."""

    counts: dict[TriageLevel, int]
    top_symptoms: list[tuple[str, int]]
    risk_tier: str
    risk_analysis: str
    recommendations: str
    timeline: str
    summary: str


def count_levels(entries: Sequence[SymptomEntry]) -> dict[TriageLevel, int]:
    counts = Counter(e.triage_level for e in entries)
    return {level: counts.get(level, 0) for level in TriageLevel}


def top_symptom_categories(
    entries: Sequence[SymptomEntry], limit: int = TOP_SYMPTOM_LIMIT
) -> list[tuple[str, int]]:
    """Most frequent categories; ties keep first-seen order."""
    counts: dict[str, int] = {}
    for entry in entries:
        for category in categorize_symptoms(entry.text):
            counts[category] = counts.get(category, 0) + 1
    # sorted() is stable, so equal counts stay in insertion order
    return sorted(counts.items(), key=lambda item: -item[1])[:limit]


def assess_risk(counts: dict[TriageLevel, int]) -> tuple[str, str]:
    """Return (tier, analysis sentence) from tier counts."""
    urgent, monitor = counts[TriageLevel.URGENT], counts[TriageLevel.MONITOR]
    if urgent > 0:
        return RISK_HIGH, (
            f"HIGH - {urgent} urgent symptom episode(s) requiring immediate medical evaluation."
        )
    if monitor > 1:
        return RISK_MODERATE, (
            f"MODERATE - Multiple monitor-level symptoms ({monitor}) suggest ongoing "
            "health concerns requiring professional assessment."
        )
    if monitor == 1:
        return RISK_MODERATE, (
            "MODERATE - Single monitor-level symptom warrants medical consultation within 2-3 days."
        )
    if not any(counts.values()):
        return RISK_LOW, "LOW - No active symptoms reported."
    return RISK_LOW, "LOW - Symptoms appear manageable with routine care."


def _chronological(entries: Sequence[SymptomEntry]) -> list[SymptomEntry]:
    """Most recent first; undated entries keep their order at the end."""
    dated = [e for e in entries if e.timestamp is not None]
    undated = [e for e in entries if e.timestamp is None]

    def sort_key(entry: SymptomEntry) -> float:
        ts = entry.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return ts.timestamp()

    return sorted(dated, key=sort_key, reverse=True) + undated


def build_timeline(entries: Sequence[SymptomEntry], limit: int = TIMELINE_LIMIT) -> str:
    if not entries:
        return NO_SYMPTOMS
    lines = [
        f"{format_date(e.timestamp)}: {e.text} ({e.triage_level.value})"
        for e in _chronological(entries)[:limit]
    ]
    return "Recent symptom progression:\n" + "\n".join(lines)


def _demographics(profile: PatientProfile) -> str:
    name = profile.display_name or "Patient"
    age = f"{profile.age} years" if profile.age else "Unknown age"
    gender = profile.gender or "Unknown gender"
    return f"{name} ({age}, {gender})"


def analyze_symptom_patterns(
    entries: Sequence[SymptomEntry], profile: Optional[PatientProfile] = None
) -> SymptomAnalysis:
    """Aggregate entries into the fallback report sections."""
    profile = profile or PatientProfile()
    counts = count_levels(entries)
    top = top_symptom_categories(entries)
    tier, risk_sentence = assess_risk(counts)

    distribution = (
        f" Distribution: {counts[TriageLevel.URGENT]} urgent, "
        f"{counts[TriageLevel.MONITOR]} monitor, {counts[TriageLevel.SAFE]} safe."
    )

    recommendations = RECOMMENDATIONS[tier]
    if tier == RISK_MODERATE and profile.age and profile.age > ELDERLY_AGE:
        recommendations += " Given patient age, prioritize prompt evaluation."
    if top:
        recommendations += f" Primary focus: {top[0][0]} management."

    if not entries:
        complaints = NO_SYMPTOMS
    elif top:
        complaints = "Primary complaints include " + ", ".join(
            f"{name} ({count}x)" for name, count in top
        ) + "."
    else:
        complaints = "Reports symptom episodes requiring clinical evaluation."

    history = ""
    if profile.conditions:
        history = f" Medical history: {', '.join(profile.conditions)}."

    summary = (
        f"{_demographics(profile)} has reported {len(entries)} symptom episode(s). "
        f"{complaints}{history}"
    )

    return SymptomAnalysis(
        counts=counts,
        top_symptoms=top,
        risk_tier=tier,
        risk_analysis=risk_sentence + distribution,
        recommendations=recommendations,
        timeline=build_timeline(entries),
        summary=summary,
    )


class ReportSynthesizer:
    """Builds clinical reports, remote first with a deterministic fallback."""

    def __init__(
        self,
        client: Optional[TextGenerationClient] = None,
        params: GenerationParams = REPORT_PARAMS,
        clock: Callable[[], datetime] | None = None,
    ):
        self.client = client
        self.params = params
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def synthesize(self, patient_data: Union[PatientData, dict]) -> ClinicalReport:
        """
        Generate a clinical report for a patient snapshot.

        Args:
            patient_data: PatientData, or a dict with ``profile`` and
                ``entries`` keys.

        Returns:
            ClinicalReport. Only a malformed input shape raises (TypeError).
        """
        if not isinstance(patient_data, PatientData):
            patient_data = PatientData.from_dict(patient_data)

        report = self._remote_report(patient_data)
        if report is not None:
            return report
        return self.fallback_report(patient_data)

    def _remote_report(self, patient_data: PatientData) -> Optional[ClinicalReport]:
        if self.client is None:
            return None
        try:
            completion = self.client.complete(compose_report_prompt(patient_data), self.params)
        except Exception as e:
            logger.warning(
                "Remote report generation failed for %s, using local analysis: %s",
                patient_data.patient_id or "unknown patient", e,
            )
            return None

        text = (completion or "").strip()
        if not text:
            logger.warning("Remote report generation returned empty text, using local analysis")
            return None

        sections = parse_sections(text, REPORT_SECTIONS)
        missing = [name for name, body in sections.items() if body is None]
        if missing:
            logger.info("Report missing sections %s; using defaults", missing)

        def section(name: str) -> str:
            return sections.get(name) or SECTION_DEFAULTS[name]

        return ClinicalReport(
            patient_id=patient_data.patient_id,
            summary=section("summary"),
            timeline=section("timeline"),
            risk_analysis=section("risk"),
            recommendations=section("recommendations"),
            generated_at=self.clock(),
            source="remote",
        )

    def fallback_report(self, patient_data: PatientData) -> ClinicalReport:
        """Local, deterministic report built from the entries alone."""
        analysis = analyze_symptom_patterns(patient_data.entries, patient_data.profile)
        logger.info(
            "Local report for %s: risk=%s entries=%d",
            patient_data.patient_id or "unknown patient",
            analysis.risk_tier,
            len(patient_data.entries),
        )
        return ClinicalReport(
            patient_id=patient_data.patient_id,
            summary=analysis.summary,
            timeline=analysis.timeline,
            risk_analysis=analysis.risk_analysis,
            recommendations=analysis.recommendations,
            generated_at=self.clock(),
            source="fallback",
        )
