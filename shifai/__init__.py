"""
ShifAI package — symptom triage and AI-response orchestration.
"""

from shifai.models import (
    ClinicalReport,
    ConversationMessage,
    PatientContext,
    PatientData,
    PatientProfile,
    SymptomEntry,
    TriageLevel,
    TriageResult,
)
from shifai.report_synthesizer import ReportSynthesizer
from shifai.response_generator import ResponseGenerator
from shifai.triage import classify

__all__ = [
    "ClinicalReport",
    "ConversationMessage",
    "PatientContext",
    "PatientData",
    "PatientProfile",
    "ReportSynthesizer",
    "ResponseGenerator",
    "SymptomEntry",
    "TriageLevel",
    "TriageResult",
    "classify",
]
