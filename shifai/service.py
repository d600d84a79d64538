"""
Triage Service — wiring for request handlers.

Builds the remote client, generator, synthesizer and symptom store from
``config`` and exposes the operations the HTTP layer calls. This is the
only module in the package that reads configuration; the components get
their settings through constructor arguments.
"""

import logging
from typing import Optional, Sequence

import config
from database.mongo_client import SymptomStore
from shifai.llm_engine import GeminiClient, GenerationParams
from shifai.models import (
    ClinicalReport,
    ConversationMessage,
    PatientContext,
    PatientData,
    PatientProfile,
    TriageResult,
)
from shifai.report_synthesizer import ReportSynthesizer
from shifai.response_generator import ResponseGenerator
from shifai.triage import classify, matched_keywords

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)


def chat_params() -> GenerationParams:
    return GenerationParams(
        max_new_tokens=config.CHAT_MAX_NEW_TOKENS,
        temperature=config.CHAT_TEMPERATURE,
        top_p=config.CHAT_TOP_P,
        repetition_penalty=config.CHAT_REPETITION_PENALTY,
        model=config.GEMINI_MODEL,
    )


def report_params() -> GenerationParams:
    return GenerationParams(
        max_new_tokens=config.REPORT_MAX_NEW_TOKENS,
        temperature=config.REPORT_TEMPERATURE,
        top_p=config.REPORT_TOP_P,
        repetition_penalty=config.REPORT_REPETITION_PENALTY,
        model=config.REPORT_MODEL,
    )


def initialize_client() -> Optional[GeminiClient]:
    """Create the Gemini client, or None when no API key is configured."""
    try:
        return GeminiClient(
            api_key=config.GOOGLE_API_KEY,
            model_name=config.GEMINI_MODEL,
            timeout_ms=config.REMOTE_TIMEOUT_MS,
        )
    except ValueError as e:
        logger.warning("%s Falling back to local replies only.", e)
        return None


class TriageService:
    """Facade over the triage core for a thin request handler."""

    def __init__(
        self,
        generator: ResponseGenerator,
        synthesizer: ReportSynthesizer,
        store: Optional[SymptomStore] = None,
        client: Optional[GeminiClient] = None,
    ):
        self.generator = generator
        self.synthesizer = synthesizer
        self.store = store
        self.client = client

    def classify(self, text: str, language: str = "en") -> TriageResult:
        result = classify(text, language)
        logger.debug("Classified as %s: %s", result.level.value, matched_keywords(text))
        return result

    def submit_symptoms(
        self,
        user_id: str,
        text: str,
        language: str = "en",
        profile: Optional[PatientProfile] = None,
    ) -> tuple[TriageResult, Optional[str]]:
        """Classify a symptom description and persist it when a store is available."""
        result = self.classify(text, language)
        entry_id = None
        if self.store is not None:
            profile = profile or PatientProfile()
            entry_id = self.store.save_entry(
                user_id, text, language, result, age=profile.age, gender=profile.gender
            )
        return result, entry_id

    def chat(
        self,
        message: str,
        context: PatientContext,
        history: Sequence[ConversationMessage] = (),
    ) -> str:
        return self.generator.generate(message, context, history)

    def report(self, patient_data) -> ClinicalReport:
        return self.synthesizer.synthesize(patient_data)

    def report_for_patient(
        self, patient_id: str, profile: Optional[PatientProfile] = None
    ) -> ClinicalReport:
        """Load a patient's entries from the store and synthesize a report."""
        entries = self.store.get_entries_for_user(patient_id) if self.store else []
        return self.synthesizer.synthesize(
            PatientData(
                patient_id=patient_id,
                profile=profile or PatientProfile(),
                entries=tuple(entries),
            )
        )

    def stats(self) -> dict:
        if self.store is None:
            return {"totalPatients": 0, "urgentCases": 0, "monitorCases": 0, "safeCases": 0}
        return self.store.get_dashboard_stats()

    def check_ai_health(self) -> bool:
        return self.client.health_check() if self.client else False


def build_service(store: Optional[SymptomStore] = None) -> TriageService:
    """Build the service from environment configuration."""
    configure_logging()
    client = initialize_client()
    if store is None and config.MONGODB_URI:
        store = SymptomStore()
    return TriageService(
        generator=ResponseGenerator(
            client,
            params=chat_params(),
            history_window=config.CHAT_HISTORY_WINDOW,
            symptom_limit=config.RECENT_SYMPTOM_LIMIT,
        ),
        synthesizer=ReportSynthesizer(client, params=report_params()),
        store=store,
        client=client,
    )
