"""
Response Generator — Chat Reply Orchestrator.

Turns a patient message into a reply that is always usable:

  User Message
      │
      ▼
  ┌──────────────┐
  │  Remote      │──── non-empty text ──────┐
  │  Model       │                          │
  └──────┬───────┘                          │
         │ failure / timeout / empty        │
         ▼                                  │
  ┌──────────────┐                          │
  │  Local       │──── intent matched ──────┤
  │  Intents     │                          │
  └──────┬───────┘                          │
         │ no intent                        │
         ▼                                  │
  ┌──────────────┐                          │
  │  Generic     │──────────────────────────┤
  │  Reply       │                          ▼
  └──────────────┘                 ┌──────────────┐
                                   │  Disclaimer  │
                                   └──────────────┘

Each stage is a named strategy tried in order (see ``shifai.states``).
Nothing raised by the remote client reaches the caller, and the remote
call is never retried within one request.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from shifai.intents import match_intent, respond_generic
from shifai.llm_engine import CHAT_PARAMS, GenerationParams, TextGenerationClient
from shifai.localization import DISCLAIMERS, EMERGENCY_NOTICES, localized
from shifai.medical_knowledge import check_urgent_keywords, mentions_health_terms
from shifai.models import ConversationMessage, PatientContext
from shifai.prompts import DEFAULT_HISTORY_WINDOW, DEFAULT_SYMPTOM_LIMIT, compose
from shifai.states import STAGE_ORDER, ResponseStage, next_stage

logger = logging.getLogger(__name__)

# Models sometimes echo the turn label, occasionally more than once
_PERSONA_ECHO = re.compile(r"^\s*(?:(?:dr\.?\s*)?shifai|assistant)\s*:\s*", re.IGNORECASE)

LAST_RESORT_REPLY = (
    "I'm here to help with your health questions. Could you tell me more "
    "about what you're experiencing?"
)


def clean_completion(text: str) -> str:
    """Trim the completion and strip leading persona-label echoes."""
    cleaned = (text or "").strip()
    while True:
        stripped = _PERSONA_ECHO.sub("", cleaned, count=1)
        if stripped == cleaned:
            return cleaned.strip()
        cleaned = stripped


def attach_disclaimer(message: str, reply: str, language: str) -> tuple[str, bool]:
    """Append the localized disclaimer when the exchange touches on health terms."""
    if mentions_health_terms(message, reply):
        return f"{reply}\n\n{localized(DISCLAIMERS, language)}", True
    return reply, False


@dataclass(frozen=True)
class GeneratedReply:
    text: str
    stage: ResponseStage
    disclaimer_attached: bool = False


class ResponseGenerator:
    """
    Produces chat replies with a remote-first, local-fallback cascade.

    Holds only configuration and the client, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        client: Optional[TextGenerationClient] = None,
        params: GenerationParams = CHAT_PARAMS,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        symptom_limit: int = DEFAULT_SYMPTOM_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ):
        self.client = client
        self.params = params
        self.history_window = history_window
        self.symptom_limit = symptom_limit
        self.clock = clock
        self._strategies: dict[ResponseStage, Callable[..., str]] = {
            ResponseStage.ATTEMPT_REMOTE: self._attempt_remote,
            ResponseStage.LOCAL_PATTERN_MATCH: self._local_pattern_match,
            ResponseStage.GENERIC_FALLBACK: self._generic_fallback,
        }

    def generate(
        self,
        message: str,
        context: PatientContext,
        history: Sequence[ConversationMessage] = (),
    ) -> str:
        """Return the reply text for a patient message. Never raises."""
        return self.generate_reply(message, context, history).text

    def generate_reply(
        self,
        message: str,
        context: PatientContext,
        history: Sequence[ConversationMessage] = (),
    ) -> GeneratedReply:
        """Run the cascade and report which stage produced the reply."""
        message = message or ""
        context = context or PatientContext()
        history = history or ()

        text, answered = "", STAGE_ORDER[-1]
        stage = STAGE_ORDER[0]
        while stage is not None:
            try:
                text = self._strategies[stage](message, context, history)
            except Exception as e:
                logger.error("Stage %s failed: %s", stage.value, e)
                text = ""
            if text:
                answered = stage
                break
            stage = next_stage(stage)

        if not text:
            text = LAST_RESORT_REPLY

        text, attached = attach_disclaimer(message, text, context.language)
        logger.info(
            "Chat reply for %s from stage %s (disclaimer=%s)",
            context.identifier or "anonymous", answered.value, attached,
        )
        return GeneratedReply(text=text, stage=answered, disclaimer_attached=attached)

    # ── Strategies ──────────────────────────────────────────────────────

    def _attempt_remote(self, message, context, history) -> str:
        if self.client is None:
            return ""
        prompt = compose(
            message,
            context,
            history,
            history_window=self.history_window,
            symptom_limit=self.symptom_limit,
            now=self.clock() if self.clock else None,
        )
        try:
            completion = self.client.complete(prompt, self.params)
        except Exception as e:
            logger.warning("Remote generation failed, using local reply: %s", e)
            return ""
        cleaned = clean_completion(completion)
        if not cleaned:
            logger.warning("Remote generation returned empty text, using local reply")
        return cleaned

    def _local_pattern_match(self, message, context, history) -> str:
        intent = match_intent(message)
        if intent is None:
            return ""
        logger.debug("Matched local intent '%s'", intent.name)
        return self._with_emergency_notice(intent.respond(context, message), message, context)

    def _generic_fallback(self, message, context, history) -> str:
        return self._with_emergency_notice(respond_generic(context, message), message, context)

    @staticmethod
    def _with_emergency_notice(reply: str, message: str, context: PatientContext) -> str:
        if check_urgent_keywords(message):
            return f"{reply}\n\n{localized(EMERGENCY_NOTICES, context.language)}"
        return reply
