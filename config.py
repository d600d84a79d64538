"""
Configuration module for the ShifAI triage core.
Loads environment variables and provides application-wide settings.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ── API Keys ───────────────────────────────────────────────────────────────
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
REPORT_MODEL = os.getenv("REPORT_MODEL", GEMINI_MODEL)

# Enforced by the client; a timed-out call counts as a failed remote attempt
REMOTE_TIMEOUT_MS = int(os.getenv("REMOTE_TIMEOUT_MS", "20000"))

# ── MongoDB ────────────────────────────────────────────────────────────────
MONGODB_URI = os.getenv("MONGODB_URI", "")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "shifai")
MONGODB_COLLECTION = os.getenv("MONGODB_COLLECTION", "symptom_entries")

# ── Chat Generation Settings ──────────────────────────────────────────────
CHAT_MAX_NEW_TOKENS = int(os.getenv("CHAT_MAX_NEW_TOKENS", "300"))
CHAT_TEMPERATURE = float(os.getenv("CHAT_TEMPERATURE", "0.7"))
CHAT_TOP_P = float(os.getenv("CHAT_TOP_P", "0.9"))
CHAT_REPETITION_PENALTY = float(os.getenv("CHAT_REPETITION_PENALTY", "1.1"))

# ── Clinical Report Settings ──────────────────────────────────────────────
REPORT_MAX_NEW_TOKENS = int(os.getenv("REPORT_MAX_NEW_TOKENS", "600"))
REPORT_TEMPERATURE = 0.3  # Lower temperature for more consistent clinical summaries
REPORT_TOP_P = 0.8
REPORT_REPETITION_PENALTY = 1.05

# ── Prompt Context ────────────────────────────────────────────────────────
CHAT_HISTORY_WINDOW = int(os.getenv("CHAT_HISTORY_WINDOW", "4"))
RECENT_SYMPTOM_LIMIT = int(os.getenv("RECENT_SYMPTOM_LIMIT", "3"))

# ── Logging ───────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
