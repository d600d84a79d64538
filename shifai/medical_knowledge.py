"""
Medical Knowledge Base.

Contains:
  1. Urgent and monitor keyword sets (rule-based triage policy)
  2. Health terms that require a disclaimer on chat replies
  3. Symptom category vocabulary used when aggregating patient history

Keywords are listed for every supported language in a single set. Patients
often mix languages in one message, so matching never dispatches on the
declared language: every variant is checked against the lowercased text.
"""

# ── Urgent Keywords ────────────────────────────────────────────────────────
# Any match classifies the text as urgent, regardless of monitor matches.
# Organised by category for maintainability.

URGENT_KEYWORDS: dict[str, list[str]] = {
    "cardiac": [
        "chest pain", "douleur thoracique", "ألم في الصدر",
        "heart attack", "crise cardiaque", "نوبة قلبية",
    ],
    "respiratory": [
        "shortness of breath", "essoufflement", "ضيق في التنفس",
        "difficulty breathing", "difficulté à respirer", "صعوبة في التنفس",
    ],
    "neurological": [
        "severe headache", "mal de tête sévère", "صداع شديد",
        "unconscious", "inconscient", "فقدان الوعي",
        "stroke", "avc", "سكتة دماغية",
    ],
    "bleeding": [
        "bleeding", "saignement", "نزيف",
    ],
    "pain": [
        "severe pain", "douleur sévère", "ألم شديد",
    ],
}

# ── Monitor Keywords ───────────────────────────────────────────────────────

MONITOR_KEYWORDS: dict[str, list[str]] = {
    "general": [
        "fever", "fièvre", "حمى",
        "persistent", "persistant", "مستمر",
        "severe", "sévère", "شديد",
    ],
    "digestive": [
        "vomiting", "vomissement", "قيء",
        "nausea", "nausée", "غثيان",
    ],
    "pain": [
        "pain", "douleur", "ألم",
        "headache", "mal de tête", "صداع",
        "backache", "stomachache", "toothache",
    ],
    "neurological": [
        "dizziness", "vertige", "دوخة",
    ],
}

# Flatten for quick lookup
ALL_URGENT_KEYWORDS: list[str] = [
    kw for category in URGENT_KEYWORDS.values() for kw in category
]
ALL_MONITOR_KEYWORDS: list[str] = [
    kw for category in MONITOR_KEYWORDS.values() for kw in category
]


# ── Disclaimer Terms ───────────────────────────────────────────────────────
# A chat reply carries the AI disclaimer when the patient's message or the
# reply itself mentions one of these.

DISCLAIMER_TERMS: list[str] = [
    "pain", "medication", "treatment", "symptom", "doctor", "sick", "hurt",
    "douleur", "médicament", "traitement", "symptôme", "médecin", "malade",
    "ألم", "دواء", "علاج", "أعراض", "طبيب", "مريض",
]


# ── Symptom Categories ─────────────────────────────────────────────────────
# Ordered vocabulary for history aggregation. The order breaks ties when two
# categories were first seen in the same entry.

SYMPTOM_CATEGORIES: dict[str, list[str]] = {
    "back pain": [
        "back pain", "backache", "lower back", "upper back", "back hurts",
        "mal de dos", "douleur au dos", "ألم في الظهر", "ألم الظهر",
    ],
    "limb pain": [
        "leg pain", "arm pain", "foot pain", "knee pain", "joint pain",
        "hand pain", "shoulder pain", "ankle pain",
        "douleur à la jambe", "douleur au bras", "ألم في الساق", "ألم في الذراع",
    ],
    "abdominal pain": [
        "stomach", "abdominal", "abdomen", "belly",
        "mal au ventre", "douleur abdominale", "ألم في البطن", "المعدة",
    ],
    "headache": [
        "headache", "head pain", "migraine", "head hurts",
        "mal de tête", "صداع",
    ],
    "nausea": [
        "nausea", "nauseous", "nausée", "غثيان",
    ],
    "fever": [
        "fever", "fièvre", "حمى",
    ],
    "fatigue": [
        "fatigue", "tired", "exhausted", "fatigué", "épuisé", "تعب", "إرهاق",
    ],
    "concentration difficulty": [
        "concentrat", "can't focus", "cannot focus", "brain fog",
        "difficulté à me concentrer", "صعوبة في التركيز",
    ],
    "eye strain": [
        "eye strain", "eyestrain", "eyes hurt", "sore eyes", "blurry vision",
        "fatigue oculaire", "yeux", "إجهاد العين",
    ],
}


def find_keywords(text: str, keywords: list[str]) -> list[str]:
    """Return every keyword contained in ``text`` (case-insensitive)."""
    text_lower = (text or "").lower()
    return [kw for kw in keywords if kw in text_lower]


def check_urgent_keywords(text: str) -> list[str]:
    """Urgent-tier keywords found in the text."""
    return find_keywords(text, ALL_URGENT_KEYWORDS)


def check_monitor_keywords(text: str) -> list[str]:
    """Monitor-tier keywords found in the text."""
    return find_keywords(text, ALL_MONITOR_KEYWORDS)


def mentions_health_terms(*texts: str) -> bool:
    """True when any of the texts contains a disclaimer-worthy term."""
    return any(find_keywords(t, DISCLAIMER_TERMS) for t in texts)


def categorize_symptoms(text: str) -> list[str]:
    """Symptom categories matched by the text, in vocabulary order."""
    text_lower = (text or "").lower()
    return [
        category
        for category, needles in SYMPTOM_CATEGORIES.items()
        if any(needle in text_lower for needle in needles)
    ]
