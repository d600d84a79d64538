"""
Localized text tables.

The patient app ships in English, French and Arabic. Every table here is
keyed by language code with English as the fallback.
"""

from shifai.models import TriageLevel

SUPPORTED_LANGUAGES = ("en", "fr", "ar")
DEFAULT_LANGUAGE = "en"

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "fr": "French",
    "ar": "Arabic",
}


def resolve_language(code) -> str:
    """Normalise a language tag ("fr-FR", "AR") to a supported code."""
    if not code:
        return DEFAULT_LANGUAGE
    base = str(code).strip().lower().replace("_", "-").split("-")[0]
    return base if base in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def localized(table: dict, language) -> str:
    """Pick the entry for ``language`` from a {lang: text} table."""
    return table.get(resolve_language(language), table[DEFAULT_LANGUAGE])


# ── Triage Messages ────────────────────────────────────────────────────────

TRIAGE_MESSAGES: dict[tuple[TriageLevel, str], dict[str, str]] = {
    (TriageLevel.URGENT, "en"): {
        "title": "Urgent - Seek Immediate Care",
        "description": "Your symptoms require immediate medical attention",
        "advice": (
            "Please visit the nearest emergency room or call emergency services "
            "immediately. Do not delay seeking medical care."
        ),
    },
    (TriageLevel.URGENT, "fr"): {
        "title": "Urgent - Consultez immédiatement",
        "description": "Vos symptômes nécessitent une attention médicale immédiate",
        "advice": (
            "Rendez-vous aux urgences les plus proches ou appelez les services "
            "d'urgence immédiatement. Ne tardez pas à consulter."
        ),
    },
    (TriageLevel.URGENT, "ar"): {
        "title": "عاجل - اطلب الرعاية فوراً",
        "description": "تتطلب أعراضك عناية طبية فورية",
        "advice": "يرجى التوجه إلى أقرب قسم طوارئ أو الاتصال بخدمات الطوارئ فوراً. لا تؤخر طلب الرعاية الطبية.",
    },
    (TriageLevel.MONITOR, "en"): {
        "title": "Monitor - Schedule an Appointment",
        "description": "Your symptoms should be evaluated by a healthcare provider",
        "advice": (
            "Consider scheduling an appointment with your doctor within the next "
            "few days. Monitor your symptoms and seek immediate care if they worsen."
        ),
    },
    (TriageLevel.MONITOR, "fr"): {
        "title": "Surveiller - Prenez rendez-vous",
        "description": "Vos symptômes doivent être évalués par un professionnel de santé",
        "advice": (
            "Envisagez de prendre rendez-vous avec votre médecin dans les prochains "
            "jours. Surveillez vos symptômes et consultez immédiatement s'ils s'aggravent."
        ),
    },
    (TriageLevel.MONITOR, "ar"): {
        "title": "مراقبة - حدد موعداً",
        "description": "يجب أن يقيّم مقدم رعاية صحية أعراضك",
        "advice": "فكر في تحديد موعد مع طبيبك خلال الأيام القليلة القادمة. راقب أعراضك واطلب الرعاية فوراً إذا تفاقمت.",
    },
    (TriageLevel.SAFE, "en"): {
        "title": "Safe - Self-Care Recommended",
        "description": "Your symptoms appear to be minor",
        "advice": (
            "Continue with self-care measures such as rest, hydration, and "
            "over-the-counter medications as appropriate. If symptoms persist or "
            "worsen, consult a healthcare provider."
        ),
    },
    (TriageLevel.SAFE, "fr"): {
        "title": "Sans gravité - Soins personnels recommandés",
        "description": "Vos symptômes semblent mineurs",
        "advice": (
            "Poursuivez les soins personnels : repos, hydratation et médicaments "
            "en vente libre si nécessaire. Si les symptômes persistent ou "
            "s'aggravent, consultez un professionnel de santé."
        ),
    },
    (TriageLevel.SAFE, "ar"): {
        "title": "آمن - يوصى بالرعاية الذاتية",
        "description": "تبدو أعراضك بسيطة",
        "advice": "استمر في الرعاية الذاتية مثل الراحة والترطيب والأدوية المتاحة دون وصفة حسب الحاجة. إذا استمرت الأعراض أو تفاقمت، استشر مقدم رعاية صحية.",
    },
}


def triage_message(level: TriageLevel, language) -> dict[str, str]:
    lang = resolve_language(language)
    return TRIAGE_MESSAGES.get((level, lang), TRIAGE_MESSAGES[(level, DEFAULT_LANGUAGE)])


# ── Disclaimers ────────────────────────────────────────────────────────────

DISCLAIMER_MARKER = "⚠️"

DISCLAIMERS: dict[str, str] = {
    "en": f"{DISCLAIMER_MARKER} AI-generated guidance, not a diagnosis.",
    "fr": f"{DISCLAIMER_MARKER} Conseil généré par IA, ne constitue pas un diagnostic.",
    "ar": f"{DISCLAIMER_MARKER} إرشادات مولدة بالذكاء الاصطناعي، وليست تشخيصاً.",
}

EMERGENCY_NOTICES: dict[str, str] = {
    "en": (
        "If you experience severe symptoms like difficulty breathing, chest pain, "
        "or loss of consciousness, seek immediate medical attention."
    ),
    "fr": (
        "Si vous ressentez des symptômes graves comme une difficulté à respirer, "
        "des douleurs thoraciques ou une perte de conscience, consultez immédiatement."
    ),
    "ar": "إذا كنت تعاني من أعراض شديدة مثل صعوبة في التنفس أو ألم في الصدر أو فقدان الوعي، اطلب العناية الطبية الفورية.",
}
