"""
Local Intent Responses.

Offline replies used when the remote model is unavailable. Intents are
checked in a fixed priority order against the lowercased message; the first
one that matches produces a templated reply personalised with the patient's
most recent symptom entry and profile.

Priority: greeting → pain → medication → worsening → care seeking →
stress/anxiety → gratitude → capabilities.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from shifai.localization import resolve_language
from shifai.medical_knowledge import categorize_symptoms
from shifai.models import PatientContext, PatientProfile, TriageLevel

SNIPPET_LENGTH = 40


def _pick(language: str, **texts: str) -> str:
    return texts.get(resolve_language(language), texts["en"])


def _snippet(text: str) -> str:
    text = text.strip()
    return text if len(text) <= SNIPPET_LENGTH else text[:SNIPPET_LENGTH].rstrip() + "..."


# ── Context Phrases ────────────────────────────────────────────────────────

def symptom_context(context: PatientContext) -> str:
    """Sentence referencing the latest symptom entry, or ''."""
    entry = context.latest_entry
    if entry is None:
        return ""
    text, tier = _snippet(entry.text), entry.triage_level.value
    return _pick(
        context.language,
        en=f" I see you recently reported \"{text}\" ({tier} priority).",
        fr=f" Je vois que vous avez récemment signalé « {text} » (priorité {tier}).",
        ar=f" أرى أنك أبلغت مؤخراً عن \"{text}\" (أولوية {tier}).",
    )


def profile_context(profile: Optional[PatientProfile], language: str) -> str:
    """Sentence referencing age and conditions when they are known."""
    if profile is None:
        return ""
    parts = []
    if profile.age:
        parts.append(_pick(
            language,
            en=f"your age ({profile.age})",
            fr=f"votre âge ({profile.age} ans)",
            ar=f"عمرك ({profile.age} سنة)",
        ))
    if profile.conditions:
        conditions = ", ".join(profile.conditions)
        parts.append(_pick(
            language,
            en=f"your history of {conditions}",
            fr=f"vos antécédents de {conditions}",
            ar=f"تاريخك الطبي من {conditions}",
        ))
    if not parts:
        return ""
    joined = _pick(language, en=" and ", fr=" et ", ar=" و").join(parts)
    return _pick(
        language,
        en=f" Given {joined}, keep this in mind when choosing what to do.",
        fr=f" Compte tenu de {joined}, gardez cela à l'esprit.",
        ar=f" مع مراعاة {joined}، ضع ذلك في اعتبارك.",
    )


def _greeting_name(context: PatientContext) -> str:
    return f" {context.first_name}" if context.first_name else ""


def _address(context: PatientContext) -> str:
    return f"{context.first_name}, " if context.first_name else ""


# ── Responders ─────────────────────────────────────────────────────────────

def respond_greeting(context: PatientContext, message: str) -> str:
    name, history = _greeting_name(context), symptom_context(context)
    return _pick(
        context.language,
        en=f"Hi{name}! I'm ShifAI, your personal health assistant.{history} How can I help you today?",
        fr=f"Bonjour{name} ! Je suis ShifAI, votre assistant santé personnel.{history} Comment puis-je vous aider ?",
        ar=f"مرحباً{name}! أنا شفاء الذكي، مساعدك الصحي الشخصي.{history} كيف يمكنني مساعدتك؟",
    )


def respond_pain(context: PatientContext, message: str) -> str:
    recent_pain = any(
        "pain" in e.text.lower() or categorize_symptoms(e.text)
        for e in context.recent_entries
    )
    lead = _pick(
        context.language,
        en=" given your recent pain reports," if recent_pain else "",
        fr=" compte tenu de vos douleurs récentes," if recent_pain else "",
        ar=" بالنظر إلى آلامك الأخيرة،" if recent_pain else "",
    )
    advice = _pick(
        context.language,
        en=(
            f"For pain management,{lead} consider rest, proper hydration, and gentle "
            "movement if tolerated. Heat or cold packs can ease muscle pain. Monitor "
            "pain levels and seek care if the pain is severe or lasts more than 3 days."
        ),
        fr=(
            f"Pour la gestion de la douleur,{lead} privilégiez le repos, une bonne "
            "hydratation et des mouvements doux si tolérés. Consultez si la douleur "
            "est intense ou dure plus de 3 jours."
        ),
        ar=(
            f"لإدارة الألم،{lead} فكر في الراحة والترطيب المناسب والحركة اللطيفة إذا "
            "كان ذلك مقبولاً. اطلب الرعاية إذا كان الألم شديداً أو استمر أكثر من 3 أيام."
        ),
    )
    return advice + profile_context(context.profile, context.language)


def respond_medication(context: PatientContext, message: str) -> str:
    profile = context.profile or PatientProfile()
    notes = ""
    if profile.medications:
        meds = ", ".join(profile.medications)
        notes += _pick(
            context.language,
            en=f" You are currently taking {meds}, so watch for interactions.",
            fr=f" Vous prenez actuellement {meds}, attention aux interactions.",
            ar=f" أنت تتناول حالياً {meds}، لذا انتبه للتداخلات الدوائية.",
        )
    if profile.allergies:
        allergies = ", ".join(profile.allergies)
        notes += _pick(
            context.language,
            en=f" Remember your allergies: {allergies}.",
            fr=f" N'oubliez pas vos allergies : {allergies}.",
            ar=f" تذكر حساسيتك من: {allergies}.",
        )
    address = _address(context)
    return _pick(
        context.language,
        en=(
            f"{address}I can suggest options based on your symptoms, but check with a "
            f"pharmacist or doctor before starting anything new.{notes} What specific "
            "issue would you like medication advice for?"
        ),
        fr=(
            f"{address}je peux suggérer des options selon vos symptômes, mais vérifiez "
            f"auprès d'un pharmacien ou d'un médecin avant de commencer.{notes} Pour "
            "quel problème souhaitez-vous un conseil sur les médicaments ?"
        ),
        ar=(
            f"{address}يمكنني اقتراح خيارات بناءً على أعراضك، لكن استشر صيدلياً أو طبيباً "
            f"قبل البدء بأي دواء جديد.{notes} ما المشكلة التي تريد نصيحة دوائية بشأنها؟"
        ),
    )


def respond_worsening(context: PatientContext, message: str) -> str:
    flagged = [
        e for e in context.recent_entries
        if e.triage_level in (TriageLevel.URGENT, TriageLevel.MONITOR)
    ]
    if flagged:
        text = _snippet(flagged[0].text)
        return _pick(
            context.language,
            en=(
                f"Since your symptoms are getting worse, especially your {text}, I strongly "
                "recommend seeking medical attention promptly. Worsening symptoms should not be ignored."
            ),
            fr=(
                f"Puisque vos symptômes s'aggravent, en particulier votre {text}, je recommande "
                "fortement de consulter rapidement un médecin."
            ),
            ar=f"نظراً لتفاقم أعراضك، خاصة {text}، أنصح بشدة بطلب العناية الطبية سريعاً.",
        )
    return _pick(
        context.language,
        en=(
            "If your symptoms are getting worse, please contact a healthcare provider "
            "soon, and seek emergency care if they become severe."
        ),
        fr=(
            "Si vos symptômes s'aggravent, contactez rapidement un professionnel de santé "
            "et rendez-vous aux urgences s'ils deviennent graves."
        ),
        ar="إذا كانت أعراضك تتفاقم، تواصل مع مقدم رعاية صحية قريباً واطلب الطوارئ إذا أصبحت شديدة.",
    )


def respond_care_seeking(context: PatientContext, message: str) -> str:
    levels = [e.triage_level for e in context.recent_entries]
    if TriageLevel.URGENT in levels:
        return _pick(
            context.language,
            en="Yes, based on your urgent-level symptoms, you should seek immediate medical attention. Don't delay.",
            fr="Oui, vu vos symptômes de niveau urgent, vous devriez consulter immédiatement un médecin.",
            ar="نعم، بناءً على أعراضك العاجلة، يجب أن تطلب العناية الطبية الفورية.",
        )
    if TriageLevel.MONITOR in levels:
        return _pick(
            context.language,
            en=(
                "Given your monitor-level symptoms, scheduling an appointment with your "
                "doctor within the next few days would be wise."
            ),
            fr=(
                "Étant donné vos symptômes à surveiller, prendre rendez-vous avec votre "
                "médecin dans les prochains jours serait sage."
            ),
            ar="نظراً لأعراضك التي تحتاج للمراقبة، من الحكمة تحديد موعد مع طبيبك خلال الأيام القادمة.",
        )
    return _pick(
        context.language,
        en=(
            "Your recent reports show no warning signs, but seeing a doctor is always "
            "reasonable if you are concerned or your symptoms persist."
        ),
        fr=(
            "Vos signalements récents ne montrent pas de signe d'alerte, mais consulter "
            "un médecin reste raisonnable si vous êtes inquiet ou si les symptômes persistent."
        ),
        ar="لا تظهر تقاريرك الأخيرة علامات تحذيرية، لكن زيارة الطبيب معقولة دائماً إذا كنت قلقاً أو استمرت الأعراض.",
    )


def respond_stress(context: PatientContext, message: str) -> str:
    return _pick(
        context.language,
        en=(
            "Consider stress management techniques like deep breathing, meditation, or "
            "gentle exercise. If anxiety persists, professional support can be very helpful."
        ),
        fr=(
            "Essayez des techniques de gestion du stress comme la respiration profonde, "
            "la méditation ou l'exercice léger. Si l'anxiété persiste, un soutien "
            "professionnel peut être très utile."
        ),
        ar=(
            "فكر في تقنيات إدارة التوتر مثل التنفس العميق والتأمل أو التمارين اللطيفة. "
            "إذا استمر القلق، يمكن أن يكون الدعم المهني مفيداً جداً."
        ),
    )


def respond_gratitude(context: PatientContext, message: str) -> str:
    name = _greeting_name(context)
    return _pick(
        context.language,
        en=f"You're very welcome{name}! Take care of yourself, and come back anytime.",
        fr=f"Avec plaisir{name} ! Prenez soin de vous et revenez quand vous voulez.",
        ar=f"على الرحب والسعة{name}! اعتنِ بنفسك وعد في أي وقت.",
    )


def respond_capabilities(context: PatientContext, message: str) -> str:
    return _pick(
        context.language,
        en=(
            "I'm ShifAI. I can answer health questions, explain your recent triage "
            "results, suggest self-care and medications to discuss with a pharmacist, "
            "and tell you when it's time to see a doctor."
        ),
        fr=(
            "Je suis ShifAI. Je peux répondre à vos questions de santé, expliquer vos "
            "résultats de triage, suggérer des soins personnels et vous dire quand "
            "consulter un médecin."
        ),
        ar=(
            "أنا شفاء الذكي. يمكنني الإجابة على أسئلتك الصحية وشرح نتائج الفرز الأخيرة "
            "واقتراح الرعاية الذاتية وإخبارك متى يجب زيارة الطبيب."
        ),
    )


def respond_generic(context: PatientContext, message: str) -> str:
    """Catch-all reply; always returns text."""
    history = ""
    if context.recent_entries:
        recent = ", ".join(_snippet(e.text) for e in context.recent_entries[:3])
        history = _pick(
            context.language,
            en=f" Based on your recent history of {recent}, I can tailor my advice.",
            fr=f" Compte tenu de votre historique récent ({recent}), je peux adapter mes conseils.",
            ar=f" بناءً على تاريخك الأخير ({recent})، يمكنني تخصيص نصائحي.",
        )
    address = _address(context)
    return _pick(
        context.language,
        en=(
            f"{address}I'm here to help with any health question you have.{history} Ask me "
            "about medications, treatments, prevention strategies, or any health concern."
        ),
        fr=(
            f"{address}je suis là pour vous aider avec toute question de santé.{history} "
            "Demandez-moi des médicaments, des traitements, des stratégies de prévention "
            "ou toute préoccupation de santé."
        ),
        ar=(
            f"{address}أنا هنا لمساعدتك في أي سؤال صحي.{history} اسألني عن الأدوية أو "
            "العلاجات أو استراتيجيات الوقاية أو أي مخاوف صحية."
        ),
    )


# ── Intent Table ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Intent:
    name: str
    patterns: tuple[re.Pattern, ...]
    respond: Callable[[PatientContext, str], str]

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self.patterns)


def _compile(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p) for p in patterns)


INTENTS: tuple[Intent, ...] = (
    Intent("greeting", _compile(
        r"\b(hi|hello|hey|good (morning|afternoon|evening))\b",
        r"\b(bonjour|salut|bonsoir)\b",
        r"مرحبا|السلام عليكم|أهلا",
    ), respond_greeting),
    Intent("pain", _compile(
        r"\bpain", r"\bhurt", r"ache\b",
        r"douleur", r"\bmal (de|au|à)\b",
        r"ألم|يؤلم|وجع",
    ), respond_pain),
    Intent("medication", _compile(
        r"medicat", r"medicine", r"\bdrugs?\b", r"\bpills?\b", r"\btablets?\b",
        r"médicament", r"traitement",
        r"دواء|أدوية",
    ), respond_medication),
    Intent("worsening", _compile(
        r"\bworse", r"worsening",
        r"aggrav", r"\bpire\b",
        r"تفاقم|أسوأ",
    ), respond_worsening),
    Intent("care_seeking", _compile(
        r"should i see", r"\bdoctor", r"hospital", r"\bclinic", r"emergency room",
        r"médecin", r"hôpital", r"urgences",
        r"طبيب|مستشفى",
    ), respond_care_seeking),
    Intent("stress", _compile(
        r"stress", r"anxi", r"worried", r"\bpanic",
        r"angoiss", r"inquiet",
        r"قلق|توتر",
    ), respond_stress),
    Intent("gratitude", _compile(
        r"\bthank", r"\bthx\b",
        r"\bmerci\b",
        r"شكرا",
    ), respond_gratitude),
    Intent("capabilities", _compile(
        r"what can you do", r"how can you help", r"who are you", r"what are you",
        r"que (peux|pouvez)[- ](tu|vous) faire", r"qui es[- ]tu",
        r"ماذا يمكنك|من أنت",
    ), respond_capabilities),
)


def match_intent(message: str) -> Optional[Intent]:
    """First intent (in priority order) whose patterns match the message."""
    text = (message or "").lower()
    for intent in INTENTS:
        if intent.matches(text):
            return intent
    return None
