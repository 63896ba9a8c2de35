"""
Typed-answer validation.

Answers are checked in tiers, most exact first: exact, case-insensitive,
accent/punctuation-insensitive, Catalan phrase equivalents and synonyms,
optional leading article, contractions (al ↔ a el), spacing, and finally
a typo tolerance based on edit distance. Slash-separated alternatives in
the expected answer ("vell / vella") are each accepted, and bracketed notes
("platja (F)") are ignored.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field

TYPO_SIMILARITY_THRESHOLD = 0.85

PHRASE_EQUIVALENCES: dict[str, list[str]] = {
    "si us plau": ["sisplau", "siusplau"],
    "sisplau": ["si us plau", "siusplau"],
    "siusplau": ["si us plau", "sisplau"],
    "perdo": ["perdona", "perdoni", "disculpi", "disculpa"],
    "perdona": ["perdo", "perdoni", "disculpi", "disculpa"],
    "perdoni": ["perdo", "perdona", "disculpi", "disculpa"],
    "disculpi": ["perdo", "perdona", "perdoni", "disculpa"],
    "disculpa": ["perdo", "perdona", "perdoni", "disculpi"],
    "benvingut": ["benvinguda"],
    "benvinguda": ["benvingut"],
    "encantat": ["encantada"],
    "encantada": ["encantat"],
    "gracies": ["moltes gracies", "merces", "merci"],
    "moltes gracies": ["gracies", "merces"],
    "adeu": ["adeu-siau", "a reveure"],
    "adeu-siau": ["adeu", "a reveure"],
}

SYNONYM_GROUPS: list[list[str]] = [
    ["noi", "nen", "xicot"],
    ["noia", "nena", "xicota"],
    ["muller", "dona", "esposa"],
    ["marit", "home", "espòs"],
    ["casa", "llar"],
    ["cotxe", "auto", "automòbil", "vehicle"],
    ["ordinador", "computador", "computadora"],
    ["botiga", "tenda"],
    ["gran", "gros"],
    ["petit", "menut"],
    ["parlar", "xerrar"],
    ["caminar", "passejar"],
    ["diners", "pasta", "calés"],
    ["feina", "treball"],
]

CONTRACTIONS: dict[str, str] = {
    "al": "a el",
    "als": "a els",
    "del": "de el",
    "dels": "de els",
    "pel": "per el",
    "pels": "per els",
    "cal": "ca el",
    "can": "ca en",
}

ENGLISH_CONTRACTIONS: dict[str, str] = {
    "don't": "do not",
    "doesn't": "does not",
    "didn't": "did not",
    "won't": "will not",
    "can't": "cannot",
    "isn't": "is not",
    "aren't": "are not",
    "i'm": "i am",
    "you're": "you are",
    "it's": "it is",
    "what's": "what is",
    "where's": "where is",
    "let's": "let us",
}

ARTICLES = ("el", "la", "els", "les", "un", "una", "uns", "unes", "en", "na")
ELIDED_ARTICLES = ("l'", "d'")

_PUNCTUATION_RE = re.compile(r"[.,!?;:'\"¿¡…]+")
_BRACKETS_RE = re.compile(r"\s*\([^)]*\)\s*")
_ALTERNATIVES_RE = re.compile(r"\s*/\s*")


@dataclass
class Correction:
    position: int
    expected: str
    received: str
    type: str  # accent | missing | extra | spelling


@dataclass
class TypingResult:
    is_correct: bool
    is_acceptable: bool
    user_answer: str
    correct_answer: str
    match_type: str
    feedback: str | None = None
    corrections: list[Correction] = field(default_factory=list)


def normalize(text: str) -> str:
    """Lowercase, strip diacritics and punctuation, collapse whitespace."""
    decomposed = unicodedata.normalize("NFD", text.lower().strip())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    stripped = stripped.replace("·", "")
    stripped = _PUNCTUATION_RE.sub("", stripped)
    return re.sub(r"\s+", " ", stripped).strip()


def normalize_loose(text: str) -> str:
    return re.sub(r"[-\s]+", "", normalize(text))


def strip_bracketed(text: str) -> str:
    return re.sub(r"\s+", " ", _BRACKETS_RE.sub(" ", text)).strip()


def all_forms(text: str) -> list[str]:
    parts = _ALTERNATIVES_RE.split(strip_bracketed(text))
    return [p.strip() for p in parts if p.strip()]


def strip_article(text: str) -> str:
    words = text.strip().split()
    if not words:
        return text
    first = words[0].lower()
    if first.startswith(ELIDED_ARTICLES):
        words[0] = words[0][2:]
        return " ".join(words).strip()
    if first in ARTICLES and len(words) > 1:
        return " ".join(words[1:])
    return text


def levenshtein(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    na, nb = normalize(a), normalize(b)
    if na == nb:
        return 1.0
    longest = max(len(na), len(nb))
    return 1 - levenshtein(na, nb) / longest


def _equivalent_phrases(user: str, expected: str) -> bool:
    nu, ne = normalize(user), normalize(expected)
    if any(normalize(eq) == ne for eq in PHRASE_EQUIVALENCES.get(nu, [])):
        return True
    return any(normalize(eq) == nu for eq in PHRASE_EQUIVALENCES.get(ne, []))


def _synonyms(user: str, expected: str) -> bool:
    nu, ne = normalize(user), normalize(expected)
    for group in SYNONYM_GROUPS:
        normalized = {normalize(word) for word in group}
        if nu in normalized and ne in normalized:
            return True
    return False


def _expand_contractions(text: str, table: dict[str, str]) -> str:
    for short, expanded in table.items():
        text = re.sub(rf"(?<!\w){re.escape(short)}(?!\w)", expanded, text)
    return text


def _contraction_match(user: str, expected: str) -> bool:
    nu, ne = normalize(user), normalize(expected)
    eu = _expand_contractions(nu, CONTRACTIONS)
    ee = _expand_contractions(ne, CONTRACTIONS)
    return eu == ne or nu == ee or eu == ee


def find_corrections(user_answer: str, correct_answer: str) -> list[Correction]:
    corrections: list[Correction] = []
    user_lower = user_answer.lower()
    correct_lower = correct_answer.lower()
    for i in range(max(len(user_lower), len(correct_lower))):
        received = user_lower[i] if i < len(user_lower) else ""
        expected = correct_lower[i] if i < len(correct_lower) else ""
        if received == expected:
            continue
        if received and expected and normalize(received) == normalize(expected):
            kind = "accent"
        elif not received:
            kind = "missing"
        elif not expected:
            kind = "extra"
        else:
            kind = "spelling"
        corrections.append(
            Correction(
                position=i,
                expected=correct_answer[i] if i < len(correct_answer) else "",
                received=user_answer[i] if i < len(user_answer) else "",
                type=kind,
            )
        )
    return corrections


def check_answer(user_answer: str, correct_answer: str) -> TypingResult:
    user = user_answer.strip()
    correct = correct_answer.strip()
    forms = all_forms(correct) or [correct]

    def result(is_correct, is_acceptable, match_type, feedback=None, corrections=None):
        return TypingResult(
            is_correct=is_correct,
            is_acceptable=is_acceptable,
            user_answer=user,
            correct_answer=correct,
            match_type=match_type,
            feedback=feedback,
            corrections=corrections or [],
        )

    user_forms = all_forms(user)
    if len(user_forms) > 1:
        valid = {normalize(f) for f in forms}
        if any(normalize(uf) in valid for uf in user_forms):
            return result(True, True, "exact")

    for form in forms:
        if user == form:
            return result(True, True, "exact")
        if user.lower() == form.lower():
            return result(True, True, "case")
        if normalize(user) == normalize(form):
            return result(
                False,
                True,
                "accent",
                "Acceptable! Watch the accents next time.",
                find_corrections(user, form),
            )
        if _equivalent_phrases(user, form):
            return result(True, True, "phrase", "Correct! Alternative spelling accepted.")
        if _synonyms(user, form):
            return result(True, True, "synonym", f'Correct! "{user}" is a valid synonym.')

        user_bare = strip_article(user)
        form_bare = strip_article(form)
        if (user_bare != user or form_bare != form) and normalize(user_bare) == normalize(
            form_bare
        ):
            feedback = None
            if user_bare == user:
                feedback = f'Correct! The full form includes the article: "{form}"'
            elif form_bare == form:
                feedback = "Correct! Article not required here."
            return result(True, True, "article", feedback)

        if _contraction_match(user, form):
            return result(True, True, "contraction", "Correct! Contraction accepted.")
        if normalize_loose(user) == normalize_loose(form):
            return result(True, True, "loose")

        expanded_user = _expand_contractions(user.lower(), ENGLISH_CONTRACTIONS)
        expanded_form = _expand_contractions(form.lower(), ENGLISH_CONTRACTIONS)
        if normalize(expanded_user) == normalize(expanded_form):
            return result(True, True, "contraction")
        if similarity(expanded_user, expanded_form) >= TYPO_SIMILARITY_THRESHOLD:
            return result(
                False,
                True,
                "typo",
                "Acceptable, but there was a small typo.",
                find_corrections(user, form),
            )

    return result(False, False, "none", corrections=find_corrections(user, forms[0]))
