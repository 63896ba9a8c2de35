"""Essential A1 vocabulary used to seed an empty collection."""
from __future__ import annotations

import re

from flashcat.models.flashcard import Flashcard, Gender
from flashcat.services.csv_io import generate_icon_key

M = Gender.MASCULINE
F = Gender.FEMININE

# (front, back, category, gender, notes)
STARTER_VOCABULARY: list[tuple[str, str, str, Gender | None, str]] = [
    ("hello", "hola", "Greetings", None, "Informal greeting"),
    ("good morning", "bon dia", "Greetings", None, "Used until noon"),
    ("good afternoon", "bona tarda", "Greetings", None, "Used after noon"),
    ("good evening / good night", "bona nit", "Greetings", None, "Used in evening"),
    ("goodbye", "adéu", "Greetings", None, "Formal goodbye"),
    ("see you tomorrow", "fins demà", "Greetings", None, ""),
    ("thank you", "gràcies", "Greetings", None, "Also: merci (informal)"),
    ("please", "si us plau", "Greetings", None, "Formal"),
    ("you're welcome", "de res", "Greetings", None, ""),
    ("excuse me / sorry", "perdó", "Greetings", None, ""),
    ("How are you?", "Com estàs?", "Greetings", None, "Informal"),
    ("father", "pare", "Family", M, ""),
    ("mother", "mare", "Family", F, ""),
    ("brother", "germà", "Family", M, ""),
    ("sister", "germana", "Family", F, ""),
    ("grandmother", "àvia", "Family", F, ""),
    ("friend (male)", "amic", "Family", M, ""),
    ("two", "dos / dues", "Numbers", None, "Gender depends on noun"),
    ("five", "cinc", "Numbers", None, ""),
    ("eight", "vuit", "Numbers", None, ""),
    ("eleven", "onze", "Numbers", None, ""),
    ("twenty", "vint", "Numbers", None, ""),
    ("blue", "blau", "Colors", M, "Feminine: blava"),
    ("white", "blanc", "Colors", M, "Feminine: blanca"),
    ("water", "aigua", "Food & Drink", F, ""),
    ("wine", "vi", "Food & Drink", M, ""),
    ("tomato", "tomàquet", "Food & Drink", M, ""),
    ("rice", "arròs", "Food & Drink", M, ""),
    ("bread", "pa", "Food & Drink", M, ""),
    ("to be (permanent)", "ser", "Verbs", None, "Jo sóc, tu ets, ell és"),
    ("to be (temporary)", "estar", "Verbs", None, "Jo estic, tu estàs, ell està"),
    ("to be able to / can", "poder", "Verbs", None, "Jo puc, tu pots, ell pot"),
    ("to do / to make", "fer", "Verbs", None, "Jo faig, tu fas, ell fa"),
    ("to drink", "beure", "Verbs", None, "Jo bec, tu beus, ell beu"),
    ("to live", "viure", "Verbs", None, "Jo visc, tu vius, ell viu"),
    ("the (fem. singular)", "la", "Articles", None, "la casa (the house)"),
    ("a/an (masc.)", "un", "Articles", None, "un home (a man)"),
    ("Wednesday", "dimecres", "Time", M, ""),
    ("Saturday", "dissabte", "Time", M, ""),
    ("month", "mes", "Time", M, ""),
    ("face", "cara", "Body", F, ""),
    ("arm", "braç", "Body", M, ""),
    ("I don't understand", "No entenc", "Phrases", None, ""),
    ("What is your name?", "Com et dius?", "Phrases", None, "Informal"),
    ("Where is...?", "On és...?", "Phrases", None, ""),
    ("What time is it?", "Quina hora és?", "Phrases", None, ""),
]


def _slug(value: str) -> str:
    return re.sub(r"\s+", "_", value.lower())


def starter_flashcards(created_at: str) -> list[Flashcard]:
    """Return the starter deck with stable ids, so re-seeding is idempotent."""
    return [
        Flashcard(
            id=f"starter_{_slug(category)}_{index}",
            front=front,
            back=back,
            notes=notes,
            category=category,
            gender=gender,
            icon_key=generate_icon_key(category, front),
            created_at=created_at,
        )
        for index, (front, back, category, gender, notes) in enumerate(STARTER_VOCABULARY)
    ]
