"""Offline autocomplete over a built-in list of symptom names."""

SYMPTOM_NAMES = (
    "Acidez",
    "Acné",
    "Alergia",
    "Anemia",
    "Ansiedad",
    "Artritis",
    "Asma",
    "Bronquitis",
    "Bruxismo",
    "Caída del cabello",
    "Cálculos renales",
    "Cistitis",
    "Colesterol alto",
    "Colon irritable",
    "Contractura cervical",
    "Depresión",
    "Dermatitis",
    "Diabetes",
    "Diarrea",
    "Dolor de cabeza",
    "Dolor de espalda",
    "Dolor de estómago",
    "Dolor de garganta",
    "Dolor de muelas",
    "Dolor de rodilla",
    "Eccema",
    "Estreñimiento",
    "Fatiga crónica",
    "Fibromialgia",
    "Gastritis",
    "Gripe",
    "Hemorroides",
    "Herpes",
    "Hipertensión",
    "Hipotiroidismo",
    "Insomnio",
    "Lumbalgia",
    "Mareos",
    "Migraña",
    "Náuseas",
    "Otitis",
    "Psoriasis",
    "Reflujo",
    "Resfriado",
    "Rinitis",
    "Sinusitis",
    "Tendinitis",
    "Tendón de Aquiles",
    "Tos",
    "Vértigo",
)

MIN_QUERY_LENGTH = 2


def search_local(query: str | None, limit: int = 5, names: tuple[str, ...] = SYMPTOM_NAMES) -> list[str]:
    """Case-insensitive substring match; no network, no store."""
    if not query or len(query) < MIN_QUERY_LENGTH:
        return []
    needle = query.lower()
    return [name for name in names if needle in name.lower()][:limit]
