import json

import pytest

from healing_guide.core.database import CatalogStore, SearchCacheStore, SQLiteDatabase, SymptomCacheStore
from healing_guide.core.services.background import BackgroundWriter
from healing_guide.core.services.resilience import SimpleResilienceManager


def make_document(name: str = "Dolor de Cabeza", **overrides) -> dict:
    doc = {
        "name": name,
        "shortDefinition": "La cabeza pide permiso para soltar el control.",
        "zona_detalle": "📍 **Zona Corporal:** la cabeza gobierna el pensamiento.",
        "emociones_detalle": "🧠 Autoexigencia, control, miedo a fallar.",
        "frases_tipicas": ["— Tengo que poder con todo", "— No me puedo equivocar"],
        "ejercicio_conexion": "🫧 Cerrá los ojos y respirá.",
        "alternativas_fisicas": "🤸 Reposo en penumbra.",
        "aromaterapia_sahumerios": "🌬️ Lavanda.",
        "remedios_naturales": "🫖 Infusión de manzanilla.",
        "angeles_arcangeles": "👼 Arcángel Rafael.",
        "terapias_holisticas": "🌈 Reiki.",
        "meditacion_guiada": "Sentate con la espalda recta...",
        "recomendaciones_adicionales": "🚩 Si duele, médico.",
        "rutina_integral": "⏱️ Ritual de 15 minutos.",
    }
    doc.update(overrides)
    return doc


def make_candidates(*names: str) -> list[dict]:
    return [
        {"name": n, "emotionalMeaning": f"Sentido de {n}", "conflict": "Conflicto", "category": "Emocional"}
        for n in names
    ]


class FakeGenerator:
    """Scripted TextGenerator: each call pops the next response or raises it."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    async def generate(self, prompt, json_mode=False, *, system_instruction=None, history=None):
        self.calls.append(
            {"prompt": prompt, "json_mode": json_mode, "system_instruction": system_instruction, "history": history}
        )
        if not self.responses:
            raise AssertionError("FakeGenerator ran out of scripted responses")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def resilience(sleeper):
    return SimpleResilienceManager(sleep=sleeper)


@pytest.fixture
def background():
    return BackgroundWriter()


@pytest.fixture
def database(tmp_path):
    return SQLiteDatabase(tmp_path / "guide.db")


@pytest.fixture
def catalog(database):
    return CatalogStore(database)


@pytest.fixture
def cache(database):
    return SymptomCacheStore(database)


@pytest.fixture
def search_cache(database):
    return SearchCacheStore(database)


def seed_catalog(database: SQLiteDatabase, slug: str, document: dict) -> None:
    conn = database._get_connection()
    try:
        conn.execute(
            "INSERT INTO symptom_catalog (slug, content) VALUES (?, ?)",
            (slug, json.dumps(document, ensure_ascii=False)),
        )
        conn.commit()
    finally:
        conn.close()
