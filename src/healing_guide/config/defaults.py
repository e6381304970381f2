"""Default values and built-in content for healing-guide."""

from pathlib import Path

DEFAULT_CONFIG_DIR_NAME = ".healing-guide"
DEFAULT_DATABASE_NAME = "healing_guide.db"
CONFIG_FILE_NAME = "config.json"

DEFAULT_MODEL = "gemini-flash-latest"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_REQUEST_TIMEOUT = 45.0
DEFAULT_TEMPERATURE = 0.7

# shortDefinition written by a since-removed generic fallback. Cache rows
# carrying it are treated as toxic and regenerated.
TOXIC_SHORT_DEFINITION = "Tu cuerpo te habla a través de este síntoma."

CHAT_FALLBACK_REPLY = (
    "Siento una interferencia en nuestra conexión. "
    "Por favor, respira profundo e intenta escribirme nuevamente."
)

DEFAULT_SEARCH_ERROR = "Error de conexión"

# Substitute list for a failed search. Order matters: element 0 carries the
# diagnostic message.
FALLBACK_CANDIDATES = [
    {
        "name": "Dolor de Cabeza",
        "emotionalMeaning": "Desvalorización intelectual, autoexigencia excesiva.",
        "conflict": "Querer controlar todo racionalmente.",
        "category": "Cabeza",
    },
    {
        "name": "Dolor de Espalda",
        "emotionalMeaning": "Cargas emocionales, falta de apoyo percibido.",
        "conflict": "Llevar el peso del mundo.",
        "category": "Huesos",
    },
    {
        "name": "Ansiedad",
        "emotionalMeaning": "Miedo al futuro, desconfianza en la vida.",
        "conflict": "Querer controlar lo incontrolable.",
        "category": "Emocional",
    },
    {
        "name": "Gastritis",
        "emotionalMeaning": "Rabia contenida, lo que 'no trago'.",
        "conflict": "Contrariedad indigesta.",
        "category": "Digestivo",
    },
    {
        "name": "Gripe",
        "emotionalMeaning": "Necesidad de descanso, 'hasta aquí'.",
        "conflict": "Conflicto de límites.",
        "category": "Respiratorio",
    },
]


def get_default_config_dir(project_root: Path | None = None) -> Path:
    """Return the config directory under `project_root` (cwd by default)."""
    return (project_root or Path.cwd()) / DEFAULT_CONFIG_DIR_NAME


def get_default_database_path(config_dir: Path) -> Path:
    return config_dir / DEFAULT_DATABASE_NAME
