"""
Folio service configuration.
Defaults live here; values are read from the environment by the
components that need them, at construction time.
"""
import os

SERVICE_METADATA = {
    "name": "Folio Molecule & Chat Service",
    "version": "1.4.0",
}

DEFAULT_GEMINI_MODEL = "models/gemini-2.0-flash"
DEFAULT_LLM_TIMEOUT = 8.0

PUBCHEM_BASE_URL = "https://pubchem.ncbi.nlm.nih.gov/rest/pug"
DEFAULT_HTTP_TIMEOUT = 15.0


def gemini_api_key() -> str:
    key = os.getenv("GEMINI_API_KEY", "")
    return "" if key == "dummy" else key


def classifier_model() -> str:
    return os.getenv("FOLIO_CLASSIFIER_MODEL", DEFAULT_GEMINI_MODEL)


def chat_model() -> str:
    return os.getenv("FOLIO_CHAT_MODEL", DEFAULT_GEMINI_MODEL)


def llm_timeout() -> float:
    return float(os.getenv("FOLIO_LLM_TIMEOUT", DEFAULT_LLM_TIMEOUT))


def pubchem_base_url() -> str:
    return os.getenv("FOLIO_PUBCHEM_BASE", PUBCHEM_BASE_URL).rstrip("/")


def http_timeout() -> float:
    return float(os.getenv("FOLIO_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT))


def cors_origins() -> list[str]:
    raw = os.getenv("FOLIO_CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


def log_level() -> str:
    return os.getenv("FOLIO_LOG_LEVEL", "INFO").upper()
