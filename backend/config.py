"""
Runtime configuration for the audit API.

Values come from the environment; a .env file in the backend root is loaded
automatically using python-dotenv:

ANTHROPIC_API_KEY=your_real_key_here

Without ANTHROPIC_API_KEY the audit still runs, only AI insights are skipped.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

# --- Fetcher ---
FETCH_TIMEOUT_SECONDS = 15.0
FETCH_MAX_REDIRECTS = 5
FETCH_CHUNK_BYTES = 1024
FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

# --- Insight generator ---
DEFAULT_INSIGHT_MODELS = [
    "claude-haiku-4-5",
    "claude-sonnet-4-5",
]


def _dedupe_models(values: list[str]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    for value in values:
        model = value.strip()
        if not model or model in seen:
            continue
        out.append(model)
        seen.add(model)
    return out


def _model_candidates() -> list[str]:
    override = os.getenv("INSIGHT_MODELS", "").strip()
    defaults = override.split(",") if override else DEFAULT_INSIGHT_MODELS
    return _dedupe_models([os.getenv("CLAUDE_MODEL", ""), *defaults])


# Order matters: the first model that answers with valid JSON wins.
INSIGHT_MODEL_CANDIDATES = _model_candidates()
INSIGHT_MAX_TOKENS = int(os.getenv("INSIGHT_MAX_TOKENS", "800"))
INSIGHT_TEMPERATURE = float(os.getenv("INSIGHT_TEMPERATURE", "0.4"))
INSIGHT_TIMEOUT_SECONDS = float(os.getenv("INSIGHT_TIMEOUT_SECONDS", "20"))

# --- Server ---
PORT = int(os.getenv("PORT", "4000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


def get_api_key() -> str:
    """Return the configured Anthropic key, or an empty string."""
    return (os.getenv("ANTHROPIC_API_KEY") or "").strip()
