"""
Runtime configuration.

Settings are read from environment variables. A ``.env`` file in the current
working directory is loaded first (existing environment variables win), so a
local API key does not have to be exported in every shell.

    GEMINI_API_KEY   API key (GOOGLE_API_KEY is accepted as fallback)
    GEMINI_MODEL     model name, default gemini-2.5-flash
    GEMINI_BASE_URL  REST endpoint root
    GEMINI_TIMEOUT   HTTP timeout in seconds, default 60
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r (using %s)", name, raw, default)
        return default


def load_settings(use_dotenv: bool = True) -> Settings:
    if use_dotenv:
        load_dotenv()

    key = (os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or "").strip()
    model = (os.getenv("GEMINI_MODEL") or DEFAULT_MODEL).strip().replace("models/", "")
    base_url = (os.getenv("GEMINI_BASE_URL") or DEFAULT_BASE_URL).strip().rstrip("/")

    if key:
        mask = key[:6] + "..." + key[-3:] if len(key) > 12 else "***"
        logger.debug("Gemini key detected: %s", mask)

    return Settings(api_key=key, model=model, base_url=base_url, timeout=_float_env("GEMINI_TIMEOUT", DEFAULT_TIMEOUT))
