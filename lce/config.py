"""Centralized config loading — read once at import time."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

from lce.state import ServiceConfig

# Load .env from project root (parent of lce/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

# Environment variables win over config.yaml for the completion service
_ENV_OVERRIDES = {
    "service_kind": "LCE_SERVICE_KIND",
    "base_url": "LCE_BASE_URL",
    "model_id": "LCE_MODEL_ID",
    "api_key": "LCE_API_KEY",
}


def _load() -> dict:
    config = yaml.safe_load(CONFIG_PATH.read_text()) or {}
    for key, env_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            config[key] = value
    return config


_config = _load()


def get_config() -> dict:
    """Return the loaded config dictionary."""
    return _config


def get_service_config() -> ServiceConfig:
    """Return the completion-service record: service_kind, base_url, model_id, api_key."""
    config = get_config()
    return {
        "service_kind": config.get("service_kind", ""),
        "base_url": config.get("base_url", ""),
        "model_id": config.get("model_id", ""),
        "api_key": config.get("api_key", ""),
    }
