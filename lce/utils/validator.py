"""Input validation — checks the completion-service config before any chat starts."""

VALID_SERVICE_KINDS = {"openai", "anthropic", "google"}

# Fields that must be non-empty for each service kind.
# openai covers any OpenAI-compatible server (Ollama, LM Studio, vLLM), where
# a key is often not needed but a base URL is.
_REQUIRED_FIELDS = {
    "openai": ("base_url", "model_id"),
    "anthropic": ("model_id", "api_key"),
    "google": ("model_id", "api_key"),
}


def validate_service_config(service: dict) -> dict:
    """Validate the completion-service record.

    Returns a copy with every value stripped on success.
    Raises ValueError naming the first problem found.
    """
    if not isinstance(service, dict):
        raise ValueError("Service config must be a mapping.")

    kind = str(service.get("service_kind") or "").strip().lower()
    if kind not in VALID_SERVICE_KINDS:
        raise ValueError(
            f"Unknown service_kind '{kind}'. Must be one of: {sorted(VALID_SERVICE_KINDS)}"
        )

    cleaned = {key: str(value or "").strip() for key, value in service.items()}
    cleaned["service_kind"] = kind

    for field in _REQUIRED_FIELDS[kind]:
        if not cleaned.get(field):
            raise ValueError(f"'{field}' must be a non-empty string for service_kind '{kind}'.")

    return cleaned
