"""Client-facing model names and their backend display names."""

from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_BACKEND_MODEL = "GPT-4o mini"

MODEL_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "gpt-4o-mini": "GPT-4o mini",
        "claude-haiku": "Claude Haiku",
        "llama-3": "Llama 3",
        "gemini-1.5": "Gemini 1.5",
        "gemini-flash": "Gemini Flash",
        "command-r": "Command R",
    }
)


def resolve_model(client_model: Any) -> str:
    """Translate a client model identifier into the backend display name.

    Never fails: anything outside the alias table resolves to
    ``DEFAULT_BACKEND_MODEL``.
    """
    if not isinstance(client_model, str):
        return DEFAULT_BACKEND_MODEL
    return MODEL_ALIASES.get(client_model, DEFAULT_BACKEND_MODEL)
