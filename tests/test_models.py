"""Tests for the model alias table."""

import pytest

from julius2api.core.models import DEFAULT_BACKEND_MODEL, MODEL_ALIASES, resolve_model


class TestResolveModel:
    """Tests for resolve_model."""

    @pytest.mark.parametrize(
        "client_model, backend_model",
        [
            ("gpt-4o-mini", "GPT-4o mini"),
            ("claude-haiku", "Claude Haiku"),
            ("llama-3", "Llama 3"),
            ("gemini-1.5", "Gemini 1.5"),
            ("gemini-flash", "Gemini Flash"),
            ("command-r", "Command R"),
        ],
    )
    def test_known_aliases(self, client_model, backend_model):
        """Test that every documented alias maps to its display name."""
        assert resolve_model(client_model) == backend_model

    @pytest.mark.parametrize(
        "client_model",
        ["gpt-4", "LLAMA-3", " llama-3", "", "Llama 3", "openai/gpt-4o-mini"],
    )
    def test_unknown_names_fall_back_to_default(self, client_model):
        """Test that misses resolve to the default instead of failing."""
        assert resolve_model(client_model) == DEFAULT_BACKEND_MODEL

    @pytest.mark.parametrize("client_model", [None, 42, ["llama-3"]])
    def test_non_string_input_falls_back_to_default(self, client_model):
        """Test that resolve_model is total over non-string input."""
        assert resolve_model(client_model) == DEFAULT_BACKEND_MODEL

    def test_default_is_gpt_4o_mini(self):
        assert DEFAULT_BACKEND_MODEL == "GPT-4o mini"

    def test_alias_table_is_read_only(self):
        """Test that the shared alias table cannot be mutated."""
        with pytest.raises(TypeError):
            MODEL_ALIASES["new-model"] = "New Model"  # type: ignore[index]
        assert len(MODEL_ALIASES) == 6
