"""Tests for the static model registry."""

from __future__ import annotations

import unittest
from dataclasses import FrozenInstanceError

from chatwindow.models import (
    DEFAULT_CONTEXT_WINDOW,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    PROVIDER_MODELS,
    all_models,
    context_window,
    estimate_cost,
    find_model,
    models_for_provider,
)


class ContextWindowTests(unittest.TestCase):
    def test_known_models(self) -> None:
        self.assertEqual(context_window("gpt-4o"), 128_000)
        self.assertEqual(context_window("gpt-4o-mini"), 128_000)
        self.assertEqual(context_window("gpt-4-turbo"), 128_000)
        self.assertEqual(context_window("gpt-4"), 8192)
        self.assertEqual(context_window("gpt-3.5-turbo"), 16_385)
        self.assertEqual(context_window("gemini-1.5-pro"), 1_000_000)
        self.assertEqual(context_window("gemini-2.0-flash"), 1_000_000)

    def test_unknown_model_gets_default(self) -> None:
        self.assertEqual(DEFAULT_CONTEXT_WINDOW, 4096)
        self.assertEqual(context_window("llama-3-70b"), 4096)
        self.assertEqual(context_window(""), 4096)


class LookupTests(unittest.TestCase):
    def test_find_model(self) -> None:
        profile = find_model("gpt-4")
        self.assertIsNotNone(profile)
        assert profile is not None
        self.assertEqual(profile.provider, "openai")
        self.assertEqual(profile.name, "GPT-4")
        self.assertTrue(profile.supports_streaming)
        self.assertEqual(profile.cost_per_1k_tokens.input, 0.03)
        self.assertEqual(profile.cost_per_1k_tokens.output, 0.06)

    def test_find_model_missing_returns_none(self) -> None:
        self.assertIsNone(find_model("gpt-5-ultra"))

    def test_models_for_provider_keeps_order(self) -> None:
        ids = [m.model_id for m in models_for_provider("openai")]
        self.assertEqual(ids, ["gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-4", "gpt-3.5-turbo"])
        gemini = models_for_provider("gemini")
        self.assertEqual(len(gemini), 4)
        self.assertTrue(all(m.provider == "gemini" for m in gemini))

    def test_models_for_unknown_provider_is_empty(self) -> None:
        self.assertEqual(models_for_provider("anthropic"), ())

    def test_all_models(self) -> None:
        self.assertEqual(len(all_models()), 9)
        self.assertEqual(all_models()[0].model_id, "gpt-4o")

    def test_defaults_resolve(self) -> None:
        self.assertEqual(DEFAULT_PROVIDER, "openai")
        profile = find_model(DEFAULT_MODEL)
        self.assertIsNotNone(profile)

    def test_registry_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            PROVIDER_MODELS["openai"] = ()  # type: ignore[index]
        with self.assertRaises(FrozenInstanceError):
            find_model("gpt-4").context_window = 1  # type: ignore[union-attr,misc]

    def test_every_profile_is_valid(self) -> None:
        for profile in all_models():
            self.assertGreater(profile.context_window, 0)
            self.assertGreaterEqual(profile.cost_per_1k_tokens.input, 0)
            self.assertGreaterEqual(profile.cost_per_1k_tokens.output, 0)

    def test_tokenizer_families(self) -> None:
        self.assertEqual(find_model("gpt-4o").tokenizer, "o200k_base")  # type: ignore[union-attr]
        self.assertEqual(find_model("gpt-4").tokenizer, "cl100k_base")  # type: ignore[union-attr]
        self.assertEqual(find_model("gemini-1.5-flash").tokenizer, "heuristic")  # type: ignore[union-attr]


class EstimateCostTests(unittest.TestCase):
    def test_cost(self) -> None:
        self.assertAlmostEqual(estimate_cost("gpt-4", 1000, 500), 0.03 + 0.03)
        self.assertAlmostEqual(estimate_cost("gpt-4o-mini", 2000, 0), 0.0003)

    def test_unknown_model_is_free(self) -> None:
        self.assertEqual(estimate_cost("mystery", 1000, 1000), 0.0)


if __name__ == "__main__":
    unittest.main()
