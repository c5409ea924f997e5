"""Tests for lume.api.models — Pydantic request models."""

from __future__ import annotations

from lume.api.models import MoodboardRequest, OutfitPreferences, OutfitRequest


class TestOutfitRequest:
    """Test OutfitRequest and OutfitPreferences."""

    def test_full_payload(self):
        req = OutfitRequest(
            userId="u1",
            preferences={
                "season": "fall",
                "weather": "cool",
                "occasion": "work",
                "trends": "formal",
                "voicePreference": "moody",
            },
        )
        assert req.userId == "u1"
        assert req.preferences.trends == "formal"
        assert req.preferences.voicePreference == "moody"

    def test_preferences_default_empty(self):
        req = OutfitRequest()
        assert req.userId is None
        assert req.preferences.model_dump() == {
            "season": None,
            "weather": None,
            "occasion": None,
            "trends": None,
            "voicePreference": None,
        }

    def test_extra_preference_keys_kept(self):
        prefs = OutfitPreferences(season="summer", budget="low")
        assert prefs.model_dump()["budget"] == "low"

    def test_any_string_accepted(self):
        prefs = OutfitPreferences(trends="not-a-known-trend", weather="???")
        assert prefs.trends == "not-a-known-trend"


class TestMoodboardRequest:
    """Test MoodboardRequest."""

    def test_fields(self):
        req = MoodboardRequest(theme="Urban Chic", colors="neon", style="modern")
        assert (req.theme, req.colors, req.style) == ("Urban Chic", "neon", "modern")

    def test_all_optional(self):
        req = MoodboardRequest()
        assert req.theme is None and req.colors is None and req.style is None
