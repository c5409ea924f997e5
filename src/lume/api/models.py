"""Pydantic request models for the Lume API.

FastAPI uses these models for request validation and OpenAPI documentation.
Field names follow the camelCase JSON keys the browser client sends.

Models
------
OutfitPreferences
    Quiz answers used to build the outfit prompt.
OutfitRequest
    Payload for ``POST /api/stylist/generate-outfit``.
MoodboardRequest
    Payload for ``POST /api/stylist/generate-moodboard``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OutfitPreferences(BaseModel):
    """Answers collected by the stylist quiz.

    Every field is free text.  Known ``trends`` and ``weather`` values are
    translated into descriptive phrases; anything else is used as-is.
    Unknown extra keys are kept and echoed back in the response.

    Attributes:
        season: Season to dress for (``spring``, ``summer``, ...).
        weather: Weather condition (``hot``, ``warm``, ``mild``, ...).
        occasion: Free-text occasion (``work``, ``party``, ...).
        trends: Style trend (``casual``, ``formal``, ...).
        voicePreference: Free-text vibe, usually captured by voice.
    """

    model_config = ConfigDict(extra="allow")

    season: str | None = Field(default=None, description="Season to dress for.")
    weather: str | None = Field(default=None, description="Weather condition.")
    occasion: str | None = Field(default=None, description="Occasion for the outfit.")
    trends: str | None = Field(default=None, description="Style trend to follow.")
    voicePreference: str | None = Field(
        default=None,
        description="Free-text vibe; defaults to 'colorful' in the prompt.",
    )


class OutfitRequest(BaseModel):
    """Request body for ``POST /api/stylist/generate-outfit``.

    Attributes:
        userId: Owner whose wardrobe categories are featured in the prompt.
        preferences: Quiz answers.
    """

    userId: str | None = Field(
        default=None,
        description="Owner identifier; may be omitted when a bearer token is sent.",
    )
    preferences: OutfitPreferences = Field(default_factory=OutfitPreferences)


class MoodboardRequest(BaseModel):
    """Request body for ``POST /api/stylist/generate-moodboard``."""

    userId: str | None = Field(default=None, description="Requesting owner, unused in the prompt.")
    theme: str | None = Field(default=None, description="Moodboard theme, e.g. 'Urban Chic'.")
    colors: str | None = Field(default=None, description="Colour palette, e.g. 'earth tones'.")
    style: str | None = Field(default=None, description="Style, e.g. 'minimalist'.")
