"""Prompt assembly for outfit and moodboard generation.

Prompts are built by interpolating user preferences into fixed sentence
templates.  Two small lookup tables translate the quiz answers for trend and
weather into descriptive phrases; any value missing from a table is used
verbatim, so free-text answers pass straight through.

No validation is applied here: every string the caller supplies ends up in
the prompt unchanged.

Usage
-----
::

    prompt = build_outfit_prompt(
        {"season": "summer", "weather": "hot", "occasion": "beach party",
         "trends": "casual", "voicePreference": "pastel"},
        categories=["dresses", "shoes"],
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

# ---------------------------------------------------------------------------
# Lookup tables.
# ---------------------------------------------------------------------------

STYLE_PHRASES: dict[str, str] = {
    "casual": "casual comfortable everyday",
    "formal": "elegant formal sophisticated",
    "sporty": "athletic sporty activewear",
    "trendy": "trendy fashionable modern",
    "classic": "classic timeless elegant",
}

WEATHER_PHRASES: dict[str, str] = {
    "hot": "light breathable summer",
    "warm": "comfortable spring",
    "mild": "layered transitional",
    "cool": "cozy autumn",
    "cold": "warm winter layered",
}

DEFAULT_VIBE = "colorful"

TEST_PROMPT = "a simple fashion outfit illustration, clean white background, professional"


def _text(value: object) -> str:
    # Missing quiz answers are rendered as empty strings rather than "None".
    return "" if value is None else str(value)


def style_phrase(trend: object) -> str:
    """Translate a trend answer, falling back to the raw value."""
    key = _text(trend)
    return STYLE_PHRASES.get(key, key)


def weather_phrase(weather: object) -> str:
    """Translate a weather answer, falling back to the raw value."""
    key = _text(weather)
    return WEATHER_PHRASES.get(key, key)


def build_outfit_prompt(
    preferences: Mapping[str, object],
    categories: Iterable[str] = (),
) -> str:
    """Compile the outfit illustration prompt from quiz answers.

    Args:
        preferences: Quiz answers keyed ``season``, ``weather``,
            ``occasion``, ``trends``, and ``voicePreference``.  Missing keys
            render as empty text; a missing or empty ``voicePreference``
            becomes ``"colorful"``.
        categories: Clothing categories the owner has in their wardrobe.
            When non-empty they are listed as the pieces to feature.

    Returns:
        The comma-separated prompt string.
    """
    style = style_phrase(preferences.get("trends"))
    weather = weather_phrase(preferences.get("weather"))
    vibe = _text(preferences.get("voicePreference")) or DEFAULT_VIBE
    season = _text(preferences.get("season"))
    occasion = _text(preferences.get("occasion"))

    parts = [
        "professional fashion illustration",
        "full body outfit",
        f"{style} style",
        f"{season} season",
        f"{weather} weather",
        f"{occasion} outfit",
        f"{vibe} aesthetic",
    ]

    owned = [c for c in categories if c]
    if owned:
        parts.append(f"featuring {', '.join(owned)} pieces")

    parts.extend(
        [
            "fashion sketch",
            "clean white background",
            "detailed clothing design",
            "high quality",
        ]
    )
    return ", ".join(parts)


def build_moodboard_prompt(theme: object, colors: object, style: object) -> str:
    """Compile the moodboard collage prompt."""
    return (
        f"fashion moodboard collage, {_text(theme)} aesthetic, "
        f"{_text(colors)} color palette, {_text(style)} style, "
        "outfit inspirations, accessories, textures, fabric swatches, "
        "trendy fashion design board, professional styling, "
        "pinterest aesthetic, high quality"
    )


def outfit_description(preferences: Mapping[str, object]) -> str:
    return (
        f"AI-generated {_text(preferences.get('occasion'))} outfit "
        f"for {_text(preferences.get('season'))} 👗✨"
    )


def moodboard_description(theme: object) -> str:
    return f"AI-generated {_text(theme)} fashion moodboard 🎨💖"
