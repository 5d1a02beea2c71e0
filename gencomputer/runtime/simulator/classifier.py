"""Keyword classifier for the smart simulator.

Maps a free-text command to a ``ContentProfile`` without any model call.
Rules are evaluated in table order and the first rule with any matching
keyword wins, so a command mentioning both "shop" and "blog" is a shopping
list.  Matching is a case-insensitive substring search ("art" also matches
"start").  Commands matching nothing get a generic planning profile.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from gencomputer.runtime.models.profile import ContentProfile

GENERIC_CATEGORY = "generic"
TITLE_ECHO_LIMIT = 50
SHOPPING_PREFIX = "🛒 "

ASCII_ART = r"""  /\_/\\
 ( o.o )  🍎 ASCII Orchard Controller
  > ^ <"""

DEFAULT_GROCERIES = ("carrots", "apples", "potatoes", "milk", "bread", "eggs")

_QUOTED = re.compile(r'"([^"]+)"')
# Items end at the first line break.
_AFTER_COLON = re.compile(r":[ \t]*(.+)")


@dataclass(frozen=True)
class KeywordRule:
    """One row of the classification table."""

    category: str
    keywords: tuple[str, ...]
    build: Callable[[str], ContentProfile]

    def matches(self, lowered: str) -> bool:
        return any(keyword in lowered for keyword in self.keywords)


# ---------------------------------------------------------------------------
# Item extraction
# ---------------------------------------------------------------------------


def extract_items(command: str, defaults: tuple[str, ...] | list[str] = DEFAULT_GROCERIES) -> list[str]:
    """Pull list items out of a command.

    Preference order: double-quoted substrings, then a comma-separated list
    after the first colon, then ``defaults``.
    """
    quoted = _QUOTED.findall(command)
    if quoted:
        return [f"{SHOPPING_PREFIX}{item}" for item in quoted]

    after_colon = _AFTER_COLON.search(command)
    if after_colon and "," in after_colon.group(1):
        return [f"{SHOPPING_PREFIX}{piece.strip()}" for piece in after_colon.group(1).split(",")]

    return [f"{SHOPPING_PREFIX}{item}" for item in defaults]


# ---------------------------------------------------------------------------
# Profile builders
# ---------------------------------------------------------------------------


def _ascii_profile(_command: str) -> ContentProfile:
    return ContentProfile(
        category="ascii",
        title="🎨 ASCII Art Showcase",
        custom_content=ASCII_ART,
        tip="Ask for a new scene to regenerate fresh terminal art.",
    )


def _shopping_profile(command: str) -> ContentProfile:
    return ContentProfile(
        category="shopping",
        title="🛒 Shopping Companion",
        items=extract_items(command),
        tip="Check your pantry before heading out to avoid buying duplicates!",
    )


def _blog_profile(_command: str) -> ContentProfile:
    return ContentProfile(
        category="blog",
        title="✍️ Blog Writing Toolkit",
        items=[
            "📋 Research topic and gather sources",
            "🎯 Define target audience and key message",
            "✏️ Write compelling headline and introduction",
            "📝 Draft main content sections",
            "🖼️ Add images, code examples, or diagrams",
            "🔍 Proofread and edit for clarity",
            "🚀 Publish and share on social media",
        ],
        tip="Start with an outline to keep your writing focused and structured.",
    )


def _code_profile(_command: str) -> ContentProfile:
    return ContentProfile(
        category="code",
        title="💻 Development Sprint Plan",
        items=[
            "📐 Design architecture and component structure",
            "🎨 Create UI mockups or wireframes",
            "⚙️ Set up development environment",
            "🔨 Implement core functionality",
            "✅ Write unit and integration tests",
            "🐛 Debug and fix issues",
            "📚 Document code and API",
            "🚀 Deploy to production",
        ],
        tip="Break work into small, testable chunks for faster iteration.",
    )


def _travel_profile(_command: str) -> ContentProfile:
    return ContentProfile(
        category="travel",
        title="✈️ Travel Planner",
        items=[
            "🎯 Choose destination and dates",
            "✈️ Book flights and accommodation",
            "📋 Create daily itinerary",
            "💳 Arrange travel insurance",
            "🎒 Pack essentials (clothes, documents, chargers)",
            "💱 Exchange currency or notify bank",
            "📸 Charge camera and devices",
            "🏠 Arrange pet/plant care if needed",
        ],
        tip="Book accommodations and flights at least 2-3 months in advance for better deals.",
    )


def _social_profile(_command: str) -> ContentProfile:
    return ContentProfile(
        category="social",
        title="🐦 Social Media Launch Checklist",
        items=[
            "💡 Draft engaging tweet copy (keep it under 280 chars)",
            "🖼️ Create eye-catching visual or screenshot",
            "🔗 Add relevant links or call-to-action",
            "🏷️ Include 2-3 relevant hashtags",
            "⏰ Schedule for optimal posting time",
            "👥 Tag relevant accounts or collaborators",
            "📊 Monitor engagement and reply to comments",
            "🔄 Retweet and amplify responses",
        ],
        tip="Posts with images get 150% more engagement. Make it visual!",
    )


GENERIC_ITEMS = (
    "🎯 Define clear goals and success criteria",
    "📋 Break down into smaller actionable steps",
    "⏰ Set realistic deadlines for each step",
    "🚀 Start with the highest priority item",
    "✅ Complete and verify each step",
    "📝 Document progress and learnings",
    "🎉 Celebrate completion!",
)


def _generic_profile(command: str) -> ContentProfile:
    # The title is a single Markdown heading line.
    flat = " ".join(command.split())
    echo = flat[:TITLE_ECHO_LIMIT]
    if len(flat) > TITLE_ECHO_LIMIT:
        echo += "..."
    return ContentProfile(
        category=GENERIC_CATEGORY,
        title=f"📋 Project Brief: {echo}",
        items=list(GENERIC_ITEMS),
        tip="Focus on one task at a time for maximum productivity.",
    )


# ---------------------------------------------------------------------------
# Classification table
# ---------------------------------------------------------------------------

RULES: tuple[KeywordRule, ...] = (
    KeywordRule("ascii", ("ascii", "art"), _ascii_profile),
    KeywordRule("shopping", ("shop", "groceries", "grocery", "buy", "carrots", "apples"), _shopping_profile),
    KeywordRule("blog", ("blog", "write", "article"), _blog_profile),
    KeywordRule("code", ("code", "app", "build", "implement", "develop"), _code_profile),
    KeywordRule("travel", ("travel", "vacation", "trip", "holiday"), _travel_profile),
    KeywordRule("social", ("twitter", "tweet", "post", "social media"), _social_profile),
)


def match_rule(command: str) -> KeywordRule | None:
    lowered = command.lower()
    for rule in RULES:
        if rule.matches(lowered):
            return rule
    return None


def match_category(command: str) -> str:
    """Name of the first matching rule, or ``"generic"``."""
    rule = match_rule(command)
    return rule.category if rule else GENERIC_CATEGORY


def classify(command: str) -> ContentProfile:
    """Pick a content profile for ``command``.  Total: never raises."""
    command = command or ""
    rule = match_rule(command)
    if rule is None:
        return _generic_profile(command)
    return rule.build(command)
