"""Brand voice trait catalog and custom trait helpers."""

import random
import re
import string
import time
from typing import TypedDict

from constants import CUSTOM_TRAIT_NAME_MAX_LENGTH


class TraitExample(TypedDict):
    before: str
    after: str


class VoiceTrait(TypedDict):
    hover_summary: str
    definition: str
    do: list[str]
    dont: list[str]
    example: TraitExample


class CustomTrait(TypedDict):
    id: str
    name: str
    is_custom: bool


TRAITS: dict[str, VoiceTrait] = {
    "Assertive": {
        "hover_summary": "Confident voice that states the stakes.",
        "definition": "Confident and self-assured communication that states positions clearly without being aggressive",
        "do": [
            "State facts clearly and back claims with evidence",
            "Use decisive language that shows confidence",
            "Stand firm in your position while remaining respectful",
        ],
        "dont": [
            "Be aggressive or pushy",
            "Make claims without evidence",
            "Back down when you should stand firm",
        ],
        "example": {
            "before": "We think this might possibly help in some cases",
            "after": "Here's exactly why this approach works better",
        },
    },
    "Witty": {
        "hover_summary": "Smart humor with a quick grin.",
        "definition": "Clever, sharp humor that shows intelligence without being silly or inappropriate",
        "do": [
            "Use clever wordplay and unexpected connections that make people smile",
            "Reference cultural moments or shared experiences your audience knows",
            "Time humor appropriately to enhance rather than distract from your message",
        ],
        "dont": [
            "Use humor that could offend or exclude part of your audience",
            "Be silly when serious communication is needed",
            "Force jokes that don't naturally fit the context",
        ],
        "example": {
            "before": "Our system is currently unavailable due to technical issues",
            "after": "Our servers decided to take an unscheduled coffee break. Back in 5 minutes!",
        },
    },
    "Direct": {
        "hover_summary": "No fluff, straight to the point.",
        "definition": "Clear and straightforward communication that gets to the point without unnecessary fluff",
        "do": [
            "State your main message upfront without beating around the bush",
            "Use simple, clear language that leaves no room for confusion",
            "Focus on what matters most to your audience",
        ],
        "dont": [
            "Bury the main point in unnecessary details",
            "Use complex jargon when simple words work",
            "Add fluff that doesn't serve the message",
        ],
        "example": {
            "before": "We're excited to introduce an innovative solution that may potentially help "
                      "optimize your workflow efficiency",
            "after": "This feature saves you 2 hours per week. Here's how.",
        },
    },
    "Inspiring": {
        "hover_summary": "Keeps energy high and momentum moving.",
        "definition": "Motivating and uplifting communication that encourages people to take action "
                      "and reach their potential",
        "do": [
            "Focus on possibilities and what people can achieve",
            "Use encouraging language that builds confidence and momentum",
            "Share stories and examples that motivate positive change",
        ],
        "dont": [
            "Focus on limitations or what can't be done",
            "Use discouraging or negative language",
            "Promise unrealistic outcomes",
        ],
        "example": {
            "before": "This process can be challenging and may not work for everyone",
            "after": "You're already closer to success than you think. Here's your next step",
        },
    },
    "Warm": {
        "hover_summary": "Feels personal, welcoming, and genuine.",
        "definition": "Genuine human connection that feels personal and caring without being overly emotional",
        "do": [
            "Use personal pronouns and inclusive language that brings people closer",
            "Acknowledge individual experiences and show you care about outcomes",
            "Express genuine appreciation and recognition when appropriate",
        ],
        "dont": [
            "Sound distant or transactional in important moments",
            "Use overly emotional language that feels manipulative",
            "Fake warmth or use generic pleasantries without meaning",
        ],
        "example": {
            "before": "User account has been successfully created. Proceed to next step.",
            "after": "Welcome! We're excited to have you here and can't wait to see what you create.",
        },
    },
    "Inclusive": {
        "hover_summary": "Invites everyone in without assumptions.",
        "definition": "Welcoming communication that makes everyone feel seen, valued, and able to participate",
        "do": [
            "Use language that welcomes all backgrounds and abilities",
            "Avoid assumptions about knowledge, experience, or circumstances",
            "Create content that works for diverse audiences",
        ],
        "dont": [
            "Make assumptions about your audience's background",
            "Use exclusionary language or references",
            "Ignore accessibility and diverse needs",
        ],
        "example": {
            "before": "Every professional knows that networking is essential",
            "after": "Whether you're starting out or switching careers...",
        },
    },
    "Playful": {
        "hover_summary": "Light, fun, and a little cheeky.",
        "definition": "Light-hearted and fun communication that brings joy while staying professional and on-brand",
        "do": [
            "Use humor, wordplay, and creative metaphors appropriately",
            "Add personality through unexpected but relevant references",
            "Keep things interesting with varied sentence structure",
        ],
        "dont": [
            "Use humor that could offend or exclude",
            "Be silly when serious communication is needed",
            "Let playfulness overshadow the main message",
        ],
        "example": {
            "before": "We are currently experiencing technical difficulties",
            "after": "Our servers are having a coffee break. Back in 5 minutes!",
        },
    },
    "Supportive": {
        "hover_summary": "Reassuring voice that's got your back.",
        "definition": "Understanding and encouraging communication that acknowledges challenges while "
                      "offering helpful guidance",
        "do": [
            "Acknowledge difficulties people face before offering solutions",
            "Use 'we're in this together' language that builds trust",
            "Provide reassurance while maintaining realistic expectations",
        ],
        "dont": [
            "Dismiss or minimize real challenges",
            "Sound patronizing or condescending",
            "Promise solutions you can't deliver",
        ],
        "example": {
            "before": "This is simple and straightforward for most users",
            "after": "We know this feels overwhelming. Let's break it into manageable steps",
        },
    },
    "Refined": {
        "hover_summary": "Polished tone with graceful restraint.",
        "definition": "Elegant and polished communication that respects your audience's intellect and expertise",
        "do": [
            "Use precise language and nuanced explanations",
            "Reference relevant cultural, industry, or intellectual contexts",
            "Maintain elegance without being pretentious",
        ],
        "dont": [
            "Talk down to your audience",
            "Use unnecessarily complex language to sound smart",
            "Be pretentious or show-offy",
        ],
        "example": {
            "before": "Our super easy tool makes hard stuff simple for anyone!",
            "after": "We've distilled complexity into clarity, just as you would",
        },
    },
}

_CUSTOM_NAME_RE = re.compile(r"^[a-zA-Z0-9\s\-]+$")
_ID_ALPHABET = string.ascii_lowercase + string.digits


def is_predefined_trait(name: str) -> bool:
    return name in TRAITS


def is_valid_custom_trait_name(name: str) -> bool:
    """Letters, digits, spaces and hyphens; 1-20 chars; not a predefined name (any case)."""
    trimmed = (name or "").strip()
    if not trimmed or len(trimmed) > CUSTOM_TRAIT_NAME_MAX_LENGTH:
        return False
    if trimmed.lower() in {n.lower() for n in TRAITS}:
        return False
    return bool(_CUSTOM_NAME_RE.match(trimmed))


def create_custom_trait(name: str) -> CustomTrait:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return CustomTrait(
        id=f"custom_{int(time.time() * 1000)}_{suffix}",
        name=name.strip(),
        is_custom=True,
    )


def predefined_trait_markdown(name: str, index: int) -> str:
    trait = TRAITS[name]
    return "\n".join([
        f"### {index}. {name}",
        "",
        trait["definition"],
        "",
        "***What It Means***",
        "",
        *(f"→ {item}" for item in trait["do"]),
        "",
        "***What It Doesn't Mean***",
        "",
        *(f"✗ {item}" for item in trait["dont"]),
    ])


def list_traits() -> list[dict[str, object]]:
    """Catalog as returned by the API, in display order."""
    return [{"name": name, "is_custom": False, **trait} for name, trait in TRAITS.items()]
