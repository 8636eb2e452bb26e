"""
Keyword and regex classifiers over a single free-text user message.
Each detector is independent of the others.
"""
import re
from natureup.models.base_model import IntentResponse, LocationIntent

EXCURSION_KEYWORDS = [
    "hike",
    "walk",
    "excursion",
    "trail",
    "nature spot",
    "outdoor",
    "explore",
    "get outside",
    "go outside",
    "nature walk",
    "nature experience",
]

HOUR_PATTERNS = [
    re.compile(r"(\d+)\s*hour", re.IGNORECASE),
    re.compile(r"(\d+)\s*hr", re.IGNORECASE),
]

MINUTE_PATTERNS = [
    re.compile(r"(\d+)\s*minute", re.IGNORECASE),
    re.compile(r"(\d+)\s*min", re.IGNORECASE),
]

# Checked in order, first hit wins
DURATION_KEYWORDS = [
    ("quick", 15),
    ("short", 20),
    ("long", 90),
]

SUGGESTION_PHRASES = [
    "surprise me",
    "you choose",
    "give me options",
    "show me options",
    "suggest",
    "recommend",
    "anywhere",
    "don't care",
    "whatever",
]

SPECIFIC_LOCATION_INDICATORS = [
    "i know a place",
    "specific place",
    "trail called",
    "park called",
    "at ",
    "near ",
]

AFFIRMATIVE_RESPONSES = [
    "yes",
    "yeah",
    "sure",
    "ok",
    "okay",
    "please",
    "go ahead",
    "show me",
    "let me see",
    "sounds good",
    "perfect",
    "great",
    "yep",
    "yup",
    "absolutely",
    "definitely",
    "of course",
]


def detect_excursion_intent(message: str) -> bool:
    message_lower = message.lower()
    return any(keyword in message_lower for keyword in EXCURSION_KEYWORDS)


def detect_duration_intent(message: str) -> int | None:
    """Duration in minutes: explicit hours, then explicit minutes, then vague keywords."""
    for pattern in HOUR_PATTERNS:
        match = pattern.search(message)
        if match:
            return int(match.group(1)) * 60

    for pattern in MINUTE_PATTERNS:
        match = pattern.search(message)
        if match:
            return int(match.group(1))

    message_lower = message.lower()
    for keyword, minutes in DURATION_KEYWORDS:
        if keyword in message_lower:
            return minutes

    return None


def detect_location_intent(message: str) -> LocationIntent:
    message_lower = message.lower()

    if any(phrase in message_lower for phrase in SUGGESTION_PHRASES):
        return LocationIntent(wants_suggestions=True)

    if any(indicator in message_lower for indicator in SPECIFIC_LOCATION_INDICATORS):
        return LocationIntent(specific_location=message)

    return LocationIntent()


def detect_confirmation_intent(message: str) -> bool:
    message_lower = message.lower().strip()
    return any(
        message_lower == response or message_lower.startswith(response + " ")
        for response in AFFIRMATIVE_RESPONSES
    )


def detect_all(message: str) -> IntentResponse:
    return IntentResponse(
        excursion=detect_excursion_intent(message),
        duration_minutes=detect_duration_intent(message),
        location=detect_location_intent(message),
        confirmation=detect_confirmation_intent(message)
    )
