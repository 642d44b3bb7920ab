from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.core.errors import InvalidEmotion


class Emotion(str, Enum):
    # Declaration order is the tie-break order for the weekly aggregation.
    HAPPY = "Happy"
    TIRED = "Tired"
    ANXIOUS = "Anxious"
    CALM = "Calm"
    STRESSED = "Stressed"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


MIXED_LABEL = "Mixed"

# Canonical names plus the gendered forms of the product's Portuguese vocabulary.
ALIASES: dict[Emotion, tuple[str, ...]] = {
    Emotion.HAPPY: ("happy", "feliz"),
    Emotion.TIRED: ("tired", "cansado", "cansada"),
    Emotion.ANXIOUS: ("anxious", "ansioso", "ansiosa"),
    Emotion.CALM: ("calm", "calmo", "calma"),
    Emotion.STRESSED: ("stressed", "estressado", "estressada"),
}

_LOOKUP = {alias: emotion for emotion, names in ALIASES.items() for alias in names}

_MIXED_ALIASES = ("mixed", "misto")

SENTIMENTS = {
    Emotion.HAPPY: Sentiment.POSITIVE,
    Emotion.CALM: Sentiment.NEUTRAL,
    Emotion.TIRED: Sentiment.NEGATIVE,
    Emotion.ANXIOUS: Sentiment.NEGATIVE,
    Emotion.STRESSED: Sentiment.NEGATIVE,
}


def accepted_values() -> str:
    """
    Human-readable list of accepted inputs, e.g.
    'Happy (feliz), Tired (cansado/cansada), ...'.
    """
    parts = []
    for emotion in Emotion:
        variants = [a for a in ALIASES[emotion] if a != emotion.value.lower()]
        parts.append(f"{emotion.value} ({'/'.join(variants)})")
    return ", ".join(parts)


def parse_emotion(raw: object) -> Emotion:
    """
    Lenient string -> Emotion. Trims and ignores case; accepts gendered variants.
    Raises InvalidEmotion for anything else, including blank input.
    """
    if isinstance(raw, Emotion):
        return raw
    if raw is not None and not isinstance(raw, str):
        raise InvalidEmotion(raw, accepted_values())
    key = (raw or "").strip().lower()
    try:
        return _LOOKUP[key]
    except KeyError:
        raise InvalidEmotion(raw, accepted_values()) from None


def classify_sentiment(emotion: Emotion | str) -> Sentiment:
    """
    Happy -> positive, Calm -> neutral, Tired/Anxious/Stressed -> negative.
    Strings that do not parse fall back to neutral.
    """
    if not isinstance(emotion, Emotion):
        try:
            emotion = parse_emotion(emotion)
        except InvalidEmotion:
            return Sentiment.NEUTRAL
    return SENTIMENTS[emotion]


@dataclass(frozen=True, slots=True)
class PredominantEmotion:
    """
    Tagged union over a week's predominant emotion:
    kind is 'emotion' (with `emotion` set), 'mixed' or 'unrecognized'.
    """
    kind: str
    emotion: Optional[Emotion] = None

    @classmethod
    def of(cls, emotion: Emotion) -> "PredominantEmotion":
        return cls("emotion", emotion)

    @classmethod
    def mixed(cls) -> "PredominantEmotion":
        return cls("mixed")

    @classmethod
    def unrecognized(cls) -> "PredominantEmotion":
        return cls("unrecognized")

    @classmethod
    def from_label(cls, label: Optional[str]) -> "PredominantEmotion":
        """Case-insensitive substring match against names and aliases, in declaration order."""
        text = (label or "").strip().lower()
        if not text:
            return cls.unrecognized()
        for emotion in Emotion:
            if any(alias in text for alias in ALIASES[emotion]):
                return cls.of(emotion)
        if any(alias in text for alias in _MIXED_ALIASES):
            return cls.mixed()
        return cls.unrecognized()

    @property
    def label(self) -> str:
        if self.kind == "emotion" and self.emotion is not None:
            return self.emotion.value
        if self.kind == "mixed":
            return MIXED_LABEL
        return ""
