from __future__ import annotations

from collections import Counter
from typing import Iterable

from app.services.emotions import MIXED_LABEL, Emotion, parse_emotion

DEFAULT_PREDOMINANT = Emotion.CALM.value


def emotion_counts(emotions: Iterable[Emotion | str]) -> Counter:
    return Counter(parse_emotion(e) for e in emotions)


def predominant_emotion(emotions: Iterable[Emotion | str]) -> str:
    """
    Most frequent emotion of the window.
    - no check-ins                                -> "Calm"
    - every distinct emotion tied at the top      -> "Mixed"
    - partial tie                                 -> earliest tied emotion in Emotion declaration order
    The result only depends on the multiset of emotions.
    """
    counts = emotion_counts(emotions)
    if not counts:
        return DEFAULT_PREDOMINANT

    top = max(counts.values())
    tied = [e for e in Emotion if counts.get(e) == top]

    if len(tied) > 1 and len(tied) == len(counts):
        return MIXED_LABEL
    return tied[0].value
