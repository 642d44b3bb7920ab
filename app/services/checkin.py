from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidEmotion
from app.db.models import Checkin
from app.repositories import checkin_repo
from app.services.emotions import Emotion, Sentiment, classify_sentiment, parse_emotion

log = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 100

POSITIVE_WORDS = ("good", "great", "well", "happy", "joyful", "gratitude", "grateful", "happiness", "satisfied")
NEGATIVE_WORDS = ("bad", "awful", "difficult", "problem", "worried", "sad", "tired")
ANXIETY_WORDS = ("anxious", "nervous", "worried", "fear", "tension", "restless")
STRESS_WORDS = ("stressed", "pressure", "overwhelmed", "exhausted", "overloaded")
FATIGUE_WORDS = ("tired", "fatigue", "exhausted", "no energy", "drained")


@dataclass(frozen=True, slots=True)
class KeywordHits:
    positive: bool
    negative: bool
    anxiety: bool
    stress: bool
    fatigue: bool


# Per emotion: (pool used when its own keyword group matched, generic pool).
RESPONSES: dict[Emotion, tuple[tuple[str, ...], tuple[str, ...]]] = {
    Emotion.HAPPY: (
        (
            "How wonderful! Keep nurturing these positive moments and celebrating your wins.",
            "It's amazing to see you this happy! Enjoy every moment and share that positivity.",
            "What joy! Moments like this are precious, so hold on to the feeling and celebrate.",
            "Fantastic! Your happiness is contagious. Keep treasuring these special moments.",
        ),
        (
            "It's great to see that you're happy! Enjoy this moment.",
            "So good to know you're feeling well! Make the most of this positive feeling.",
            "I'm glad you're doing well! Keep cultivating this positive energy.",
            "It's wonderful to see your happiness! Enjoy every bit of this feeling.",
        ),
    ),
    Emotion.CALM: (
        (
            "Glad you're at peace! Calm is a precious state, so use it to recharge.",
            "It's comforting to know you feel tranquil. Serenity is a gift, enjoy it.",
            "How lovely to feel this peace! Use this calm moment to renew your energy.",
            "Great to see you at peace! Calm is essential, take the chance to reconnect with yourself.",
        ),
        (
            "It's comforting to know you're calm. Serenity matters for your well-being.",
            "Good that you're feeling tranquil. Calm is an important ally for your mental health.",
            "It's great to see you at peace. Serenity helps a lot with your daily well-being.",
            "I'm glad to know you're calm. Tranquility is fundamental for you.",
        ),
    ),
    Emotion.ANXIOUS: (
        (
            "I understand anxiety can be challenging. Try deep breaths and focus on the present.",
            "Anxiety can be intense. Breathe deeply, count to ten and try to focus on the here and now.",
            "I understand your anxiety. Practice deep breathing and remember: you are safe right now.",
            "Anxiety is hard but it passes. Try breathing techniques and focus on what you can control.",
        ),
        (
            "Anxiety can be difficult. How about a breathing exercise or a walk? It's normal to feel this way.",
            "I understand anxiety is challenging. Try taking a break and doing something that calms you.",
            "Anxiety can be intense. Breathe deeply, take a walk or listen to some relaxing music.",
            "It's normal to feel anxious. Try deep breathing or an activity that takes your mind off it.",
        ),
    ),
    Emotion.STRESSED: (
        (
            "Stress can be draining. Take a break, do something relaxing or talk to someone.",
            "Stress wears you down. Stop for a moment, breathe deeply and do something that brings you calm.",
            "I understand the stress is heavy. Give yourself a pause, do something relaxing or seek support.",
            "Stress can be overwhelming. Try pausing, breathing deeply and doing something that soothes you.",
        ),
        (
            "I understand you're stressed. Try to identify the cause and take small steps to ease the pressure.",
            "Stress can be hard. Take a break, identify what is causing it and look after yourself.",
            "I understand your stress. Try pausing, breathing deeply and taking small steps to feel better.",
            "Stress is challenging. Identify the cause, take a break and do something that relaxes you.",
        ),
    ),
    Emotion.TIRED: (
        (
            "Tiredness may be a sign you need rest. Prioritize your well-being and allow yourself to pause.",
            "Tiredness is your body's warning. Give yourself permission to rest and recharge.",
            "I understand you're tired. Rest is essential, allow yourself moments of pause and recovery.",
            "Tiredness deserves attention. Prioritize rest and don't be so hard on yourself.",
        ),
        (
            "It's important to respect your tiredness. Try to rest properly, rest is essential.",
            "Being tired is valid. Prioritize rest and don't push yourself, you deserve to recharge.",
            "It's normal to feel tired. Give yourself permission to rest and care for your well-being.",
            "Tiredness needs to be respected. Try to rest properly and don't pressure yourself so much.",
        ),
    ),
}

DEFAULT_RESPONSES = (
    "Thanks for sharing. Remember to take care of your emotional well-being.",
    "Thanks for opening up. Looking after your mental and emotional health matters.",
    "I appreciate you sharing. Remember to prioritize your well-being and take care of yourself.",
    "Thanks for trusting me. Take care of your emotional well-being, you deserve to feel good.",
)


@dataclass(slots=True)
class CheckinResult:
    checkin: Checkin
    sentiment: Sentiment
    generated_response: str


def _contains_any(text: str, words: Sequence[str]) -> bool:
    return any(w in text for w in words)


def detect_keywords(text: Optional[str]) -> KeywordHits:
    """Run the five keyword detectors over a check-in's free text."""
    lowered = (text or "").lower()
    return KeywordHits(
        positive=_contains_any(lowered, POSITIVE_WORDS),
        negative=_contains_any(lowered, NEGATIVE_WORDS),
        anxiety=_contains_any(lowered, ANXIETY_WORDS),
        stress=_contains_any(lowered, STRESS_WORDS),
        fatigue=_contains_any(lowered, FATIGUE_WORDS),
    )


def _reinforced(emotion: Emotion, hits: KeywordHits) -> bool:
    """Whether the emotion's own keyword group matched."""
    if emotion in (Emotion.HAPPY, Emotion.CALM):
        return hits.positive
    if emotion is Emotion.ANXIOUS:
        return hits.anxiety
    if emotion is Emotion.STRESSED:
        return hits.stress
    if emotion is Emotion.TIRED:
        return hits.fatigue
    return False


def classify(checkin) -> Sentiment:
    """Sentiment of a check-in; depends on its emotion only."""
    return classify_sentiment(checkin.emotion)


def generate_response(
    emotion: Emotion | str,
    sentiment: Sentiment | str | None,
    text: Optional[str],
    rng: Optional[random.Random] = None,
) -> str:
    """
    Pick a personalized reply for a check-in.
    The reinforced pool is used when the text contains words of the emotion's
    own group, the generic pool otherwise. `rng` makes the choice reproducible.
    """
    rng = rng or random.Random()
    try:
        emo = parse_emotion(emotion)
    except InvalidEmotion:
        return rng.choice(DEFAULT_RESPONSES)

    hits = detect_keywords(text)
    reinforced, generic = RESPONSES[emo]
    pool = reinforced if _reinforced(emo, hits) else generic
    log.debug("Reply pool for %s (%s): %s", emo.value, sentiment, "reinforced" if pool is reinforced else "generic")
    return rng.choice(pool)


def _validate_text(text: Optional[str]) -> str:
    if text is None or not text.strip():
        raise ValueError("Text is required")
    if len(text) > MAX_TEXT_LENGTH:
        raise ValueError(f"Text must be at most {MAX_TEXT_LENGTH} characters")
    return text


async def create_checkin(
    db: AsyncSession,
    *,
    user_id: UUID,
    emotion: Emotion | str,
    text: str,
    rng: Optional[random.Random] = None,
) -> CheckinResult:
    """
    Validates, classifies and persists a new check-in with its generated reply.
    """
    emo = parse_emotion(emotion)
    text = _validate_text(text)
    sentiment = classify_sentiment(emo)
    reply = generate_response(emo, sentiment, text, rng)

    ci = await checkin_repo.create_checkin(db, user_id, emo.value, text, sentiment.value, reply)
    log.info("Checkin %s created for user %s (%s)", ci.id, user_id, sentiment.value)
    return CheckinResult(checkin=ci, sentiment=sentiment, generated_response=reply)


async def update_checkin(
    db: AsyncSession,
    checkin: Checkin,
    *,
    emotion: Emotion | str,
    text: str,
    rng: Optional[random.Random] = None,
) -> CheckinResult:
    """
    Re-classifies and regenerates the reply of an existing check-in.
    The original timestamp is kept.
    """
    emo = parse_emotion(emotion)
    text = _validate_text(text)
    sentiment = classify_sentiment(emo)
    reply = generate_response(emo, sentiment, text, rng)

    ci = await checkin_repo.update_checkin(db, checkin, emo.value, text, sentiment.value, reply)
    log.info("Checkin %s updated", ci.id)
    return CheckinResult(checkin=ci, sentiment=sentiment, generated_response=reply)
