from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ModelInferenceDegraded, NoDataError
from app.db.models import WeeklyAnalysis
from app.repositories import analysis_repo, checkin_repo
from app.services.clock import trailing_window, week_label
from app.services.emotions import Emotion
from app.services.model import ModelCandidate, NullSummaryModel, SummaryModel
from app.services.summary import GENERIC_SUMMARY, combine_texts, recommend, summarize
from app.services.weekly import predominant_emotion

log = logging.getLogger(__name__)

DEFAULT_MODEL_TIMEOUT = 5.0


class AnalysisState(str, Enum):
    VALIDATING = "validating"
    AGGREGATING = "aggregating"
    PREDICTING = "predicting"
    RESOLVING = "resolving"
    DONE = "done"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class WeeklyAnalysisResult:
    predominant_emotion: str
    summary: str
    recommendation: str


def _emotion_name(emotion) -> str:
    return emotion.value if isinstance(emotion, Emotion) else str(emotion)


def needs_summary_fallback(candidate: Optional[str]) -> bool:
    """Blank output and the generic sentence both count as 'no answer'."""
    return not candidate or not candidate.strip() or candidate.strip() == GENERIC_SUMMARY


def needs_recommendation_fallback(candidate: Optional[str]) -> bool:
    return not candidate or not candidate.strip()


async def _predict(
    model: SummaryModel, emotions: str, texts: str, predominant: str, timeout: float
) -> ModelCandidate:
    try:
        return await asyncio.wait_for(model.predict(emotions, texts, predominant), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ModelInferenceDegraded(f"summary model timed out after {timeout}s") from e
    except Exception as e:
        raise ModelInferenceDegraded(f"{type(e).__name__}: {e}") from e


async def analyze_week(
    checkins: Sequence,
    model: Optional[SummaryModel] = None,
    *,
    timeout: float = DEFAULT_MODEL_TIMEOUT,
) -> WeeklyAnalysisResult:
    """
    Validating -> Aggregating -> Predicting -> Resolving -> Done.
    Only an empty window is fatal (NoDataError); model trouble of any kind
    ends in the rule-based summary and recommendation.
    """
    state = AnalysisState.VALIDATING
    if not checkins:
        state = AnalysisState.REJECTED
        log.warning("Weekly analysis %s: empty window", state.value, extra={"analysis_state": state.value})
        raise NoDataError()

    state = AnalysisState.AGGREGATING
    emotions = [_emotion_name(c.emotion) for c in checkins]
    texts = [c.text for c in checkins if c.text and c.text.strip()]
    predominant = predominant_emotion(emotions)

    state = AnalysisState.PREDICTING
    candidate = ModelCandidate()
    try:
        candidate = await _predict(
            model or NullSummaryModel(), ",".join(emotions), combine_texts(texts), predominant, timeout
        )
    except ModelInferenceDegraded as e:
        log.warning(
            "Weekly analysis %s: summary model degraded, using rule-based fallback: %s",
            state.value, e, extra={"analysis_state": state.value},
        )

    state = AnalysisState.RESOLVING
    summary = candidate.summary
    if needs_summary_fallback(summary):
        log.info(
            "Weekly analysis %s: rule-based summary for %s",
            state.value, predominant, extra={"analysis_state": state.value},
        )
        summary = summarize(emotions, texts, predominant)

    recommendation = candidate.recommendation
    if needs_recommendation_fallback(recommendation):
        log.info(
            "Weekly analysis %s: rule-based recommendation for %s",
            state.value, predominant, extra={"analysis_state": state.value},
        )
        recommendation = recommend(predominant)

    state = AnalysisState.DONE
    log.info("Weekly analysis %s: %s", state.value, predominant, extra={"analysis_state": state.value})
    return WeeklyAnalysisResult(
        predominant_emotion=predominant,
        summary=summary.strip(),
        recommendation=recommendation.strip(),
    )


async def generate_weekly_analysis(
    db: AsyncSession,
    *,
    user_id: UUID,
    model: Optional[SummaryModel] = None,
    now: Optional[datetime] = None,
    days: int = 7,
    timeout: float = DEFAULT_MODEL_TIMEOUT,
) -> WeeklyAnalysis:
    """
    Loads the user's trailing window, analyzes it and stores a new analysis.
    Raises NoDataError when the window is empty.
    """
    start, end = trailing_window(now, days=days)
    checkins = await checkin_repo.list_checkins_in_window(db, user_id, start, end)
    log.info("Generating weekly analysis for user %s from %s check-ins", user_id, len(checkins))

    result = await analyze_week(checkins, model, timeout=timeout)
    analysis = await analysis_repo.create_analysis(
        db,
        user_id,
        week_label=week_label(start, end),
        predominant_emotion=result.predominant_emotion,
        summary=result.summary,
        recommendation=result.recommendation,
    )
    log.info("Weekly analysis %s stored for user %s", analysis.id, user_id)
    return analysis
