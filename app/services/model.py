"""
Statistical summary models consulted before the rule-based fallback.

A model only proposes a (summary, recommendation) pair for a week; the analysis
service decides whether to keep it. Three backends:
- none:        NullSummaryModel, always returns an empty candidate
- classifier:  scikit-learn text classifiers fit once from a JSON training file
- openai:      chat completion returning both fields as JSON
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from sklearn.dummy import DummyClassifier
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from app.core.errors import ModelBuildError

log = logging.getLogger(__name__)

OPENAI_URL = "https://api.openai.com/v1/chat/completions"

SYSTEM = (
  "You write a weekly emotional synthesis from a user's daily check-ins.\n"
  "Given: the week's emotions, the check-in texts and the predominant emotion, you will:\n"
  "1) Write one short sentence summarizing the week.\n"
  "2) Write one or two sentences of practical, gentle advice.\n"
  "3) Return JSON: {\"summary\":\"...\",\"recommendation\":\"...\"}\n"
)


@dataclass(frozen=True, slots=True)
class ModelCandidate:
    summary: str = ""
    recommendation: str = ""


class SummaryModel(Protocol):
    async def predict(self, emotions: str, texts: str, predominant: str) -> ModelCandidate: ...


class TrainingRecord(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    emotions: str
    texts: str
    predominant_emotion: str
    expected_summary: str
    expected_recommendation: str


def features(emotions: str, texts: str, predominant: str) -> str:
    """Single document fed to the vectorizer; emotions are tagged so they do not blend with free text."""
    emotion_tokens = " ".join(f"emo_{e.strip().lower()}" for e in emotions.split(",") if e.strip())
    return f"{emotion_tokens} pred_{predominant.strip().lower()} {texts}"


def load_training_data(path: str | Path) -> list[TrainingRecord]:
    """
    Read the training file. A missing file yields no records;
    a file that exists but cannot be parsed is an error.
    """
    p = Path(path)
    if not p.is_file():
        log.warning("Training data file not found at %s", p)
        return []
    try:
        raw = p.read_text(encoding="utf-8").strip()
        if not raw:
            log.warning("Training data file %s is empty", p)
            return []
        records = TypeAdapter(list[TrainingRecord]).validate_json(raw)
    except (OSError, ValidationError) as e:
        raise ModelBuildError(f"Could not load training data from {p}: {e}") from e
    log.info("Loaded %s training records from %s", len(records), p)
    return records


class NullSummaryModel:
    """No trained model: every field is left to the rule-based fallback."""

    async def predict(self, emotions: str, texts: str, predominant: str) -> ModelCandidate:
        return ModelCandidate()


def _fit(docs: list[str], labels: list[str]):
    if len(set(labels)) < 2:
        clf = DummyClassifier(strategy="most_frequent")
    else:
        clf = LogisticRegression(max_iter=1000)
    pipe = Pipeline([("tfidf", TfidfVectorizer(ngram_range=(1, 2), sublinear_tf=True)), ("clf", clf)])
    pipe.fit(docs, labels)
    return pipe


class TextClassifierSummaryModel:
    """
    One multiclass classifier per field, trained once and then only read.
    Predictions whose probability is below `min_confidence` come back blank.
    """

    def __init__(self, records: list[TrainingRecord], *, min_confidence: float = 0.0):
        if not records:
            raise ModelBuildError("Cannot train a summary model without training records")
        docs = [features(r.emotions, r.texts, r.predominant_emotion) for r in records]
        try:
            self._summary = _fit(docs, [r.expected_summary for r in records])
            self._recommendation = _fit(docs, [r.expected_recommendation for r in records])
        except ValueError as e:
            raise ModelBuildError(f"Summary model training failed: {e}") from e
        self.min_confidence = min_confidence
        log.info("Summary model trained on %s records", len(records))

    def _label(self, pipe, doc: str, field: str) -> str:
        proba = pipe.predict_proba([doc])[0]
        best = int(proba.argmax())
        label = str(pipe.classes_[best])
        if proba[best] < self.min_confidence:
            log.warning("Low-confidence %s prediction (%.2f), discarding", field, proba[best])
            return ""
        return label

    def predict_sync(self, emotions: str, texts: str, predominant: str) -> ModelCandidate:
        doc = features(emotions, texts, predominant)
        return ModelCandidate(
            summary=self._label(self._summary, doc, "summary"),
            recommendation=self._label(self._recommendation, doc, "recommendation"),
        )

    async def predict(self, emotions: str, texts: str, predominant: str) -> ModelCandidate:
        return await asyncio.to_thread(self.predict_sync, emotions, texts, predominant)


class OpenAISummaryModel:
    def __init__(self, api_key: str, model: str, temperature: float = 0.4, timeout: float = 30.0):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(2),
        wait=wait_fixed(1),
        reraise=True,
    )
    async def predict(self, emotions: str, texts: str, predominant: str) -> ModelCandidate:
        week = {"emotions": emotions, "texts": texts, "predominant_emotion": predominant}
        req = {
          "model": self.model,
          "messages": [
            {"role": "system", "content": SYSTEM},
            {"role": "user", "content": f"Week:\n{json.dumps(week)}\nReturn ONLY JSON."}
          ],
          "temperature": self.temperature,
          "response_format": {"type": "json_object"},
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(OPENAI_URL, json=req, headers=headers)
            r.raise_for_status()
            data = r.json()
        parsed = json.loads(data["choices"][0]["message"]["content"])
        return ModelCandidate(
            summary=str(parsed.get("summary") or ""),
            recommendation=str(parsed.get("recommendation") or ""),
        )


def build_summary_model(settings) -> SummaryModel:
    """
    Construct the configured backend. Runs once before the app serves traffic;
    a ModelBuildError here must stop the process.
    """
    backend = (settings.MODEL_BACKEND or "none").lower()
    if backend == "none":
        log.info("Summary model disabled, rule-based analysis only")
        return NullSummaryModel()
    if backend == "openai":
        if not settings.OPENAI_API_KEY:
            raise ModelBuildError("MODEL_BACKEND=openai requires OPENAI_API_KEY")
        log.info("Using OpenAI summary model %s", settings.OPENAI_MODEL)
        return OpenAISummaryModel(settings.OPENAI_API_KEY, settings.OPENAI_MODEL, settings.OPENAI_TEMPERATURE)
    if backend == "classifier":
        records = load_training_data(settings.TRAINING_DATA_PATH)
        if not records:
            log.warning("No training data, summary model unavailable; rule-based fallback will be used")
            return NullSummaryModel()
        return TextClassifierSummaryModel(records, min_confidence=settings.MODEL_MIN_CONFIDENCE)
    raise ModelBuildError(f"Unknown MODEL_BACKEND: {settings.MODEL_BACKEND}")


def describe(model: Optional[SummaryModel]) -> str:
    return type(model).__name__ if model is not None else "none"
