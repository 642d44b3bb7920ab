from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from datetime import datetime
from app.services.emotions import Emotion, Sentiment, parse_emotion

class CheckinCreate(BaseModel):
    emotion: Emotion  # Happy | Tired | Anxious | Calm | Stressed, gendered variants accepted
    text: str = Field(min_length=1, max_length=100)

    @field_validator("emotion", mode="before")
    @classmethod
    def _emotion(cls, v):
        return parse_emotion(v)

    @field_validator("text")
    @classmethod
    def _text(cls, v: str):
        if not v.strip():
            raise ValueError("text is required")
        return v

class CheckinOut(BaseModel):
    checkin_id: UUID
    emotion: Emotion
    text: str
    sentiment: Sentiment
    generated_response: str
    created_at: datetime
