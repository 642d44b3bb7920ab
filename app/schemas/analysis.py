from pydantic import BaseModel
from uuid import UUID
from datetime import datetime

class WeeklyAnalysisOut(BaseModel):
    analysis_id: UUID
    week_label: str
    predominant_emotion: str  # one of the five emotions or "Mixed"
    summary: str
    recommendation: str
    created_at: datetime
