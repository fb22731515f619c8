import datetime

from pydantic import BaseModel, Field


class ThroughputRecord(BaseModel):
    """Number of work items completed on a single day."""
    date: datetime.date
    completed_issues: int = Field(ge=0)
