"""
Pydantic models for warming state and the remote prediction resource.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from prewarm.constants import TERMINAL_STATUSES


class Prediction(BaseModel):
    """
    Snapshot of a prediction resource as returned by the warm/status endpoints.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    prediction_id: Optional[str] = Field(default=None, alias="predictionId")
    status: str = "starting"
    logs: Optional[List[str]] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


class WarmingState(BaseModel):
    """
    Mutable state register owned by one scheduler.
    Timestamps are epoch seconds; 0 means "never".
    """

    in_progress: bool = False
    last_warm_attempt_at: float = 0.0
    last_successful_warm_at: float = 0.0


class WarmingStatus(BaseModel):
    """
    Read-only status snapshot.
    """

    in_progress: bool
    last_warm_attempt_at: float
    time_since_last_warm: float
    time_since_last_successful_warm: float
    can_warm: bool
