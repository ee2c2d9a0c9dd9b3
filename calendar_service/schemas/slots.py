from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Slot(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_time: datetime = Field(description="Start time of the slot")
    end_time: datetime = Field(description="End time of the slot")
    slot_index: int = Field(ge=0, description="Index of the slot within its day (one slot per hour)")
