from datetime import date, datetime

from pydantic import BaseModel, Field


class DelayMonitorStats(BaseModel):
    as_of: datetime
    window_start: date = Field(..., description="Oldest journey date in the check window (UTC)")
    window_end: date = Field(..., description="Newest journey date in the check window (UTC)")

    pending_count: int = Field(..., description="Bookings in the window without a final delay")
    processed_count: int = Field(..., description="Bookings in the window with a final delay recorded")
    eligible_claims_count: int = Field(..., description="Processed bookings delayed 60 minutes or more")
