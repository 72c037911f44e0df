from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from railclaim.api.v1.schemas.delay_monitor import DelayMonitorStats
from railclaim.core.deps import get_db
from railclaim.jobs.delay_monitor.service import DelayMonitorService, check_window
from railclaim.utils.time import ensure_utc

router = APIRouter(prefix="/v1", tags=["delay-monitor"])


@router.get("/delay-monitor/stats", response_model=DelayMonitorStats)
def get_delay_monitor_stats(
    now: Optional[datetime] = Query(None, description="ISO timestamp; defaults to the current time"),
    db: Session = Depends(get_db),
):
    as_of = ensure_utc(now) if now else datetime.now(pytz.utc)
    window_start, window_end = check_window(as_of)
    stats = DelayMonitorService().get_stats(db, as_of)
    return DelayMonitorStats(as_of=as_of, window_start=window_start, window_end=window_end, **stats)
