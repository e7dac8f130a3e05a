# sleep_tracker/api/routes/sleep_routes.py
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from sleep_tracker.api.dependencies import get_config, get_record_store, get_session_recorder
from sleep_tracker.core.analysis.chart_aggregator import (
    build_monthly_charts,
    build_weekly_charts,
    month_dates,
    week_dates,
)
from sleep_tracker.core.analysis.sleep_metrics import summarize_records
from sleep_tracker.core.exceptions import InvalidSession
from sleep_tracker.core.repositories.record_store import RecordStore
from sleep_tracker.core.services.sleep_service import SessionRecorder


class SleepSessionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    duration_seconds: int = Field(..., ge=0, alias="durationSeconds")
    memo: str = ""
    sleep_score: Optional[int] = Field(None, ge=0, le=100, alias="sleepScore")


router = APIRouter(
    prefix="/sleep",
    tags=["Sleep"],
    responses={404: {"description": "Not found"}}
)


@router.post("/record", response_model=Dict, status_code=201)
async def record_sleep(session: SleepSessionIn, recorder: SessionRecorder = Depends(get_session_recorder)):
    """Save a sleep session confirmed at wake-up"""
    try:
        result = await recorder.record_session(session.duration_seconds, session.memo, session.sleep_score)
    except InvalidSession as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "status": "success" if result["saved"] else "warning",
        "saved": result["saved"],
        "record": result["record"].to_storage(),
        "sleep_time": result["sleep_time"],
        "warning": result["warning"],
    }


@router.get("/records", response_model=List[Dict])
async def get_records(record_store: RecordStore = Depends(get_record_store)):
    """Get all recorded sleep sessions in the order they were saved"""
    records = await record_store.read_all()
    return [record.to_storage() for record in records]


@router.get("/charts/weekly", response_model=Dict)
async def get_weekly_charts(
    reference: Optional[date] = None,
    record_store: RecordStore = Depends(get_record_store),
    config=Depends(get_config)
):
    """Get the sleep time and sleep score series for the week containing reference"""
    reference = reference or datetime.now(timezone.utc).date()
    records = await record_store.read_all()
    charts = build_weekly_charts(records, reference, config)
    dates = week_dates(reference)
    return {
        "period": {"start": dates[0].isoformat(), "end": dates[-1].isoformat()},
        "sleep_time": charts["sleep_time"].model_dump(mode="json"),
        "sleep_score": charts["sleep_score"].model_dump(mode="json"),
    }


@router.get("/charts/monthly", response_model=Dict)
async def get_monthly_charts(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    record_store: RecordStore = Depends(get_record_store),
    config=Depends(get_config)
):
    """Get per-day and per-week sleep time and sleep score series for a month"""
    today = datetime.now(timezone.utc).date()
    year = year or today.year
    month = month or today.month
    records = await record_store.read_all()
    charts = build_monthly_charts(records, year, month, config)
    dates = month_dates(year, month)
    return {
        "period": {"start": dates[0].isoformat(), "end": dates[-1].isoformat()},
        **{name: series.model_dump(mode="json") for name, series in charts.items()},
    }


@router.get("/summary", response_model=Dict)
async def get_summary(record_store: RecordStore = Depends(get_record_store)):
    """Get summary statistics over all recorded sessions"""
    records = await record_store.read_all()
    return summarize_records(records)
