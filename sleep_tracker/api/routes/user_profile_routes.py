# sleep_tracker/api/routes/user_profile_routes.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from sleep_tracker.api.dependencies import get_app_state, get_profile_reconciler, get_record_store
from sleep_tracker.core.exceptions import NoActiveUser, StorageUnavailable
from sleep_tracker.core.repositories.record_store import RecordStore
from sleep_tracker.core.services.profile_service import ProfileReconciler

router = APIRouter(
    prefix="/user",
    tags=["User Profiles"],
    responses={404: {"description": "Not found"}}
)


@router.get("/me", response_model=Dict)
async def get_current_user(
    service: ProfileReconciler = Depends(get_profile_reconciler),
    app_state=Depends(get_app_state)
):
    """Get the signed-in user's profile"""
    try:
        user = await service.get_current_user(app_state)
    except NoActiveUser as e:
        raise HTTPException(status_code=401, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return user.to_storage()


@router.patch("/me", response_model=Dict)
async def update_current_user(
    update: Dict[str, Any] = Body(...),
    service: ProfileReconciler = Depends(get_profile_reconciler),
    app_state=Depends(get_app_state)
):
    """Update the signed-in user's profile. Edits must not be sent concurrently."""
    try:
        user = await service.update_profile(update, app_state=app_state)
    except NoActiveUser as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return user.to_storage()


@router.post("/me/refresh-stats", response_model=Dict)
async def refresh_current_user_stats(
    service: ProfileReconciler = Depends(get_profile_reconciler),
    record_store: RecordStore = Depends(get_record_store),
    app_state=Depends(get_app_state)
):
    """Recompute the profile's sleep statistics from recorded sessions"""
    records = await record_store.read_all()
    try:
        user = await service.refresh_stats(records, app_state=app_state)
    except NoActiveUser as e:
        raise HTTPException(status_code=401, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return user.to_storage()
