"""
toastx.api.routes.notifications — The acting user's notifications (JWT-protected)
==================================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from toastx.api.deps import get_current_user_id, get_store
from toastx.services import recognition_service as svc
from toastx.store import notifications as notif_store
from toastx.store.holder import StateStore
from toastx.store.snapshot import notification_to_dict

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
def list_notifications(
    limit: int = Query(50, ge=1, le=200),
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    state = store.state
    items = notif_store.recent_notifications(state, user_id, limit)
    return {
        "items": [notification_to_dict(n) for n in items],
        "unread_count": notif_store.unread_count(state, user_id),
    }


@router.post("/read-all")
def mark_all_read(
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    store.dispatch(svc.mark_all_read, user_id)
    return {"unread_count": 0}


@router.post("/{notification_id}/read")
def mark_read(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    result = store.dispatch(svc.mark_notification_read, notification_id, user_id)
    if not result.success:
        raise HTTPException(404, result.error)
    return {"unread_count": notif_store.unread_count(store.state, user_id)}


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    result = store.dispatch(svc.remove_notification, notification_id, user_id)
    if not result.success:
        raise HTTPException(404, result.error)
    return {"message": "Notification deleted"}


@router.delete("")
def clear_notifications(
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    store.dispatch(svc.clear_notifications, user_id)
    return {"message": "Notifications cleared"}
