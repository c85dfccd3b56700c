"""
toastx.api.routes.recognitions — Recognition & social endpoints (JWT-protected writes)
=======================================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from toastx.api.deps import get_config, get_current_user_id, get_store
from toastx.config import ToastXConfig
from toastx.database.models import AwardType, CompanyValue, ReactionType, RecognitionType
from toastx.services import recognition_service as svc
from toastx.store import recognitions as rec_store
from toastx.store.holder import StateStore
from toastx.store.snapshot import recognition_to_dict

router = APIRouter(prefix="/recognitions", tags=["recognitions"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class RecognitionCreate(BaseModel):
    type: RecognitionType
    recipient_ids: list[str]
    value: CompanyValue
    message: str
    expert_areas: list[str] = Field(default_factory=list)
    impact: str | None = None
    image_id: str = ""
    award: AwardType | None = None
    is_private: bool = False
    notify_managers: bool = False
    nominated_for_monthly: bool = False
    chain_parent_id: str | None = None


class RecognitionCheck(BaseModel):
    type: RecognitionType
    recipient_ids: list[str]


class ReactionCreate(BaseModel):
    type: ReactionType


class CommentCreate(BaseModel):
    content: str
    parent_id: str | None = None
    mentions: list[str] = Field(default_factory=list)


class CommentUpdate(BaseModel):
    content: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _raise_for(result: svc.ActionResult) -> None:
    if result.success:
        return
    code = 404 if result.error and result.error.endswith("not found") else 400
    raise HTTPException(code, result.error)


# ---------------------------------------------------------------------------
# Feed
# ---------------------------------------------------------------------------
@router.get("")
def list_recognitions(
    limit: int = Query(20, ge=1, le=100),
    giver_id: str | None = None,
    recipient_id: str | None = None,
    value: CompanyValue | None = None,
    store: StateStore = Depends(get_store),
):
    """Public feed, newest first.  Private recognitions are never listed."""
    state = store.state
    if giver_id:
        recs = rec_store.recognitions_by_giver(state, giver_id)
    elif recipient_id:
        recs = rec_store.recognitions_by_recipient(state, recipient_id)
    elif value:
        recs = rec_store.recognitions_by_value(state, value)
    else:
        recs = list(state.recognitions)
    visible = [r for r in recs if not r.is_private][:limit]
    return {"items": [recognition_to_dict(r) for r in visible], "count": len(visible)}


@router.get("/{recognition_id}")
def get_recognition(
    recognition_id: str,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    rec = store.select(rec_store.get_recognition, recognition_id)
    if rec is None or (rec.is_private and user_id != rec.giver_id and user_id not in rec.recipient_ids):
        raise HTTPException(404, "Recognition not found")
    return recognition_to_dict(rec)


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------
@router.post("/check")
def check_recognition(
    body: RecognitionCheck,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
    cfg: ToastXConfig = Depends(get_config),
):
    """Dry-run the anti-gaming gate for the acting user."""
    check = svc.check_recognition(store.state, user_id, body.recipient_ids, body.type, config=cfg)
    return {
        "allowed": check.allowed,
        "reason": check.reason,
        "suggested_action": check.suggested_action,
        "cooldown_ends_at": check.cooldown_ends_at.isoformat() if check.cooldown_ends_at else None,
        "remaining": check.remaining,
    }


@router.post("", status_code=201)
def create_recognition(
    body: RecognitionCreate,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
    cfg: ToastXConfig = Depends(get_config),
):
    data = svc.CreateRecognitionInput(
        type=body.type,
        recipient_ids=tuple(body.recipient_ids),
        value=body.value,
        message=body.message,
        expert_areas=tuple(body.expert_areas),
        impact=body.impact,
        image_id=body.image_id,
        award=body.award,
        is_private=body.is_private,
        notify_managers=body.notify_managers,
        nominated_for_monthly=body.nominated_for_monthly,
        chain_parent_id=body.chain_parent_id,
    )
    result = store.dispatch(svc.create_recognition, user_id, data, config=cfg)
    if not result.success:
        raise HTTPException(
            400,
            {
                "error": result.error,
                "suggested_action": result.suggested_action,
                "cooldown_ends_at": (
                    result.cooldown_ends_at.isoformat() if result.cooldown_ends_at else None
                ),
            },
        )
    return {
        "recognition_id": result.recognition_id,
        "credits": result.credits,
        "new_badges": {uid: [str(b) for b in badges] for uid, badges in result.new_badges.items()},
    }


# ---------------------------------------------------------------------------
# Reactions
# ---------------------------------------------------------------------------
@router.post("/{recognition_id}/reactions", status_code=201)
def add_reaction(
    recognition_id: str,
    body: ReactionCreate,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    _raise_for(store.dispatch(svc.react, recognition_id, user_id, body.type))
    return {"message": "Reaction added"}


@router.delete("/{recognition_id}/reactions/{reaction_type}")
def remove_reaction(
    recognition_id: str,
    reaction_type: ReactionType,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    _raise_for(store.dispatch(svc.unreact, recognition_id, user_id, reaction_type))
    return {"message": "Reaction removed"}


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------
@router.post("/{recognition_id}/comments", status_code=201)
def add_comment(
    recognition_id: str,
    body: CommentCreate,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    result = store.dispatch(
        svc.comment, recognition_id, user_id, body.content,
        parent_id=body.parent_id, mentions=body.mentions,
    )
    _raise_for(result)
    return {"comment_id": result.id}


@router.patch("/{recognition_id}/comments/{comment_id}")
def edit_comment(
    recognition_id: str,
    comment_id: str,
    body: CommentUpdate,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    _raise_for(store.dispatch(svc.edit_comment, recognition_id, comment_id, user_id, body.content))
    return {"comment_id": comment_id}


@router.delete("/{recognition_id}/comments/{comment_id}")
def delete_comment(
    recognition_id: str,
    comment_id: str,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    _raise_for(store.dispatch(svc.remove_comment, recognition_id, comment_id, user_id))
    return {"message": "Comment deleted"}


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------
@router.post("/{recognition_id}/repost")
def repost(
    recognition_id: str,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    _raise_for(store.dispatch(svc.repost, recognition_id))
    return {"message": "Reposted"}


@router.post("/{recognition_id}/bookmark")
def bookmark(
    recognition_id: str,
    user_id: str = Depends(get_current_user_id),
    store: StateStore = Depends(get_store),
):
    _raise_for(store.dispatch(svc.bookmark, recognition_id))
    return {"message": "Bookmarked"}
