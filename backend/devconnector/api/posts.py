from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import posts
from ..utils.dependencies import current_user_id
from ..utils.validation import check_required, raise_if_errors

router = APIRouter(prefix="/posts", tags=["Posts"])


class TextRequest(BaseModel):
    text: str | None = None


def _require_text(payload: TextRequest) -> str:
    errors: list[dict] = []
    check_required(errors, payload.text, "text", "Text is required")
    raise_if_errors(errors)
    return payload.text.strip()


@router.post("")
def create_post(payload: TextRequest, db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    text = _require_text(payload)
    return posts.post_to_dict(posts.create_post(db, user_id, text))


@router.get("")
def list_posts(db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    return [posts.post_to_dict(p) for p in posts.list_posts(db)]


@router.get("/{post_id}")
def get_post(post_id: int, db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    return posts.post_to_dict(posts.get_post(db, post_id))


@router.delete("/{post_id}")
def delete_post(post_id: int, db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    posts.delete_post(db, user_id, post_id)
    return {"msg": "Post removed"}


@router.put("/like/{post_id}")
def like_post(post_id: int, db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    return posts.post_to_dict(posts.like_post(db, user_id, post_id))


@router.put("/unlike/{post_id}")
def unlike_post(post_id: int, db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    return posts.post_to_dict(posts.unlike_post(db, user_id, post_id))


@router.put("/comment/{post_id}")
def add_comment(
    post_id: int,
    payload: TextRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(current_user_id),
):
    text = _require_text(payload)
    return posts.post_to_dict(posts.add_comment(db, user_id, post_id, text))


@router.delete("/comment/{post_id}/{comment_id}")
def delete_comment(
    post_id: int,
    comment_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(current_user_id),
):
    return posts.post_to_dict(posts.delete_comment(db, user_id, post_id, comment_id))
