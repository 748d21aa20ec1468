"""
Posts, likes and comments, with the ownership rules for mutating them.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.post import Post, PostComment, PostLike
from ..utils.error_handlers import (
    AlreadyLikedError,
    ForbiddenError,
    NotFoundError,
    NotLikedError,
    get_error_message,
)
from .accounts import get_user

logger = logging.getLogger(__name__)


def create_post(db: Session, user_id: int, text: str) -> Post:
    author = get_user(db, user_id)
    post = Post(user_id=author.id, text=text, name=author.name, avatar=author.avatar)
    try:
        db.add(post)
        db.commit()
        db.refresh(post)
    except Exception:
        db.rollback()
        raise
    return post


def list_posts(db: Session) -> list[Post]:
    return db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).all()


def get_post(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == int(post_id)).first()
    if not post:
        raise NotFoundError(get_error_message("post_not_found"))
    return post


def delete_post(db: Session, user_id: int, post_id: int) -> None:
    post = get_post(db, post_id)
    if post.user_id != int(user_id):
        logger.warning("User %s tried to delete post %s owned by %s", user_id, post.id, post.user_id)
        raise ForbiddenError(get_error_message("not_post_owner"))
    try:
        db.delete(post)
        db.commit()
    except Exception:
        db.rollback()
        raise


def like_post(db: Session, user_id: int, post_id: int) -> Post:
    post = get_post(db, post_id)
    try:
        db.add(PostLike(post_id=post.id, user_id=int(user_id)))
        db.commit()
    except IntegrityError:
        db.rollback()
        # uq_post_likes_post_user: this user already likes the post.
        exists = (
            db.query(PostLike.id)
            .filter(PostLike.post_id == post.id, PostLike.user_id == int(user_id))
            .first()
        )
        if exists:
            raise AlreadyLikedError()
        raise
    db.refresh(post)
    return post


def unlike_post(db: Session, user_id: int, post_id: int) -> Post:
    post = get_post(db, post_id)
    try:
        deleted = (
            db.query(PostLike)
            .filter(PostLike.post_id == post.id, PostLike.user_id == int(user_id))
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    if not deleted:
        raise NotLikedError()
    db.refresh(post)
    return post


def add_comment(db: Session, user_id: int, post_id: int, text: str) -> Post:
    post = get_post(db, post_id)
    author = get_user(db, user_id)
    comment = PostComment(
        post_id=post.id,
        user_id=author.id,
        text=text,
        name=author.name,
        avatar=author.avatar,
    )
    try:
        db.add(comment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(post)
    return post


def delete_comment(db: Session, user_id: int, post_id: int, comment_id: int) -> Post:
    post = get_post(db, post_id)
    comment = (
        db.query(PostComment)
        .filter(PostComment.id == int(comment_id), PostComment.post_id == post.id)
        .first()
    )
    if not comment:
        raise NotFoundError(get_error_message("comment_not_found"))
    if comment.user_id != int(user_id):
        logger.warning("User %s tried to delete comment %s owned by %s", user_id, comment.id, comment.user_id)
        raise ForbiddenError(get_error_message("not_comment_owner"))

    try:
        deleted = (
            db.query(PostComment)
            .filter(
                PostComment.id == comment.id,
                PostComment.post_id == post.id,
                PostComment.user_id == int(user_id),
            )
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    if not deleted:
        # Removed by a concurrent request between the lookup and the delete.
        raise NotFoundError(get_error_message("comment_not_found"))
    db.refresh(post)
    return post


def like_to_dict(like: PostLike) -> dict:
    return {"id": like.id, "user": like.user_id}


def comment_to_dict(comment: PostComment) -> dict:
    return {
        "id": comment.id,
        "user": comment.user_id,
        "text": comment.text,
        "name": comment.name,
        "avatar": comment.avatar,
        "date": comment.created_at.isoformat() if comment.created_at else None,
    }


def post_to_dict(post: Post) -> dict:
    return {
        "id": post.id,
        "user": post.user_id,
        "text": post.text,
        "name": post.name,
        "avatar": post.avatar,
        "likes": [like_to_dict(like) for like in post.likes],
        "comments": [comment_to_dict(c) for c in post.comments],
        "date": post.created_at.isoformat() if post.created_at else None,
    }
