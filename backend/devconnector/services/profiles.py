"""
Profile merge engine.

Profiles are created or partially updated in one statement (INSERT ... ON CONFLICT
DO UPDATE) keyed on the unique `profiles.user_id`, so two concurrent requests for
the same user can never both insert, and fields absent from a request are never
cleared. Experience/education entries are separate child rows, so adding or
removing one is a single INSERT/DELETE rather than a rewrite of the profile.
"""
import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from ..models.profile import Education, Experience, Profile
from ..utils.error_handlers import ProfileNotFoundError

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("company", "website", "location", "bio", "status", "githubusername")
SOCIAL_FIELDS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


def parse_skills(skills: Any) -> list[str]:
    """'HTML, CSS,python ' -> ['HTML', 'CSS', 'python']"""
    if isinstance(skills, str):
        items = skills.split(",")
    else:
        items = list(skills or [])
    return [str(s).strip() for s in items if str(s).strip()]


def build_profile_fields(data: dict[str, Any]) -> dict[str, Any]:
    """
    Turn request input into the column values to write.

    Only keys that carry a value are included; the rest are left out entirely so an
    update never overwrites them with blanks. Social links are nested under `social`
    and only when at least one was supplied.
    """
    fields: dict[str, Any] = {}
    for key in PROFILE_FIELDS:
        value = data.get(key)
        if value:
            fields[key] = value.strip() if isinstance(value, str) else value

    if data.get("skills"):
        fields["skills"] = parse_skills(data["skills"])

    social = {key: data[key].strip() for key in SOCIAL_FIELDS if data.get(key)}
    if social:
        fields["social"] = social

    return fields


def _upsert_statement(db: Session, user_id: int, fields: dict[str, Any]):
    """Dialect-native single-statement upsert; None when the dialect has none."""
    table = Profile.__table__
    values = {"user_id": user_id, **fields}
    dialect = db.get_bind().dialect.name

    if dialect in ("sqlite", "postgresql"):
        insert = sqlite_insert if dialect == "sqlite" else pg_insert
        stmt = insert(table).values(**values)
        updates = {key: getattr(stmt.excluded, key) for key in fields}
        updates["updated_at"] = func.now()
        return stmt.on_conflict_do_update(index_elements=[table.c.user_id], set_=updates)

    if dialect in ("mysql", "mariadb"):
        stmt = mysql_insert(table).values(**values)
        updates = {key: stmt.inserted[key] for key in fields}
        updates["updated_at"] = func.now()
        return stmt.on_duplicate_key_update(updates)

    return None


def upsert_profile(db: Session, user_id: int, data: dict[str, Any]) -> Profile:
    fields = build_profile_fields(data)
    stmt = _upsert_statement(db, user_id, fields)
    try:
        if stmt is not None:
            db.execute(stmt)
        else:
            # No native upsert: lock the row (if any) for the rest of the transaction.
            profile = (
                db.query(Profile)
                .filter(Profile.user_id == user_id)
                .with_for_update()
                .first()
            )
            if profile:
                for key, value in fields.items():
                    setattr(profile, key, value)
            else:
                db.add(Profile(user_id=user_id, **fields))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Upserted profile for user %s (%s)", user_id, ", ".join(sorted(fields)) or "no fields")
    return get_profile(db, user_id)


def get_profile(db: Session, user_id: int) -> Profile:
    profile = db.query(Profile).filter(Profile.user_id == int(user_id)).first()
    if not profile:
        raise ProfileNotFoundError()
    return profile


def list_profiles(db: Session) -> list[Profile]:
    return db.query(Profile).order_by(Profile.id.asc()).all()


def _profile_id(db: Session, user_id: int) -> int:
    row = db.query(Profile.id).filter(Profile.user_id == int(user_id)).first()
    if not row:
        raise ProfileNotFoundError()
    return row[0]


def _add_item(db: Session, user_id: int, model, data: dict[str, Any]) -> Profile:  # noqa: ANN001
    profile_id = _profile_id(db, user_id)
    item = model(profile_id=profile_id, **data)
    try:
        db.add(item)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return get_profile(db, user_id)


def _remove_item(db: Session, user_id: int, model, item_id: int) -> Profile:  # noqa: ANN001
    profile_id = _profile_id(db, user_id)
    try:
        # Scoped to the caller's profile; an unknown id deletes nothing.
        deleted = (
            db.query(model)
            .filter(model.id == int(item_id), model.profile_id == profile_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    if not deleted:
        logger.debug("No %s %s on profile %s", model.__tablename__, item_id, profile_id)
    return get_profile(db, user_id)


def add_experience(db: Session, user_id: int, data: dict[str, Any]) -> Profile:
    return _add_item(db, user_id, Experience, data)


def remove_experience(db: Session, user_id: int, exp_id: int) -> Profile:
    return _remove_item(db, user_id, Experience, exp_id)


def add_education(db: Session, user_id: int, data: dict[str, Any]) -> Profile:
    return _add_item(db, user_id, Education, data)


def remove_education(db: Session, user_id: int, edu_id: int) -> Profile:
    return _remove_item(db, user_id, Education, edu_id)


def _date(value) -> str | None:  # noqa: ANN001
    return value.isoformat() if value else None


def experience_to_dict(exp: Experience) -> dict:
    return {
        "id": exp.id,
        "title": exp.title,
        "company": exp.company,
        "location": exp.location,
        "from": _date(exp.from_date),
        "to": _date(exp.to_date),
        "current": bool(exp.current),
        "description": exp.description,
    }


def education_to_dict(edu: Education) -> dict:
    return {
        "id": edu.id,
        "school": edu.school,
        "degree": edu.degree,
        "fieldofstudy": edu.fieldofstudy,
        "from": _date(edu.from_date),
        "to": _date(edu.to_date),
        "current": bool(edu.current),
        "description": edu.description,
    }


def profile_to_dict(profile: Profile) -> dict:
    user = profile.user
    payload = {
        "id": profile.id,
        # Live name/avatar of the owner, unlike the snapshots stored on posts.
        "user": {"id": user.id, "name": user.name, "avatar": user.avatar} if user else None,
        "company": profile.company,
        "website": profile.website,
        "location": profile.location,
        "status": profile.status,
        "bio": profile.bio,
        "githubusername": profile.githubusername,
        "skills": list(profile.skills or []),
        "experience": [experience_to_dict(e) for e in profile.experience],
        "education": [education_to_dict(e) for e in profile.education],
        "date": profile.created_at.isoformat() if profile.created_at else None,
    }
    if profile.social:
        payload["social"] = dict(profile.social)
    return payload
