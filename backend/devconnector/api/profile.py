from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..services import accounts, github, profiles
from ..utils.dependencies import current_user_id
from ..utils.error_handlers import ProfileNotFoundError
from ..utils.validation import check_required, parse_int_id, raise_if_errors

router = APIRouter(prefix="/profile", tags=["Profile"])


class ProfileRequest(BaseModel):
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str | None = None
    githubusername: str | None = None
    skills: str | list[str] | None = None  # "HTML, CSS, Python"
    youtube: str | None = None
    twitter: str | None = None
    facebook: str | None = None
    linkedin: str | None = None
    instagram: str | None = None


class ExperienceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    company: str | None = None
    location: str | None = None
    from_date: date | None = Field(default=None, alias="from")
    to_date: date | None = Field(default=None, alias="to")
    current: bool = False
    description: str | None = None


class EducationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    school: str | None = None
    degree: str | None = None
    fieldofstudy: str | None = None
    from_date: date | None = Field(default=None, alias="from")
    to_date: date | None = Field(default=None, alias="to")
    current: bool = False
    description: str | None = None


@router.get("")
def list_profiles(db: Session = Depends(get_db)):
    return [profiles.profile_to_dict(p) for p in profiles.list_profiles(db)]


@router.get("/me")
def my_profile(db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    return profiles.profile_to_dict(profiles.get_profile(db, user_id))


@router.get("/user/{user_id}")
def profile_by_user(user_id: str, db: Session = Depends(get_db)):
    parsed = parse_int_id(user_id)
    if parsed is None:
        raise ProfileNotFoundError("Profile not found")
    return profiles.profile_to_dict(profiles.get_profile(db, parsed))


@router.post("")
def upsert_profile(
    payload: ProfileRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(current_user_id),
):
    errors: list[dict] = []
    check_required(errors, payload.status, "status", "Status is required")
    # ",,," parses to no skills at all.
    check_required(errors, profiles.parse_skills(payload.skills) or None, "skills", "Skills is required")
    raise_if_errors(errors)

    profile = profiles.upsert_profile(db, user_id, payload.model_dump())
    return profiles.profile_to_dict(profile)


@router.delete("")
def delete_profile(db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    accounts.delete_account(db, user_id)
    return {"msg": "User deleted"}


@router.put("/experience")
def add_experience(
    payload: ExperienceRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(current_user_id),
):
    errors: list[dict] = []
    check_required(errors, payload.title, "title", "Title is required")
    check_required(errors, payload.company, "company", "Company is required")
    check_required(errors, payload.from_date, "from", "From date is required")
    raise_if_errors(errors)

    profile = profiles.add_experience(db, user_id, payload.model_dump())
    return profiles.profile_to_dict(profile)


@router.delete("/experience/{exp_id}")
def remove_experience(exp_id: str, db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    parsed = parse_int_id(exp_id)
    if parsed is None:
        # Nothing can match; still answer with the caller's profile.
        return profiles.profile_to_dict(profiles.get_profile(db, user_id))
    return profiles.profile_to_dict(profiles.remove_experience(db, user_id, parsed))


@router.put("/education")
def add_education(
    payload: EducationRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(current_user_id),
):
    errors: list[dict] = []
    check_required(errors, payload.school, "school", "School is required")
    check_required(errors, payload.degree, "degree", "Degree is required")
    check_required(errors, payload.fieldofstudy, "fieldofstudy", "Field of study is required")
    check_required(errors, payload.from_date, "from", "From date is required")
    raise_if_errors(errors)

    profile = profiles.add_education(db, user_id, payload.model_dump())
    return profiles.profile_to_dict(profile)


@router.delete("/education/{edu_id}")
def remove_education(edu_id: str, db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    parsed = parse_int_id(edu_id)
    if parsed is None:
        return profiles.profile_to_dict(profiles.get_profile(db, user_id))
    return profiles.profile_to_dict(profiles.remove_education(db, user_id, parsed))


@router.get("/github/{username}")
async def github_repos(username: str):
    return await github.fetch_github_repos(
        username,
        base_url=config.GITHUB_API_BASE_URL,
        client_id=config.GITHUB_CLIENT_ID,
        client_secret=config.GITHUB_CLIENT_SECRET,
        timeout_s=config.GITHUB_TIMEOUT_S,
    )
