from datetime import date

import pytest

from backend.devconnector.models.user import User
from backend.devconnector.services import profiles
from backend.devconnector.utils.error_handlers import ProfileNotFoundError


def _user(db_session, email: str = "p@x.com") -> User:
    user = User(name="Pat", email=email, password="hashed", avatar="https://example.com/a.png")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def test_build_profile_fields_only_keeps_supplied_values():
    fields = profiles.build_profile_fields(
        {"company": "Acme", "website": "", "bio": None, "status": "Developer", "skills": " HTML, CSS ,,python "}
    )
    assert fields == {"company": "Acme", "status": "Developer", "skills": ["HTML", "CSS", "python"]}


def test_build_profile_fields_nests_social_only_when_present():
    assert "social" not in profiles.build_profile_fields({"status": "Dev", "twitter": ""})
    fields = profiles.build_profile_fields({"twitter": "https://twitter.com/pat", "youtube": "https://yt/pat"})
    assert fields["social"] == {"twitter": "https://twitter.com/pat", "youtube": "https://yt/pat"}


def test_upsert_creates_then_merges(db_session):
    user = _user(db_session)

    first = profiles.upsert_profile(
        db_session, user.id, {"status": "Developer", "skills": "python", "company": "Acme"}
    )
    assert first.company == "Acme"

    second = profiles.upsert_profile(
        db_session, user.id, {"location": "Berlin", "skills": "python, sql", "twitter": "https://t/pat"}
    )
    assert second.id == first.id
    # Union of both calls; nothing from the first call was cleared.
    assert second.company == "Acme"
    assert second.status == "Developer"
    assert second.location == "Berlin"
    assert second.skills == ["python", "sql"]
    assert second.social == {"twitter": "https://t/pat"}


def test_upsert_without_social_keeps_existing_social(db_session):
    user = _user(db_session)
    profiles.upsert_profile(db_session, user.id, {"status": "Dev", "skills": "go", "linkedin": "https://li/pat"})
    updated = profiles.upsert_profile(db_session, user.id, {"bio": "hello"})
    assert updated.social == {"linkedin": "https://li/pat"}
    assert updated.bio == "hello"


def test_one_profile_per_user(db_session):
    from backend.devconnector.models.profile import Profile

    user = _user(db_session)
    for status in ("a", "b", "c"):
        profiles.upsert_profile(db_session, user.id, {"status": status, "skills": "x"})
    rows = db_session.query(Profile).filter(Profile.user_id == user.id).all()
    assert len(rows) == 1
    assert rows[0].status == "c"


def test_get_profile_missing_raises(db_session):
    user = _user(db_session)
    with pytest.raises(ProfileNotFoundError):
        profiles.get_profile(db_session, user.id)


def test_add_experience_requires_profile(db_session):
    user = _user(db_session)
    with pytest.raises(ProfileNotFoundError):
        profiles.add_experience(
            db_session, user.id, {"title": "Dev", "company": "Acme", "from_date": date(2020, 1, 1)}
        )


def test_experience_is_newest_first_and_removal_by_id(db_session):
    user = _user(db_session)
    profiles.upsert_profile(db_session, user.id, {"status": "Dev", "skills": "x"})

    profiles.add_experience(db_session, user.id, {"title": "Junior", "company": "A", "from_date": date(2018, 1, 1)})
    profile = profiles.add_experience(
        db_session, user.id, {"title": "Senior", "company": "B", "from_date": date(2021, 1, 1), "current": True}
    )
    assert [e.title for e in profile.experience] == ["Senior", "Junior"]

    junior_id = profile.experience[1].id
    profile = profiles.remove_experience(db_session, user.id, junior_id)
    assert [e.title for e in profile.experience] == ["Senior"]

    # Unknown id is a no-op.
    profile = profiles.remove_experience(db_session, user.id, 999999)
    assert [e.title for e in profile.experience] == ["Senior"]


def test_cannot_remove_another_users_education(db_session):
    owner = _user(db_session, "owner@x.com")
    other = _user(db_session, "other@x.com")
    profiles.upsert_profile(db_session, owner.id, {"status": "Dev", "skills": "x"})
    profiles.upsert_profile(db_session, other.id, {"status": "Dev", "skills": "x"})

    profile = profiles.add_education(
        db_session,
        owner.id,
        {"school": "MIT", "degree": "BSc", "fieldofstudy": "CS", "from_date": date(2010, 9, 1)},
    )
    edu_id = profile.education[0].id

    profiles.remove_education(db_session, other.id, edu_id)
    assert [e.id for e in profiles.get_profile(db_session, owner.id).education] == [edu_id]


def test_profile_to_dict_shape(db_session):
    user = _user(db_session)
    profile = profiles.upsert_profile(db_session, user.id, {"status": "Dev", "skills": "a, b"})
    profile = profiles.add_experience(
        db_session, user.id, {"title": "Dev", "company": "Acme", "from_date": date(2020, 5, 1)}
    )
    data = profiles.profile_to_dict(profile)
    assert data["user"] == {"id": user.id, "name": "Pat", "avatar": "https://example.com/a.png"}
    assert data["skills"] == ["a", "b"]
    assert "social" not in data
    assert data["experience"][0]["from"] == "2020-05-01"
    assert data["experience"][0]["to"] is None
    assert data["experience"][0]["current"] is False
