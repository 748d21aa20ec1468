from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import accounts
from ..utils.validation import check_email, check_password, check_required, raise_if_errors

router = APIRouter(prefix="/users", tags=["Users"])


class RegisterRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None


@router.get("")
def users_root():
    return {"msg": "Users route"}


@router.post("")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    errors: list[dict] = []
    check_required(errors, payload.name, "name", "Name is required")
    email = check_email(errors, payload.email)
    check_password(errors, payload.password)
    raise_if_errors(errors)

    token = accounts.register(db, name=payload.name, email=email, password=payload.password)
    return {"token": token}
