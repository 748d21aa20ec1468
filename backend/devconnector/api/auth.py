from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import accounts
from ..utils.dependencies import current_user_id
from ..utils.validation import check_email, check_required, raise_if_errors

router = APIRouter(prefix="/auth", tags=["Auth"])


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


@router.get("")
def me(db: Session = Depends(get_db), user_id: int = Depends(current_user_id)):
    return accounts.public_user(accounts.get_user(db, user_id))


@router.post("")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    errors: list[dict] = []
    email = check_email(errors, payload.email)
    check_required(errors, payload.password, "password", "Password is required")
    raise_if_errors(errors)

    token = accounts.authenticate(db, email=email, password=payload.password)
    return {"token": token}
