from collections.abc import Generator
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from db import SessionLocal
from models import Identity


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Identity:
    # identity is verified upstream and forwarded as headers
    if not x_user_email or not x_user_role:
        raise HTTPException(status_code=401, detail="unauthorized")
    if x_user_role not in ("hr", "employee"):
        raise HTTPException(status_code=403, detail="unknown role")
    return Identity(id=x_user_id or x_user_email, email=x_user_email, role=x_user_role)  # type: ignore


def require_hr(user: Identity = Depends(get_current_user)) -> Identity:
    if user.role != "hr":
        raise HTTPException(status_code=403, detail="hr only")
    return user


def require_employee(user: Identity = Depends(get_current_user)) -> Identity:
    if user.role != "employee":
        raise HTTPException(status_code=403, detail="employee only")
    return user
