from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import Unauthenticated
from app.models.user import User
from app.utils.auth import decode_token, extract_bearer


def get_current_user(authorization: Optional[str] = Header(None), db: Session = Depends(get_db)) -> User:
    """Resolve the bearer token to the user making the request."""
    token = extract_bearer(authorization)
    if not token:
        raise Unauthenticated("Missing token")
    email = decode_token(token)
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise Unauthenticated("User not found")
    return user
