import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from email_validator import validate_email, EmailNotValidError
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from app.config import SECRET_KEY, ALGORITHM, PASSWORD_MAX_BYTES
from app.errors import Unauthenticated

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str):
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if isinstance(password, str):
        b = password.encode("utf-8")
        if len(b) > PASSWORD_MAX_BYTES:
            # make the failure explicit and consistent
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """Verify a plaintext password against a hash.

    If verification raises a ValueError (for example plain >72 bytes), return False
    to allow the caller to respond with an authentication failure instead of an error.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def dummy_verify():
    """Spend the same effort as a real verification when there is no user to check."""
    pwd_context.dummy_verify()


def create_token(data: dict, expires_delta: Optional[timedelta] = None):
    data = data.copy()
    if expires_delta is None:
        # read expiry at call-time so tests (and runtime overrides) that modify
        # app.config.ACCESS_TOKEN_EXPIRE_MINUTES take effect immediately
        import app.config as _cfg
        expires_delta = timedelta(minutes=_cfg.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(UTC) + expires_delta
    data.update({"exp": int(expire.timestamp())})  # JWT spec uses Unix timestamp
    return jwt.encode(data, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> str:
    """Verify signature and expiry and return the subject claim."""
    try:
        # jwt.decode validates exp automatically
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except JWTError:
        raise Unauthenticated("Invalid token")
    subject = payload.get("sub")
    if not subject:
        raise Unauthenticated("Invalid token: missing user")
    return subject


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer ...`` header value."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return None


def normalize_email(value: str) -> str:
    """Return the address in the form ``EmailStr`` stores at signup.

    Values that are not valid addresses are returned unchanged; they simply
    won't match anyone.
    """
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        return value
