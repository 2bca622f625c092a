import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import Conflict, InvalidRequest, Unauthenticated
from app.models.user import User
from app.utils.auth import hash_password, verify_password, create_token, dummy_verify, normalize_email

logger = logging.getLogger(__name__)

BAD_CREDENTIALS = "Incorrect email or password"


def signup(db: Session, name: str, email: str, password: str) -> User:
    email = normalize_email(email)
    exists = db.query(User).filter(User.email == email).first()
    if exists:
        raise Conflict("Email already registered")

    try:
        hashed = hash_password(password)
    except ValueError as e:
        # map hashing/validation errors to a 400 so client gets a clear message
        raise InvalidRequest(str(e))

    user = User(name=name, email=email, password_hash=hashed)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    db.refresh(user)
    logger.info("user %s signed up", user.id)
    return user


def login(db: Session, email: str, password: str):
    """Check the credentials and return ``(token, user)``.

    Unknown emails and wrong passwords fail the same way.
    """
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        dummy_verify()
        logger.warning("failed login attempt")
        raise Unauthenticated(BAD_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        logger.warning("failed login attempt")
        raise Unauthenticated(BAD_CREDENTIALS)

    token = create_token({"sub": user.email})
    return token, user
