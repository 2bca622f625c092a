from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.schemas.user import UserCreate, UserOut, LoginRequest, TokenOut
from app.services import auth as auth_service
from app.database import get_db

router = APIRouter(tags=["auth"])

@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(user: UserCreate, db: Session = Depends(get_db)):
    return auth_service.signup(db, user.name, user.email, user.password)

@router.post("/login", response_model=TokenOut)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, credentials.username, credentials.password)
    return {"access_token": token, "token_type": "bearer", "user": user}
