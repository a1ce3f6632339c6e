# wealth_api/api/routes/user_routes.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from wealth_api.api.deps import get_current_user
from wealth_api.core.security import create_access_token, hash_password, verify_password
from wealth_api.db.session import get_db
from wealth_api.models.financial import User
from wealth_api.schemas.user_schema import (
    AuthResponse,
    UserLogin,
    UserProfile,
    UserRegister,
    UserUpdate,
)

router = APIRouter(prefix="/api/users", tags=["Users"])
logger = logging.getLogger(__name__)


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        token=create_access_token(user.id),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(data: UserRegister, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(name=data.name, email=data.email, hashed_password=hash_password(data.password))
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="User already exists")

    db.refresh(user)
    logger.info("Registered new user %s", user.id)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login_user(data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _auth_response(user)


@router.get("/profile", response_model=UserProfile)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserProfile)
def update_profile(
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if data.email and data.email != current_user.email:
        existing = db.query(User).filter(User.email == data.email).first()
        if existing and existing.id != current_user.id:
            raise HTTPException(status_code=400, detail="Email already in use")
        current_user.email = data.email

    if data.name:
        current_user.name = data.name
    if data.password:
        current_user.hashed_password = hash_password(data.password)

    db.commit()
    db.refresh(current_user)
    return current_user


@router.delete("/profile")
def delete_user(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user_id = current_user.id
    # Records go with the user via the relationship cascade
    db.delete(current_user)
    db.commit()
    logger.info("Deleted user %s", user_id)
    return {"message": "User removed"}
