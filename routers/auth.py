import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import func
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import SessionData, get_current_session
from models.users import User as UserModel
from schemas.users import LoginRequest, LoginResponse, SessionInfo
from utils.exceptions import AuthError
from utils.security import create_session_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# ✅ [LOGIN] email + password -> session token (also set as cookie)
@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(UserModel).filter(func.lower(UserModel.email) == request.email.strip().lower()).first()
    if user is None or not verify_password(request.password, user.password_hash):
        logger.info(f"Failed login for {request.email}")
        raise AuthError("Invalid email or password")

    token = create_session_token({"sub": str(user.id), "role": user.role, "name": user.name, "email": user.email})
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        secure=settings.ENV == "prod",
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
    )
    return LoginResponse(
        token=token,
        user=SessionInfo(user_id=user.id, name=user.name, email=user.email, role=user.role),
    )


# ✅ [LOGOUT] drop the cookie
@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True}


# ✅ [SESSION] who am I
@router.get("/session", response_model=SessionInfo)
def read_session(session: SessionData = Depends(get_current_session)):
    return SessionInfo(**session)
