# backend/windowquote/api/auth.py

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import get_db
from ..models import AdminUser
from ..schemas.user import AdminUserResponse, Token
from ..utils.auth import normalize_email, verify_password
from ..utils.errors import AuthorizationError, error_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

ACCESS_COOKIE_NAME = "access_token"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_admin_by_email(db: Session, email: str) -> Optional[AdminUser]:
    return db.query(AdminUser).filter(AdminUser.email == normalize_email(email)).first()


def get_current_admin(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> AdminUser:
    """Gate for admin-only routes: resolve the signed-in admin or raise 401.

    Accepts a bearer token or the ``access_token`` cookie set at login.
    """
    jwt_token = token or request.cookies.get(ACCESS_COOKIE_NAME)
    if not jwt_token:
        raise AuthorizationError("Not authenticated")
    try:
        payload = jwt.decode(jwt_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthorizationError("Not authenticated")
    email = payload.get("sub")
    if not email:
        raise AuthorizationError("Not authenticated")
    admin = get_admin_by_email(db, email)
    if admin is None or not admin.is_active:
        raise AuthorizationError("Not authenticated")
    return admin


def _set_access_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


@router.post("/login", response_model=Token)
def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    admin = get_admin_by_email(db, form_data.username)
    if admin is None or not admin.is_active or not verify_password(form_data.password, admin.password):
        logger.warning("Failed admin login for %s", form_data.username)
        raise error_response(
            "Incorrect email or password",
            code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = create_access_token({"sub": admin.email})
    _set_access_cookie(response, token)
    logger.info("Admin %s logged in", admin.email)
    return Token(access_token=token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    response.delete_cookie(ACCESS_COOKIE_NAME, path="/")


@router.get("/me", response_model=AdminUserResponse)
def read_current_admin(current_admin: AdminUser = Depends(get_current_admin)):
    return current_admin
