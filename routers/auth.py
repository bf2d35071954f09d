import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from authx import AuthX, AuthXConfig, TokenPayload
from core.config import settings
from core.database import SessionLocal, get_db
from schemas.auth import LoginIn, RegisterIn, TokenOut, UserOut
from repositories.refresh_token_repo import RefreshTokenRepository
from services.auth_services import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/account", tags=["account"])

_cookie_samesite = settings.JWT_COOKIE_SAMESITE.lower() if settings.JWT_COOKIE_SAMESITE else None
_cookie_domain = settings.JWT_COOKIE_DOMAIN or None

config = AuthXConfig(
    JWT_SECRET_KEY=settings.SECRET_KEY,
    JWT_ALGORITHM=settings.JWT_ALG,
    JWT_ACCESS_TOKEN_EXPIRES=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    JWT_REFRESH_TOKEN_EXPIRES=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    JWT_TOKEN_LOCATION=settings.token_locations,
    JWT_ACCESS_COOKIE_NAME=settings.JWT_ACCESS_COOKIE_NAME,
    JWT_REFRESH_COOKIE_NAME=settings.JWT_REFRESH_COOKIE_NAME,
    JWT_COOKIE_SAMESITE=_cookie_samesite or "lax",
    JWT_COOKIE_SECURE=settings.JWT_COOKIE_SECURE,
    JWT_COOKIE_DOMAIN=_cookie_domain,
    JWT_COOKIE_CSRF_PROTECT=settings.JWT_COOKIE_CSRF_PROTECT,
)

security = AuthX(config=config)


def _decode_token(token: str) -> TokenPayload:
    return TokenPayload.decode(
        token=token,
        key=security.config.public_key,
        algorithms=[security.config.JWT_ALGORITHM],
    )


def _exp_to_datetime(exp_value: float | int | datetime) -> datetime:
    if isinstance(exp_value, datetime):
        return exp_value if exp_value.tzinfo else exp_value.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(exp_value, tz=timezone.utc)


def _ensure_refresh_metadata(payload: TokenPayload) -> tuple[str, datetime]:
    if payload.jti is None:
        raise ValueError("Refresh token does not contain jti")
    if payload.exp is None:
        raise ValueError("Refresh token missing expiry")
    expiry = _exp_to_datetime(payload.exp)
    return payload.jti, expiry


def _is_token_revoked(token: str, **_: Any) -> bool:
    try:
        payload = _decode_token(token)
    except Exception:
        return True

    if payload.type != "refresh" or payload.jti is None:
        return False

    db = SessionLocal()
    try:
        return RefreshTokenRepository(db).is_revoked(payload.jti)
    finally:
        db.close()


security.set_token_blocklist(_is_token_revoked)


def current_user_id(payload: TokenPayload = Depends(security.access_token_required)) -> int:
    try:
        return int(payload.sub)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid subject in token") from exc


def _issue_tokens(response: Response, db: Session, user_id: int, *, rotate_from: str | None = None) -> TokenOut:
    access_token = security.create_access_token(uid=str(user_id))
    refresh_token = security.create_refresh_token(uid=str(user_id))

    jti, expires_at = _ensure_refresh_metadata(_decode_token(refresh_token))
    repo = RefreshTokenRepository(db)
    if rotate_from is None:
        repo.replace_for_user(user_id=user_id, jti=jti, expires_at=expires_at)
    else:
        repo.revoke(rotate_from)
        repo.add(user_id=user_id, jti=jti, expires_at=expires_at)

    security.set_access_cookies(access_token, response)
    security.set_refresh_cookies(refresh_token, response)
    return TokenOut(access_token=access_token, refresh_token=refresh_token)


@router.post("/register", response_model=UserOut, status_code=201)
async def post_reg(data: RegisterIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    user = svc.register(name=data.name, password=data.password)
    return UserOut.model_validate(user, from_attributes=True)


@router.post("/login", response_model=TokenOut)
async def post_login(response: Response, data: LoginIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    user = svc.login(name=data.name, password=data.password)
    logger.info("User %s logged in", user.id)
    return _issue_tokens(response, db, user.id)


@router.get("/currentuser", response_model=UserOut)
async def me(user_id: int = Depends(current_user_id), db: Session = Depends(get_db)):
    user = AuthService(db).get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User no longer exists")
    return UserOut.model_validate(user, from_attributes=True)


@router.post("/logout")
async def logout(
    response: Response,
    payload: TokenPayload = Depends(security.refresh_token_required),
    db: Session = Depends(get_db),
):
    if payload.jti:
        RefreshTokenRepository(db).revoke(payload.jti)
    security.unset_cookies(response)
    return {"ok": True}


@router.post("/refresh", response_model=TokenOut)
async def refresh(
    response: Response,
    payload: TokenPayload = Depends(security.refresh_token_required),
    db: Session = Depends(get_db),
):
    try:
        user_id = int(payload.sub)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid subject in token") from exc

    if payload.jti is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token missing identifier")

    try:
        RefreshTokenRepository(db).assert_active(jti=payload.jti, user_id=user_id)
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    return _issue_tokens(response, db, user_id, rotate_from=payload.jti)
