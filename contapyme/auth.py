import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, Response
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from contapyme import config
from contapyme.database import get_db
from contapyme.exceptions import AuthenticationError, ConflictError
from contapyme.models.audit_mixin import now_santiago
from contapyme.models.users import User
from contapyme.schemas.auth import LoginRequest, PLAN_LIMITS, RegisterRequest
from contapyme.utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

ACCESS_COOKIE = "sb-access-token"
USER_ID_COOKIE = "sb-user-id"
REDIRECT_COOKIE = "auth_redirect_pending"

bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return bcrypt_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt_context.verify(password, hashed_password)


def create_access_token(user: User, expires_in: int = config.SESSION_MAX_AGE) -> str:
    expire = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iss": config.JWT_ISSUER,
        "exp": expire,
    }
    return jwt.encode(claims, config.SUPABASE_JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(
            token,
            config.SUPABASE_JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            issuer=config.JWT_ISSUER,
        )
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        return None


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.full_name,
        "role": user.role,
        "plan": user.subscription_plan,
        "status": user.subscription_status,
        "max_companies": user.max_companies,
    }


def get_session(request: Request, db: Session = Depends(get_db)) -> Optional[Dict[str, Any]]:
    """
    Resolve the caller's session from the ``sb-access-token`` cookie.

    Returns None when the cookie is absent, the token does not verify, or the
    user behind it no longer exists or is inactive.
    """
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None

    user = db.query(User).filter(User.id == user_id, User.is_active == True).first()
    if user is None:
        return None

    return {
        "access_token": token,
        "expires_at": payload.get("exp"),
        "user": user,
    }


def get_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    session = get_session(request, db)
    return session["user"] if session else None


def require_user(user: Optional[User] = Depends(get_user)) -> User:
    """Dependency for handlers that only answer authenticated callers."""
    if user is None:
        raise AuthenticationError("No autorizado")
    return user


def _set_session_cookies(response: Response, user: User, token: str):
    response.set_cookie(
        ACCESS_COOKIE, token,
        httponly=True, secure=config.COOKIE_SECURE, samesite="lax",
        max_age=config.SESSION_MAX_AGE, path="/",
    )
    # Readable from the browser so the UI knows who is logged in
    response.set_cookie(
        USER_ID_COOKIE, str(user.id),
        httponly=False, secure=config.COOKIE_SECURE, samesite="lax",
        max_age=config.SESSION_MAX_AGE, path="/",
    )


def _clear_session_cookies(response: Response):
    response.delete_cookie(ACCESS_COOKIE, path="/")
    response.delete_cookie(USER_ID_COOKIE, path="/")


def set_pending_redirect(response: Response, url: str):
    response.set_cookie(
        REDIRECT_COOKIE, url,
        httponly=True, secure=config.COOKIE_SECURE, samesite="lax", path="/",
    )


def consume_pending_redirect(request: Request, response: Response) -> Optional[str]:
    """Return the pending redirect target, if any, and clear it so it fires once."""
    pending = request.cookies.get(REDIRECT_COOKIE)
    if pending:
        response.delete_cookie(REDIRECT_COOKIE, path="/")
    return pending or None


@router.post("/register")
def register_user(user: RegisterRequest, db: Session = Depends(get_db)):
    email = user.email.strip().lower()
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        raise ConflictError("El email ya está registrado")

    limits = PLAN_LIMITS[user.selectedPlan]
    new_user = User(
        email=email,
        full_name=user.name.strip(),
        hashed_password=hash_password(user.password),
        role="CLIENT",
        subscription_plan=user.selectedPlan,
        subscription_status="trial",
        max_companies=limits["companies"],
        trial_ends_at=now_santiago() + timedelta(days=limits["trial_days"]),
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info("Registered user %s on plan %s", new_user.email, new_user.subscription_plan)

    return ok(
        user={"id": new_user.id, "email": new_user.email, "plan": new_user.subscription_plan},
        message="Usuario registrado exitosamente",
    )


@router.post("/login")
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email.strip().lower()).first()
    if user is None or not verify_password(credentials.password, user.hashed_password):
        raise AuthenticationError("Credenciales inválidas")
    if not user.is_active:
        raise AuthenticationError("Usuario inactivo")

    token = create_access_token(user)
    _set_session_cookies(response, user, token)
    set_pending_redirect(response, "/")
    logger.info("User %s logged in", user.email)

    return ok(user=serialize_user(user), redirect="/")


@router.get("/session")
def read_session(request: Request, response: Response, db: Session = Depends(get_db)):
    session = get_session(request, db)
    if session is None:
        if request.cookies.get(ACCESS_COOKIE):
            # Stale or forged token: drop it
            _clear_session_cookies(response)
        return {"user": None, "session": None}

    return {
        "user": serialize_user(session["user"]),
        "session": {
            "access_token": session["access_token"],
            "expires_at": session["expires_at"],
        },
    }


@router.delete("/session")
def logout(response: Response):
    _clear_session_cookies(response)
    response.delete_cookie(REDIRECT_COOKIE, path="/")
    return ok()


@router.post("/redirect/ready")
def redirect_ready(request: Request, response: Response):
    """
    Readiness signal sent by the client once its page is interactive.

    Answers with the pending redirect target (consuming it) or null.
    """
    return {"redirect": consume_pending_redirect(request, response)}
