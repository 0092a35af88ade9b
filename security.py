"""
Authentication and authorization.

Tokens are HS256 JWTs carrying ``sub`` (user id) and ``role``. Routers
depend on ``get_current_user`` for protected routes, ``get_optional_user``
where a guest is allowed, and ``require_roles(...)`` for role allow-lists.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Optional, Union

from bson import ObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pymongo.database import Database

from config import settings
from database import get_db, is_valid_id, serialize_doc
from exceptions import AccountInactive, Forbidden, Unauthorized, ValidationError
from logging_config import get_logger

logger = get_logger("security")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)
bearer_scheme = HTTPBearer(auto_error=False)


# ===== Roles =====
class AccessRole(str, Enum):
    ADMIN = "admin"
    USER = "user"
    ADVISOR = "advisor"


@dataclass(frozen=True)
class CustomRole:
    """Free-text title shown in the UI. Carries no privileges."""
    label: str


Role = Union[AccessRole, CustomRole]

OTHER_ROLE = "other"


def parse_role(value: Optional[str]) -> Role:
    normalized = str(value or "").strip().lower()
    try:
        return AccessRole(normalized)
    except ValueError:
        return CustomRole(str(value or "").strip())


def display_role(user: dict) -> Role:
    """The role a user is presented with: custom label first, access role otherwise"""
    label = (user.get("custom_role") or "").strip()
    if label:
        return CustomRole(label)
    return parse_role(user.get("role"))


def authorize(user: Optional[dict], allowed_roles: Iterable[str]) -> None:
    if not user:
        raise Unauthorized("Not authorized, please log in")
    allowed_roles = list(allowed_roles)
    allowed = {r for r in (parse_role(a) for a in allowed_roles) if isinstance(r, AccessRole)}
    role = parse_role(user.get("role"))
    if not isinstance(role, AccessRole) or role not in allowed:
        raise Forbidden(
            f'User role "{user.get("role")}" is not authorized to access this route. '
            f'Required roles: {", ".join(allowed_roles)}'
        )


# ===== Passwords =====
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # stored value is not a recognizable hash
        return False


# ===== Tokens =====
def create_access_token(user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: Optional[str]) -> dict:
    if not token or not token.strip():
        raise Unauthorized()
    # Offline-demo tokens come from the client fixtures; reject without a log record
    if token.startswith(settings.MOCK_TOKEN_PREFIX):
        raise Unauthorized()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.log_auth_event("token", False, reason="expired")
        raise Unauthorized()
    except JWTError:
        logger.log_auth_event("token", False, reason="invalid")
        raise Unauthorized()
    if not is_valid_id(payload.get("sub")):
        logger.log_auth_event("token", False, reason="missing subject")
        raise Unauthorized()
    return payload


def verify(token: Optional[str], db: Database) -> dict:
    """Resolve a bearer token to the stored user, password removed"""
    payload = decode_token(token)
    user = db["user"].find_one({"_id": ObjectId(payload["sub"])})
    if user is None:
        logger.log_auth_event("token", False, reason="user no longer exists")
        raise Unauthorized()
    if not user.get("is_active", True):
        logger.log_auth_event("token", False, reason="inactive")
        raise AccountInactive()
    return serialize_doc(user)


# ===== Dependencies =====
def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_db),
) -> dict:
    if credentials is None:
        raise Unauthorized("Not authorized, no token")
    user = verify(credentials.credentials, db)
    # read back by RequestLoggingMiddleware, which runs outside this context
    request.state.user_id = user["id"]
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_db),
) -> Optional[dict]:
    """Attach the caller if a valid token is present; continue as guest otherwise"""
    if credentials is None:
        return None
    try:
        return verify(credentials.credentials, db)
    except (Unauthorized, AccountInactive):
        return None


def require_roles(*roles: str):
    def role_checker(user: dict = Depends(get_current_user)) -> dict:
        authorize(user, roles)
        return user
    return role_checker


require_admin = require_roles(AccessRole.ADMIN.value)


def resolve_role(role: Optional[str], custom_role: Optional[str] = None) -> tuple:
    """
    Map a requested role to the stored (access role, custom label) pair.

    ``other`` becomes a plain ``user`` carrying the custom label; anything
    outside admin/user/advisor/other is rejected.
    """
    normalized = str(role or AccessRole.USER.value).strip().lower()
    if normalized == OTHER_ROLE:
        label = (custom_role or "").strip()
        if not label:
            raise ValidationError("Please specify the custom role", field="custom_role")
        return AccessRole.USER.value, label
    parsed = parse_role(normalized)
    if not isinstance(parsed, AccessRole):
        raise ValidationError("Invalid role. Allowed roles: user, admin, advisor, or other", field="role")
    return parsed.value, ""
