from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer, SecurityScopes
from fastapi import Depends, HTTPException, status, Security
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from tastebuddy.core.config import settings
from tastebuddy.core.error_codes import ADMIN_PRIVILEGE_REQUIRED, UNAUTHORIZED_ERROR
from tastebuddy.core.exceptions import CustomHTTPException
from tastebuddy.models.user import User
from tastebuddy.db.database import get_db

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

OAUTH2_SCOPES = {
    "user": "Regular user access",
    "admin": "Admin privileges"
}

# OAuth2 scheme with scopes
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    scopes=OAUTH2_SCOPES
)

# Same scheme for endpoints that also serve anonymous callers
optional_oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    scopes=OAUTH2_SCOPES,
    auto_error=False
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(
    user_id: str,
    scopes: Optional[list[str]] = None,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    payload = {
        "sub": str(user_id),
        "exp": int(expire.timestamp()),
        "iat": int(now.timestamp()),
        "type": "access",
        "scopes": scopes or ["user"],
    }

    if additional_claims:
        payload.update(additional_claims)

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def scopes_for(user: User) -> list[str]:
    return ["user", "admin"] if user.is_admin else ["user"]


def verify_token(token: str, expected_type: Optional[str] = None) -> dict:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
        if expected_type and payload.get("type") != expected_type:
            raise JWTError("Invalid token type")
        return payload
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def _load_user(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    return result.scalars().first()


def _unknown_user(authenticate_value: str = "Bearer") -> CustomHTTPException:
    # Token is valid but its user no longer exists
    return CustomHTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        error_code=UNAUTHORIZED_ERROR,
        headers={"WWW-Authenticate": authenticate_value},
    )


async def get_current_user(
    security_scopes: SecurityScopes,
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    if security_scopes.scopes:
        authenticate_value = f'Bearer scope="{security_scopes.scope_str}"'
    else:
        authenticate_value = "Bearer"

    payload = verify_token(token, expected_type="access")
    user = await _load_user(db, payload["sub"])
    if not user:
        raise _unknown_user(authenticate_value)

    token_scopes = payload.get("scopes", [])
    for scope in security_scopes.scopes:
        if scope not in token_scopes:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
                headers={"WWW-Authenticate": authenticate_value},
            )

    return user


async def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Resolve the caller when a token is sent; anonymous callers get None"""
    if not token:
        return None
    payload = verify_token(token, expected_type="access")
    user = await _load_user(db, payload["sub"])
    if not user:
        raise _unknown_user()
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    return user


async def get_current_active_user(
    current_user: User = Security(get_current_user, scopes=["user"])
) -> User:
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    return current_user


async def get_admin_user(
    current_user: User = Security(get_current_user, scopes=["admin"])
) -> User:
    if not current_user.is_admin:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
            error_code=ADMIN_PRIVILEGE_REQUIRED
        )
    return current_user
