import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.constants import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from app.database import get_db
from app.exceptions import InvalidTokenError
from app.models.user import User
from app.permissions_config.permissions import ActorSnapshot

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# OAuth2 scheme for token validation
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if "sub" not in to_encode:
        raise ValueError("Missing 'sub' claim (email) in token data.")

    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the ``sub`` (email) claim of a valid token."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Token expired")
        raise InvalidTokenError("Token has expired")
    except JWTError as e:
        logger.warning("JWT decoding failed: %s", e)
        raise InvalidTokenError("Invalid token") from e

    email = payload.get("sub")
    if email is None:
        logger.warning("Token is missing 'sub' claim")
        raise InvalidTokenError("Token does not contain 'sub' field.")
    return email


async def _user_for_token(token: str, db: AsyncSession) -> User:
    email = decode_access_token(token)
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()
    if user is None:
        logger.warning("User with email '%s' not found.", email)
        raise InvalidTokenError("Could not validate credentials")
    return user


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    return await _user_for_token(token, db)


async def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like ``get_current_user`` but returns None for anonymous requests."""
    if not token:
        return None
    return await _user_for_token(token, db)


async def get_current_actor(user: Optional[User] = Depends(get_optional_user)) -> Optional[ActorSnapshot]:
    """Actor snapshot handed to the access evaluator (None when anonymous)."""
    return ActorSnapshot.from_user(user)
