import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth import create_access_token, verify_password
from ..constants import ACCESS_TOKEN_EXPIRE_MINUTES
from ..database import get_db
from ..exceptions import InvalidCredentialsError
from ..schemas import Token, UserCreate, UserResponse
from ..services import user_service

# Initialize logger
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """
    Exchange email (sent as ``username``) and password for a bearer token.
    """
    user = await user_service.get_user_by_email(form_data.username, db)

    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning("Login failed for email: %s", form_data.username)
        raise InvalidCredentialsError()

    access_token = create_access_token(
        data={"sub": user.email},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    logger.info("Access token created for user: %s", user.email)

    return {"access_token": access_token, "token_type": "Bearer"}


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    """Self-service signup. The very first account becomes an admin."""
    return await user_service.create_user(
        email=user_in.email,
        password=user_in.password,
        db=db,
        name=user_in.name,
    )
