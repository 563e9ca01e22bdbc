from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.config import get_settings
from app.core.rate_limit import limiter
from app.models.user import User
from app.schemas.auth import Token
from app.schemas.user import RegisterRequest, RegisterResponse, UserOut
from app.services.auth import (
    authenticate_user,
    create_token_for_user,
    create_user,
    get_user_by_email,
)

router = APIRouter()
settings = get_settings()


@router.post("/login", response_model=Token)
@limiter.limit(lambda: f"{settings.login_rate_limit_per_minute}/minute")
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> Token:
    """Exchange email (sent as ``username``) and password for a bearer token."""
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return Token(access_token=create_token_for_user(user))


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(lambda: f"{settings.registration_rate_limit_per_minute}/minute")
def register(
    request: Request,
    reg_data: RegisterRequest,
    db: Session = Depends(get_db),
) -> RegisterResponse:
    """Create an academy or student account and sign it in."""
    if get_user_by_email(db, reg_data.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Registration failed. Email already in use.",
        )
    try:
        user = create_user(
            db,
            email=reg_data.email,
            password=reg_data.password,
            role=reg_data.role.value,
            display_name=reg_data.display_name,
        )
    except IntegrityError:
        # Concurrent registration with the same email
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Registration failed. Email already in use.",
        )
    return RegisterResponse(
        access_token=create_token_for_user(user), user=UserOut.model_validate(user)
    )
