from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.models.user import User, UserRole
from app.schemas.auth import TokenData

settings = get_settings()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_token_for_user(user: User) -> str:
    return create_access_token(data={"sub": user.email, "role": user.role})


def decode_token(token: str) -> TokenData | None:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        return None
    email = payload.get("sub")
    if email is None:
        return None
    return TokenData(email=email)


def normalize_email(email: str) -> str:
    return email.strip().lower()


# Pre-computed hash for timing equalization when the account is not found.
_DUMMY_HASH = get_password_hash("dummy-timing-equalization")


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    user = get_user_by_email(db, email)
    if not user:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def create_user(
    db: Session,
    email: str,
    password: str,
    role: str = UserRole.STUDENT.value,
    display_name: str = "User",
) -> User:
    user = User(
        email=normalize_email(email),
        password_hash=get_password_hash(password),
        role=role,
        display_name=display_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
