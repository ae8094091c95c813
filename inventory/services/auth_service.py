import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from sqlalchemy.orm import Session

from inventory.config import settings
from inventory.exceptions import DuplicateKeyError
from inventory.models.user import User, UserRole
from inventory.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

# Explicit nulls for these are ignored on update
_NOT_NULL_FIELDS = ("username", "password", "role", "active")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


def create_access_token(user: User) -> str:
    payload = {
        "sub": user.id,
        "username": user.username,
        "role": user.role.value,
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except (jwt.ExpiredSignatureError, jwt.InvalidTokenError):
        return None


def authenticate(db: Session, username: str, password: str) -> User | None:
    user = db.query(User).filter(User.username == username, User.active == True).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def _check_unique(db: Session, username: str | None, email: str | None, exclude_id: str | None = None) -> None:
    if username:
        q = db.query(User).filter(User.username == username)
        if exclude_id:
            q = q.filter(User.id != exclude_id)
        if q.first():
            raise DuplicateKeyError(f"Username '{username}' already exists")
    if email:
        q = db.query(User).filter(User.email == email)
        if exclude_id:
            q = q.filter(User.id != exclude_id)
        if q.first():
            raise DuplicateKeyError(f"Email '{email}' already exists")


def create_user(db: Session, data: UserCreate) -> User:
    _check_unique(db, data.username, data.email)
    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        role=data.role,
        full_name=data.full_name,
        email=data.email,
        active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s (%s)", user.username, user.role.value)
    return user


def update_user(db: Session, user_id: str, data: UserUpdate) -> User | None:
    user = get_user_by_id(db, user_id)
    if not user:
        return None
    update_data = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k not in _NOT_NULL_FIELDS
    }
    _check_unique(db, update_data.get("username"), update_data.get("email"), exclude_id=user.id)
    password = update_data.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for field, value in update_data.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> bool:
    user = get_user_by_id(db, user_id)
    if not user:
        return False
    user.active = False
    db.commit()
    return True


def list_users(db: Session, active_only: bool = False, role: UserRole | None = None) -> list[User]:
    q = db.query(User)
    if active_only:
        q = q.filter(User.active == True)
    if role:
        q = q.filter(User.role == role)
    return q.order_by(User.created_at.desc()).all()


def ensure_default_users(db: Session) -> None:
    """Create the default admin and staff accounts if no users exist."""
    if db.query(User).count() > 0:
        return
    logger.info("Initializing default users...")
    create_user(db, UserCreate(
        username="admin",
        password=settings.DEFAULT_ADMIN_PASSWORD,
        role=UserRole.ADMIN,
        full_name="System Administrator",
        email="admin@inventory.local",
    ))
    create_user(db, UserCreate(
        username="staff",
        password=settings.DEFAULT_STAFF_PASSWORD,
        role=UserRole.STAFF,
        full_name="Staff User",
        email="staff@inventory.local",
    ))
    logger.warning("Default users 'admin' and 'staff' created; change their passwords")
