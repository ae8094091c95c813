from fastapi import APIRouter, Cookie, Depends, HTTPException, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from inventory.config import settings
from inventory.database import get_db
from inventory.models.user import User, UserRole
from inventory.schemas.user import LoginRequest, TokenOut, UserCreate, UserOut
from inventory.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    token: str | None = Cookie(default=None, alias="token"),
    db: Session = Depends(get_db),
) -> User:
    """Dependency: extract user from a Bearer header, falling back to the JWT cookie."""
    raw = credentials.credentials if credentials else token
    if not raw:
        raise HTTPException(401, "Not authenticated")
    payload = auth_service.decode_token(raw)
    if not payload:
        raise HTTPException(401, "Invalid or expired token")
    user = auth_service.get_user_by_id(db, payload["sub"])
    if not user or not user.active:
        raise HTTPException(401, "User not found or disabled")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(403, "Admin only")
    return user


@router.post("/signin", response_model=TokenOut)
def signin(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, data.username, data.password)
    if not user:
        raise HTTPException(401, "Invalid username or password")
    token = auth_service.create_access_token(user)
    response.set_cookie(
        "token", token, httponly=True, samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_HOURS * 3600,
    )
    return TokenOut(
        token=token, id=user.id, username=user.username,
        full_name=user.full_name, email=user.email, role=user.role,
    )


@router.post("/signup", response_model=UserOut, status_code=201)
def signup(data: UserCreate, db: Session = Depends(get_db)):
    # Self-registration never grants admin
    return auth_service.create_user(db, data.model_copy(update={"role": UserRole.STAFF}))


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie("token")
    return {"ok": True}


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user
