from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from inventory.api.auth import require_admin
from inventory.database import get_db
from inventory.models.user import User, UserRole
from inventory.schemas.user import UserCreate, UserOut, UserUpdate
from inventory.services import auth_service

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    return auth_service.list_users(db)


@router.get("/active", response_model=list[UserOut])
def list_active_users(db: Session = Depends(get_db)):
    return auth_service.list_users(db, active_only=True)


@router.get("/role/{role}", response_model=list[UserOut])
def users_by_role(role: UserRole, db: Session = Depends(get_db)):
    return auth_service.list_users(db, role=role)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = auth_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user


@router.post("", response_model=UserOut, status_code=201)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    return auth_service.create_user(db, data)


@router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: str, data: UserUpdate, db: Session = Depends(get_db)):
    user = auth_service.update_user(db, user_id, data)
    if not user:
        raise HTTPException(404, "User not found")
    return user


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    if user_id == admin.id:
        raise HTTPException(400, "Cannot disable yourself")
    if not auth_service.delete_user(db, user_id):
        raise HTTPException(404, "User not found")
