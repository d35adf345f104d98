import sqlite3

from fastapi import APIRouter, Depends, status

from ..deps import Principal, get_current_user, get_db
from ..exceptions import Unauthenticated
from ..repositories import UserRepository
from ..schemas import LoginModel, RegisterModel
from ..services.auth_service import AuthService

router = APIRouter()

# ─────────────────────────────────────────
#  АУТЕНТИФИКАЦИЯ
# ─────────────────────────────────────────


# register и login синхронные: PBKDF2 выполняется в пуле потоков
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: RegisterModel, db: sqlite3.Connection = Depends(get_db)):
    """Регистрация нового пользователя (без автоматического входа)"""
    AuthService(db).register(data)
    return {"message": "User registered successfully"}


@router.post("/login")
def login(data: LoginModel, db: sqlite3.Connection = Depends(get_db)):
    """Вход: выдаёт новый токен, старые остаются действительными"""
    token = AuthService(db).login(data)
    return {"token": token}


@router.post("/logout")
async def logout(
    principal: Principal = Depends(get_current_user),
    db: sqlite3.Connection = Depends(get_db),
):
    """Отзывает только токен текущего запроса"""
    AuthService(db).logout(principal.token_id)
    return {"message": "Logged out"}


@router.get("/me")
async def get_me(
    principal: Principal = Depends(get_current_user),
    db: sqlite3.Connection = Depends(get_db),
):
    """Информация о текущем пользователе"""
    user = UserRepository(db).get_by_id(principal.user_id)
    if not user:
        raise Unauthenticated()
    return {
        "id": user["id"],
        "nickname": user["nickname"],
        "first_name": user["first_name"],
        "last_name": user["last_name"],
        "email": user["email"],
        "created_at": user["created_at"],
    }
