"""Регистрация, вход и выход"""

import sqlite3

import structlog

from ..exceptions import InvalidCredentials, ValidationError
from ..repositories import TokenRepository, UserRepository
from ..schemas import LoginModel, RegisterModel
from ..security import hash_password, verify_password

log = structlog.get_logger()


def derive_nickname(users: UserRepository, first_name: str, last_name: str) -> str:
    """first.last, затем first.last1, first.last2 ... -- первый свободный"""
    base = f"{first_name}.{last_name}".lower()
    nickname = base
    counter = 1
    while users.nickname_exists(nickname):
        nickname = f"{base}{counter}"
        counter += 1
    return nickname


class AuthService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.users = UserRepository(conn)
        self.tokens = TokenRepository(conn)

    def register(self, data: RegisterModel) -> int:
        if data.password != data.password_confirmation:
            raise ValidationError.for_field(
                "password", "The password field confirmation does not match."
            )
        if self.users.email_exists(data.email):
            raise ValidationError.for_field("email", "The email has already been taken.")

        nickname = derive_nickname(self.users, data.first_name, data.last_name)
        pwd_hash, pwd_salt = hash_password(data.password)
        try:
            user_id = self.users.create(
                nickname=nickname,
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                password_hash=pwd_hash,
                password_salt=pwd_salt,
            )
        except sqlite3.IntegrityError as e:
            # параллельная регистрация заняла тот же nickname или email
            log.info("registration_conflict", email=data.email, nickname=nickname, error=str(e))
            raise ValidationError(
                {"email": ["Registration conflicted with another request, please retry."]}
            ) from e

        log.info("user_registered", user_id=user_id, nickname=nickname)
        return user_id

    def login(self, data: LoginModel) -> str:
        user = self.users.get_by_email(data.email)
        if not user or not verify_password(data.password, user["password_hash"], user["password_salt"]):
            raise InvalidCredentials()

        token = self.tokens.issue(user["id"])
        log.info("token_issued", user_id=user["id"])
        return token

    def logout(self, token_id: int) -> None:
        self.tokens.revoke(token_id)
        log.info("token_revoked", token_id=token_id)
