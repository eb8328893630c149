import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable

from passlib.context import CryptContext

from config import load_settings
from errors import ErrorKind, Failure, Result

logger = logging.getLogger(__name__)

# pbkdf2_sha256 ships with passlib itself, no bcrypt backend needed.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


@dataclass
class User:
    login: str
    password_hash: str
    role: Role = Role.MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class UserDirectory:
    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def list_users(self) -> Iterable[User]:
        with self._lock:
            return list(self._users.values())

    def register(self, login: str, password: str, role: Role = Role.MEMBER) -> Result[User]:
        password_hash = pwd_context.hash(password)
        with self._lock:
            if login in self._users:
                return Failure(ErrorKind.CONFLICT, f"User '{login}' already exists")
            user = User(login=login, password_hash=password_hash, role=role)
            self._users[login] = user
        logger.info("Registered user %s (%s)", login, role.value)
        return user

    def find(self, login: str) -> Result[User]:
        with self._lock:
            user = self._users.get(login)
        if user is None:
            return Failure(ErrorKind.NOT_FOUND, f"User '{login}' not found")
        return user

    def verify(self, user: User, password: str) -> bool:
        return pwd_context.verify(password, user.password_hash)


def create_user_directory() -> UserDirectory:
    """Empty directory, seeded with the admin from ADMIN_LOGIN / ADMIN_PASSWORD when both are set."""
    directory = UserDirectory()
    settings = load_settings()
    if settings.admin_login and settings.admin_password:
        directory.register(settings.admin_login, settings.admin_password, role=Role.ADMIN)
    return directory
