"""SQLite-backed user accounts and usage quotas."""

from __future__ import annotations

import hashlib
import logging
import secrets
import sqlite3
import string
from pathlib import Path

from vanban_assistant.errors import AssistantError, QuotaExceededError, RecordNotFoundError
from vanban_assistant.models.user import Quota, Role, User

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".vanban-assistant" / "store.db"

_RESET_ALPHABET = string.ascii_lowercase + string.digits

# (username, password, role, used, total)
DEFAULT_USERS = [
    ("superadmin", "hungnguyen", Role.SUPERADMIN, 0, 9999),
    ("user", "123456", Role.USER, 15, 150),
]


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def check_quota(user: User) -> None:
    """Raise QuotaExceededError when the user has no AI calls left."""
    if user.quota.exhausted:
        raise QuotaExceededError(user.username, user.quota.used, user.quota.total)


class UserStore:
    """User accounts with hashed passwords and per-user quota counters."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH, default_quota: int = 150):
        self.db_path = Path(db_path)
        self.default_quota = default_quota
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    role TEXT NOT NULL DEFAULT 'user',
                    quota_total INTEGER NOT NULL,
                    quota_used INTEGER NOT NULL DEFAULT 0
                )
            """)

    def seed_defaults(self) -> bool:
        """Create the default accounts if the table is empty. Returns True if seeded."""
        with self._connect() as conn:
            count = conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
            if count:
                return False
            conn.executemany(
                """INSERT INTO users (username, password_hash, role, quota_total, quota_used)
                   VALUES (?, ?, ?, ?, ?)""",
                [
                    (name, hash_password(pw), role.value, total, used)
                    for name, pw, role, used, total in DEFAULT_USERS
                ],
            )
        logger.info("Seeded %d default users", len(DEFAULT_USERS))
        return True

    def register(self, username: str, password: str, role: Role = Role.USER) -> User:
        username = username.strip()
        if not username or not password:
            raise AssistantError("Tên đăng nhập và mật khẩu là bắt buộc")
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """INSERT INTO users (username, password_hash, role, quota_total, quota_used)
                       VALUES (?, ?, ?, ?, 0)""",
                    (username, hash_password(password), role.value, self.default_quota),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise AssistantError(f"Tài khoản '{username}' đã tồn tại") from e
        return self.find_by_id(user_id)

    def get_all_users(self) -> list[User]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, username, role, quota_total, quota_used FROM users ORDER BY id"
            ).fetchall()
        return [self._row_to_user(r) for r in rows]

    def find_by_id(self, user_id: int) -> User | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, username, role, quota_total, quota_used FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        return self._row_to_user(row) if row else None

    def find_by_username(self, username: str) -> User | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, username, role, quota_total, quota_used FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        return self._row_to_user(row) if row else None

    def authenticate(self, username: str, password: str) -> User | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT password_hash FROM users WHERE username = ?", (username,)
            ).fetchone()
        if row is None or row[0] != hash_password(password):
            return None
        return self.find_by_username(username)

    def update_user(self, user: User) -> User:
        """Persist role and quota changes. The stored password is kept."""
        with self._connect() as conn:
            cursor = conn.execute(
                """UPDATE users SET role = ?, quota_total = ?, quota_used = ?
                   WHERE id = ?""",
                (user.role.value, user.quota.total, user.quota.used, user.id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(f"User not found: {user.id}")
        return self.find_by_id(user.id)

    def change_password(self, user_id: int, old_password: str, new_password: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE users SET password_hash = ? WHERE id = ? AND password_hash = ?",
                (hash_password(new_password), user_id, hash_password(old_password)),
            )
            return cursor.rowcount == 1

    def reset_password(self, user_id: int) -> str:
        """Assign and return a random 'reset_xxxxxx' password."""
        new_password = "reset_" + "".join(secrets.choice(_RESET_ALPHABET) for _ in range(6))
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE users SET password_hash = ? WHERE id = ?",
                (hash_password(new_password), user_id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(f"User not found: {user_id}")
        return new_password

    def set_quota(self, user_id: int, total: int, used: int | None = None) -> User:
        user = self.find_by_id(user_id)
        if user is None:
            raise RecordNotFoundError(f"User not found: {user_id}")
        quota = Quota(total=total, used=user.quota.used if used is None else used)
        return self.update_user(user.model_copy(update={"quota": quota}))

    def increment_usage(self, user_id: int) -> User:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE users SET quota_used = quota_used + 1 WHERE id = ?", (user_id,)
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(f"User not found: {user_id}")
        return self.find_by_id(user_id)

    def reserve_quota(self, user_id: int) -> User:
        """Spend one quota unit in a single guarded UPDATE.

        Raises QuotaExceededError when no unit is left, so two processes
        cannot both take the last one.
        """
        with self._connect() as conn:
            cursor = conn.execute(
                """UPDATE users SET quota_used = quota_used + 1
                   WHERE id = ? AND quota_used < quota_total""",
                (user_id,),
            )
            reserved = cursor.rowcount == 1
        user = self.find_by_id(user_id)
        if user is None:
            raise RecordNotFoundError(f"User not found: {user_id}")
        if not reserved:
            # Quota was released between the UPDATE and the read
            check_quota(user)
            return self.reserve_quota(user_id)
        return user

    def release_quota(self, user_id: int) -> None:
        """Give back a unit taken by reserve_quota for a call that did not complete."""
        with self._connect() as conn:
            conn.execute(
                "UPDATE users SET quota_used = quota_used - 1 WHERE id = ? AND quota_used > 0",
                (user_id,),
            )

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        return User(
            id=row[0],
            username=row[1],
            role=Role(row[2]),
            quota=Quota(total=row[3], used=row[4]),
        )
