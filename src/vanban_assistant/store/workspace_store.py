"""SQLite-backed abbreviation dictionaries and per-user workspace projects."""

from __future__ import annotations

import logging
import re
import sqlite3
import time
import uuid
from datetime import datetime
from pathlib import Path

from vanban_assistant.models.workspace import Dictionary, Project, ProjectResultType

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".vanban-assistant" / "store.db"

DEFAULT_DICTIONARIES = [
    Dictionary(
        id="llvt",
        name="Lực lượng Vũ trang",
        content="""\
- CTCT: Công tác chính trị
- CTĐ: Công tác đảng
- QS: Quân sự
- HC: Hậu cần
- KT: Kỹ thuật
- TM: Tham mưu
- BTM: Bộ Tổng Tham mưu
- TCCT: Tổng cục Chính trị
- TCHC: Tổng cục Hậu cần
- TCKT: Tổng cục Kỹ thuật
- BQP: Bộ Quốc phòng""",
    ),
    Dictionary(
        id="cand",
        name="Công an Nhân dân",
        content="""\
- ANND: An ninh Nhân dân
- CSND: Cảnh sát Nhân dân
- BCA: Bộ Công an
- X01: Văn phòng Bộ Công an
- C01: Văn phòng Cơ quan Cảnh sát điều tra
- C02: Cục Cảnh sát hình sự
- C03: Cục Cảnh sát điều tra tội phạm về tham nhũng, kinh tế, buôn lậu
- GĐ: Giám đốc""",
    ),
]

_RESULT_COLUMNS = {
    ProjectResultType.ANALYSIS: "analysis_result",
    ProjectResultType.DRAFTING: "draft_result",
    ProjectResultType.REVIEW: "review_result",
}

_PROJECT_FIELDS = (
    "id, name, created_at, last_modified, analysis_result, draft_result, review_result"
)


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


class WorkspaceStore:
    """Shared dictionaries plus each user's saved projects."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS dictionaries (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    content TEXT NOT NULL,
                    position INTEGER NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS projects (
                    id TEXT PRIMARY KEY,
                    user_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    last_modified TEXT NOT NULL,
                    analysis_result TEXT,
                    draft_result TEXT,
                    review_result TEXT
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_projects_user ON projects (user_id)"
            )

    def seed_defaults(self) -> bool:
        with self._connect() as conn:
            if conn.execute("SELECT COUNT(*) FROM dictionaries").fetchone()[0]:
                return False
            conn.executemany(
                "INSERT INTO dictionaries (id, name, content, position) VALUES (?, ?, ?, ?)",
                [(d.id, d.name, d.content, i) for i, d in enumerate(DEFAULT_DICTIONARIES)],
            )
        logger.info("Seeded %d default dictionaries", len(DEFAULT_DICTIONARIES))
        return True

    # -- dictionaries --------------------------------------------------------

    def get_dictionaries(self) -> list[Dictionary]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, name, content FROM dictionaries ORDER BY position"
            ).fetchall()
        return [Dictionary(id=r[0], name=r[1], content=r[2]) for r in rows]

    def get_dictionary(self, dictionary_id: str) -> Dictionary | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, content FROM dictionaries WHERE id = ?", (dictionary_id,)
            ).fetchone()
        return Dictionary(id=row[0], name=row[1], content=row[2]) if row else None

    def add_dictionary(self, name: str, content: str) -> Dictionary:
        dictionary = Dictionary(
            id=f"{slugify(name)}{int(time.time() * 1000)}",
            name=name,
            content=content,
        )
        with self._connect() as conn:
            position = conn.execute(
                "SELECT COALESCE(MAX(position) + 1, 0) FROM dictionaries"
            ).fetchone()[0]
            conn.execute(
                "INSERT INTO dictionaries (id, name, content, position) VALUES (?, ?, ?, ?)",
                (dictionary.id, dictionary.name, dictionary.content, position),
            )
        return dictionary

    # -- projects ------------------------------------------------------------

    def get_projects(self, user_id: int) -> list[Project]:
        """Return a user's projects, most recently created first."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_PROJECT_FIELDS} FROM projects WHERE user_id = ? "
                "ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_project(r) for r in rows]

    def get_project(self, user_id: int, project_id: str) -> Project | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_PROJECT_FIELDS} FROM projects WHERE user_id = ? AND id = ?",
                (user_id, project_id),
            ).fetchone()
        return self._row_to_project(row) if row else None

    def save_result(
        self,
        user_id: int,
        project_name: str,
        result_type: ProjectResultType,
        content: str,
    ) -> Project:
        """Store a result under a project, creating the project if its name is new.

        Project names match case-insensitively.
        """
        now = datetime.now().isoformat()
        column = _RESULT_COLUMNS[result_type]
        with self._connect() as conn:
            # SQLite's lower() only folds ASCII, so compare Vietnamese names here
            rows = conn.execute(
                "SELECT id, name FROM projects WHERE user_id = ?", (user_id,)
            ).fetchall()
            key = project_name.strip().casefold()
            project_id = next((r[0] for r in rows if r[1].strip().casefold() == key), None)
            if project_id:
                conn.execute(
                    f"UPDATE projects SET {column} = ?, last_modified = ? WHERE id = ?",
                    (content, now, project_id),
                )
            else:
                project_id = f"project_{uuid.uuid4().hex[:12]}"
                conn.execute(
                    f"""INSERT INTO projects
                        (id, user_id, name, created_at, last_modified, {column})
                        VALUES (?, ?, ?, ?, ?, ?)""",
                    (project_id, user_id, project_name, now, now, content),
                )
        return self.get_project(user_id, project_id)

    def delete_project(self, user_id: int, project_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM projects WHERE user_id = ? AND id = ?", (user_id, project_id)
            )
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_project(row: tuple) -> Project:
        return Project(
            id=row[0],
            name=row[1],
            created_at=datetime.fromisoformat(row[2]),
            last_modified=datetime.fromisoformat(row[3]),
            analysis_result=row[4],
            draft_result=row[5],
            review_result=row[6],
        )
