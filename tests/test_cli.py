"""Tests for the offline CLI commands."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from vanban_assistant.cli import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        f"store:\n  db_path: {tmp_path / 'store.db'}\n  usage_db_path: {tmp_path / 'usage.db'}\n",
        encoding="utf-8",
    )
    return path


class TestDiffCommand:
    def test_counts_changed_lines(self, tmp_path):
        original = tmp_path / "goc.txt"
        modified = tmp_path / "sua.txt"
        original.write_text("Dòng một\nDòng hai\nDòng ba", encoding="utf-8")
        modified.write_text("Dòng một\nDòng 2\nDòng ba", encoding="utf-8")

        result = runner.invoke(app, ["diff", str(original), str(modified)])

        assert result.exit_code == 0
        assert "2 dòng thay đổi" in result.output

    def test_missing_file_fails(self, tmp_path):
        existing = tmp_path / "a.txt"
        existing.write_text("a", encoding="utf-8")

        result = runner.invoke(app, ["diff", str(existing), str(tmp_path / "khongco.txt")])

        assert result.exit_code == 1
        assert "Không tìm thấy tệp" in result.output


class TestAccountCommands:
    def test_dictionaries_list(self, config_file):
        result = runner.invoke(app, ["--config", str(config_file), "dictionaries", "list"])
        assert result.exit_code == 0
        assert "llvt" in result.output
        assert "cand" in result.output

    def test_users_list_requires_admin(self, config_file):
        result = runner.invoke(
            app,
            ["--config", str(config_file), "-u", "user", "--password", "123456", "users", "list"],
        )
        assert result.exit_code == 1

    def test_users_list_as_admin(self, config_file):
        result = runner.invoke(
            app,
            [
                "--config", str(config_file),
                "-u", "superadmin", "--password", "hungnguyen",
                "users", "list",
            ],
        )
        assert result.exit_code == 0
        assert "superadmin" in result.output

    def test_wrong_password(self, config_file):
        result = runner.invoke(
            app,
            ["--config", str(config_file), "-u", "user", "--password", "sai", "projects", "list"],
        )
        assert result.exit_code == 1


class TestInputEncoding:
    def test_review_rejects_non_utf8_file(self, tmp_path, config_file):
        path = tmp_path / "vb.txt"
        path.write_text("Báo cáo tổng kết", encoding="utf-16")

        result = runner.invoke(app, ["--config", str(config_file), "review", str(path)])

        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert "UTF-8" in result.output

    def test_diff_rejects_non_utf8_file(self, tmp_path):
        good = tmp_path / "a.txt"
        bad = tmp_path / "b.txt"
        good.write_text("a", encoding="utf-8")
        bad.write_text("b", encoding="utf-16")

        result = runner.invoke(app, ["diff", str(good), str(bad)])

        assert result.exit_code == 1
        assert "UTF-8" in result.output


class TestProjectCommands:
    def test_show_titles_each_result(self, config_file, tmp_path):
        from vanban_assistant.models.workspace import ProjectResultType
        from vanban_assistant.store.user_store import UserStore
        from vanban_assistant.store.workspace_store import WorkspaceStore

        users = UserStore(db_path=tmp_path / "store.db")
        users.seed_defaults()
        member = users.find_by_username("user")
        project = WorkspaceStore(db_path=tmp_path / "store.db").save_result(
            member.id, "Báo cáo", ProjectResultType.REVIEW, "Nội dung đã rà soát"
        )

        result = runner.invoke(
            app,
            [
                "--config", str(config_file),
                "-u", "user", "--password", "123456",
                "projects", "show", project.id,
            ],
        )

        assert result.exit_code == 0
        assert "Báo cáo: review" in result.output
        assert "Nội dung đã rà soát" in result.output
