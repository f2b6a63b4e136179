"""Tests for UserStore accounts and quotas."""

from __future__ import annotations

import pytest

from vanban_assistant.errors import AssistantError, QuotaExceededError, RecordNotFoundError
from vanban_assistant.models.user import Quota, Role, User
from vanban_assistant.store.user_store import UserStore, check_quota, hash_password


class TestSeed:
    def test_default_accounts(self, user_store):
        users = {u.username: u for u in user_store.get_all_users()}
        assert users["superadmin"].role is Role.SUPERADMIN
        assert users["superadmin"].quota == Quota(total=9999, used=0)
        assert users["user"].role is Role.USER
        assert users["user"].quota == Quota(total=150, used=15)

    def test_seed_only_once(self, user_store):
        assert user_store.seed_defaults() is False
        assert len(user_store.get_all_users()) == 2

    def test_data_survives_reopen(self, user_store):
        user_store.register("trolyB", "pw")
        reopened = UserStore(db_path=user_store.db_path)
        assert reopened.find_by_username("trolyB") is not None


class TestRegisterAndAuthenticate:
    def test_register_uses_default_quota(self, user_store):
        user = user_store.register("  trolyA  ", "matkhau")
        assert user.username == "trolyA"
        assert user.role is Role.USER
        assert user.quota == Quota(total=10, used=0)

    def test_duplicate_username_rejected(self, user_store):
        with pytest.raises(AssistantError, match="đã tồn tại"):
            user_store.register("user", "khac")

    @pytest.mark.parametrize("username,password", [("", "pw"), ("   ", "pw"), ("ai", "")])
    def test_missing_fields_rejected(self, user_store, username, password):
        with pytest.raises(AssistantError):
            user_store.register(username, password)

    def test_authenticate(self, user_store):
        assert user_store.authenticate("superadmin", "hungnguyen").is_admin
        assert user_store.authenticate("superadmin", "sai") is None
        assert user_store.authenticate("khongco", "hungnguyen") is None

    def test_password_is_hashed_at_rest(self, user_store):
        import sqlite3

        with sqlite3.connect(user_store.db_path) as conn:
            stored = conn.execute(
                "SELECT password_hash FROM users WHERE username = 'user'"
            ).fetchone()[0]
        assert stored == hash_password("123456")
        assert stored != "123456"


class TestPasswords:
    def test_change_password(self, user_store):
        user = user_store.find_by_username("user")
        assert user_store.change_password(user.id, "123456", "moi") is True
        assert user_store.authenticate("user", "moi") is not None
        assert user_store.authenticate("user", "123456") is None

    def test_change_password_wrong_old(self, user_store):
        user = user_store.find_by_username("user")
        assert user_store.change_password(user.id, "sai", "moi") is False
        assert user_store.authenticate("user", "123456") is not None

    def test_reset_password(self, user_store):
        user = user_store.find_by_username("user")
        new_password = user_store.reset_password(user.id)
        assert new_password.startswith("reset_")
        assert len(new_password) == len("reset_") + 6
        assert user_store.authenticate("user", new_password) is not None

    def test_reset_password_unknown_user(self, user_store):
        with pytest.raises(RecordNotFoundError):
            user_store.reset_password(999)


class TestQuota:
    def test_increment_usage(self, user_store):
        user = user_store.find_by_username("user")
        updated = user_store.increment_usage(user.id)
        assert updated.quota.used == 16

    def test_increment_unknown_user(self, user_store):
        with pytest.raises(RecordNotFoundError):
            user_store.increment_usage(999)

    def test_set_quota_keeps_used_by_default(self, user_store):
        user = user_store.find_by_username("user")
        updated = user_store.set_quota(user.id, total=500)
        assert updated.quota == Quota(total=500, used=15)

    def test_set_quota_with_used(self, user_store):
        user = user_store.find_by_username("user")
        assert user_store.set_quota(user.id, total=20, used=0).quota.remaining == 20

    def test_update_user_role(self, user_store):
        user = user_store.register("trolyC", "pw")
        promoted = user_store.update_user(user.model_copy(update={"role": Role.SUPERADMIN}))
        assert promoted.is_admin

    def test_update_unknown_user(self, user_store):
        ghost = User(id=999, username="ghost", quota=Quota(total=1))
        with pytest.raises(RecordNotFoundError):
            user_store.update_user(ghost)


class TestReserveQuota:
    def test_reserve_spends_one_unit(self, user_store):
        user = user_store.find_by_username("user")
        assert user_store.reserve_quota(user.id).quota.used == 16

    def test_last_unit_can_only_be_taken_once(self, user_store):
        user = user_store.register("trolyD", "pw")
        user_store.set_quota(user.id, total=1, used=0)
        # Both callers saw 0/1 before either reserved
        first = user_store.find_by_id(user.id)
        second = user_store.find_by_id(user.id)
        assert not first.quota.exhausted and not second.quota.exhausted

        user_store.reserve_quota(first.id)
        with pytest.raises(QuotaExceededError):
            user_store.reserve_quota(second.id)
        assert user_store.find_by_id(user.id).quota.used == 1

    def test_reserve_unknown_user(self, user_store):
        with pytest.raises(RecordNotFoundError):
            user_store.reserve_quota(999)

    def test_release_returns_unit(self, user_store):
        user = user_store.find_by_username("user")
        user_store.reserve_quota(user.id)
        user_store.release_quota(user.id)
        assert user_store.find_by_id(user.id).quota.used == 15

    def test_release_never_goes_negative(self, user_store):
        admin = user_store.find_by_username("superadmin")
        user_store.release_quota(admin.id)
        assert user_store.find_by_id(admin.id).quota.used == 0


class TestCheckQuota:
    def test_passes_with_remaining(self):
        check_quota(User(id=1, username="a", quota=Quota(total=2, used=1)))

    def test_raises_when_exhausted(self):
        with pytest.raises(QuotaExceededError, match="5/5"):
            check_quota(User(id=1, username="a", quota=Quota(total=5, used=5)))

    def test_zero_total_is_exhausted(self):
        with pytest.raises(QuotaExceededError):
            check_quota(User(id=1, username="a", quota=Quota(total=0)))
