"""Tests for the user store and role seeding."""

import pytest

from app.models.role import RoleName
from app.scripts.seed import seed
from app.services.user_store import DuplicateEmailError


class TestUserStore:
    """Tests for user persistence."""

    def test_create_and_find(self, store):
        user = store.create("a@example.com", "hash")
        assert user.id is not None
        assert store.find_by_id(user.id).email == "a@example.com"
        assert store.find_by_email("a@example.com").id == user.id
        assert store.find_by_email("missing@example.com") is None

    def test_create_duplicate_email(self, store):
        store.create("a@example.com", "hash")
        with pytest.raises(DuplicateEmailError):
            store.create("a@example.com", "other")

    def test_update_to_taken_email(self, store):
        store.create("a@example.com", "hash")
        other = store.create("b@example.com", "hash")
        with pytest.raises(DuplicateEmailError):
            store.update(other.id, email="a@example.com")
        assert store.find_by_id(other.id).email == "b@example.com"

    def test_update_fields(self, store):
        user = store.create("a@example.com", "hash")
        updated = store.update(user.id, first_name="Ada", refresh_token_hash="rt")
        assert updated.first_name == "Ada"
        assert updated.refresh_token_hash == "rt"

    def test_update_missing_user(self, store):
        assert store.update(9999, first_name="Nobody") is None

    def test_update_rejects_unknown_field(self, store):
        user = store.create("a@example.com", "hash")
        with pytest.raises(ValueError):
            store.update(user.id, id=42)

    def test_clear_refresh_token_only_when_set(self, store):
        user = store.create("a@example.com", "hash")
        assert store.clear_refresh_token(user.id) == 0
        store.update(user.id, refresh_token_hash="rt")
        assert store.clear_refresh_token(user.id) == 1
        assert store.find_by_id(user.id).refresh_token_hash is None

    def test_list_users(self, store):
        for i in range(3):
            store.create(f"user{i}@example.com", "hash")
        users, total = store.list_users(limit=2)
        assert total == 3
        assert [u.email for u in users] == ["user0@example.com", "user1@example.com"]


class TestSeed:
    """Tests for the seed script."""

    def test_seed_creates_roles_and_admin(self, db_session, store):
        actions = seed(db_session, "root@example.com", "rootpass123")
        assert len(actions) == 4
        for name in RoleName:
            assert store.find_role_by_name(name.value) is not None
        assert store.find_by_email("root@example.com").role_name == "superadmin"

    def test_seed_is_idempotent(self, db_session):
        seed(db_session, "root@example.com", "rootpass123")
        assert seed(db_session, "root@example.com", "rootpass123") == []

    def test_seed_without_admin(self, db_session, store):
        seed(db_session)
        users, total = store.list_users()
        assert total == 0
