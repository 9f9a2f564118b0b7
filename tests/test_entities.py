import time

import pytest

from mytodo.errors import HashingError
from mytodo.todos.models import Todo
from mytodo.users.models import User


class TestUserEntity:
    def test_new_user_hashes_password(self):
        user = User.new("u1", "ada@example.com", "correct horse")
        assert user.password_hash != "correct horse"
        assert user.password_hash.startswith("$2")
        assert user.created_at == user.updated_at
        assert user.created_at.tzinfo is not None

    def test_check_password(self):
        user = User.new("u1", "ada@example.com", "correct horse")
        assert user.check_password("correct horse") is True
        assert user.check_password("correct horse ") is False
        assert user.check_password("wrong") is False
        assert user.check_password("") is False

    def test_identical_passwords_get_distinct_hashes(self):
        a = User.new("u1", "a@example.com", "same-password")
        b = User.new("u2", "b@example.com", "same-password")
        assert a.password_hash != b.password_hash
        assert a.check_password("same-password")
        assert b.check_password("same-password")

    def test_update_password(self):
        user = User.new("u1", "ada@example.com", "old-password")
        old_hash = user.password_hash
        created = user.created_at
        time.sleep(0.001)

        user.update_password("new-password")

        assert user.password_hash != old_hash
        assert user.check_password("new-password")
        assert not user.check_password("old-password")
        assert user.updated_at > created
        assert user.created_at == created

    def test_update_password_empty_leaves_password_unchanged(self):
        user = User.new("u1", "ada@example.com", "old-password")
        old_hash = user.password_hash
        updated = user.updated_at

        user.update_password("")

        assert user.password_hash == old_hash
        assert user.updated_at == updated
        assert user.check_password("old-password")

    def test_update_email_bumps_updated_at(self):
        user = User.new("u1", "ada@example.com", "pw-123456")
        time.sleep(0.001)
        user.update_email("not-validated-here")
        assert user.email == "not-validated-here"
        assert user.updated_at > user.created_at

    def test_check_password_with_corrupt_hash_is_false(self):
        user = User.new("u1", "ada@example.com", "pw-123456")
        user.password_hash = "not-a-bcrypt-hash"
        assert user.check_password("pw-123456") is False

    def test_unhashable_password_raises_hashing_error(self, monkeypatch):
        from mytodo.users import models

        def boom(*args, **kwargs):
            raise ValueError("invalid salt")

        monkeypatch.setattr(models.bcrypt, "hashpw", boom)
        with pytest.raises(HashingError):
            User.new("u1", "ada@example.com", "pw-123456")

    def test_password_over_72_bytes_is_refused(self):
        with pytest.raises(HashingError):
            User.new("u1", "ada@example.com", "a" * 73)
        user = User.new("u1", "ada@example.com", "pw-123456")
        with pytest.raises(HashingError):
            user.update_password("\u00e9" * 37)
        assert user.check_password("pw-123456")

    def test_password_at_72_bytes_is_accepted(self):
        user = User.new("u1", "ada@example.com", "a" * 72)
        assert user.check_password("a" * 72)
        assert user.check_password("a" * 71) is False

    def test_long_candidate_sharing_prefix_is_rejected(self):
        user = User.new("u1", "ada@example.com", "a" * 72)
        assert user.check_password("a" * 72 + "WRONG") is False
        assert user.check_password("a" * 72 + "correct") is False


class TestTodoEntity:
    def test_new_todo_defaults(self):
        todo = Todo.new("t1", "u1", "Buy milk", "2 litres")
        assert todo.completed is False
        assert todo.completed_at is None
        assert todo.created_at == todo.updated_at
        assert todo.user_id == "u1"

    def test_update_only_overwrites_non_empty_fields(self):
        todo = Todo.new("t1", "u1", "Buy milk", "2 litres")
        time.sleep(0.001)

        todo.update("", "3 litres")
        assert todo.title == "Buy milk"
        assert todo.description == "3 litres"

        todo.update("Buy oat milk", "")
        assert todo.title == "Buy oat milk"
        assert todo.description == "3 litres"
        assert todo.updated_at > todo.created_at

    def test_update_never_touches_completion(self):
        todo = Todo.new("t1", "u1", "Buy milk", "")
        todo.mark_complete(True)
        completed_at = todo.completed_at

        todo.update("Renamed", "With description")

        assert todo.completed is True
        assert todo.completed_at == completed_at

    def test_mark_complete_then_reopen(self):
        todo = Todo.new("t1", "u1", "Buy milk", "")

        todo.mark_complete(True)
        assert todo.completed is True
        assert todo.completed_at is not None

        todo.mark_complete(False)
        assert todo.completed is False
        assert todo.completed_at is None

    def test_mark_complete_bumps_updated_at_even_without_change(self):
        todo = Todo.new("t1", "u1", "Buy milk", "")
        before = todo.updated_at
        time.sleep(0.001)

        todo.mark_complete(False)

        assert todo.completed is False
        assert todo.updated_at > before
