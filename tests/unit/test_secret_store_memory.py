"""Unit tests for the in-memory secret store."""

import pytest

from funcauth.store import (
    InMemorySecretStore,
    SecretConflictError,
    SecretNotFoundError,
    SecretRecord,
    SecretStore,
    SecretStoreError,
)


class TestSecretStoreProtocol:
    """Tests for protocol conformance."""

    def test_memory_store_satisfies_protocol(self):
        """Test InMemorySecretStore is a SecretStore."""
        assert isinstance(InMemorySecretStore(), SecretStore)

    def test_error_hierarchy(self):
        """Test not-found and conflict are store errors."""
        assert issubclass(SecretNotFoundError, SecretStoreError)
        assert issubclass(SecretConflictError, SecretStoreError)

    def test_error_messages(self):
        """Test errors carry the record name."""
        assert str(SecretNotFoundError("pf-secret-abcde")) == "Secret not found: pf-secret-abcde"
        assert str(SecretConflictError("pf-secret-abcde")) == "Secret already exists: pf-secret-abcde"


class TestInMemorySecretStore:
    """Tests for basic store operations."""

    def test_create_and_read(self, store):
        """Test a created record can be read back."""
        store.create_secret("pf-secret-abcde", {"token": b"t1"})

        record = store.read_secret("pf-secret-abcde")
        assert record == SecretRecord(name="pf-secret-abcde", data={"token": b"t1"})

    def test_create_conflict(self, store):
        """Test creating an existing name raises a conflict."""
        store.create_secret("pf-secret-abcde", {"token": b"t1"})

        with pytest.raises(SecretConflictError):
            store.create_secret("pf-secret-abcde", {"token": b"t2"})
        assert store.read_secret("pf-secret-abcde").data == {"token": b"t1"}

    def test_replace(self, store):
        """Test replace overwrites the payload."""
        store.create_secret("pf-secret-abcde", {"token": b"t1"})
        store.replace_secret("pf-secret-abcde", {"token": b"t2"})

        assert store.read_secret("pf-secret-abcde").data == {"token": b"t2"}

    def test_replace_missing(self, store):
        """Test replacing a missing record raises not found."""
        with pytest.raises(SecretNotFoundError):
            store.replace_secret("pf-secret-abcde", {"token": b"t1"})

    def test_read_missing(self, store):
        """Test reading a missing record raises not found."""
        with pytest.raises(SecretNotFoundError):
            store.read_secret("pf-secret-abcde")

    def test_delete(self, store):
        """Test deleted records are gone."""
        store.create_secret("pf-secret-abcde", {"token": b"t1"})
        store.delete_secret("pf-secret-abcde")

        assert "pf-secret-abcde" not in store
        with pytest.raises(SecretNotFoundError):
            store.read_secret("pf-secret-abcde")

    def test_delete_missing(self, store):
        """Test deleting a missing record raises not found."""
        with pytest.raises(SecretNotFoundError):
            store.delete_secret("pf-secret-abcde")

    def test_payload_is_copied(self, store):
        """Test the store does not alias the caller's payload."""
        payload = {"token": b"t1"}
        store.create_secret("pf-secret-abcde", payload)
        payload["token"] = b"changed"

        assert store.read_secret("pf-secret-abcde").data == {"token": b"t1"}

    def test_prepopulated_records(self):
        """Test records passed at construction are readable."""
        store = InMemorySecretStore({"pf-secret-abcde": {"token": b"t1"}})
        assert store.names() == ["pf-secret-abcde"]

    def test_calls_recorded(self, store):
        """Test every call is recorded and writes() filters reads."""
        store.create_secret("pf-secret-abcde", {"token": b"t1"})
        store.read_secret("pf-secret-abcde")
        store.delete_secret("pf-secret-abcde")

        assert store.calls == [
            ("create", "pf-secret-abcde"),
            ("read", "pf-secret-abcde"),
            ("delete", "pf-secret-abcde"),
        ]
        assert store.writes() == [
            ("create", "pf-secret-abcde"),
            ("delete", "pf-secret-abcde"),
        ]


class TestFailureInjection:
    """Tests for fail_next and stale_reads."""

    def test_fail_next(self, store):
        """Test queued failures are raised in order, then calls succeed."""
        store.fail_next("create", SecretStoreError("etcd timeout"), times=2)

        for _ in range(2):
            with pytest.raises(SecretStoreError, match="etcd timeout"):
                store.create_secret("pf-secret-abcde", {"token": b"t1"})

        store.create_secret("pf-secret-abcde", {"token": b"t1"})
        assert "pf-secret-abcde" in store

    def test_fail_next_wraps_foreign_errors(self, store):
        """Test non-store errors are wrapped as SecretStoreError."""
        cause = ConnectionError("reset by peer")
        store.fail_next("read", cause)

        with pytest.raises(SecretStoreError) as exc_info:
            store.read_secret("pf-secret-abcde")
        assert exc_info.value.cause is cause

    def test_fail_next_only_affects_operation(self, store):
        """Test failures are queued per operation."""
        store.fail_next("delete", SecretStoreError("nope"))
        store.create_secret("pf-secret-abcde", {"token": b"t1"})

        with pytest.raises(SecretStoreError):
            store.delete_secret("pf-secret-abcde")
        assert "pf-secret-abcde" in store

    def test_stale_reads_after_delete(self, store):
        """Test stale reads serve a deleted record until the budget runs out."""
        store.create_secret("pf-secret-abcde", {"token": b"t1"})
        store.stale_reads("pf-secret-abcde", 2)
        store.delete_secret("pf-secret-abcde")

        assert store.read_secret("pf-secret-abcde").data == {"token": b"t1"}
        assert store.read_secret("pf-secret-abcde").data == {"token": b"t1"}
        with pytest.raises(SecretNotFoundError):
            store.read_secret("pf-secret-abcde")

    def test_stale_reads_ignored_for_live_record(self, store):
        """Test the stale budget is not consumed while the record exists."""
        store.create_secret("pf-secret-abcde", {"token": b"t1"})
        store.stale_reads("pf-secret-abcde", 1)
        store.read_secret("pf-secret-abcde")
        store.delete_secret("pf-secret-abcde")

        assert store.read_secret("pf-secret-abcde").data == {"token": b"t1"}

    def test_recreate_clears_tombstone(self, store):
        """Test a recreated record is served rather than the old copy."""
        store.create_secret("pf-secret-abcde", {"token": b"t1"})
        store.stale_reads("pf-secret-abcde", 5)
        store.delete_secret("pf-secret-abcde")
        store.create_secret("pf-secret-abcde", {"token": b"t2"})
        store.delete_secret("pf-secret-abcde")

        assert store.read_secret("pf-secret-abcde").data == {"token": b"t2"}
