"""Unit tests for versioned storage envelopes."""
from flashcat.services.store_versioning import VersionedStorage, get_stored_version, needs_migration


def add_field(data):
    return {**data, "added": True}


def rename_field(data):
    data = dict(data)
    data["name"] = data.pop("title")
    return data


class TestVersionedStorage:
    def test_serialize_wraps_with_current_version(self):
        storage = VersionedStorage(3)
        assert storage.serialize({"a": 1}) == {"version": 3, "data": {"a": 1}}

    def test_current_envelope_is_unwrapped(self):
        storage = VersionedStorage(2, {2: add_field})
        assert storage.deserialize({"version": 2, "data": {"a": 1}}) == {"a": 1}

    def test_migrations_run_in_order(self):
        storage = VersionedStorage(3, {2: add_field, 3: rename_field})
        result = storage.deserialize({"version": 1, "data": {"title": "x"}})
        assert result == {"name": "x", "added": True}

    def test_bare_payload_is_version_one(self):
        storage = VersionedStorage(2, {2: add_field})
        assert storage.deserialize({"title": "x"}) == {"title": "x", "added": True}

    def test_missing_steps_are_skipped(self):
        storage = VersionedStorage(3, {3: add_field})
        assert storage.deserialize({"version": 1, "data": {}}) == {"added": True}

    def test_failed_migration_returns_none(self):
        storage = VersionedStorage(2, {2: rename_field})
        assert storage.deserialize({"version": 1, "data": {"no_title": 1}}) is None

    def test_empty_or_invalid_input(self):
        storage = VersionedStorage(1)
        assert storage.deserialize(None) is None
        assert storage.deserialize({}) is None
        assert storage.deserialize([1, 2]) is None


def test_version_helpers():
    assert get_stored_version(None) == 0
    assert get_stored_version({"x": 1}) == 1
    assert get_stored_version({"version": 4, "data": {}}) == 4
    assert needs_migration({"version": 1, "data": {}}, 2)
    assert not needs_migration({"version": 2, "data": {}}, 2)
    assert not needs_migration(None, 2)
