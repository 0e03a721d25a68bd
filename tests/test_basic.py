"""
Basic functionality tests for snapkv.

Tests cover:
- SET/GET operations
- REMOVE operations
- Overwrites
- Key validation
- Independence of returned values
"""
import pytest
from snapkv import (
    Array,
    Boolean,
    InvalidKeyError,
    KeyValueStore,
    LockError,
    LockPoisonedError,
    Null,
    Number,
    Object,
    SnapshotError,
    SnapshotIOError,
    StoreError,
    String,
)


class TestBasicOperations:
    """Test basic SET, GET, REMOVE operations."""

    def test_set_and_get(self, populated_store):
        """Test that every variant reads back equal to what was stored."""
        assert populated_store.get("name") == String("John")
        assert populated_store.get("age") == Number(26)
        assert populated_store.get("married") == Boolean(True)
        assert populated_store.get("citizenships") == Array([String("American"), String("Swiss")])
        assert populated_store.get("address") == Object({
            "street_number": Number(12),
            "street": String("Karlston"),
            "city": String("NYC"),
        })
        assert populated_store.get("job_occupation") == Null()

    def test_get_nonexistent_key(self, store):
        """Test reading a key that doesn't exist."""
        assert store.get("nonexistent") is None

    def test_set_overwrites_existing_key(self, store):
        """Test that setting an existing key replaces the value."""
        store.set("key1", String("value1"))
        store.set("key1", String("value2"))
        assert store.get("key1") == String("value2")

    def test_overwrite_does_not_merge_objects(self, store):
        """Test that overwriting an object replaces it entirely."""
        store.set("obj", Object({"a": Number(1)}))
        store.set("obj", Object({"b": Number(2)}))
        assert store.get("obj") == Object({"b": Number(2)})

    def test_overwrite_changes_variant(self, store):
        """Test that a key can switch between variants."""
        store.set("key", Number(1))
        store.set("key", Boolean(True))
        assert store.get("key") == Boolean(True)

    def test_remove_existing_key(self, populated_store):
        """Test removing every key one by one."""
        for key in ["name", "age", "married", "citizenships", "address", "job_occupation"]:
            populated_store.remove(key)
            assert populated_store.get(key) is None
        assert len(populated_store) == 0

    def test_remove_nonexistent_key(self, populated_store):
        """Test that removing an absent key is a silent no-op."""
        before = populated_store.items()
        assert populated_store.remove("nonexistent") is None
        assert populated_store.items() == before

    def test_remove_leaves_other_keys(self, populated_store):
        populated_store.remove("age")
        assert populated_store.get("name") == String("John")
        assert len(populated_store) == 5

    def test_empty_string_value(self, store):
        """Test storing an empty string value."""
        store.set("key1", String(""))
        assert store.get("key1") == String("")

    def test_special_characters_in_key(self, store):
        """Test keys with special characters."""
        special_keys = [
            "key:with:colons",
            "key\nwith\nnewlines",
            "key,with,commas",
            "key with spaces",
            "key@#$%^&*()",
            "ключ",
        ]
        for key in special_keys:
            store.set(key, String("value"))
            assert store.get(key) == String("value")

    def test_plain_python_values_are_coerced(self, store):
        """Test that plain JSON-compatible objects are accepted by set."""
        store.set("user", {"name": "John", "tags": ["a", "b"], "active": True, "score": None})
        assert store.get("user") == Object({
            "name": String("John"),
            "tags": Array([String("a"), String("b")]),
            "active": Boolean(True),
            "score": Null(),
        })

    def test_unsupported_value_type(self, store):
        with pytest.raises(TypeError):
            store.set("key", object())
        assert "key" not in store


class TestKeyValidation:
    """Test that keys must be non-empty strings."""

    def test_empty_key_rejected(self, store):
        with pytest.raises(InvalidKeyError):
            store.set("", String("value"))
        assert len(store) == 0

    def test_non_string_key_rejected(self, store):
        with pytest.raises(InvalidKeyError):
            store.set(42, String("value"))

    def test_invalid_key_is_value_error(self, store):
        """InvalidKeyError can be caught as a ValueError."""
        with pytest.raises(ValueError):
            store.set("", String("value"))


class TestValueIndependence:
    """Test that callers never share mutable state with the store."""

    def test_mutating_source_dict_does_not_change_store(self, store):
        fields = {"a": Number(1)}
        store.set("obj", Object(fields))
        fields["b"] = Number(2)
        assert store.get("obj") == Object({"a": Number(1)})

    def test_mutating_source_list_does_not_change_store(self, store):
        items = [Number(1)]
        store.set("arr", Array(items))
        items.append(Number(2))
        assert store.get("arr") == Array([Number(1)])

    def test_returned_value_is_immutable(self, store):
        store.set("obj", Object({"a": Number(1)}))
        value = store.get("obj")
        with pytest.raises(TypeError):
            value.fields["a"] = Number(2)
        with pytest.raises(AttributeError):
            value.fields = {}

    def test_to_python_returns_fresh_containers(self, store):
        store.set("arr", Array([Number(1)]))
        plain = store.get("arr").to_python()
        plain.append(2)
        assert store.get("arr") == Array([Number(1)])

    def test_get_after_overwrite_keeps_old_reference_intact(self, store):
        store.set("key", String("first"))
        first = store.get("key")
        store.set("key", String("second"))
        assert first == String("first")


class TestStoreHelpers:
    """Test the read-only helpers and construction paths."""

    def test_keys_sorted(self, populated_store):
        assert populated_store.keys() == sorted(
            ["name", "age", "married", "citizenships", "address", "job_occupation"]
        )

    def test_contains(self, populated_store):
        assert "name" in populated_store
        assert "missing" not in populated_store

    def test_clear(self, populated_store):
        populated_store.clear()
        assert len(populated_store) == 0
        assert populated_store.get("name") is None

    def test_from_mapping(self):
        store = KeyValueStore.from_mapping({"a": String("x"), "b": 2})
        assert store.get("a") == String("x")
        assert store.get("b") == Number(2)

    def test_new_stores_are_independent(self):
        first = KeyValueStore()
        second = KeyValueStore()
        first.set("key", String("value"))
        assert second.get("key") is None

    def test_store_equality(self, populated_store):
        copy = KeyValueStore.from_mapping(dict(populated_store.items()))
        assert copy == populated_store
        copy.remove("age")
        assert copy != populated_store


class TestErrors:
    """Test error messages and hierarchy."""

    def test_message_includes_extra_info(self):
        error = InvalidKeyError("")
        assert str(error) == "Keys must be non-empty strings: (key: '')"

    def test_snapshot_errors_share_base(self):
        error = SnapshotIOError("Snapshot file not found", "store.json")
        assert isinstance(error, SnapshotError)
        assert isinstance(error, StoreError)
        assert error.path.name == "store.json"
        assert "path: store.json" in str(error)

    def test_lock_errors_are_not_snapshot_errors(self):
        assert issubclass(LockPoisonedError, LockError)
        assert not issubclass(LockError, SnapshotError)
