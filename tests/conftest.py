import pytest
from snapkv import Array, Boolean, Null, Number, Object, String, get_store
from snapkv.core import shared


@pytest.fixture
def store():
    """Fresh, empty store."""
    return get_store()


@pytest.fixture
def populated_store(store):
    """Store holding one value of every variant."""
    store.set("name", String("John"))
    store.set("age", Number(26))
    store.set("married", Boolean(True))
    store.set("citizenships", Array([String("American"), String("Swiss")]))
    store.set("address", Object({
        "city": String("NYC"),
        "street": String("Karlston"),
        "street_number": Number(12),
    }))
    store.set("job_occupation", Null())
    return store


@pytest.fixture
def base_name(tmp_path):
    """Snapshot base name inside a temporary directory."""
    return str(tmp_path / "test-file")


@pytest.fixture
def fresh_shared_context(monkeypatch):
    """Reset the process-wide context so each test sees a new one."""
    monkeypatch.setattr(shared, "_shared_context", None)
    yield
