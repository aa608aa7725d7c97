"""Tests for the PersistenceAdapter protocol, SQLite adapter and DatabaseConfig."""

import pytest

from saveforge.metadata.loader import EntityModel, FieldDefinition
from saveforge.persistence import DatabaseConfig, PersistenceAdapter, create_adapter
from saveforge.persistence.sequences import SequenceService
from saveforge.persistence.sqlite import SQLiteAdapter


@pytest.fixture
def model():
    return EntityModel(
        name="Organisation",
        display_name="Organisation",
        plural_name="Organisations",
        primary_key="id",
        abbreviation="ORG",
        fields=[
            FieldDefinition(name="id", type="id", display_name="ID", primary_key=True),
            FieldDefinition(name="friendlyName", type="string", display_name="Friendly Name"),
            FieldDefinition(name="headcount", type="integer", display_name="Headcount"),
            FieldDefinition(name="createdAt", type="datetime", display_name="Created At"),
            FieldDefinition(name="updatedAt", type="datetime", display_name="Updated At"),
        ],
    )


@pytest.fixture
def adapter(model):
    adapter = SQLiteAdapter(":memory:")
    adapter.connect()
    adapter.initialize_entity(model)
    yield adapter
    adapter.close()


class TestPersistenceAdapterProtocol:
    def test_sqlite_adapter_is_instance(self):
        assert isinstance(SQLiteAdapter(":memory:"), PersistenceAdapter)

    def test_conn_lifecycle(self):
        adapter = SQLiteAdapter(":memory:")
        assert adapter.conn is None
        adapter.connect()
        assert adapter.conn is not None
        adapter.close()
        assert adapter.conn is None

    def test_operations_require_connection(self, model):
        with pytest.raises(RuntimeError, match="not connected"):
            SQLiteAdapter(":memory:").insert(model, {})


class TestSQLiteAdapter:
    def test_insert_generates_sequence_ids(self, adapter, model):
        first = adapter.insert(model, {"friendlyName": "Acme"})
        second = adapter.insert(model, {"friendlyName": "Globex"})

        assert first["id"] == "ORG-00001"
        assert second["id"] == "ORG-00002"
        assert first["createdAt"] is not None
        assert first["updatedAt"] is not None

    def test_insert_keeps_explicit_id(self, adapter, model):
        row = adapter.insert(model, {"id": "ORG-99999", "friendlyName": "Acme"})
        assert row["id"] == "ORG-99999"

    def test_insert_does_not_mutate_input(self, adapter, model):
        data = {"friendlyName": "Acme"}
        adapter.insert(model, data)
        assert data == {"friendlyName": "Acme"}

    def test_insert_ignores_unknown_keys(self, adapter, model):
        row = adapter.insert(model, {"friendlyName": "Acme", "transient": True})
        assert "transient" not in row

    def test_update(self, adapter, model):
        row = adapter.insert(model, {"friendlyName": "Acme", "headcount": 3})
        updated = adapter.update(model, row["id"], {**row, "headcount": 4})

        assert updated["headcount"] == 4
        assert updated["friendlyName"] == "Acme"
        assert adapter.get(model, row["id"])["headcount"] == 4

    def test_update_missing_returns_none(self, adapter, model):
        assert adapter.update(model, "ORG-00404", {"friendlyName": "Nobody"}) is None

    def test_get_missing_returns_none(self, adapter, model):
        assert adapter.get(model, "ORG-00404") is None


class TestSequenceService:
    def test_current_value(self, adapter):
        sequences = SequenceService(adapter.conn)
        assert sequences.current_value("Thing") == 0
        assert sequences.next_id("Thing", "THG") == "THG-00001"
        assert sequences.current_value("Thing") == 1


class TestDatabaseConfig:
    def test_from_env_database_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///override.db")
        monkeypatch.setenv("SAVEFORGE_DB_PATH", "/tmp/ignored.db")
        assert DatabaseConfig.from_env().url == "sqlite:///override.db"

    def test_from_env_db_path(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("SAVEFORGE_DB_PATH", "/tmp/test.db")
        config = DatabaseConfig.from_env()
        assert config.url == "sqlite:////tmp/test.db"
        assert config.is_sqlite

    def test_from_env_with_base_path(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("SAVEFORGE_DB_PATH", raising=False)
        config = DatabaseConfig.from_env(base_path=tmp_path)
        assert config.url == f"sqlite:///{tmp_path / 'data' / 'saveforge.db'}"

    def test_from_env_default(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("SAVEFORGE_DB_PATH", raising=False)
        assert DatabaseConfig.from_env().url == "sqlite:///saveforge.db"


class TestCreateAdapter:
    def test_sqlite(self, tmp_path):
        adapter = create_adapter(DatabaseConfig(url=f"sqlite:///{tmp_path / 'x.db'}"))
        assert isinstance(adapter, SQLiteAdapter)
        assert adapter.db_path == str(tmp_path / "x.db")

    def test_sqlite_memory(self):
        adapter = create_adapter(DatabaseConfig(url="sqlite:///"))
        assert adapter.db_path == ":memory:"

    def test_unsupported_scheme(self):
        with pytest.raises(ValueError, match="Unsupported"):
            create_adapter(DatabaseConfig(url="postgresql://localhost/db"))
