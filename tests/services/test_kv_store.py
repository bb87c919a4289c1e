"""SqlKeyValueStore 테스트"""

from src.db.models import KeyValueEntryModel
from src.services.kv_store import SqlKeyValueStore


class TestSqlKeyValueStore:
    def test_get_missing_returns_none(self, sql_store: SqlKeyValueStore):
        assert sql_store.get("local:session") is None

    def test_set_then_get(self, sql_store: SqlKeyValueStore):
        sql_store.set("local:session", "첫눈".encode("utf-8"))
        assert sql_store.get("local:session").decode("utf-8") == "첫눈"

    def test_set_overwrites(self, sql_store: SqlKeyValueStore, db_session):
        sql_store.set("k", b"one")
        sql_store.set("k", b"two")
        assert sql_store.get("k") == b"two"
        assert db_session.query(KeyValueEntryModel).count() == 1

    def test_remove_is_idempotent(self, sql_store: SqlKeyValueStore):
        sql_store.set("k", b"v")
        sql_store.remove("k")
        sql_store.remove("k")
        assert sql_store.get("k") is None
