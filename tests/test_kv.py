from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import WatchError

from vending.utils import kv as kv_module
from vending.utils.kv import (
    MemoryKV,
    RedisKV,
    StorageUnavailableError,
    get_kv,
    get_storage_status,
    remove_where,
    upsert_by_id,
)


class TestMemoryKV:
    def test_set_and_get_roundtrip_copies(self):
        store = MemoryKV()
        data = [{"id": "a", "nombre": "Uno"}]
        store.set("k", data)

        leido = store.get("k")
        leido[0]["nombre"] = "Cambiado"

        assert store.get("k")[0]["nombre"] == "Uno"

    def test_get_missing_returns_none(self):
        assert MemoryKV().get("nada") is None

    def test_update_uses_default_copy(self):
        store = MemoryKV()
        default = []

        store.update("lista", lambda items: items + [1], default=default)

        assert store.get("lista") == [1]
        assert default == []

    def test_delete(self):
        store = MemoryKV()
        store.set("k", 1)
        store.delete("k")
        store.delete("k")
        assert store.get("k") is None


class TestRedisKV:
    def _client(self, pipe):
        client = MagicMock()
        client.pipeline.return_value.__enter__.return_value = pipe
        return client

    def test_get_decodes_json(self):
        client = MagicMock()
        client.get.return_value = '{"id": "x"}'

        assert RedisKV(client).get("k") == {"id": "x"}

    def test_update_watch_multi_execute(self):
        pipe = MagicMock()
        pipe.get.return_value = '[{"id": "a"}]'
        store = RedisKV(self._client(pipe))

        result = store.update("k", lambda items: items + [{"id": "b"}], default=[])

        assert result == [{"id": "a"}, {"id": "b"}]
        pipe.watch.assert_called_once_with("k")
        pipe.multi.assert_called_once()
        pipe.set.assert_called_once_with("k", '[{"id": "a"}, {"id": "b"}]')
        pipe.execute.assert_called_once()

    def test_update_watches_guard_keys(self):
        pipe = MagicMock()
        pipe.get.return_value = None
        store = RedisKV(self._client(pipe))

        store.update("k", lambda items: items, default=[], guard_keys=["g1", "g2"])

        pipe.watch.assert_called_once_with("k", "g1", "g2")

    def test_update_error_in_fn_skips_write(self):
        pipe = MagicMock()
        pipe.get.return_value = None

        def _reject(_items):
            raise ValueError("en uso")

        with pytest.raises(ValueError):
            RedisKV(self._client(pipe)).update("k", _reject, default=[])
        pipe.execute.assert_not_called()

    def test_update_retries_on_watch_error(self):
        pipe = MagicMock()
        pipe.get.return_value = None
        pipe.execute.side_effect = [WatchError(), True]
        calls = []

        def _append(items):
            calls.append(1)
            return items + ["x"]

        result = RedisKV(self._client(pipe)).update("k", _append, default=[])

        assert result == ["x"]
        assert len(calls) == 2

    def test_update_gives_up_after_max_retries(self):
        pipe = MagicMock()
        pipe.get.return_value = None
        pipe.execute.side_effect = WatchError()

        with pytest.raises(StorageUnavailableError):
            RedisKV(self._client(pipe)).update("k", lambda items: items, default=[])


class TestBackendSelection:
    def test_memory_in_dev_without_redis(self):
        kv_module.reset_kv()
        with patch("vending.utils.kv.get_redis_client", return_value=None):
            store = get_kv()
        assert isinstance(store, MemoryKV)
        assert get_storage_status()["persistent"] is False

    def test_prod_without_redis_raises(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")
        monkeypatch.delenv("ALLOW_MEMORY_KV_FALLBACK", raising=False)
        kv_module.reset_kv()
        with patch("vending.utils.kv.get_redis_client", return_value=None):
            with pytest.raises(StorageUnavailableError):
                get_kv()

    def test_prod_with_fallback_allowed(self, monkeypatch):
        monkeypatch.setenv("ENV", "prod")
        monkeypatch.setenv("ALLOW_MEMORY_KV_FALLBACK", "1")
        kv_module.reset_kv()
        with patch("vending.utils.kv.get_redis_client", return_value=None):
            assert get_kv().backend == "memory"

    def test_redis_when_available(self):
        kv_module.reset_kv()
        with patch("vending.utils.kv.get_redis_client", return_value=MagicMock()):
            store = get_kv()
        assert store.backend == "redis"
        assert get_storage_status()["warning"] is None

    def test_invalid_redis_scheme_ignored(self, monkeypatch):
        monkeypatch.setenv("REDIS_URL", "http://localhost:6379")
        kv_module.reset_kv()
        assert kv_module.get_redis_client() is None
        assert get_storage_status()["redis_url_valid"] is False


def test_upsert_by_id_replaces_or_appends():
    items = [{"id": "a", "v": 1}]
    upsert_by_id(items, {"id": "a", "v": 2})
    upsert_by_id(items, {"id": "b", "v": 3})
    assert items == [{"id": "a", "v": 2}, {"id": "b", "v": 3}]


def test_remove_where():
    items = [{"maquinaId": "m1"}, {"maquinaId": "m2"}, {"maquinaId": "m1"}]
    assert remove_where(items, "maquinaId", "m1") == [{"maquinaId": "m2"}]
