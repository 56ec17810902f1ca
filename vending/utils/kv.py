"""
Almacén clave-valor con soporte para Redis (producción) y memoria (desarrollo).

Cada clave guarda un documento JSON: una lista de entidades o una entidad.
El backend se elige en el primer uso:

- ``REDIS_URL`` (o ``KV_URL``) válido y alcanzable -> :class:`RedisKV`.
- En otro caso -> :class:`MemoryKV` (los datos se pierden al reiniciar),
  salvo en producción sin ``ALLOW_MEMORY_KV_FALLBACK``, donde se lanza
  :class:`StorageUnavailableError`.

No hay reintentos ni timeouts propios más allá de los del cliente; los
errores de Redis se propagan al llamador.
"""
from __future__ import annotations

import copy
import json
import os
import threading
from typing import Any, Callable, Dict, Sequence

import redis
from redis.exceptions import WatchError

from vending.constants import KV_UPDATE_MAX_RETRIES
from vending.utils.logger import get_environment, get_logger

logger = get_logger("KVStore")

_VALID_SCHEMES = ("redis://", "rediss://", "unix://")


class StorageUnavailableError(RuntimeError):
    pass


class KVStore:
    """Contrato común: ``get``/``set``/``delete`` sobre documentos JSON."""

    backend = "abstract"

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def update(
        self,
        key: str,
        fn: Callable[[Any], Any],
        default: Any = None,
        guard_keys: Sequence[str] = (),
    ) -> Any:
        """
        Lectura-modificación-escritura atómica de una clave.

        ``fn`` recibe el valor actual (o una copia de ``default`` si la clave
        no existe) y devuelve el valor a guardar. Puede invocarse más de una
        vez si otro proceso modifica la clave entre lectura y escritura.

        ``guard_keys`` son claves que ``fn`` solo lee: si cambian antes de
        escribir, la operación se repite. Una excepción en ``fn`` cancela la
        escritura y se propaga.

        Retorna:
            El valor guardado.
        """
        raise NotImplementedError


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _loads(raw: Any) -> Any:
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    return json.loads(raw)


class MemoryKV(KVStore):
    """Mapa del proceso. Guarda JSON serializado para aislar a los llamadores."""

    backend = "memory"

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Any:
        with self._lock:
            return _loads(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = _dumps(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def update(self, key, fn, default=None, guard_keys=()):
        with self._lock:
            current = self.get(key)
            if current is None:
                current = copy.deepcopy(default)
            new_value = fn(current)
            self.set(key, new_value)
            return new_value

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class RedisKV(KVStore):
    backend = "redis"

    def __init__(self, client: "redis.Redis") -> None:
        self._client = client

    def get(self, key: str) -> Any:
        return _loads(self._client.get(key))

    def set(self, key: str, value: Any) -> None:
        self._client.set(key, _dumps(value))

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def update(self, key, fn, default=None, guard_keys=()):
        with self._client.pipeline() as pipe:
            for _ in range(KV_UPDATE_MAX_RETRIES):
                try:
                    pipe.watch(key, *guard_keys)
                    current = _loads(pipe.get(key))
                    if current is None:
                        current = copy.deepcopy(default)
                    new_value = fn(current)
                    pipe.multi()
                    pipe.set(key, _dumps(new_value))
                    pipe.execute()
                    return new_value
                except WatchError:
                    logger.info("Conflicto concurrente en %s, reintentando", key)
                    continue
        raise StorageUnavailableError(
            f"No se pudo actualizar {key} tras {KV_UPDATE_MAX_RETRIES} intentos"
        )


# =============================================================================
# SELECCIÓN DE BACKEND
# =============================================================================

_store: KVStore | None = None
_redis_client: "redis.Redis | None" = None
_init_lock = threading.Lock()


def _redis_url() -> str:
    return (os.getenv("REDIS_URL") or os.getenv("KV_URL") or "").strip()


def _allow_memory_fallback_in_prod() -> bool:
    value = (os.getenv("ALLOW_MEMORY_KV_FALLBACK") or "").strip().lower()
    return value in {"1", "true", "yes", "on"}


def _strict_backend() -> bool:
    return get_environment() == "prod" and not _allow_memory_fallback_in_prod()


def get_redis_client() -> "redis.Redis | None":
    """
    Obtiene el cliente Redis configurado.

    Returns:
        Cliente Redis o None si no está configurado/disponible
    """
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    url = _redis_url()
    if not url:
        return None
    if not url.startswith(_VALID_SCHEMES):
        logger.warning("URL de Redis inválida (esquema no soportado)")
        return None

    try:
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=5,
        )
        client.ping()
    except redis.RedisError as e:
        logger.warning("Redis no disponible: %s", str(e)[:120])
        return None

    logger.info("Redis conectado para almacenamiento")
    _redis_client = client
    return _redis_client


def get_kv() -> KVStore:
    """Devuelve el almacén del proceso, creándolo en el primer uso."""
    global _store

    if _store is not None:
        return _store

    with _init_lock:
        if _store is not None:
            return _store
        client = get_redis_client()
        if client is not None:
            _store = RedisKV(client)
        elif _strict_backend():
            logger.critical(
                "Redis requerido en producción y fallback en memoria deshabilitado."
            )
            raise StorageUnavailableError("Almacenamiento no disponible")
        else:
            logger.warning(
                "Redis NO configurado - usando almacenamiento en memoria "
                "(los datos se perderán al reiniciar)"
            )
            _store = MemoryKV()
    return _store


def set_kv(store: KVStore | None) -> None:
    """Reemplaza el almacén del proceso (pruebas y scripts)."""
    global _store
    _store = store


def reset_kv() -> None:
    global _store, _redis_client
    _store = None
    _redis_client = None


def get_storage_status() -> dict:
    """
    Obtiene el estado del almacenamiento (para diagnóstico).

    Returns:
        Dict con información del backend actual
    """
    url = _redis_url()
    backend = _store.backend if _store is not None else "sin inicializar"
    return {
        "backend": backend,
        "persistent": backend == "redis",
        "redis_url_configured": bool(url),
        "redis_url_valid": bool(url) and url.startswith(_VALID_SCHEMES),
        "strict_backend": _strict_backend(),
        "memory_fallback_allowed": _allow_memory_fallback_in_prod(),
        "environment": get_environment(),
        "warning": None
        if backend == "redis"
        else "Los datos se perderán al reiniciar. Configura REDIS_URL para persistencia.",
    }


# =============================================================================
# HELPERS PARA LISTAS DE ENTIDADES
# =============================================================================


def upsert_by_id(items: list, entity: dict) -> list:
    """Reemplaza el elemento con el mismo ``id`` o lo agrega al final."""
    for index, item in enumerate(items):
        if item.get("id") == entity.get("id"):
            items[index] = entity
            return items
    items.append(entity)
    return items


def remove_where(items: list, field: str, value: Any) -> list:
    return [item for item in items if item.get(field) != value]
