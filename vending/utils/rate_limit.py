"""
Rate limiting de inicios de sesión con soporte para Redis (producción) y memoria (desarrollo).

Protege ``/api/auth/login`` y el formulario de ingreso contra fuerza bruta,
compartiendo estado entre workers cuando hay Redis. Reutiliza el cliente del
almacén clave-valor (:func:`vending.utils.kv.get_redis_client`).
"""
from __future__ import annotations

import os
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List

import redis

from vending.constants import LOGIN_LOCKOUT_MINUTES, MAX_LOGIN_ATTEMPTS
from vending.utils.keys import login_attempts_key
from vending.utils.kv import get_redis_client
from vending.utils.logger import get_environment, get_logger

logger = get_logger("RateLimit")

_memory_store: Dict[str, List[datetime]] = defaultdict(list)


def _allow_memory_fallback_in_prod() -> bool:
    value = (os.getenv("ALLOW_MEMORY_RATE_LIMIT_FALLBACK") or "").strip().lower()
    return value in {"1", "true", "yes", "on"}


def _strict_rate_limit_backend() -> bool:
    return get_environment() == "prod" and not _allow_memory_fallback_in_prod()


def _build_key(email: str) -> str | None:
    key = (email or "").lower().strip()
    return key or None


def is_rate_limited(
    email: str,
    max_attempts: int = MAX_LOGIN_ATTEMPTS,
    window_minutes: int = LOGIN_LOCKOUT_MINUTES,
) -> bool:
    """
    Verifica si un email está bloqueado por demasiados intentos fallidos.

    Args:
        email: Email a verificar
        max_attempts: Número máximo de intentos permitidos
        window_minutes: Ventana de tiempo en minutos

    Returns:
        True si está bloqueado, False si puede intentar
    """
    key = _build_key(email)
    if not key:
        return False

    redis_client = get_redis_client()
    if redis_client is None and _strict_rate_limit_backend():
        # Fail-closed: en producción no se permite backend en memoria.
        return True

    if redis_client is not None:
        try:
            attempts = redis_client.get(login_attempts_key(key))
            return int(attempts or 0) >= max_attempts
        except redis.RedisError as e:
            logger.error("Error Redis is_rate_limited: %s", e)
            if _strict_rate_limit_backend():
                return True

    return _is_rate_limited_memory(key, max_attempts, window_minutes)


def _is_rate_limited_memory(key: str, max_attempts: int, window_minutes: int) -> bool:
    """Rate limiting en memoria (single worker)."""
    cutoff = datetime.now() - timedelta(minutes=window_minutes)
    _memory_store[key] = [t for t in _memory_store[key] if t > cutoff]
    return len(_memory_store[key]) >= max_attempts


def record_failed_attempt(
    email: str,
    window_minutes: int = LOGIN_LOCKOUT_MINUTES,
) -> None:
    """Registra un intento de login fallido."""
    key = _build_key(email)
    if not key:
        return

    redis_client = get_redis_client()
    if redis_client is None and _strict_rate_limit_backend():
        logger.error(
            "Intento fallido no registrado: Redis no disponible en modo estricto."
        )
        return

    if redis_client is not None:
        try:
            redis_key = login_attempts_key(key)
            pipe = redis_client.pipeline()
            pipe.incr(redis_key)
            pipe.expire(redis_key, window_minutes * 60)
            pipe.execute()
            return
        except redis.RedisError as e:
            logger.error("Error Redis record_failed_attempt: %s", e)

    _memory_store[key].append(datetime.now())


def clear_login_attempts(email: str) -> None:
    """Limpia los intentos fallidos tras login exitoso."""
    key = _build_key(email)
    if not key:
        return

    redis_client = get_redis_client()
    if redis_client is not None:
        try:
            redis_client.delete(login_attempts_key(key))
        except redis.RedisError as e:
            logger.error("Error Redis clear_login_attempts: %s", e)

    # Limpiar también en memoria (por si hubo fallback)
    _memory_store.pop(key, None)


def remaining_lockout_time(
    email: str,
    window_minutes: int = LOGIN_LOCKOUT_MINUTES,
) -> int:
    """
    Calcula los minutos restantes de bloqueo.

    Returns:
        Minutos restantes o 0 si no está bloqueado
    """
    key = _build_key(email)
    if not key:
        return 0

    redis_client = get_redis_client()
    if redis_client is None and _strict_rate_limit_backend():
        return max(1, int(window_minutes))

    if redis_client is not None:
        try:
            ttl = redis_client.ttl(login_attempts_key(key))
            if ttl and ttl > 0:
                return max(1, (ttl + 59) // 60)  # Redondear hacia arriba
            return 0
        except redis.RedisError as e:
            logger.error("Error Redis remaining_lockout_time: %s", e)

    if not _memory_store.get(key):
        return 0

    oldest_attempt = min(_memory_store[key])
    unlock_time = oldest_attempt + timedelta(minutes=window_minutes)
    remaining = (unlock_time - datetime.now()).total_seconds() / 60
    return max(0, int(remaining) + 1)


def get_rate_limit_status() -> dict:
    """Estado del rate limiting (para diagnóstico)."""
    redis_client = get_redis_client()
    return {
        "backend": "redis" if redis_client else "memory",
        "strict_backend": _strict_rate_limit_backend(),
        "memory_fallback_allowed": _allow_memory_fallback_in_prod(),
        "memory_entries": len(_memory_store),
    }
