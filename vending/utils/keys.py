"""Claves del almacén y generación de identificadores.

Todas las entidades se particionan por usuario bajo el prefijo ``APP_NAME``::

    vending:lugares:{userId}          lista de lugares
    vending:lugar:{userId}:{id}       lugar individual
    vending:maquinas:{userId}         lista de máquinas
    vending:maquina:{userId}:{id}     máquina individual
    vending:recolecciones:{userId}    lista de recolecciones
    vending:costos:{userId}           lista de costos de insumos
    vending:usuario:{email}           usuario por email
    vending:usuario:id:{userId}       usuario por id
"""
from __future__ import annotations

import secrets
import string
import time

from vending.constants import APP_NAME

_ID_ALPHABET = string.ascii_lowercase + string.digits


def lugares_key(user_id: str) -> str:
    return f"{APP_NAME}:lugares:{user_id}"


def lugar_key(user_id: str, lugar_id: str) -> str:
    return f"{APP_NAME}:lugar:{user_id}:{lugar_id}"


def maquinas_key(user_id: str) -> str:
    return f"{APP_NAME}:maquinas:{user_id}"


def maquina_key(user_id: str, maquina_id: str) -> str:
    return f"{APP_NAME}:maquina:{user_id}:{maquina_id}"


def recolecciones_key(user_id: str) -> str:
    return f"{APP_NAME}:recolecciones:{user_id}"


def costos_key(user_id: str) -> str:
    return f"{APP_NAME}:costos:{user_id}"


def usuario_email_key(email: str) -> str:
    return f"{APP_NAME}:usuario:{(email or '').strip().lower()}"


def usuario_id_key(user_id: str) -> str:
    return f"{APP_NAME}:usuario:id:{user_id}"


def login_attempts_key(identifier: str) -> str:
    return f"{APP_NAME}:login_attempts:{identifier}"


def generate_id(prefix: str) -> str:
    """Genera ``{prefix}-{epoch_ms}-{9 caracteres aleatorios}``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"
