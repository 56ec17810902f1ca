"""Dependencias compartidas de la API REST.

- Identidad: solo ``Authorization: Bearer <token>`` (JWT firmado). Los
  encabezados como ``X-User-Id`` o un ``userId`` en el cuerpo se ignoran.
- Errores: :class:`ApiError` se serializa como ``{"error": ...}`` con su
  código HTTP; :func:`storage_guard` convierte fallos de almacenamiento en
  500 con un mensaje genérico y los registra.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Type, TypeVar

from fastapi import Header
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError

from vending.services.errors import ServiceError
from vending.utils.auth import decode_token
from vending.utils.logger import get_logger

logger = get_logger("API")

M = TypeVar("M", bound=BaseModel)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


def validation_details(exc: ValidationError) -> list:
    return jsonable_encoder(exc.errors(include_url=False))


def parse_model(model: Type[M], data: Any) -> M:
    """Valida ``data`` contra ``model`` o responde 400 con la lista de errores."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ApiError(400, "Datos inválidos", details=validation_details(exc)) from exc


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        return ""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def resolve_token_payload(authorization: str | None) -> dict | None:
    return decode_token(_bearer_token(authorization))


def get_current_user_id(authorization: str | None = Header(default=None)) -> str:
    payload = resolve_token_payload(authorization)
    if payload is None:
        raise ApiError(401, "Usuario no autenticado")
    return str(payload["sub"])


def get_optional_user_id(authorization: str | None = Header(default=None)) -> str | None:
    payload = resolve_token_payload(authorization)
    return str(payload["sub"]) if payload else None


@contextmanager
def storage_guard(message: str) -> Iterator[None]:
    """Errores de negocio pasan tal cual; cualquier otro fallo -> 500."""
    try:
        yield
    except (ApiError, ServiceError):
        raise
    except Exception as exc:
        logger.exception("%s: %s", message, exc)
        raise ApiError(500, message) from exc
