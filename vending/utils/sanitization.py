"""
Utilidades de sanitización para prevenir XSS y validar entrada de datos.

Se aplican a los campos de texto libre (nombres, direcciones, notas,
conceptos) antes de guardarlos en el almacén o mostrarlos en la interfaz.
"""
from __future__ import annotations

import re
from typing import Any

from vending.constants import (
    ADDRESS_MAX_LENGTH,
    CONCEPT_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
)

_TAG_RE = re.compile(r"<[^>]*>")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def sanitize_text(value: Any, max_length: int = 500) -> str:
    """
    Sanitiza texto de entrada para prevenir XSS y limitar longitud.

    Parámetros:
        value: Valor a sanitizar (se convierte a string)
        max_length: Longitud máxima permitida

    Retorna:
        String sanitizado y truncado
    """
    if value is None:
        return ""

    cleaned = str(value).strip()

    # Se remueven tags HTML en lugar de escaparlos para evitar doble
    # codificación en el almacén y en los reportes.
    if "<" in cleaned and ">" in cleaned:
        cleaned = _TAG_RE.sub("", cleaned).strip()

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    return cleaned


def sanitize_notes(value: Any) -> str:
    """Sanitiza campos de notas/observaciones."""
    return sanitize_text(value, max_length=NOTES_MAX_LENGTH)


def sanitize_name(value: Any) -> str:
    """
    Sanitiza nombres (máquinas, lugares, usuarios, productos).

    Parámetros:
        value: Nombre a sanitizar

    Retorna:
        String sanitizado
    """
    return sanitize_text(value, max_length=NAME_MAX_LENGTH)


def sanitize_address(value: Any) -> str:
    return sanitize_text(value, max_length=ADDRESS_MAX_LENGTH)


def sanitize_concept(value: Any) -> str:
    """Sanitiza conceptos de costos (insumos, transporte, etc)."""
    return sanitize_text(value, max_length=CONCEPT_MAX_LENGTH)


def sanitize_url(value: Any) -> str:
    """
    Sanitiza URLs (enlaces de Google Maps).

    Solo se aceptan esquemas http/https; cualquier otro valor se descarta.
    """
    cleaned = sanitize_text(value, max_length=ADDRESS_MAX_LENGTH)
    if not cleaned:
        return ""
    if not cleaned.lower().startswith(("http://", "https://")):
        return ""
    return cleaned


def sanitize_email(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()[:NAME_MAX_LENGTH * 2]


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))
