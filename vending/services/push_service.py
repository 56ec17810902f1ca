"""Envío de recordatorios urgentes como notificación push (Neynar / Farcaster).

Solo se envían los recordatorios de prioridad ``alta`` y solo si el
usuario indicó un FID numérico y hay ``NEYNAR_API_KEY`` configurada.
"""
from __future__ import annotations

import os
import uuid
from typing import List

import httpx

from vending.constants import NEYNAR_NOTIFICATIONS_URL, PUSH_TIMEOUT_SECONDS
from vending.enums import Prioridad
from vending.schemas.vending_schemas import NotificacionRecoleccion
from vending.utils.logger import get_logger

logger = get_logger("PushService")

TITLE = "Máquinas listas para recolección"
TITLE_MAX_LENGTH = 32
BODY_MAX_LENGTH = 128


def parse_fid(value) -> int | None:
    """FID de Farcaster: entero positivo; cualquier otro valor se ignora."""
    if value is None or isinstance(value, bool):
        return None
    try:
        fid = int(str(value).strip())
    except ValueError:
        return None
    return fid if fid > 0 else None


def build_message(urgentes: List[NotificacionRecoleccion]) -> str:
    lista = "\n".join(
        f"• {n.maquina_nombre} ({n.ubicacion})" if n.ubicacion else f"• {n.maquina_nombre}"
        for n in urgentes
    )
    return f"Tienes {len(urgentes)} máquina(s) que necesitan recolección:\n\n{lista}"


def send_notification(fid: int, title: str, body: str, target_url: str = "") -> dict:
    """
    Envía una notificación de mini-app a un FID.

    Returns:
        ``{"state": "success" | "no_api_key" | "error", ...}``
    """
    api_key = (os.getenv("NEYNAR_API_KEY") or "").strip()
    if not api_key:
        return {"state": "no_api_key"}

    payload = {
        "target_fids": [fid],
        "notification": {
            "title": title[:TITLE_MAX_LENGTH],
            "body": body[:BODY_MAX_LENGTH],
            "target_url": target_url or os.getenv("APP_URL", ""),
            "uuid": str(uuid.uuid4()),
        },
    }
    try:
        response = httpx.post(
            NEYNAR_NOTIFICATIONS_URL,
            json=payload,
            headers={"x-api-key": api_key},
            timeout=PUSH_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.error("Error enviando notificación a FID %s: %s", fid, exc)
        return {"state": "error", "error": str(exc)[:200]}
    try:
        contenido = response.json()
    except ValueError:
        # 2xx sin JSON (proxies, respuestas vacías)
        contenido = response.text[:200]
    return {"state": "success", "response": contenido}


def enviar_recordatorios(
    fid_value,
    notificaciones: List[NotificacionRecoleccion],
) -> dict:
    """
    Envía los recordatorios urgentes.

    Returns:
        Dict con ``enviado`` (bool), ``mensaje`` y las notificaciones
        consideradas.
    """
    fid = parse_fid(fid_value)
    if fid is None:
        return {
            "enviado": False,
            "mensaje": "Se requiere conexión a Farcaster para enviar notificaciones",
            "notificaciones": notificaciones,
        }

    urgentes = [n for n in notificaciones if n.prioridad == Prioridad.alta]
    if not urgentes:
        return {
            "enviado": False,
            "mensaje": "No hay máquinas que requieran recolección urgente",
            "notificaciones": [],
        }

    resultado = send_notification(fid, TITLE, build_message(urgentes))
    if resultado["state"] == "no_api_key":
        mensaje = "NEYNAR_API_KEY no configurada"
    elif resultado["state"] == "success":
        mensaje = f"Notificación enviada ({len(urgentes)} máquina(s))"
    else:
        mensaje = "No se pudo enviar la notificación"
    return {
        "enviado": resultado["state"] == "success",
        "mensaje": mensaje,
        "resultado": resultado,
        "notificaciones": urgentes,
    }
