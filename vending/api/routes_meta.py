"""Rutas sin autenticación: manifiesto de mini-app y diagnóstico."""
import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from vending.api.deps import get_optional_user_id, storage_guard
from vending.constants import APP_NAME
from vending.utils.keys import costos_key, lugares_key, maquinas_key, recolecciones_key
from vending.utils.kv import get_kv, get_storage_status

router = APIRouter(tags=["meta"])


def build_manifest() -> dict:
    app_url = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")
    manifest = {
        "miniapp": {
            "version": "1",
            "name": os.getenv("APP_DISPLAY_NAME", "Gestión Vending"),
            "homeUrl": app_url,
            "iconUrl": os.getenv("APP_ICON_URL", f"{app_url}/favicon.ico"),
            "splashBackgroundColor": os.getenv("APP_SPLASH_COLOR", "#ffffff"),
            "subtitle": "Máquinas, recolecciones y rentabilidad",
            "primaryCategory": "productivity",
            "tags": [APP_NAME, "vending", "negocios"],
        }
    }
    webhook_url = os.getenv("NEYNAR_WEBHOOK_URL")
    if webhook_url:
        manifest["miniapp"]["webhookUrl"] = webhook_url

    header = os.getenv("FARCASTER_HEADER")
    payload = os.getenv("FARCASTER_PAYLOAD")
    signature = os.getenv("FARCASTER_SIGNATURE")
    if header and payload and signature:
        manifest["accountAssociation"] = {
            "header": header,
            "payload": payload,
            "signature": signature,
        }
    return manifest


@router.get("/.well-known/farcaster.json")
def farcaster_manifest():
    return JSONResponse(
        build_manifest(),
        headers={"Cache-Control": "public, max-age=3600"},
    )


def user_storage_summary(user_id: str) -> dict:
    """Claves del usuario y cantidad de entidades guardadas en cada una."""
    kv = get_kv()
    keys = {
        "lugares": lugares_key(user_id),
        "maquinas": maquinas_key(user_id),
        "recolecciones": recolecciones_key(user_id),
        "costos": costos_key(user_id),
    }
    return {
        "keys": keys,
        "counts": {name: len(kv.get(key) or []) for name, key in keys.items()},
    }


@router.get("/api/debug/storage")
def storage_status(user_id: str | None = Depends(get_optional_user_id)):
    status = get_storage_status()
    status["authenticated"] = user_id is not None
    if user_id is not None:
        with storage_guard("Error al leer el almacenamiento"):
            status["user"] = user_storage_summary(user_id)
    return status
