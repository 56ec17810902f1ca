"""Servicio de Recolecciones.

Registrar una visita son dos pasos no transaccionales:

1. Guardar la recolección (upsert por id) en la lista del usuario.
2. Actualizar la máquina (fecha de última recolección y stock).

Si el segundo paso falla, el error se registra y la recolección queda
guardada; no hay rollback.
"""
from __future__ import annotations

from typing import List

from vending.schemas.vending_schemas import Recoleccion
from vending.services.comprobante_service import ComprobanteService
from vending.services.errors import NotFoundError
from vending.services.lugar_service import LugarService
from vending.services.maquina_service import MaquinaService
from vending.utils.keys import generate_id, recolecciones_key
from vending.utils.kv import get_kv, upsert_by_id
from vending.utils.logger import get_logger

logger = get_logger("RecoleccionService")


class RecoleccionService:
    @staticmethod
    def list_recolecciones(user_id: str, maquina_id: str | None = None) -> List[Recoleccion]:
        data = get_kv().get(recolecciones_key(user_id)) or []
        recolecciones = [Recoleccion.model_validate(item) for item in data]
        if maquina_id:
            recolecciones = [r for r in recolecciones if r.maquina_id == maquina_id]
        return recolecciones

    @staticmethod
    def save_recoleccion(user_id: str, recoleccion: Recoleccion) -> Recoleccion:
        """
        Registra (o re-guarda con el mismo id) una recolección.

        Raises:
            NotFoundError: si la máquina no existe
        """
        if MaquinaService.get_maquina(user_id, recoleccion.maquina_id) is None:
            raise NotFoundError("Máquina no encontrada")

        if not recoleccion.id:
            recoleccion.id = generate_id("recoleccion")

        data = recoleccion.to_dict()
        existia = {"value": False}

        def _upsert(items: list) -> list:
            existia["value"] = any(item.get("id") == recoleccion.id for item in items)
            return upsert_by_id(items, data)

        get_kv().update(recolecciones_key(user_id), _upsert, default=[])
        logger.info(
            "Recolección guardada: %s (máquina %s, netos %.2f)",
            recoleccion.id,
            recoleccion.maquina_id,
            recoleccion.ingresos_netos or 0,
        )

        try:
            MaquinaService.apply_recoleccion(
                user_id, recoleccion, aplicar_stock=not existia["value"]
            )
        except Exception:
            logger.exception(
                "Recolección %s guardada pero no se pudo actualizar la máquina %s",
                recoleccion.id,
                recoleccion.maquina_id,
            )
        return recoleccion


    @staticmethod
    def get_recoleccion(user_id: str, recoleccion_id: str) -> Recoleccion | None:
        for recoleccion in RecoleccionService.list_recolecciones(user_id):
            if recoleccion.id == recoleccion_id:
                return recoleccion
        return None

    @staticmethod
    def build_comprobante(user_id: str, recoleccion_id: str) -> bytes:
        """
        PDF del comprobante de una recolección.

        Raises:
            NotFoundError: si la recolección o su máquina no existen
        """
        recoleccion = RecoleccionService.get_recoleccion(user_id, recoleccion_id)
        if recoleccion is None:
            raise NotFoundError("Recolección no encontrada")
        maquina = MaquinaService.get_maquina(user_id, recoleccion.maquina_id)
        if maquina is None:
            raise NotFoundError("Máquina no encontrada")
        lugar = LugarService.get_lugar(user_id, maquina.lugar_id)
        return ComprobanteService.generate_comprobante_pdf(recoleccion, maquina, lugar)
