"""Servicio de Lugares.

Los lugares se guardan en una lista por usuario y, en paralelo, en una
clave por id para lectura directa. Ambas se actualizan en cada escritura.
La lista es la referencia para saber si un lugar existe al dar de alta
una máquina.
"""
from __future__ import annotations

from typing import List

from vending.schemas.vending_schemas import Lugar
from vending.services.errors import ConflictError, NotFoundError
from vending.utils.keys import generate_id, lugar_key, lugares_key, maquinas_key
from vending.utils.kv import get_kv, remove_where, upsert_by_id
from vending.utils.logger import get_logger

logger = get_logger("LugarService")


class LugarService:
    @staticmethod
    def list_lugares(user_id: str) -> List[Lugar]:
        data = get_kv().get(lugares_key(user_id)) or []
        return [Lugar.model_validate(item) for item in data]

    @staticmethod
    def get_lugar(user_id: str, lugar_id: str) -> Lugar | None:
        data = get_kv().get(lugar_key(user_id, lugar_id))
        if data is None:
            return None
        return Lugar.model_validate(data)

    @staticmethod
    def save_lugar(user_id: str, lugar: Lugar) -> Lugar:
        """Crea (sin id) o reemplaza (con id) un lugar."""
        if not lugar.id:
            lugar.id = generate_id("lugar")
        kv = get_kv()
        data = lugar.to_dict()
        kv.set(lugar_key(user_id, lugar.id), data)
        kv.update(lugares_key(user_id), lambda items: upsert_by_id(items, data), default=[])
        logger.info("Lugar guardado: %s (usuario %s)", lugar.id, user_id)
        return lugar

    @staticmethod
    def update_lugar(user_id: str, lugar: Lugar) -> Lugar:
        if not lugar.id or LugarService.get_lugar(user_id, lugar.id) is None:
            raise NotFoundError("Lugar no encontrado")
        return LugarService.save_lugar(user_id, lugar)

    @staticmethod
    def delete_lugar(user_id: str, lugar_id: str) -> None:
        """
        Elimina un lugar.

        Raises:
            NotFoundError: si el lugar no existe
            ConflictError: si alguna máquina todavía lo referencia
        """
        kv = get_kv()
        if kv.get(lugar_key(user_id, lugar_id)) is None:
            raise NotFoundError("Lugar no encontrado")

        # La lista de máquinas se vigila: un alta concurrente en este lugar
        # repite la verificación en vez de quedar huérfana.
        def _remove(items: list) -> list:
            maquinas = kv.get(maquinas_key(user_id)) or []
            en_uso = [
                m.get("nombre", m.get("id")) for m in maquinas if m.get("lugarId") == lugar_id
            ]
            if en_uso:
                raise ConflictError(
                    "No se puede eliminar el lugar: tiene máquinas asignadas "
                    f"({', '.join(en_uso)}). Reasígnelas o elimínelas primero."
                )
            return remove_where(items, "id", lugar_id)

        kv.update(lugares_key(user_id), _remove, default=[], guard_keys=[maquinas_key(user_id)])
        kv.delete(lugar_key(user_id, lugar_id))
        logger.info("Lugar eliminado: %s (usuario %s)", lugar_id, user_id)
