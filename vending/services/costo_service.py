"""Servicio de Costos de Insumos."""
from __future__ import annotations

from typing import List

from vending.schemas.vending_schemas import CostoInsumo
from vending.services.errors import ServiceError
from vending.utils.calculations import calcular_costo_unitario, derivar_costos
from vending.utils.keys import costos_key, generate_id
from vending.utils.kv import get_kv, upsert_by_id
from vending.utils.logger import get_logger

logger = get_logger("CostoService")


class CostoService:
    @staticmethod
    def list_costos(user_id: str, tipo: str | None = None) -> List[CostoInsumo]:
        data = get_kv().get(costos_key(user_id)) or []
        costos = [CostoInsumo.model_validate(item) for item in data]
        if tipo:
            costos = [c for c in costos if c.tipo_maquina == tipo]
        return costos

    @staticmethod
    def completar_costos(costo: CostoInsumo) -> CostoInsumo:
        """
        Deriva ``costoUnitario`` y ``costoPorUnidad`` cuando faltan.

        Raises:
            ServiceError: si la cantidad, el total o los factores de
                conversión no son positivos
        """
        if costo.costo_unitario is not None and costo.costo_por_unidad is not None:
            return costo
        if costo.costo_por_unidad is not None:
            costo.costo_unitario = calcular_costo_unitario(costo.costo_total, costo.cantidad)
            return costo
        try:
            costo_unitario, costo_por_unidad = derivar_costos(
                costo.unidad.value,
                costo.cantidad,
                costo.costo_total,
                unidades_por_kg=costo.unidades_por_kg,
                kg_por_caja=costo.kg_por_caja,
                unidades_por_bolsas=costo.unidades_por_bolsas,
            )
        except ValueError as exc:
            raise ServiceError(str(exc)) from exc
        if costo.costo_unitario is None:
            costo.costo_unitario = costo_unitario
        costo.costo_por_unidad = costo_por_unidad
        return costo

    @staticmethod
    def save_costo(user_id: str, costo: CostoInsumo) -> CostoInsumo:
        costo = CostoService.completar_costos(costo)
        if not costo.id:
            costo.id = generate_id("costo")
        data = costo.to_dict()
        get_kv().update(costos_key(user_id), lambda items: upsert_by_id(items, data), default=[])
        logger.info(
            "Costo guardado: %s (%s, total %.2f)", costo.id, costo.concepto, costo.costo_total
        )
        return costo
