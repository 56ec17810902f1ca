"""Servicio de Máquinas.

Operaciones principales:

- Alta de máquinas con compartimentos por defecto según el tipo
- Edición atómica sobre el documento guardado (clave individual y lista)
- Baja con eliminación en cascada de sus recolecciones
- Aplicación de una recolección: fecha de última visita, ventas y rellenos

Ejemplo de uso::

    from vending.services.maquina_service import MaquinaService

    maquina = MaquinaService.create_maquina(user_id, Maquina(...))
    MaquinaService.delete_maquina(user_id, maquina.id)
"""
from __future__ import annotations

from typing import Callable, List

from vending.constants import (
    CHICLERA_COMPARTMENTS,
    CHICLERA_DEFAULT_CAPACITY,
    PELUCHERA_DEFAULT_CAPACITY,
)
from vending.enums import TipoMaquina
from vending.schemas.vending_schemas import Compartimento, Maquina, Recoleccion
from vending.services.errors import NotFoundError
from vending.utils.calculations import clamp_stock
from vending.utils.keys import (
    generate_id,
    lugares_key,
    maquina_key,
    maquinas_key,
    recolecciones_key,
)
from vending.utils.kv import get_kv, remove_where, upsert_by_id
from vending.utils.logger import get_logger

logger = get_logger("MaquinaService")


def build_default_compartimentos(maquina: Maquina) -> List[Compartimento]:
    """Peluchera: 1 compartimento de 50. Chiclera: 1/2/3 de 200."""
    if maquina.tipo == TipoMaquina.peluchera:
        cantidad, capacidad = 1, PELUCHERA_DEFAULT_CAPACITY
    else:
        tipo_chiclera = maquina.tipo_chiclera.value if maquina.tipo_chiclera else "individual"
        cantidad = CHICLERA_COMPARTMENTS.get(tipo_chiclera, 1)
        capacidad = CHICLERA_DEFAULT_CAPACITY
    return [
        Compartimento(id=f"comp-{maquina.id}-{n}", capacidad=capacidad, cantidad_actual=0)
        for n in range(1, cantidad + 1)
    ]


class MaquinaService:
    @staticmethod
    def list_maquinas(user_id: str) -> List[Maquina]:
        data = get_kv().get(maquinas_key(user_id)) or []
        return [Maquina.model_validate(item) for item in data]

    @staticmethod
    def get_maquina(user_id: str, maquina_id: str) -> Maquina | None:
        data = get_kv().get(maquina_key(user_id, maquina_id))
        if data is None:
            return None
        return Maquina.model_validate(data)

    @staticmethod
    def _sync_lista(user_id: str, maquina_id: str) -> None:
        """Copia a la lista el documento individual vigente (o lo quita si ya no existe)."""
        kv = get_kv()

        def _upsert(items: list) -> list:
            data = kv.get(maquina_key(user_id, maquina_id))
            if data is None:
                return remove_where(items, "id", maquina_id)
            return upsert_by_id(items, data)

        kv.update(maquinas_key(user_id), _upsert, default=[])

    @staticmethod
    def mutate_maquina(
        user_id: str,
        maquina_id: str,
        mutacion: Callable[[Maquina], Maquina],
    ) -> Maquina:
        """
        Aplica ``mutacion`` sobre el documento guardado de forma atómica.

        ``mutacion`` recibe la máquina tal como está en el almacenamiento y
        devuelve la versión a guardar. Puede ejecutarse más de una vez si hay
        escrituras concurrentes, así que no debe tener efectos externos.

        Raises:
            NotFoundError: si la máquina no existe
        """

        def _mutate(data):
            if data is None:
                raise NotFoundError("Máquina no encontrada")
            return mutacion(Maquina.model_validate(data)).to_dict()

        data = get_kv().update(maquina_key(user_id, maquina_id), _mutate)
        MaquinaService._sync_lista(user_id, maquina_id)
        return Maquina.model_validate(data)

    @staticmethod
    def _ensure_lugar(user_id: str, lugar_id: str) -> None:
        lugares = get_kv().get(lugares_key(user_id)) or []
        if not any(item.get("id") == lugar_id for item in lugares):
            raise NotFoundError("Lugar no encontrado")

    @staticmethod
    def create_maquina(user_id: str, maquina: Maquina) -> Maquina:
        """
        Alta de una máquina en un lugar existente.

        La verificación del lugar y el alta en la lista ocurren en la misma
        operación atómica, vigilando la lista de lugares: si el lugar se
        elimina en paralelo, el alta falla con ``NotFoundError``.
        """
        if not maquina.id:
            maquina.id = generate_id("maquina")
        if not maquina.compartimentos:
            maquina.compartimentos = build_default_compartimentos(maquina)
        kv = get_kv()
        data = maquina.to_dict()

        def _insert(items: list) -> list:
            MaquinaService._ensure_lugar(user_id, maquina.lugar_id)
            return upsert_by_id(items, data)

        kv.update(maquinas_key(user_id), _insert, default=[], guard_keys=[lugares_key(user_id)])
        kv.set(maquina_key(user_id, maquina.id), data)
        logger.info("Máquina creada: %s (usuario %s)", maquina.id, user_id)
        return maquina

    @staticmethod
    def update_maquina(
        user_id: str,
        maquina: Maquina,
        merge: Callable[[Maquina, Maquina], Maquina] | None = None,
    ) -> Maquina:
        """
        Reemplaza una máquina existente.

        Args:
            merge: ``merge(editada, guardada)`` combina la edición con el
                documento vigente dentro de la operación atómica (por ejemplo,
                para conservar la última recolección y el stock). Sin
                ``merge`` la edición reemplaza el documento completo.

        Raises:
            NotFoundError: máquina o lugar inexistentes
        """
        if not maquina.id:
            raise NotFoundError("Máquina no encontrada")
        MaquinaService._ensure_lugar(user_id, maquina.lugar_id)

        def _apply(actual: Maquina) -> Maquina:
            editada = maquina.model_copy(deep=True)
            return merge(editada, actual) if merge else editada

        actualizada = MaquinaService.mutate_maquina(user_id, maquina.id, _apply)
        logger.info("Máquina actualizada: %s (usuario %s)", maquina.id, user_id)
        return actualizada

    @staticmethod
    def toggle_activa(user_id: str, maquina_id: str) -> Maquina:
        def _toggle(actual: Maquina) -> Maquina:
            actual.activa = not actual.activa
            return actual

        return MaquinaService.mutate_maquina(user_id, maquina_id, _toggle)

    @staticmethod
    def delete_maquina(user_id: str, maquina_id: str) -> int:
        """
        Elimina la máquina y todas sus recolecciones.

        Returns:
            Cantidad de recolecciones eliminadas en cascada
        """
        kv = get_kv()
        existe_individual = kv.get(maquina_key(user_id, maquina_id)) is not None
        existe_en_lista = any(
            item.get("id") == maquina_id for item in kv.get(maquinas_key(user_id)) or []
        )
        if not existe_individual and not existe_en_lista:
            raise NotFoundError("Máquina no encontrada")

        kv.delete(maquina_key(user_id, maquina_id))
        kv.update(
            maquinas_key(user_id),
            lambda items: remove_where(items, "id", maquina_id),
            default=[],
        )

        eliminadas = {"total": 0}

        def _cascade(items: list) -> list:
            restantes = remove_where(items, "maquinaId", maquina_id)
            eliminadas["total"] = len(items) - len(restantes)
            return restantes

        kv.update(recolecciones_key(user_id), _cascade, default=[])
        logger.info(
            "Máquina eliminada: %s (%s recolección(es) en cascada)",
            maquina_id,
            eliminadas["total"],
        )
        return eliminadas["total"]

    @staticmethod
    def apply_recoleccion(
        user_id: str,
        recoleccion: Recoleccion,
        aplicar_stock: bool = True,
    ) -> Maquina:
        """
        Actualiza la máquina tras una visita.

        - ``fechaUltimaRecoleccion`` pasa a la fecha de la recolección
        - el stock baja por lo vendido y sube por los rellenos,
          siempre dentro de ``[0, capacidad]`` (solo si ``aplicar_stock``;
          al re-guardar una recolección existente no se vuelve a aplicar)
        """
        def _mutate(maquina: Maquina) -> Maquina:
            maquina.fecha_ultima_recoleccion = recoleccion.fecha
            if not aplicar_stock:
                return maquina
            for venta in recoleccion.productos_vendidos:
                comp = maquina.compartimento(venta.compartimento_id)
                if comp is not None:
                    comp.cantidad_actual = clamp_stock(
                        comp.cantidad_actual - venta.cantidad, comp.capacidad
                    )
            for relleno in recoleccion.rellenos:
                comp = maquina.compartimento(relleno.compartimento_id)
                if comp is not None:
                    comp.cantidad_actual = clamp_stock(
                        comp.cantidad_actual + relleno.cantidad, comp.capacidad
                    )
            return maquina

        return MaquinaService.mutate_maquina(user_id, recoleccion.maquina_id, _mutate)
