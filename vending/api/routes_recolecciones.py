from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from vending.api.deps import get_current_user_id, storage_guard
from vending.schemas.vending_schemas import Recoleccion
from vending.services.recoleccion_service import RecoleccionService

router = APIRouter(prefix="/api/recolecciones", tags=["recolecciones"])


@router.get("")
def listar_recolecciones(
    maquina_id: str | None = Query(default=None, alias="maquinaId"),
    user_id: str = Depends(get_current_user_id),
):
    with storage_guard("Error al obtener recolecciones"):
        recolecciones = RecoleccionService.list_recolecciones(user_id, maquina_id)
    return {"recolecciones": [r.to_dict() for r in recolecciones]}


@router.post("")
def crear_recoleccion(
    recoleccion: Recoleccion,
    user_id: str = Depends(get_current_user_id),
):
    with storage_guard("Error al crear recolección"):
        recoleccion = RecoleccionService.save_recoleccion(user_id, recoleccion)
    return {"recoleccion": recoleccion.to_dict()}


@router.get("/{recoleccion_id}/comprobante")
def comprobante_recoleccion(
    recoleccion_id: str,
    user_id: str = Depends(get_current_user_id),
):
    with storage_guard("Error al generar comprobante"):
        pdf = RecoleccionService.build_comprobante(user_id, recoleccion_id)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="comprobante_{recoleccion_id}.pdf"'},
    )
