from fastapi import APIRouter, Depends, Query

from vending.api.deps import ApiError, get_current_user_id, parse_model, storage_guard
from vending.schemas.vending_schemas import Lugar, LugarUpdateRequest
from vending.services.lugar_service import LugarService

router = APIRouter(prefix="/api/lugares", tags=["lugares"])


@router.get("")
def listar_lugares(user_id: str = Depends(get_current_user_id)):
    with storage_guard("Error al obtener lugares"):
        lugares = LugarService.list_lugares(user_id)
    return {"lugares": [lugar.to_dict() for lugar in lugares]}


@router.post("")
def crear_lugar(lugar: Lugar, user_id: str = Depends(get_current_user_id)):
    with storage_guard("Error al crear lugar"):
        lugar = LugarService.save_lugar(user_id, lugar)
    return {"lugar": lugar.to_dict()}


@router.put("")
def actualizar_lugar(
    body: LugarUpdateRequest,
    user_id: str = Depends(get_current_user_id),
):
    if not body.lugar or not body.lugar.get("id"):
        raise ApiError(400, "Lugar es requerido")
    lugar = parse_model(Lugar, body.lugar)
    with storage_guard("Error al actualizar lugar"):
        lugar = LugarService.update_lugar(user_id, lugar)
    return {"lugar": lugar.to_dict()}


@router.delete("")
def eliminar_lugar(
    lugar_id: str | None = Query(default=None, alias="lugarId"),
    user_id: str = Depends(get_current_user_id),
):
    if not lugar_id:
        raise ApiError(400, "lugarId es requerido")
    with storage_guard("Error al eliminar lugar"):
        LugarService.delete_lugar(user_id, lugar_id)
    return {"success": True}
