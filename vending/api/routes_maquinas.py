from fastapi import APIRouter, Depends, Query

from vending.api.deps import ApiError, get_current_user_id, parse_model, storage_guard
from vending.schemas.vending_schemas import Maquina, MaquinaUpdateRequest
from vending.services.maquina_service import MaquinaService

router = APIRouter(prefix="/api/maquinas", tags=["maquinas"])


@router.get("")
def listar_maquinas(user_id: str = Depends(get_current_user_id)):
    with storage_guard("Error al obtener máquinas"):
        maquinas = MaquinaService.list_maquinas(user_id)
    return {"maquinas": [maquina.to_dict() for maquina in maquinas]}


@router.post("")
def crear_maquina(maquina: Maquina, user_id: str = Depends(get_current_user_id)):
    with storage_guard("Error al crear máquina"):
        maquina = MaquinaService.create_maquina(user_id, maquina)
    return {"maquina": maquina.to_dict()}


@router.put("")
def actualizar_maquina(
    body: MaquinaUpdateRequest,
    user_id: str = Depends(get_current_user_id),
):
    if not body.maquina or not body.maquina.get("id"):
        raise ApiError(400, "Máquina es requerida")
    maquina = parse_model(Maquina, body.maquina)
    with storage_guard("Error al actualizar máquina"):
        maquina = MaquinaService.update_maquina(user_id, maquina)
    return {"maquina": maquina.to_dict()}


@router.delete("")
def eliminar_maquina(
    maquina_id: str | None = Query(default=None, alias="maquinaId"),
    user_id: str = Depends(get_current_user_id),
):
    if not maquina_id:
        raise ApiError(400, "maquinaId es requerido")
    with storage_guard("Error al eliminar máquina"):
        eliminadas = MaquinaService.delete_maquina(user_id, maquina_id)
    return {"success": True, "recoleccionesEliminadas": eliminadas}
