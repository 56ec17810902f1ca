from fastapi import APIRouter, Depends, Query

from vending.api.deps import get_current_user_id, storage_guard
from vending.schemas.vending_schemas import CostoInsumo
from vending.services.costo_service import CostoService

router = APIRouter(prefix="/api/costos", tags=["costos"])


@router.get("")
def listar_costos(
    tipo: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
):
    with storage_guard("Error al obtener costos"):
        costos = CostoService.list_costos(user_id, tipo)
    return {"costos": [costo.to_dict() for costo in costos]}


@router.post("")
def crear_costo(costo: CostoInsumo, user_id: str = Depends(get_current_user_id)):
    with storage_guard("Error al crear costo"):
        costo = CostoService.save_costo(user_id, costo)
    return {"costo": costo.to_dict()}
