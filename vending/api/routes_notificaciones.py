from fastapi import APIRouter, Body, Depends

from vending.api.deps import get_current_user_id, storage_guard
from vending.schemas.vending_schemas import NotificacionPushRequest
from vending.services import notificacion_service, push_service

router = APIRouter(prefix="/api/notificaciones-recoleccion", tags=["notificaciones"])


@router.get("")
def listar_notificaciones(user_id: str = Depends(get_current_user_id)):
    with storage_guard("Error al obtener notificaciones"):
        notificaciones = notificacion_service.get_notificaciones(user_id)
    return {"notificaciones": [n.to_dict() for n in notificaciones]}


@router.post("")
def enviar_notificaciones(
    body: NotificacionPushRequest | None = Body(default=None),
    user_id: str = Depends(get_current_user_id),
):
    with storage_guard("Error al enviar notificaciones"):
        notificaciones = notificacion_service.get_notificaciones(user_id)
        resultado = push_service.enviar_recordatorios(
            body.fid if body else None, notificaciones
        )
    resultado["notificaciones"] = [n.to_dict() for n in resultado["notificaciones"]]
    return resultado
