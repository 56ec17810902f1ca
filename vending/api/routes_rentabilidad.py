from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from vending.api.deps import get_current_user_id, storage_guard
from vending.services import rentabilidad_service
from vending.services.maquina_service import MaquinaService
from vending.utils.dates import get_today_str
from vending.utils.exports import workbook_to_bytes

router = APIRouter(prefix="/api/rentabilidad", tags=["rentabilidad"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("")
def obtener_rentabilidad(
    maquina_id: str | None = Query(default=None, alias="maquinaId"),
    inicio: str | None = Query(default=None),
    fin: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
):
    with storage_guard("Error al calcular rentabilidad"):
        rentabilidades = rentabilidad_service.calcular_rentabilidades(
            user_id, maquina_id, inicio, fin
        )
    return {"rentabilidades": [r.to_dict() for r in rentabilidades]}


@router.get("/export")
def exportar_rentabilidad(
    maquina_id: str | None = Query(default=None, alias="maquinaId"),
    inicio: str | None = Query(default=None),
    fin: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
):
    with storage_guard("Error al exportar rentabilidad"):
        rentabilidades = rentabilidad_service.calcular_rentabilidades(
            user_id, maquina_id, inicio, fin
        )
        tipos = {m.id: m.tipo.value for m in MaquinaService.list_maquinas(user_id)}
        workbook = rentabilidad_service.build_rentabilidad_workbook(rentabilidades, tipos)
    filename = f"rentabilidad_{get_today_str()}.xlsx"
    return Response(
        content=workbook_to_bytes(workbook),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
