"""API REST (FastAPI) montada junto a la app Reflex.

Todas las respuestas de error usan el sobre ``{"error": "..."}``; los
errores de validación agregan ``details``.
"""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vending.api.deps import ApiError
from vending.api import (
    routes_auth,
    routes_costos,
    routes_lugares,
    routes_maquinas,
    routes_meta,
    routes_notificaciones,
    routes_recolecciones,
    routes_rentabilidad,
)
from vending.services.errors import ServiceError
from vending.utils.logger import get_logger

logger = get_logger("API")

ROUTERS = (
    routes_auth.router,
    routes_lugares.router,
    routes_maquinas.router,
    routes_recolecciones.router,
    routes_costos.router,
    routes_rentabilidad.router,
    routes_notificaciones.router,
    routes_meta.router,
)


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=exc.status_code)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Solicitud inválida en %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        {"error": "Datos inválidos", "details": jsonable_encoder(exc.errors())},
        status_code=400,
    )


def create_api() -> FastAPI:
    api = FastAPI(title="Gestión Vending API")
    for router in ROUTERS:
        api.include_router(router)
    api.add_exception_handler(ApiError, _api_error_handler)
    api.add_exception_handler(ServiceError, _service_error_handler)
    api.add_exception_handler(RequestValidationError, _validation_error_handler)
    return api
