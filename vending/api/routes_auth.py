from fastapi import APIRouter, Body, Header

from vending.api.deps import ApiError, resolve_token_payload, storage_guard
from vending.schemas.vending_schemas import LoginRequest, SignupRequest, VerifyRequest
from vending.services.auth_service import AuthService
from vending.utils.auth import decode_token

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _session(usuario, token: str) -> dict:
    return {"success": True, "token": token, "usuario": usuario.to_public()}


@router.post("/signup")
def signup(body: SignupRequest):
    with storage_guard("Error al registrar usuario"):
        usuario, token = AuthService.signup(body.email, body.password, body.nombre)
    return _session(usuario, token)


@router.post("/login")
def login(body: LoginRequest):
    with storage_guard("Error al iniciar sesión"):
        usuario, token = AuthService.login(body.email, body.password)
    return _session(usuario, token)


@router.post("/verify")
def verify(
    body: VerifyRequest | None = Body(default=None),
    authorization: str | None = Header(default=None),
):
    """Valida un token del cuerpo o del encabezado ``Authorization``."""
    if body and body.token:
        payload = decode_token(body.token)
    else:
        payload = resolve_token_payload(authorization)
    if payload is None:
        raise ApiError(401, "Token inválido o expirado")
    with storage_guard("Error al verificar token"):
        usuario = AuthService.get_usuario_by_id(str(payload["sub"]))
    if usuario is None:
        raise ApiError(401, "Usuario no encontrado")
    return {"valid": True, "usuario": usuario.to_public()}
