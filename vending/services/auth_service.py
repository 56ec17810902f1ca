"""Servicio de Usuarios (registro e inicio de sesión por email/contraseña).

Cada usuario se guarda dos veces: por email (para el login) y por id
(para resolver el ``sub`` del token).
"""
from __future__ import annotations

from vending.constants import PASSWORD_MIN_LENGTH
from vending.schemas.vending_schemas import Usuario
from vending.services.errors import ConflictError, ServiceError
from vending.utils.auth import check_password, create_access_token, hash_password
from vending.utils.keys import generate_id, usuario_email_key, usuario_id_key
from vending.utils.kv import get_kv
from vending.utils.logger import get_logger
from vending.utils.rate_limit import (
    clear_login_attempts,
    is_rate_limited,
    record_failed_attempt,
    remaining_lockout_time,
)
from vending.utils.sanitization import is_valid_email, sanitize_email, sanitize_name

logger = get_logger("AuthService")


class AuthenticationError(ServiceError):
    status_code = 401


class TooManyAttemptsError(ServiceError):
    status_code = 429


class AuthService:
    @staticmethod
    def get_usuario(email: str) -> Usuario | None:
        data = get_kv().get(usuario_email_key(email))
        return Usuario.model_validate(data) if data else None

    @staticmethod
    def get_usuario_by_id(user_id: str) -> Usuario | None:
        data = get_kv().get(usuario_id_key(user_id))
        return Usuario.model_validate(data) if data else None

    @staticmethod
    def signup(email: str, password: str, nombre: str | None = None) -> tuple[Usuario, str]:
        """
        Registra un usuario nuevo.

        Returns:
            (usuario, token)

        Raises:
            ServiceError: email/contraseña faltantes o inválidos (400)
            ConflictError: email ya registrado (409)
        """
        email = sanitize_email(email)
        if not email or not password:
            raise ServiceError("Email y contraseña son requeridos")
        if not is_valid_email(email):
            raise ServiceError("Email inválido")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ServiceError(
                f"La contraseña debe tener al menos {PASSWORD_MIN_LENGTH} caracteres"
            )
        if AuthService.get_usuario(email) is not None:
            raise ConflictError("Este email ya está registrado")

        usuario = Usuario(
            id=generate_id("user"),
            email=email,
            nombre=sanitize_name(nombre) or email.split("@")[0],
            password_hash=hash_password(password),
        )
        kv = get_kv()
        data = usuario.to_dict()

        def _reservar(actual):
            if actual is not None:
                raise ConflictError("Este email ya está registrado")
            return data

        kv.update(usuario_email_key(email), _reservar)
        kv.set(usuario_id_key(usuario.id), data)
        logger.info("Usuario registrado: %s", usuario.id)
        return usuario, create_access_token(usuario.id, email=usuario.email)

    @staticmethod
    def login(email: str, password: str) -> tuple[Usuario, str]:
        """
        Verifica credenciales y emite un token.

        Raises:
            ServiceError: datos faltantes (400)
            TooManyAttemptsError: bloqueo por intentos fallidos (429)
            AuthenticationError: credenciales incorrectas (401)
        """
        email = sanitize_email(email)
        if not email or not password:
            raise ServiceError("Email y contraseña son requeridos")

        if is_rate_limited(email):
            minutes = remaining_lockout_time(email)
            raise TooManyAttemptsError(
                f"Demasiados intentos fallidos. Intente nuevamente en {minutes} minuto(s)."
            )

        usuario = AuthService.get_usuario(email)
        if usuario is None or not check_password(password, usuario.password_hash):
            record_failed_attempt(email)
            logger.warning("Intento de login fallido para %s", email)
            raise AuthenticationError("Email o contraseña incorrectos")

        clear_login_attempts(email)
        return usuario, create_access_token(usuario.id, email=usuario.email)
