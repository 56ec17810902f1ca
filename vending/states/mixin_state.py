"""Mixin Base y Decoradores de Estados.

Componentes principales:

Decoradores:
    @require_login(): Verifica que haya un usuario autenticado antes de
    ejecutar el evento.

Clase MixinState:
    Métodos utilitarios compartidos por todos los estados:
    - Usuario actual a partir del token
    - Formateo de moneda
    - Conversión de errores de servicio a toasts

Ejemplo de uso::

    from vending.states.mixin_state import MixinState, require_login

    class LugaresState(MixinState):
        @rx.event
        @require_login()
        def save_lugar(self):
            # Solo ejecuta con sesión iniciada
            ...
"""
import functools
from typing import Any, Callable, TypeVar

import reflex as rx
from pydantic import ValidationError

from vending.utils.formatting import format_currency, round_currency

F = TypeVar("F", bound=Callable[..., Any])


def require_login(
    message: str = "Debe iniciar sesión para realizar esta operación.",
) -> Callable[[F], F]:
    """
    Decorador para verificar la sesión antes de ejecutar un evento.

    Uso:
        @rx.event
        @require_login()
        def delete_maquina(self, maquina_id: str):
            ...
    """
    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            if not self._user_id():
                return rx.toast(message, duration=3000)
            return method(self, *args, **kwargs)

        return wrapper  # type: ignore

    return decorator


class MixinState:
    def _user_id(self) -> str:
        # current_user_id lo provee AuthState en el estado combinado
        return getattr(self, "current_user_id", "") or ""

    def _round_currency(self, value: float) -> float:
        return round_currency(value)

    def _format_currency(self, value: float) -> str:
        return format_currency(value)

    def _error_message(self, exc: Exception) -> str:
        """Mensaje legible para toasts a partir de errores de validación o servicio."""
        if isinstance(exc, ValidationError):
            errors = exc.errors(include_url=False)
            if not errors:
                return "Datos inválidos"
            first = errors[0]
            campo = ".".join(str(part) for part in first.get("loc", ()))
            detalle = str(first.get("msg", "")).removeprefix("Value error, ")
            return f"{campo}: {detalle}" if campo else detalle
        return str(exc) or "Ocurrió un error inesperado"
