"""
Estados de la aplicación.

Este módulo exporta los estados y utilidades principales.
"""
from .mixin_state import require_login

__all__ = [
    "require_login",
]
