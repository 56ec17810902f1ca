"""
Constantes centralizadas del sistema.

Este módulo contiene todas las constantes mágicas del sistema
para facilitar su mantenimiento y configuración.
"""
from __future__ import annotations

import os

# =============================================================================
# ALMACENAMIENTO
# =============================================================================

# Prefijo de todas las claves del almacén clave-valor
APP_NAME: str = (os.getenv("APP_NAME") or "vending").strip() or "vending"

# Reintentos máximos de una actualización optimista (WATCH/MULTI)
KV_UPDATE_MAX_RETRIES: int = 10


# =============================================================================
# LÍMITES DE TEXTO
# =============================================================================

# Longitud máxima de notas/observaciones
NOTES_MAX_LENGTH: int = 500

# Longitud máxima de nombres
NAME_MAX_LENGTH: int = 100

# Longitud máxima de direcciones
ADDRESS_MAX_LENGTH: int = 300

# Longitud máxima de conceptos de costo
CONCEPT_MAX_LENGTH: int = 200


# =============================================================================
# MÁQUINAS
# =============================================================================

# Capacidad del compartimento único de una peluchera
PELUCHERA_DEFAULT_CAPACITY: int = 50

# Capacidad de cada compartimento de una chiclera
CHICLERA_DEFAULT_CAPACITY: int = 200

# Compartimentos físicos según el tipo de chiclera
CHICLERA_COMPARTMENTS: dict[str, int] = {
    "individual": 1,
    "doble": 2,
    "triple": 3,
}

# Días estimados entre recolecciones cuando no se indica
DEFAULT_DIAS_RECOLECCION: int = 7

DEFAULT_MACHINE_COLOR: str = "Sin color"


# =============================================================================
# RECORDATORIOS DE RECOLECCIÓN
# =============================================================================

# Porcentaje mínimo del ciclo para mostrar un recordatorio
REMINDER_MIN_PERCENT: float = 50.0

# Umbral de prioridad media
REMINDER_MEDIUM_PERCENT: float = 75.0

# Umbral de prioridad alta
REMINDER_HIGH_PERCENT: float = 100.0

PRIORITY_ORDER: dict[str, int] = {"alta": 3, "media": 2, "baja": 1}

# Máquinas a mostrar en el tablero de próximas recolecciones
DASHBOARD_TOP_MACHINES: int = 5


# =============================================================================
# RENTABILIDAD
# =============================================================================

# Período por defecto del reporte (días hacia atrás desde hoy)
DEFAULT_REPORT_DAYS: int = 30


# =============================================================================
# CONFIGURACIÓN DE CONTRASEÑAS
# =============================================================================

# Longitud mínima de contraseña
PASSWORD_MIN_LENGTH: int = 6

# Tiempo de bloqueo por intentos fallidos (minutos)
LOGIN_LOCKOUT_MINUTES: int = 15

# Máximo de intentos de login antes de bloqueo
MAX_LOGIN_ATTEMPTS: int = 5


# =============================================================================
# TOKENS Y SESIONES
# =============================================================================

# Duración de token JWT (días)
TOKEN_EXPIRY_DAYS: int = 30


# =============================================================================
# CONFIGURACIÓN DE DECIMALES
# =============================================================================

# Precisión para montos monetarios
MONEY_DECIMAL_PLACES: int = 2

# Precisión para costos por unidad individual (chicles sueltos, etc.)
UNIT_COST_DECIMAL_PLACES: int = 4


# =============================================================================
# NOTIFICACIONES PUSH
# =============================================================================

NEYNAR_NOTIFICATIONS_URL: str = (
    "https://api.neynar.com/v2/farcaster/frame/notifications/"
)

PUSH_TIMEOUT_SECONDS: float = 10.0
