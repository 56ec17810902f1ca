from vending.states.root_state import RootState
from vending.states.types import (
    CurrentUser,
    LugarRow,
    MaquinaRow,
    NotificacionRow,
    RecoleccionRow,
    RentabilidadRow,
)


# Re-export State
class State(RootState):
    """Estado principal de la aplicación (combina todos los estados modulares)."""
    pass
