import reflex as rx
from .auth_state import AuthState
from .ui_state import UIState
from .dashboard_state import DashboardState
from .lugares_state import LugaresState
from .maquinas_state import MaquinasState
from .recolecciones_state import RecoleccionesState
from .costos_state import CostosState
from .rentabilidad_state import RentabilidadState

_mixins = [
    RentabilidadState,
    CostosState,
    RecoleccionesState,
    MaquinasState,
    LugaresState,
    DashboardState,
    UIState,
    AuthState,
]

_class_dict = {
    "__module__": __name__,
    "__qualname__": "RootState",
    "__doc__": """
    Root state that combines all modular states via multiple inheritance (Mixins).
    """,
    "__annotations__": {},
}

for _mixin in _mixins:
    # Merge annotations
    if hasattr(_mixin, "__annotations__"):
        _class_dict["__annotations__"].update(_mixin.__annotations__)

    # Merge attributes and methods
    for _name, _value in _mixin.__dict__.items():
        if _name.startswith("__"):
            continue
        _class_dict[_name] = _value

# Create RootState dynamically so BaseStateMeta processes all mixin methods
RootState = type("RootState", (*_mixins, rx.State), _class_dict)
