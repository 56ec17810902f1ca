import reflex as rx

from vending.schemas.vending_schemas import Recoleccion
from vending.services.recoleccion_service import RecoleccionService
from vending.states.dashboard_state import DashboardState
from vending.states.rentabilidad_state import RentabilidadState


def test_dashboard_without_session_is_empty():
    state = DashboardState()
    state.current_user_id = ""

    state.load_dashboard()

    assert state.dashboard_data["total_maquinas"] == 0
    assert state.notificaciones == []


def test_dashboard_loads_overdue_machines(chiclera_sample):
    state = DashboardState()
    state.current_user_id = "user-1"

    state.load_dashboard()

    assert state.dashboard_data["total_maquinas"] == 1
    assert state.notificaciones[0]["prioridad"] == "alta"
    assert state.notificaciones[0]["maquina_nombre"] == "Chiclera Entrada"


def test_push_without_fid(monkeypatch, chiclera_sample):
    state = DashboardState()
    state.current_user_id = "user-1"
    state.farcaster_fid = ""
    monkeypatch.setattr(rx, "toast", lambda message, **kwargs: message)

    assert "Farcaster" in state.send_push_reminders()


def test_rentabilidad_rows_sorted_by_profit(user_id, chiclera_sample, peluchera_sample):
    for maquina, ingresos in ((chiclera_sample, 20), (peluchera_sample, 80)):
        RecoleccionService.save_recoleccion(
            user_id,
            Recoleccion(maquina_id=maquina.id, fecha="2024-03-10T10:00:00Z", ingresos=ingresos),
        )
    state = RentabilidadState()
    state.current_user_id = user_id
    state.rent_maquina_id = ""
    state.rent_inicio = "2024-03-01"
    state.rent_fin = "2024-03-31"

    state.load_rentabilidad()

    assert [row["maquina_id"] for row in state.rentabilidades] == [
        peluchera_sample.id,
        chiclera_sample.id,
    ]
    assert state.rent_resumen["ingresos_totales"] == 100.0
    assert state.rent_error == ""


def test_rentabilidad_invalid_period_sets_error(user_id, chiclera_sample):
    state = RentabilidadState()
    state.current_user_id = user_id
    state.rent_maquina_id = ""
    state.rent_inicio = "2024-04-01"
    state.rent_fin = "2024-03-01"

    state.load_rentabilidad()

    assert state.rent_error == "La fecha de inicio debe ser anterior a la fecha fin"
    assert state.rentabilidades == []


def test_export_rentabilidad_downloads_xlsx(monkeypatch, user_id, chiclera_sample):
    state = RentabilidadState()
    state.current_user_id = user_id
    state.rent_maquina_id = ""
    state.rent_inicio = "2024-03-01"
    state.rent_fin = "2024-03-31"
    monkeypatch.setattr(rx, "download", lambda data, filename: (data, filename))

    data, filename = state.export_rentabilidad()

    assert filename == "rentabilidad_2024-03-01_2024-03-31.xlsx"
    assert data[:2] == b"PK"
