import pytest
import reflex as rx

from vending.schemas.vending_schemas import Recoleccion
from vending.services.errors import ServiceError
from vending.services.maquina_service import MaquinaService
from vending.services.recoleccion_service import RecoleccionService
from vending.states.recolecciones_state import RecoleccionesState


def _state(user_id="user-1"):
    state = RecoleccionesState()
    state.current_user_id = user_id
    state.recoleccion_form = state._empty_recoleccion_form()
    state.lineas_venta_form = []
    state.costos_recoleccion_form = []
    return state


def _con_precio(user_id, maquina, precio):
    for comp in maquina.compartimentos:
        comp.precio_venta = precio
    return MaquinaService.update_maquina(user_id, maquina)


def test_save_requires_login(monkeypatch):
    state = _state(user_id="")
    sentinel = object()
    monkeypatch.setattr(rx, "toast", lambda *args, **kwargs: sentinel)

    assert state.save_recoleccion() is sentinel


def test_select_machine_builds_lines(chiclera_sample):
    state = _state()

    state.select_recoleccion_maquina(chiclera_sample.id)

    assert state.recoleccion_maquina_tipo == "chiclera"
    assert [linea["compartimento_id"] for linea in state.lineas_venta_form] == [
        c.id for c in chiclera_sample.compartimentos
    ]
    assert state.lineas_venta_form[0]["stock"] == "0/200"


def test_income_from_lines_when_no_manual_amount(user_id, chiclera_sample):
    maquina = _con_precio(user_id, chiclera_sample, 1.5)
    state = _state()
    state.select_recoleccion_maquina(maquina.id)
    state.update_linea_venta(0, "cantidad", "10")
    state.update_linea_venta(1, "ingresos", "6")
    state.update_recoleccion_field("comision_local", "10")

    recoleccion = state._recoleccion_from_form(maquina)

    assert recoleccion.ingresos == pytest.approx(21.0)
    assert recoleccion.ingresos_netos == pytest.approx(18.9)
    assert [p.cantidad for p in recoleccion.productos_vendidos] == [10.0, 4.0]


def test_manual_income_overrides_lines(user_id, chiclera_sample):
    maquina = _con_precio(user_id, chiclera_sample, 1.5)
    state = _state()
    state.select_recoleccion_maquina(maquina.id)
    state.update_linea_venta(0, "cantidad", "10")
    state.update_recoleccion_field("ingresos", "50")

    assert state._recoleccion_from_form(maquina).ingresos == 50


def test_refill_over_free_space_is_rejected(chiclera_sample):
    state = _state()
    state.select_recoleccion_maquina(chiclera_sample.id)
    state.update_linea_venta(0, "relleno", "250")

    with pytest.raises(ServiceError, match="No puedes rellenar más de 200"):
        state._recoleccion_from_form(chiclera_sample)


def test_peluchera_fields_only_for_peluchera(chiclera_sample, peluchera_sample):
    state = _state()
    state.update_recoleccion_field("ingresos", "40")
    state.update_recoleccion_field("turnos_realizados", "40")
    state.update_recoleccion_field("peluches_sacados", "4")

    peluchera = state._recoleccion_from_form(peluchera_sample)
    chiclera = state._recoleccion_from_form(chiclera_sample)

    assert peluchera.tasa_conversion == pytest.approx(10.0)
    assert chiclera.turnos_realizados is None


def test_blank_cost_rows_are_ignored(chiclera_sample):
    state = _state()
    state.update_recoleccion_field("ingresos", "10")
    state.add_costo_recoleccion()
    state.add_costo_recoleccion()
    state.update_costo_recoleccion(0, "concepto", "Transporte")
    state.update_costo_recoleccion(0, "monto", "3.5")

    recoleccion = state._recoleccion_from_form(chiclera_sample)

    assert [(c.concepto, c.monto) for c in recoleccion.costos] == [("Transporte", 3.5)]


def test_save_recoleccion_updates_stock(monkeypatch, user_id, chiclera_sample):
    state = _state()
    messages = []
    monkeypatch.setattr(rx, "toast", lambda message, **kwargs: messages.append(message))
    state.open_recoleccion_modal(chiclera_sample.id)
    state.update_recoleccion_field("ingresos", "100")
    state.update_linea_venta(1, "relleno", "80")

    state.save_recoleccion()

    assert "Recolección registrada" in messages[0]
    assert state.show_recoleccion_modal is False
    assert len(RecoleccionService.list_recolecciones(user_id)) == 1
    maquina = MaquinaService.get_maquina(user_id, chiclera_sample.id)
    assert maquina.compartimentos[1].cantidad_actual == 80
    assert state.recolecciones[0]["ingresos_netos"] == 100.0


def test_save_without_machine(monkeypatch):
    state = _state()
    monkeypatch.setattr(rx, "toast", lambda message, **kwargs: message)

    assert state.save_recoleccion() == "Seleccione una máquina."


def test_download_comprobante(monkeypatch, user_id, chiclera_sample):
    recoleccion = RecoleccionService.save_recoleccion(
        user_id,
        Recoleccion(maquina_id=chiclera_sample.id, ingresos=30, comision_local=10),
    )
    state = _state()
    monkeypatch.setattr(rx, "download", lambda data, filename: (data, filename))

    data, filename = state.download_comprobante(recoleccion.id)

    assert filename == f"comprobante_{recoleccion.id}.pdf"
    assert data[:4] == b"%PDF"


def test_download_comprobante_unknown(monkeypatch):
    state = _state()
    monkeypatch.setattr(rx, "toast", lambda message, **kwargs: message)

    assert state.download_comprobante("recoleccion-x") == "Recolección no encontrada"
