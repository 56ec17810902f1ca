import pytest
import reflex as rx

from vending.services.costo_service import CostoService
from vending.states.costos_state import RELACION_SEPARATOR, CostosState


def _state(user_id="user-1"):
    state = CostosState()
    state.current_user_id = user_id
    state.costo_form = state._empty_costo_form()
    state.costo_relacionados = []
    state.costo_relacion_options = []
    return state


def test_preview_kg():
    state = _state()
    state.costo_form.update({"cantidad": "1", "costo_total": "50", "unidades_por_kg": "100"})

    preview = state._preview_costos()

    assert preview == {
        "valido": True,
        "mensaje": "",
        "costo_unitario": "50",
        "costo_por_unidad": "0.5",
    }


def test_preview_reports_missing_factor():
    state = _state()
    state.costo_form.update({"unidad": "cajas", "cantidad": "2", "costo_total": "80"})

    preview = state._preview_costos()

    assert preview["valido"] is False
    assert "caja" in preview["mensaje"]


def test_relation_options_for_machine_type(chiclera_sample, peluchera_sample):
    state = _state()

    state._load_relacion_options("chiclera")

    assert [opt["value"] for opt in state.costo_relacion_options] == [
        f"{chiclera_sample.id}{RELACION_SEPARATOR}{comp.id}"
        for comp in chiclera_sample.compartimentos
    ]


def test_save_costo_with_related_compartment(monkeypatch, user_id, chiclera_sample):
    state = _state()
    monkeypatch.setattr(rx, "toast", lambda *args, **kwargs: "toast")
    state._load_relacion_options("chiclera")
    state.costo_form.update(
        {
            "concepto": "Chicle bola",
            "cantidad": "1",
            "costo_total": "50",
            "unidades_por_kg": "100",
        }
    )
    state.toggle_costo_relacionado(state.costo_relacion_options[1]["value"])

    assert state.save_costo() == "toast"

    costos = CostoService.list_costos(user_id)
    assert len(costos) == 1
    assert costos[0].costo_por_unidad == pytest.approx(0.5)
    relacionado = costos[0].productos_relacionados[0]
    assert relacionado.maquina_id == chiclera_sample.id
    assert relacionado.compartimento_id == chiclera_sample.compartimentos[1].id
    assert state.costos[0]["relacionados"] == 1


def test_save_costo_invalid_shows_message(monkeypatch):
    state = _state()
    messages = []
    monkeypatch.setattr(rx, "toast", lambda message, **kwargs: messages.append(message))
    state.costo_form.update({"concepto": "Granel", "cantidad": "1", "costo_total": "10"})

    state.save_costo()

    assert "1 kg" in messages[0]
