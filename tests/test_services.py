import logging

import pytest

from vending.schemas.vending_schemas import (
    CostoInsumo,
    Lugar,
    Maquina,
    Recoleccion,
)
from vending.services.costo_service import CostoService
from vending.services.errors import ConflictError, NotFoundError, ServiceError
from vending.services.lugar_service import LugarService
from vending.services.maquina_service import MaquinaService, build_default_compartimentos
from vending.services import recoleccion_service
from vending.services.recoleccion_service import RecoleccionService
from vending.utils.keys import generate_id, lugar_key, lugares_key, maquina_key, maquinas_key


class TestLugarService:
    def test_save_assigns_id_and_lists(self, memory_store, user_id):
        lugar = LugarService.save_lugar(user_id, Lugar(nombre="Cine", direccion="Calle 1"))

        assert lugar.id.startswith("lugar-")
        assert [l.id for l in LugarService.list_lugares(user_id)] == [lugar.id]
        assert memory_store.get(lugar_key(user_id, lugar.id))["nombre"] == "Cine"

    def test_lists_are_partitioned_by_user(self, user_id):
        LugarService.save_lugar(user_id, Lugar(nombre="Cine", direccion="Calle 1"))
        assert LugarService.list_lugares("otro-usuario") == []

    def test_update_replaces_in_place(self, user_id, lugar_sample):
        lugar_sample.nombre = "Plaza Sur"
        LugarService.update_lugar(user_id, lugar_sample)

        lugares = LugarService.list_lugares(user_id)
        assert len(lugares) == 1
        assert lugares[0].nombre == "Plaza Sur"

    def test_update_missing_raises(self, user_id):
        with pytest.raises(NotFoundError):
            LugarService.update_lugar(
                user_id, Lugar(id="lugar-x", nombre="X", direccion="Y")
            )

    def test_delete_with_machines_conflicts(self, user_id, lugar_sample, chiclera_sample):
        with pytest.raises(ConflictError) as exc_info:
            LugarService.delete_lugar(user_id, lugar_sample.id)

        assert exc_info.value.status_code == 409
        assert "Chiclera Entrada" in str(exc_info.value)

    def test_delete_without_machines(self, memory_store, user_id, lugar_sample):
        LugarService.delete_lugar(user_id, lugar_sample.id)

        assert LugarService.list_lugares(user_id) == []
        assert memory_store.get(lugar_key(user_id, lugar_sample.id)) is None

    def test_delete_missing_raises(self, user_id):
        with pytest.raises(NotFoundError):
            LugarService.delete_lugar(user_id, "lugar-inexistente")


class TestMaquinaService:
    def test_default_compartimentos_chiclera_doble(self, chiclera_sample):
        comps = chiclera_sample.compartimentos
        assert [c.id for c in comps] == [
            f"comp-{chiclera_sample.id}-1",
            f"comp-{chiclera_sample.id}-2",
        ]
        assert all(c.capacidad == 200 and c.cantidad_actual == 0 for c in comps)

    def test_default_compartimentos_peluchera(self, peluchera_sample):
        assert len(peluchera_sample.compartimentos) == 1
        assert peluchera_sample.compartimentos[0].capacidad == 50
        assert peluchera_sample.tipo_chiclera is None

    @pytest.mark.parametrize("tipo_chiclera, esperado", [("individual", 1), ("triple", 3)])
    def test_build_default_compartimentos(self, tipo_chiclera, esperado):
        maquina = Maquina(
            id="m1",
            nombre="C",
            tipo="chiclera",
            tipo_chiclera=tipo_chiclera,
            lugar_id="l1",
            fecha_instalacion="2024-01-01",
        )
        assert len(build_default_compartimentos(maquina)) == esperado

    def test_create_requires_existing_lugar(self, user_id):
        with pytest.raises(NotFoundError, match="Lugar"):
            MaquinaService.create_maquina(
                user_id,
                Maquina(
                    nombre="Sin lugar",
                    tipo="peluchera",
                    lugar_id="lugar-inexistente",
                    fecha_instalacion="2024-01-01",
                ),
            )

    def test_roundtrip_get_and_list(self, user_id, chiclera_sample):
        maquina = MaquinaService.get_maquina(user_id, chiclera_sample.id)

        assert maquina == chiclera_sample
        assert MaquinaService.list_maquinas(user_id) == [chiclera_sample]

    def test_stored_document_uses_camel_case(self, memory_store, user_id, chiclera_sample):
        data = memory_store.get(maquina_key(user_id, chiclera_sample.id))

        assert data["lugarId"] == chiclera_sample.lugar_id
        assert data["compartimentos"][0]["cantidadActual"] == 0
        assert "lugar_id" not in data

    def test_delete_cascades_recolecciones(self, user_id, chiclera_sample, peluchera_sample):
        for maquina in (chiclera_sample, chiclera_sample, peluchera_sample):
            RecoleccionService.save_recoleccion(
                user_id, Recoleccion(maquina_id=maquina.id, ingresos=10)
            )

        eliminadas = MaquinaService.delete_maquina(user_id, chiclera_sample.id)

        assert eliminadas == 2
        assert MaquinaService.get_maquina(user_id, chiclera_sample.id) is None
        restantes = RecoleccionService.list_recolecciones(user_id)
        assert [r.maquina_id for r in restantes] == [peluchera_sample.id]

    def test_delete_missing_raises(self, user_id):
        with pytest.raises(NotFoundError):
            MaquinaService.delete_maquina(user_id, "maquina-x")


class TestRecoleccionService:
    def test_save_computes_net_and_updates_machine(self, user_id, chiclera_sample):
        recoleccion = RecoleccionService.save_recoleccion(
            user_id,
            Recoleccion(
                maquina_id=chiclera_sample.id,
                fecha="2024-03-10T12:00:00.000Z",
                ingresos=100,
                comision_local=10,
            ),
        )

        assert recoleccion.id.startswith("recoleccion-")
        assert recoleccion.ingresos_netos == pytest.approx(90.0)
        maquina = MaquinaService.get_maquina(user_id, chiclera_sample.id)
        assert maquina.fecha_ultima_recoleccion == "2024-03-10T12:00:00.000Z"
        listado = MaquinaService.list_maquinas(user_id)[0]
        assert listado.fecha_ultima_recoleccion == "2024-03-10T12:00:00.000Z"

    def test_sales_and_refills_clamp_stock(self, user_id, chiclera_sample):
        comp_1, comp_2 = (c.id for c in chiclera_sample.compartimentos)
        RecoleccionService.save_recoleccion(
            user_id,
            Recoleccion(
                maquina_id=chiclera_sample.id,
                ingresos=0,
                rellenos=[
                    {"compartimentoId": comp_1, "cantidad": 150},
                    {"compartimentoId": comp_2, "cantidad": 500},
                ],
            ),
        )
        RecoleccionService.save_recoleccion(
            user_id,
            Recoleccion(
                maquina_id=chiclera_sample.id,
                ingresos=30,
                productos_vendidos=[
                    {"compartimentoId": comp_1, "cantidad": 400},
                    {"compartimentoId": comp_2, "cantidad": 20},
                ],
            ),
        )

        maquina = MaquinaService.get_maquina(user_id, chiclera_sample.id)
        assert maquina.compartimento(comp_1).cantidad_actual == 0
        assert maquina.compartimento(comp_2).cantidad_actual == 180

    def test_resave_does_not_reapply_stock(self, user_id, peluchera_sample):
        comp = peluchera_sample.compartimentos[0].id
        recoleccion = RecoleccionService.save_recoleccion(
            user_id,
            Recoleccion(
                maquina_id=peluchera_sample.id,
                ingresos=0,
                rellenos=[{"compartimentoId": comp, "cantidad": 20}],
            ),
        )
        RecoleccionService.save_recoleccion(user_id, recoleccion)

        maquina = MaquinaService.get_maquina(user_id, peluchera_sample.id)
        assert maquina.compartimentos[0].cantidad_actual == 20
        assert len(RecoleccionService.list_recolecciones(user_id)) == 1

    def test_unknown_machine_raises(self, user_id):
        with pytest.raises(NotFoundError):
            RecoleccionService.save_recoleccion(
                user_id, Recoleccion(maquina_id="maquina-x", ingresos=5)
            )

    def test_filter_by_machine(self, user_id, chiclera_sample, peluchera_sample):
        RecoleccionService.save_recoleccion(
            user_id, Recoleccion(maquina_id=chiclera_sample.id, ingresos=5)
        )
        RecoleccionService.save_recoleccion(
            user_id, Recoleccion(maquina_id=peluchera_sample.id, ingresos=7)
        )

        filtradas = RecoleccionService.list_recolecciones(user_id, peluchera_sample.id)
        assert [r.ingresos for r in filtradas] == [7]


class TestCostoService:
    def test_save_derives_unit_costs(self, user_id):
        costo = CostoService.save_costo(
            user_id,
            CostoInsumo(
                tipo_maquina="chiclera",
                concepto="Chicle bola",
                cantidad=1,
                unidad="KG",
                costo_total=50,
                unidades_por_kg=100,
            ),
        )

        assert costo.id.startswith("costo-")
        assert costo.costo_unitario == pytest.approx(50.0)
        assert costo.costo_por_unidad == pytest.approx(0.5)

    def test_save_keeps_explicit_values(self, user_id):
        costo = CostoService.save_costo(
            user_id,
            CostoInsumo(
                tipo_maquina="peluchera",
                concepto="Peluches",
                cantidad=10,
                unidad="unidades",
                costo_total=100,
                costo_unitario=9,
                costo_por_unidad=9,
            ),
        )
        assert costo.costo_por_unidad == 9

    def test_save_rejects_missing_conversion(self, user_id):
        with pytest.raises(ServiceError, match="1 kg"):
            CostoService.save_costo(
                user_id,
                CostoInsumo(
                    tipo_maquina="chiclera",
                    concepto="Granel",
                    cantidad=2,
                    unidad="kg",
                    costo_total=80,
                ),
            )

    def test_list_filter_by_tipo(self, user_id):
        for tipo in ("chiclera", "peluchera"):
            CostoService.save_costo(
                user_id,
                CostoInsumo(
                    tipo_maquina=tipo,
                    concepto=f"Insumo {tipo}",
                    cantidad=1,
                    unidad="unidades",
                    costo_total=10,
                ),
            )

        costos = CostoService.list_costos(user_id, "peluchera")
        assert [c.concepto for c in costos] == ["Insumo peluchera"]


def test_generate_id_format():
    parts = generate_id("lugar").split("-")
    assert parts[0] == "lugar"
    assert parts[1].isdigit()
    assert len(parts[2]) == 9


class TestMaquinaAtomicUpdates:
    def test_update_without_merge_replaces_document(self, user_id, chiclera_sample):
        editada = chiclera_sample.model_copy(update={"nombre": "Chiclera Nueva"})

        MaquinaService.update_maquina(user_id, editada)

        assert MaquinaService.get_maquina(user_id, chiclera_sample.id).nombre == "Chiclera Nueva"
        assert MaquinaService.list_maquinas(user_id)[0].nombre == "Chiclera Nueva"

    def test_update_merge_sees_stored_document(self, user_id, chiclera_sample):
        RecoleccionService.save_recoleccion(
            user_id,
            Recoleccion(maquina_id=chiclera_sample.id, fecha="2024-05-01T10:00:00.000Z", ingresos=5),
        )
        editada = chiclera_sample.model_copy(update={"nombre": "Editada"})

        def _merge(nueva, guardada):
            nueva.fecha_ultima_recoleccion = guardada.fecha_ultima_recoleccion
            return nueva

        resultado = MaquinaService.update_maquina(user_id, editada, merge=_merge)

        assert resultado.fecha_ultima_recoleccion == "2024-05-01T10:00:00.000Z"
        assert chiclera_sample.nombre == "Chiclera Entrada"

    def test_update_unknown_machine(self, user_id, lugar_sample):
        maquina = Maquina(
            id="maquina-x",
            nombre="X",
            tipo="peluchera",
            lugar_id=lugar_sample.id,
            fecha_instalacion="2024-01-01",
        )
        with pytest.raises(NotFoundError, match="Máquina"):
            MaquinaService.update_maquina(user_id, maquina)

    def test_toggle_reads_stored_document(self, user_id, chiclera_sample):
        RecoleccionService.save_recoleccion(
            user_id,
            Recoleccion(maquina_id=chiclera_sample.id, fecha="2024-05-01T10:00:00.000Z", ingresos=5),
        )

        maquina = MaquinaService.toggle_activa(user_id, chiclera_sample.id)

        assert maquina.activa is False
        assert maquina.fecha_ultima_recoleccion == "2024-05-01T10:00:00.000Z"

    def test_create_checks_lugar_list(self, memory_store, user_id, lugar_sample):
        # Lugar a medio eliminar: fuera de la lista, clave individual todavía presente.
        memory_store.update(lugares_key(user_id), lambda items: [], default=[])

        with pytest.raises(NotFoundError, match="Lugar"):
            MaquinaService.create_maquina(
                user_id,
                Maquina(
                    nombre="Tardía",
                    tipo="peluchera",
                    lugar_id=lugar_sample.id,
                    fecha_instalacion="2024-01-01",
                ),
            )
        assert MaquinaService.list_maquinas(user_id) == []

    def test_create_and_delete_lugar_watch_each_other(self, memory_store, user_id, lugar_sample):
        calls = []
        original = memory_store.update

        def _spy(key, fn, default=None, guard_keys=()):
            calls.append((key, list(guard_keys)))
            return original(key, fn, default=default, guard_keys=guard_keys)

        memory_store.update = _spy
        maquina = MaquinaService.create_maquina(
            user_id,
            Maquina(nombre="P", tipo="peluchera", lugar_id=lugar_sample.id, fecha_instalacion="2024-01-01"),
        )
        MaquinaService.delete_maquina(user_id, maquina.id)
        LugarService.delete_lugar(user_id, lugar_sample.id)

        assert (maquinas_key(user_id), [lugares_key(user_id)]) in calls
        assert (lugares_key(user_id), [maquinas_key(user_id)]) in calls


class TestRecoleccionPartialFailure:
    def test_machine_update_failure_keeps_collection(self, monkeypatch, caplog, user_id, chiclera_sample):
        def _falla(*args, **kwargs):
            raise RuntimeError("almacenamiento caído")

        monkeypatch.setattr(MaquinaService, "apply_recoleccion", _falla)
        monkeypatch.setattr(recoleccion_service.logger, "propagate", True)

        with caplog.at_level(logging.ERROR, logger="RecoleccionService"):
            recoleccion = RecoleccionService.save_recoleccion(
                user_id,
                Recoleccion(maquina_id=chiclera_sample.id, fecha="2024-05-01T10:00:00.000Z", ingresos=40),
            )

        assert [r.id for r in RecoleccionService.list_recolecciones(user_id)] == [recoleccion.id]
        assert MaquinaService.get_maquina(user_id, chiclera_sample.id).fecha_ultima_recoleccion is None
        assert "no se pudo actualizar la máquina" in caplog.text
        assert "almacenamiento caído" in caplog.text
