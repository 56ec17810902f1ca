import pytest

from vending.utils.calculations import (
    calcular_costo_por_unidad,
    calcular_ingresos_netos,
    calcular_tasa_conversion,
    clamp_stock,
    completar_linea_venta,
    derivar_costos,
    espacio_disponible,
    round_money,
)


@pytest.mark.parametrize(
    "ingresos, comision, esperado",
    [
        (100, 10, 90.0),
        (100, None, 100.0),
        (100, 0, 100.0),
        (250, 100, 0.0),
        (33.33, 15, 28.33),
    ],
)
def test_calcular_ingresos_netos(ingresos, comision, esperado):
    assert calcular_ingresos_netos(ingresos, comision) == pytest.approx(esperado)


def test_derivar_costos_kg():
    assert derivar_costos("kg", 1, 50, unidades_por_kg=100) == (50.0, 0.5)


def test_derivar_costos_cajas():
    costo_unitario, costo_por_unidad = derivar_costos(
        "cajas", 2, 300, unidades_por_kg=100, kg_por_caja=5
    )
    assert costo_unitario == pytest.approx(150.0)
    assert costo_por_unidad == pytest.approx(0.3)


def test_derivar_costos_bolsas_y_unidades():
    assert derivar_costos("bolsas", 4, 100, unidades_por_bolsas=50) == (25.0, 0.5)
    assert derivar_costos("unidades", 10, 25) == (2.5, 2.5)
    assert derivar_costos("Paquetes", 5, 10) == (2.0, 2.0)


@pytest.mark.parametrize(
    "unidad, cantidad, total, extra, mensaje",
    [
        ("kg", 0, 50, {"unidades_por_kg": 100}, "cantidad"),
        ("kg", 1, 0, {"unidades_por_kg": 100}, "costo total"),
        ("kg", 1, 50, {}, "1 kg"),
        ("cajas", 1, 50, {"unidades_por_kg": 100}, "1 caja"),
        ("bolsas", 1, 50, {"unidades_por_bolsas": 0}, "1 bolsa"),
        ("litros", 1, 50, {}, "no soportada"),
    ],
)
def test_derivar_costos_rechaza_datos_incompletos(unidad, cantidad, total, extra, mensaje):
    with pytest.raises(ValueError, match=mensaje):
        derivar_costos(unidad, cantidad, total, **extra)


def test_costo_por_unidad_con_divisor_cero():
    assert calcular_costo_por_unidad("kg", 50, unidades_por_kg=0) == 0.0


def test_costo_por_unidad_conserva_cuatro_decimales():
    assert calcular_costo_por_unidad("kg", 10, unidades_por_kg=3) == pytest.approx(3.3333)


@pytest.mark.parametrize(
    "cantidad, capacidad, esperado",
    [(-5, 10, 0), (15, 10, 10), (7, 10, 7), (None, 10, 0)],
)
def test_clamp_stock(cantidad, capacidad, esperado):
    assert clamp_stock(cantidad, capacidad) == esperado


def test_completar_linea_venta_desde_cantidad():
    assert completar_linea_venta(12, None, 1.5) == (12.0, 18.0)


def test_completar_linea_venta_desde_ingresos():
    assert completar_linea_venta(None, 10, 3) == (3.33, 10.0)


def test_completar_linea_venta_sin_precio():
    assert completar_linea_venta(4, 20, None) == (4.0, 20.0)


def test_espacio_disponible():
    assert espacio_disponible(200, 150) == 50
    assert espacio_disponible(50, 60) == 0


def test_tasa_conversion():
    assert calcular_tasa_conversion(40, 4) == pytest.approx(10.0)
    assert calcular_tasa_conversion(0, 4) is None
    assert calcular_tasa_conversion(40, None) is None


@pytest.mark.parametrize(
    "valor, esperado",
    [(2.345, 2.35), (2.344, 2.34), ("10", 10.0), (None, 0.0)],
)
def test_round_money_dos_decimales(valor, esperado):
    assert round_money(valor) == esperado
