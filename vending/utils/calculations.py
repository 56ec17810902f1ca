"""
Cálculos de costos, ingresos y stock.

Funciones puras usadas por los servicios, la API y los formularios.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from vending.constants import MONEY_DECIMAL_PLACES, UNIT_COST_DECIMAL_PLACES

MONEY_QUANT = Decimal(1).scaleb(-MONEY_DECIMAL_PLACES)
UNIT_COST_QUANT = Decimal(1).scaleb(-UNIT_COST_DECIMAL_PLACES)

UNIDADES_DIRECTAS = {"unidades", "paquetes"}


def _to_decimal(value: Decimal | str | int | float | None) -> Decimal:
    return Decimal(str(value or 0))


def round_money(value: Any) -> float:
    return float(_to_decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP))


def round_unit_cost(value: Any) -> float:
    return float(_to_decimal(value).quantize(UNIT_COST_QUANT, rounding=ROUND_HALF_UP))


def calcular_ingresos_netos(ingresos: float, comision_local: float | None) -> float:
    """
    Ingresos después de la comisión del local.

    ``ingresos × (1 − comision/100)``; sin comisión (o 0) devuelve los
    ingresos brutos.
    """
    bruto = _to_decimal(ingresos)
    if not comision_local:
        return round_money(bruto)
    factor = Decimal(1) - _to_decimal(comision_local) / Decimal(100)
    return round_money(bruto * factor)


def clamp_stock(cantidad: float, capacidad: float) -> float:
    """Limita ``cantidad`` al rango ``[0, capacidad]``."""
    if cantidad is None or cantidad < 0:
        return 0
    if capacidad is not None and cantidad > capacidad:
        return capacidad
    return cantidad


def validar_costo_insumo(
    unidad: str,
    cantidad: float | None,
    costo_total: float | None,
    unidades_por_kg: float | None = None,
    kg_por_caja: float | None = None,
    unidades_por_bolsas: float | None = None,
) -> None:
    """
    Verifica los datos de una compra antes de derivar el costo por unidad.

    Raises:
        ValueError: con un mensaje apto para mostrar al usuario
    """
    if not cantidad or cantidad <= 0:
        raise ValueError("La cantidad debe ser mayor a 0.")
    if not costo_total or costo_total <= 0:
        raise ValueError("El costo total debe ser mayor a 0.")

    unidad = (unidad or "").strip().lower()
    if unidad == "kg":
        if not unidades_por_kg or unidades_por_kg <= 0:
            raise ValueError("Indique cuántas unidades hay en 1 kg.")
    elif unidad == "cajas":
        if not kg_por_caja or kg_por_caja <= 0:
            raise ValueError("Indique cuántos kg hay en 1 caja.")
        if not unidades_por_kg or unidades_por_kg <= 0:
            raise ValueError("Indique cuántas unidades hay en 1 kg.")
    elif unidad == "bolsas":
        if not unidades_por_bolsas or unidades_por_bolsas <= 0:
            raise ValueError("Indique cuántas unidades hay en 1 bolsa.")
    elif unidad not in UNIDADES_DIRECTAS:
        raise ValueError(f"Unidad de compra no soportada: {unidad or '(vacía)'}.")


def calcular_costo_unitario(costo_total: float, cantidad: float) -> float:
    """Costo por unidad de compra (kg, caja, bolsa...)."""
    cantidad_dec = _to_decimal(cantidad)
    if cantidad_dec <= 0:
        return 0.0
    return round_unit_cost(_to_decimal(costo_total) / cantidad_dec)


def calcular_costo_por_unidad(
    unidad: str,
    costo_unitario: float,
    unidades_por_kg: float | None = None,
    kg_por_caja: float | None = None,
    unidades_por_bolsas: float | None = None,
) -> float:
    """
    Costo de cada pieza individual a partir del costo por unidad de compra.

    - ``kg``: costo_unitario / unidades_por_kg
    - ``cajas``: costo_unitario / (kg_por_caja × unidades_por_kg)
    - ``bolsas``: costo_unitario / unidades_por_bolsas
    - ``unidades``/``paquetes``: el mismo costo_unitario
    """
    unidad = (unidad or "").strip().lower()
    precio = _to_decimal(costo_unitario)

    if unidad == "kg":
        divisor = _to_decimal(unidades_por_kg)
    elif unidad == "cajas":
        divisor = _to_decimal(kg_por_caja) * _to_decimal(unidades_por_kg)
    elif unidad == "bolsas":
        divisor = _to_decimal(unidades_por_bolsas)
    else:
        divisor = Decimal(1)

    if divisor <= 0:
        return 0.0
    return round_unit_cost(precio / divisor)


def derivar_costos(
    unidad: str,
    cantidad: float,
    costo_total: float,
    unidades_por_kg: float | None = None,
    kg_por_caja: float | None = None,
    unidades_por_bolsas: float | None = None,
) -> tuple[float, float]:
    """
    Valida la compra y devuelve ``(costo_unitario, costo_por_unidad)``.

    Ejemplo: 1 kg a 50 con 100 unidades por kg -> ``(50.0, 0.5)``.
    """
    validar_costo_insumo(
        unidad,
        cantidad,
        costo_total,
        unidades_por_kg=unidades_por_kg,
        kg_por_caja=kg_por_caja,
        unidades_por_bolsas=unidades_por_bolsas,
    )
    costo_unitario = calcular_costo_unitario(costo_total, cantidad)
    costo_por_unidad = calcular_costo_por_unidad(
        unidad,
        costo_unitario,
        unidades_por_kg=unidades_por_kg,
        kg_por_caja=kg_por_caja,
        unidades_por_bolsas=unidades_por_bolsas,
    )
    return costo_unitario, costo_por_unidad


def calcular_tasa_conversion(turnos: float | None, premios: float | None) -> float | None:
    """Porcentaje de turnos de peluchera que terminaron en premio."""
    if not turnos or turnos <= 0 or premios is None:
        return None
    return round_money(_to_decimal(premios) / _to_decimal(turnos) * 100)


def completar_linea_venta(
    cantidad: float | None,
    ingresos: float | None,
    precio_venta: float | None,
) -> tuple[float, float]:
    """
    Completa una línea de venta a partir de cantidad o de ingresos.

    - con cantidad y precio: ``ingresos = cantidad × precio``
    - solo con ingresos y precio: ``cantidad = ingresos / precio`` (2 decimales)
    - sin precio se respetan los valores recibidos
    """
    precio = _to_decimal(precio_venta)
    cantidad_dec = _to_decimal(cantidad)
    ingresos_dec = _to_decimal(ingresos)
    if precio > 0 and cantidad_dec > 0:
        return float(cantidad_dec), round_money(cantidad_dec * precio)
    if precio > 0 and ingresos_dec > 0:
        return round_money(ingresos_dec / precio), round_money(ingresos_dec)
    return float(cantidad_dec), round_money(ingresos_dec)


def espacio_disponible(capacidad: float, cantidad_actual: float) -> float:
    """Unidades que todavía entran en un compartimento."""
    return max((capacidad or 0) - (cantidad_actual or 0), 0)
