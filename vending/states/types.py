from typing import TypedDict


class CurrentUser(TypedDict):
    id: str
    email: str
    nombre: str


class NavigationItem(TypedDict):
    label: str
    icon: str
    page: str


class LugarRow(TypedDict):
    id: str
    nombre: str
    direccion: str
    google_maps_url: str
    notas: str
    maquinas: int


class MaquinaRow(TypedDict):
    id: str
    nombre: str
    color: str
    tipo: str
    detalle_tipo: str
    lugar_id: str
    lugar_nombre: str
    activa: bool
    estado: str
    dias_estimados: int
    porcentaje: float
    prioridad: str
    dias_restantes: int
    ultima_recoleccion: str
    stock_resumen: str


class CompartimentoForm(TypedDict):
    id: str
    capacidad: str
    cantidad_actual: str
    cantidad_cargada: str
    tipo_producto: str
    precio_venta: str


class RecoleccionRow(TypedDict):
    id: str
    maquina_id: str
    maquina_nombre: str
    fecha: str
    ingresos: float
    comision_local: float
    ingresos_netos: float
    costos: float
    tasa_conversion: str
    notas: str


class LineaVentaForm(TypedDict):
    compartimento_id: str
    producto_nombre: str
    precio: str
    stock: str
    cantidad: str
    ingresos: str
    relleno: str


class CostoRecoleccionForm(TypedDict):
    concepto: str
    monto: str


class CostoRow(TypedDict):
    id: str
    fecha: str
    tipo_maquina: str
    concepto: str
    cantidad: float
    unidad: str
    costo_total: float
    costo_unitario: float
    costo_por_unidad: float
    proveedor: str
    relacionados: int


class RentabilidadRow(TypedDict):
    maquina_id: str
    maquina_nombre: str
    recolecciones: int
    ingresos_totales: float
    costos_recoleccion: float
    costos_productos: float
    costos_totales: float
    ganancia_neta: float
    margen_ganancia: float


class NotificacionRow(TypedDict):
    maquina_id: str
    maquina_nombre: str
    ubicacion: str
    dias_desde_ultima_recoleccion: int
    dias_estimados: int
    porcentaje: float
    prioridad: str
