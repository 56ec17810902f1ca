"""Esquemas de entidades (pydantic v2).

Los atributos Python usan snake_case; el formato JSON de la API y del
almacén usa los nombres camelCase originales (``fechaUltimaRecoleccion``,
``ingresosNetos``...). Los modelos aceptan ambos al validar.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from vending.constants import DEFAULT_DIAS_RECOLECCION, DEFAULT_MACHINE_COLOR
from vending.enums import (
    Prioridad,
    TipoChiclera,
    TipoMaquina,
    TipoProductoChiclera,
    UnidadCompra,
)
from vending.utils.calculations import (
    calcular_ingresos_netos,
    calcular_tasa_conversion,
    clamp_stock,
)
from vending.utils.dates import now_iso, parse_iso
from vending.utils.sanitization import (
    sanitize_address,
    sanitize_concept,
    sanitize_name,
    sanitize_notes,
    sanitize_url,
)


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def _check_fecha(value: str | None) -> str | None:
    if value is None:
        return value
    if parse_iso(value) is None:
        raise ValueError("Fecha inválida, se espera formato ISO 8601")
    return value


def _optional_text(value, sanitizer):
    if value is None:
        return None
    cleaned = sanitizer(value)
    return cleaned or None


# =============================================================================
# LUGARES
# =============================================================================


class Coordenadas(BaseSchema):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Lugar(BaseSchema):
    id: str = ""
    nombre: str = Field(min_length=1)
    direccion: str = Field(min_length=1)
    coordenadas: Coordenadas | None = None
    google_maps_url: str | None = None
    notas: str | None = None
    fecha_creacion: str = Field(default_factory=now_iso)

    @field_validator("nombre", mode="before")
    @classmethod
    def _clean_nombre(cls, value):
        return sanitize_name(value)

    @field_validator("direccion", mode="before")
    @classmethod
    def _clean_direccion(cls, value):
        return sanitize_address(value)

    @field_validator("google_maps_url", mode="before")
    @classmethod
    def _clean_url(cls, value):
        return _optional_text(value, sanitize_url)

    @field_validator("notas", mode="before")
    @classmethod
    def _clean_notas(cls, value):
        return _optional_text(value, sanitize_notes)

    @field_validator("fecha_creacion", mode="before")
    @classmethod
    def _default_fecha(cls, value):
        return value or now_iso()

    @field_validator("fecha_creacion")
    @classmethod
    def _check_fecha_creacion(cls, value):
        return _check_fecha(value)


# =============================================================================
# MÁQUINAS
# =============================================================================


class Producto(BaseSchema):
    """Producto anidado de versiones anteriores; se pliega en el compartimento."""

    id: str = ""
    nombre: str = ""
    precio: float = Field(default=0, ge=0)
    costo: float = Field(default=0, ge=0)


class Compartimento(BaseSchema):
    id: str = Field(min_length=1)
    producto: Producto | None = Field(default=None, exclude=True)
    capacidad: int = Field(ge=1)
    cantidad_actual: float = Field(default=0, ge=0)
    tipo_producto: str | None = None
    tipo_granel_bola: TipoProductoChiclera | None = None
    precio_venta: float | None = Field(default=None, ge=0)

    @field_validator("tipo_producto", mode="before")
    @classmethod
    def _clean_tipo_producto(cls, value):
        return _optional_text(value, sanitize_name)

    @model_validator(mode="after")
    def _normalize(self):
        if self.producto is not None:
            if not self.tipo_producto and self.producto.nombre:
                self.tipo_producto = sanitize_name(self.producto.nombre) or None
            if self.precio_venta is None and self.producto.precio:
                self.precio_venta = self.producto.precio
            self.producto = None
        self.cantidad_actual = clamp_stock(self.cantidad_actual, self.capacidad)
        return self

    @property
    def nombre_producto(self) -> str:
        if self.tipo_producto:
            return self.tipo_producto[:1].upper() + self.tipo_producto[1:]
        return "Producto"


class Maquina(BaseSchema):
    id: str = ""
    nombre: str = Field(min_length=1)
    color: str = DEFAULT_MACHINE_COLOR
    tipo: TipoMaquina
    tipo_chiclera: TipoChiclera | None = None
    tipo_producto_chiclera: TipoProductoChiclera | None = None
    lugar_id: str = Field(min_length=1)
    compartimentos: List[Compartimento] = Field(default_factory=list)
    costo_maquina: float = Field(default=0, ge=0)
    fecha_instalacion: str
    fecha_ultima_recoleccion: str | None = None
    dias_recoleccion_estimados: int = Field(default=DEFAULT_DIAS_RECOLECCION, ge=1)
    activa: bool = True
    notas: str | None = None
    imagen: str | None = None

    @field_validator("nombre", mode="before")
    @classmethod
    def _clean_nombre(cls, value):
        return sanitize_name(value)

    @field_validator("color", mode="before")
    @classmethod
    def _clean_color(cls, value):
        return sanitize_name(value) or DEFAULT_MACHINE_COLOR

    @field_validator("notas", mode="before")
    @classmethod
    def _clean_notas(cls, value):
        return _optional_text(value, sanitize_notes)

    @field_validator("imagen", mode="before")
    @classmethod
    def _empty_imagen(cls, value):
        return value or None

    @field_validator("fecha_ultima_recoleccion", mode="before")
    @classmethod
    def _empty_fecha(cls, value):
        return value or None

    @field_validator("fecha_instalacion", "fecha_ultima_recoleccion")
    @classmethod
    def _check_fechas(cls, value):
        return _check_fecha(value)

    @model_validator(mode="after")
    def _defaults_por_tipo(self):
        if self.tipo == TipoMaquina.chiclera:
            self.tipo_chiclera = self.tipo_chiclera or TipoChiclera.individual
            self.tipo_producto_chiclera = (
                self.tipo_producto_chiclera or TipoProductoChiclera.granel
            )
        else:
            self.tipo_chiclera = None
            self.tipo_producto_chiclera = None
        return self

    def compartimento(self, compartimento_id: str) -> Compartimento | None:
        for comp in self.compartimentos:
            if comp.id == compartimento_id:
                return comp
        return None


class MaquinaUpdateRequest(BaseSchema):
    maquina: dict | None = None


class LugarUpdateRequest(BaseSchema):
    lugar: dict | None = None


# =============================================================================
# RECOLECCIONES
# =============================================================================


class ProductoVendido(BaseSchema):
    compartimento_id: str = Field(min_length=1)
    cantidad: float = Field(ge=0)
    producto_id: str = ""
    producto_nombre: str = ""
    ingresos: float = Field(default=0, ge=0)

    @field_validator("producto_nombre", mode="before")
    @classmethod
    def _clean_nombre(cls, value):
        return sanitize_name(value)


class CostoRecoleccion(BaseSchema):
    concepto: str = Field(min_length=1)
    monto: float = Field(ge=0)

    @field_validator("concepto", mode="before")
    @classmethod
    def _clean_concepto(cls, value):
        return sanitize_concept(value)


class Relleno(BaseSchema):
    compartimento_id: str = Field(min_length=1)
    cantidad: float = Field(gt=0)


class Recoleccion(BaseSchema):
    id: str = ""
    maquina_id: str = Field(min_length=1)
    fecha: str = Field(default_factory=now_iso)
    ingresos: float = Field(ge=0)
    comision_local: float | None = Field(default=None, ge=0, le=100)
    ingresos_netos: float | None = None
    productos_vendidos: List[ProductoVendido] = Field(default_factory=list)
    costos: List[CostoRecoleccion] = Field(default_factory=list)
    notas: str | None = None
    turnos_realizados: int | None = Field(default=None, ge=0)
    peluches_sacados: int | None = Field(default=None, ge=0)
    precio_por_turno: float | None = Field(default=None, ge=0)
    tasa_conversion: float | None = None
    rellenos: List[Relleno] = Field(default_factory=list)

    @field_validator("notas", mode="before")
    @classmethod
    def _clean_notas(cls, value):
        return _optional_text(value, sanitize_notes)

    @field_validator("fecha", mode="before")
    @classmethod
    def _default_fecha(cls, value):
        return value or now_iso()

    @field_validator("fecha")
    @classmethod
    def _check_fecha(cls, value):
        return _check_fecha(value)

    @field_validator("costos", "productos_vendidos", "rellenos", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []

    @model_validator(mode="after")
    def _derivados(self):
        # Los ingresos netos siempre se recalculan a partir de la comisión.
        self.ingresos_netos = calcular_ingresos_netos(self.ingresos, self.comision_local)
        if self.tasa_conversion is None:
            self.tasa_conversion = calcular_tasa_conversion(
                self.turnos_realizados, self.peluches_sacados
            )
        return self

    @property
    def total_costos(self) -> float:
        return sum(costo.monto for costo in self.costos)


# =============================================================================
# COSTOS DE INSUMOS
# =============================================================================


class ProductoRelacionado(BaseSchema):
    """Referencia estructurada a un compartimento de una máquina."""

    maquina_id: str = Field(min_length=1)
    compartimento_id: str = Field(min_length=1)
    nombre: str | None = None


class CostoInsumo(BaseSchema):
    id: str = ""
    fecha: str = Field(default_factory=now_iso)
    tipo_maquina: TipoMaquina
    concepto: str = Field(min_length=1)
    cantidad: float = Field(ge=0)
    unidad: UnidadCompra
    costo_unitario: float | None = Field(default=None, ge=0)
    costo_total: float = Field(ge=0)
    unidades_por_kg: float | None = Field(default=None, ge=0)
    kg_por_caja: float | None = Field(default=None, ge=0)
    unidades_por_bolsas: float | None = Field(default=None, ge=0)
    costo_por_unidad: float | None = Field(default=None, ge=0)
    proveedor: str | None = None
    notas: str | None = None
    productos_relacionados: List[ProductoRelacionado] = Field(default_factory=list)

    @field_validator("concepto", mode="before")
    @classmethod
    def _clean_concepto(cls, value):
        return sanitize_concept(value)

    @field_validator("proveedor", mode="before")
    @classmethod
    def _clean_proveedor(cls, value):
        return _optional_text(value, sanitize_name)

    @field_validator("notas", mode="before")
    @classmethod
    def _clean_notas(cls, value):
        return _optional_text(value, sanitize_notes)

    @field_validator("unidad", mode="before")
    @classmethod
    def _lower_unidad(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("fecha", mode="before")
    @classmethod
    def _default_fecha(cls, value):
        return value or now_iso()

    @field_validator("fecha")
    @classmethod
    def _check_fecha(cls, value):
        return _check_fecha(value)

    @field_validator("productos_relacionados", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []

    def relacionado_con(self, maquina_id: str, compartimento_id: str) -> bool:
        return any(
            rel.maquina_id == maquina_id and rel.compartimento_id == compartimento_id
            for rel in self.productos_relacionados
        )


# =============================================================================
# CALCULADOS
# =============================================================================


class Periodo(BaseSchema):
    inicio: str
    fin: str


class Rentabilidad(BaseSchema):
    maquina_id: str
    maquina_nombre: str = ""
    periodo: Periodo
    ingresos_totales: float = 0
    costos_recoleccion: float = 0
    costos_productos: float = 0
    costos_totales: float = 0
    ganancia_neta: float = 0
    margen_ganancia: float = 0
    recolecciones: int = 0


class NotificacionRecoleccion(BaseSchema):
    maquina_id: str
    maquina_nombre: str
    ubicacion: str = ""
    dias_desde_ultima_recoleccion: int
    dias_estimados: int
    porcentaje: float
    prioridad: Prioridad


# =============================================================================
# USUARIOS
# =============================================================================


class Usuario(BaseSchema):
    id: str
    email: str
    nombre: str = ""
    password_hash: str = ""
    fecha_creacion: str = Field(default_factory=now_iso)

    def to_public(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude={"password_hash"})


class SignupRequest(BaseSchema):
    email: str = ""
    password: str = ""
    nombre: str | None = None


class LoginRequest(BaseSchema):
    email: str = ""
    password: str = ""


class VerifyRequest(BaseSchema):
    token: str = ""


class NotificacionPushRequest(BaseSchema):
    fid: int | str | None = None
