from enum import Enum

class TipoMaquina(str, Enum):
    peluchera = "peluchera"
    chiclera = "chiclera"

    PELUCHERA = peluchera
    CHICLERA = chiclera

class TipoChiclera(str, Enum):
    individual = "individual"
    doble = "doble"
    triple = "triple"

    INDIVIDUAL = individual
    DOBLE = doble
    TRIPLE = triple

class TipoProductoChiclera(str, Enum):
    granel = "granel"
    bola = "bola"

    GRANEL = granel
    BOLA = bola

class UnidadCompra(str, Enum):
    unidades = "unidades"
    kg = "kg"
    cajas = "cajas"
    bolsas = "bolsas"
    paquetes = "paquetes"

    UNIDADES = unidades
    KG = kg
    CAJAS = cajas
    BOLSAS = bolsas
    PAQUETES = paquetes

class Prioridad(str, Enum):
    alta = "alta"
    media = "media"
    baja = "baja"

    ALTA = alta
    MEDIA = media
    BAJA = baja
