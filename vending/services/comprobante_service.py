"""Servicio de Comprobantes de Recolección.

Genera un comprobante en PDF de una visita: lo recaudado, la comisión
que corresponde al local y los ingresos netos, más el detalle de lo
vendido y los costos de la visita. Se entrega al encargado del local
como constancia de la liquidación de la comisión.

Ejemplo de uso::

    from vending.services.comprobante_service import ComprobanteService

    pdf = ComprobanteService.generate_comprobante_pdf(recoleccion, maquina, lugar)
"""
from __future__ import annotations

import io
from typing import List

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from vending.schemas.vending_schemas import Lugar, Maquina, Recoleccion
from vending.utils.calculations import round_money
from vending.utils.dates import format_date_display
from vending.utils.formatting import format_currency


class ComprobanteService:
    """Comprobantes de texto monoespaciado para papel de 80mm."""

    WIDTH = 42

    @staticmethod
    def _center(text: str, width: int) -> str:
        return text.center(width)

    @staticmethod
    def _line(width: int) -> str:
        return "-" * width

    @staticmethod
    def _row(left: str, right: str, width: int) -> str:
        left = left[: max(width - len(right) - 1, 1)]
        spaces = width - len(left) - len(right)
        return left + " " * max(spaces, 1) + right

    @staticmethod
    def build_comprobante_lines(
        recoleccion: Recoleccion,
        maquina: Maquina,
        lugar: Lugar | None = None,
        width: int = WIDTH,
    ) -> List[str]:
        """Líneas del comprobante, ya alineadas al ancho indicado."""
        row = ComprobanteService._row
        lines = [
            ComprobanteService._center("COMPROBANTE DE RECOLECCIÓN", width),
            ComprobanteService._line(width),
            row("Fecha:", format_date_display(recoleccion.fecha), width),
            row("Máquina:", maquina.nombre, width),
        ]
        if lugar is not None:
            lines.append(row("Lugar:", lugar.nombre, width))
        lines.append(ComprobanteService._line(width))

        if recoleccion.productos_vendidos:
            lines.append("Vendido")
            for venta in recoleccion.productos_vendidos:
                comp = maquina.compartimento(venta.compartimento_id)
                nombre = venta.producto_nombre or (comp.nombre_producto if comp else "Producto")
                lines.append(row(f"  {venta.cantidad:g} x {nombre}", format_currency(venta.ingresos), width))
            lines.append(ComprobanteService._line(width))

        comision = recoleccion.comision_local or 0
        monto_comision = round_money(recoleccion.ingresos - (recoleccion.ingresos_netos or 0))
        lines.append(row("Recaudado:", format_currency(recoleccion.ingresos), width))
        lines.append(row(f"Comisión local ({comision:g}%):", format_currency(monto_comision), width))
        lines.append(row("Ingresos netos:", format_currency(recoleccion.ingresos_netos or 0), width))

        if recoleccion.costos:
            lines.append(ComprobanteService._line(width))
            lines.append("Costos de la visita")
            for costo in recoleccion.costos:
                lines.append(row(f"  {costo.concepto}", format_currency(costo.monto), width))

        if recoleccion.turnos_realizados is not None:
            lines.append(ComprobanteService._line(width))
            lines.append(row("Turnos:", str(recoleccion.turnos_realizados), width))
            lines.append(row("Peluches sacados:", str(recoleccion.peluches_sacados or 0), width))

        if recoleccion.notas:
            lines.append(ComprobanteService._line(width))
            lines.append(recoleccion.notas[:width])
        lines.append(ComprobanteService._line(width))
        lines.append(ComprobanteService._center("Firma del encargado", width))
        return lines

    @staticmethod
    def generate_comprobante_pdf(
        recoleccion: Recoleccion,
        maquina: Maquina,
        lugar: Lugar | None = None,
    ) -> bytes:
        lines = ComprobanteService.build_comprobante_lines(recoleccion, maquina, lugar)

        buffer = io.BytesIO()
        page_width = 80 * mm
        left_margin = 4 * mm
        top_margin = 6 * mm
        bottom_margin = 16 * mm
        font_name = "Courier"
        font_size = 9
        line_height = font_size + 2

        page_height = top_margin + bottom_margin + len(lines) * line_height
        canvas_obj = canvas.Canvas(buffer, pagesize=(page_width, page_height))
        canvas_obj.setFont(font_name, font_size)

        y = page_height - top_margin
        for line in lines:
            canvas_obj.drawString(left_margin, y, line)
            y -= line_height

        canvas_obj.showPage()
        canvas_obj.save()
        buffer.seek(0)
        return buffer.getvalue()
