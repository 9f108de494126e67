# invoicing/pdf.py
"""
Geração do PDF imprimível de uma fatura
"""
from __future__ import annotations

import io
import logging
from datetime import date
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .aggregation import InvoiceTotals
from .errors import RenderError
from .models import Invoice

logger = logging.getLogger(__name__)


def format_date(value: Optional[date]) -> str:
    """Data no formato id-ID (dd/mm/aaaa)"""
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")


def format_rupiah(value: float) -> str:
    """1234567.5 -> 'Rp 1.234.567,50' (centavos omitidos quando zerados)"""
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    if text.endswith(",00"):
        text = text[:-3]
    return f"Rp {text}"


def _quantity(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def generate_invoice_pdf(invoice: Invoice, totals: InvoiceTotals) -> bytes:
    """Gera o PDF da fatura. Todos os produtos precisam estar resolvidos."""
    totals.require_resolved()

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4,
                            rightMargin=1.5*cm, leftMargin=1.5*cm,
                            topMargin=1.5*cm, bottomMargin=1.5*cm,
                            title=f"Invoice {invoice.id}")

    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'CustomTitle',
        parent=styles['Heading1'],
        fontSize=16,
        textColor=colors.HexColor('#000000'),
        alignment=TA_CENTER,
        spaceAfter=12,
    )
    elements.append(Paragraph("INVOICE", title_style))
    elements.append(Paragraph(f"No: {invoice.id}", styles['Normal']))
    elements.append(Spacer(1, 0.3*cm))
    elements.append(Paragraph(f"<b>Customer:</b> {_escape(invoice.customer)}", styles['Normal']))
    elements.append(Paragraph(f"<b>Tanggal Terima:</b> {format_date(invoice.tanggal_terima)}", styles['Normal']))
    elements.append(Paragraph(f"<b>Tanggal Selesai:</b> {format_date(invoice.tanggal_selesai)}", styles['Normal']))
    elements.append(Spacer(1, 0.5*cm))

    # Tabela de itens
    table_data = [['No', 'Product Name', 'Quantity', 'Price', 'Total Price']]
    for index, line in enumerate(totals.lines, start=1):
        table_data.append([
            str(index),
            Paragraph(_escape(line.name or ''), styles['Normal']),
            _quantity(line.quantity),
            format_rupiah(line.price),
            format_rupiah(line.total_price),
        ])

    table = Table(table_data, colWidths=[1.2*cm, 7.3*cm, 2.5*cm, 3.5*cm, 3.5*cm], repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f2f2f2')),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, 0), 10),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('ALIGN', (2, 1), (-1, -1), 'RIGHT'),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('GRID', (0, 0), (-1, -1), 1, colors.HexColor('#dddddd')),
    ]))
    elements.append(table)
    elements.append(Spacer(1, 0.5*cm))

    summary = Table([
        ['Sub Total:', format_rupiah(totals.grand_price)],
        ['DP:', format_rupiah(totals.down_payment)],
        ['Total:', format_rupiah(totals.balance_due)],
    ], colWidths=[3.5*cm, 3.5*cm], hAlign='RIGHT')
    summary.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('LINEABOVE', (0, -1), (-1, -1), 1, colors.black),
    ]))
    elements.append(summary)

    try:
        doc.build(elements)
    except Exception as exc:
        logger.exception("Falha ao gerar PDF da fatura %s", invoice.id)
        raise RenderError() from exc
    return buffer.getvalue()


def _escape(text: str) -> str:
    # Paragraph interpreta mini-HTML
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
