# reports/pdf.py
"""Printable weighing reports built with ReportLab.

Builders return the PDF as bytes; the caller decides how to ship it.
"""
import logging
import re
from datetime import date
from io import BytesIO
from typing import Iterable, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from reports.aggregation import category_breakdown, category_name
from reports.periods import format_date_id

logger = logging.getLogger(__name__)

PRIMARY = HexColor("#009ce4")
PAGE_SIZE = landscape(A4)
MARGIN = 14 * mm


class ReportError(Exception):
    """Raised when a report cannot be rendered."""


def session_filename(session_id: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"laporan_penimbangan_{session_id}_{today.isoformat()}.pdf"


def period_filename(period_name: str, year: int, today: Optional[date] = None) -> str:
    today = today or date.today()
    safe = re.sub(r"[^\w\-]+", "_", (period_name or "").strip()).strip("_") or "periode"
    return f"laporan_bulanan_{safe}_{year}_{today.isoformat()}.pdf"


def kg(value) -> str:
    return f"{float(value or 0):.2f}"


# ---------- layout helpers ----------
def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="ReportTitle", parent=styles["h1"], fontSize=18, alignment=TA_LEFT, spaceAfter=4))
    styles.add(ParagraphStyle(name="ReportSubtitle", parent=styles["h2"], fontSize=12, spaceAfter=10))
    styles.add(ParagraphStyle(name="Info", parent=styles["Normal"], fontSize=10, leading=14))
    styles.add(ParagraphStyle(name="Section", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=11, spaceBefore=8, spaceAfter=6))
    styles.add(ParagraphStyle(name="Banner", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=11, textColor=colors.white))
    return styles


def _grid(data, col_widths, right_cols=(), center_cols=(), bold_last_row=False):
    table = Table(data, colWidths=col_widths, repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    for col in right_cols:
        style.append(("ALIGN", (col, 0), (col, -1), "RIGHT"))
    for col in center_cols:
        style.append(("ALIGN", (col, 0), (col, -1), "CENTER"))
    if bold_last_row:
        style.append(("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"))
    table.setStyle(TableStyle(style))
    return table


def _banner(text, styles, width):
    table = Table([[Paragraph(text, styles["Banner"])]], colWidths=[width])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), PRIMARY),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return table


def _page_footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 9)
    canvas.drawCentredString(PAGE_SIZE[0] / 2, 10 * mm, f"Halaman {doc.page}")
    canvas.restoreState()


def _render(story) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=PAGE_SIZE,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=20 * mm,
    )
    try:
        doc.build(story, onFirstPage=_page_footer, onLaterPages=_page_footer)
    except Exception as e:
        logger.exception("PDF build failed")
        raise ReportError("Gagal membuat PDF. Silakan coba lagi.") from e
    return buf.getvalue()


def _content_width() -> float:
    return PAGE_SIZE[0] - 2 * MARGIN


# ---------- session report ----------
def build_session_pdf(summary) -> bytes:
    """One weighing session: items, per-category subtotals and grand total."""
    if summary is None:
        raise ReportError("Data session tidak valid")

    styles = _styles()
    width = _content_width()
    items = list(summary.items or [])
    story = [
        Paragraph("BARANG MASUK UPL", styles["ReportTitle"]),
        Paragraph("Laporan Hasil Penimbangan Limbah Plastik", styles["ReportSubtitle"]),
        Paragraph(f"Tanggal: {format_date_id(summary.transaction_date)}", styles["Info"]),
        Paragraph(f"PIC: {escape(summary.pic_name or 'Tidak diketahui')}", styles["Info"]),
        Paragraph(f"Pemilik: {escape(summary.owner_name or 'Tidak diketahui')}", styles["Info"]),
        Paragraph(f"Jumlah item: {summary.total_items}", styles["Info"]),
        Paragraph(f"Total berat: {kg(summary.total_weight)} kg", styles["Info"]),
        Paragraph("Detail Penimbangan:", styles["Section"]),
    ]

    rows = [["No", "Jenis Plastik", "Berat (kg)", "Satuan"]]
    for idx, it in enumerate(items, 1):
        rows.append(
            [
                str(it.sequence_number or idx),
                category_name(it),
                kg(it.weight_kg),
                it.satuan or "-",
            ]
        )
    rows.append(["Total", "", kg(summary.total_weight), ""])
    story.append(
        _grid(
            rows,
            [25 * mm, width - 125 * mm, 60 * mm, 40 * mm],
            right_cols=(2,),
            center_cols=(0, 3),
            bold_last_row=True,
        )
    )

    story.append(Paragraph("Total Berat per Kategori:", styles["Section"]))
    breakdown = category_breakdown([summary])
    cat_rows = [["Jenis Plastik", "Berat", "Harga"]]
    # Harga is left blank for manual filling
    cat_rows += [[r.category_name, f"{kg(r.total_weight)} kg", ""] for r in breakdown]
    story.append(_grid(cat_rows, [70 * mm, 40 * mm, 40 * mm], center_cols=(1, 2)))

    story.append(Spacer(1, 6 * mm))
    story.append(_banner(f"TOTAL KESELURUHAN: {kg(summary.total_weight)} kg", styles, width))
    return _render(story)


# ---------- period report ----------
def build_period_pdf(
    period_label: str,
    summary,
    categories: Iterable,
    sessions: Iterable = (),
) -> bytes:
    """Closing-period report. `summary` may be None for an empty period."""
    styles = _styles()
    width = _content_width()
    categories = list(categories)
    sessions = list(sessions or [])

    story = [
        Paragraph("LAPORAN PENIMBANGAN BULANAN", styles["ReportTitle"]),
        Paragraph(f"Periode: {escape(period_label or '')}", styles["ReportSubtitle"]),
    ]
    if summary is None:
        story.append(Paragraph("Tidak ada data penimbangan pada periode ini.", styles["Info"]))
        total_weight = 0.0
    else:
        total_weight = summary.total_weight
        story += [
            Paragraph(f"Jumlah sesi: {summary.total_sessions}", styles["Info"]),
            Paragraph(f"Jumlah item: {summary.total_items}", styles["Info"]),
            Paragraph(f"Total berat: {kg(summary.total_weight)} kg", styles["Info"]),
        ]

    if sessions:
        story.append(Paragraph("Rincian Sesi:", styles["Section"]))
        rows = [["No", "Tanggal", "Penimbang", "Pemilik", "Jenis Plastik", "Item", "Berat (kg)"]]
        for idx, s in enumerate(sessions, 1):
            rows.append(
                [
                    str(idx),
                    format_date_id(s.transaction_date),
                    s.pic_name,
                    s.owner_name,
                    Paragraph(escape(", ".join(s.categories)) or "-", styles["Info"]),
                    str(s.item_count),
                    kg(s.total_weight),
                ]
            )
        story.append(
            _grid(
                rows,
                [12 * mm, 28 * mm, 40 * mm, 40 * mm, width - 170 * mm, 18 * mm, 32 * mm],
                right_cols=(6,),
                center_cols=(0, 5),
            )
        )

    story.append(Paragraph("Total Berat per Kategori:", styles["Section"]))
    cat_rows = [["Jenis Plastik", "Berat (kg)", "Persentase", "Item"]]
    cat_rows += [
        [r.category_name, kg(r.total_weight), f"{r.percentage:.1f}%", str(r.item_count)]
        for r in categories
    ]
    story.append(_grid(cat_rows, [70 * mm, 40 * mm, 30 * mm, 20 * mm], right_cols=(1, 2), center_cols=(3,)))

    story.append(Spacer(1, 6 * mm))
    story.append(_banner(f"TOTAL KESELURUHAN: {kg(total_weight)} kg", styles, width))
    return _render(story)
