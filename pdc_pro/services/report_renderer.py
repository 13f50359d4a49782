"""
Report Renderer - ReportLab layout of an InspectionReport.

Straight flow layout on A4; platypus splits the story across pages.
Photos are drawn from pre-fetched bytes keyed by URL. A photo that is
missing from the mapping or cannot be decoded is replaced by a caption
line, it never fails the render.
"""
import io
import logging
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (
    Image,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from pdc_pro.models.inspection import ConditionStatus, Inspection
from pdc_pro.services.report_builder import (
    InspectionReport,
    PhotoEntry,
    ReportSection,
    build_report,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = A4
MARGIN = 15 * mm
PHOTO_MAX_HEIGHT = 60 * mm

TEXT_DARK = colors.HexColor("#1f2937")
TEXT_LABEL = colors.HexColor("#374151")
TEXT_MUTED = colors.HexColor("#6b7280")
RULE = colors.HexColor("#e5e7eb")

# status -> (background, text)
BADGE_COLORS = {
    ConditionStatus.OK: (colors.HexColor("#dcfce7"), colors.HexColor("#166534")),
    ConditionStatus.ISSUE: (colors.HexColor("#fecaca"), colors.HexColor("#dc2626")),
    ConditionStatus.NOT_APPLICABLE: (colors.HexColor("#f3f4f6"), TEXT_MUTED),
}


def _styles() -> Dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("ReportTitle", parent=base["Title"], fontSize=20, leading=24, textColor=TEXT_DARK),
        "subtitle": ParagraphStyle("ReportSubtitle", parent=base["Normal"], alignment=TA_CENTER, textColor=TEXT_MUTED),
        "heading": ParagraphStyle("SectionHeading", parent=base["Heading2"], textColor=TEXT_DARK, spaceBefore=8),
        "label": ParagraphStyle("Label", parent=base["Normal"], fontName="Helvetica-Bold", textColor=TEXT_LABEL),
        "value": ParagraphStyle("Value", parent=base["Normal"], textColor=TEXT_DARK),
        "badge": ParagraphStyle("Badge", parent=base["Normal"], fontSize=8, alignment=TA_CENTER),
        "issue": ParagraphStyle("Issue", parent=base["Normal"], fontName="Helvetica-Oblique", fontSize=8, textColor=TEXT_MUTED),
        "caption": ParagraphStyle("Caption", parent=base["Normal"], fontName="Helvetica-Bold", fontSize=9, textColor=TEXT_LABEL),
        "missing": ParagraphStyle("Missing", parent=base["Normal"], fontSize=8, textColor=TEXT_MUTED),
    }


def _rule(width: float, thickness: float = 0.5) -> Table:
    table = Table([[""]], colWidths=[width], rowHeights=[2])
    table.setStyle(TableStyle([("LINEBELOW", (0, 0), (-1, -1), thickness, RULE)]))
    return table


def _details_table(section: ReportSection, styles, width: float) -> Table:
    cells = [
        [Paragraph(f"{escape(row.label)}:", styles["label"]), Paragraph(escape(row.value), styles["value"])]
        for row in section.details
    ]
    # Two label/value pairs per line
    rows = []
    for index in range(0, len(cells), 2):
        pair = cells[index] + (cells[index + 1] if index + 1 < len(cells) else ["", ""])
        rows.append(pair)

    column = width / 2
    table = Table(rows, colWidths=[column * 0.4, column * 0.6] * 2)
    table.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]))
    return table


def _checks_table(section: ReportSection, styles, width: float) -> Table:
    rows = []
    commands = [
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LINEBELOW", (0, 0), (-1, -1), 0.25, RULE),
    ]

    for index, check in enumerate(section.checks):
        background, text = BADGE_COLORS[check.status]
        badge_style = ParagraphStyle(f"Badge{index}", parent=styles["badge"], textColor=text)
        description = Paragraph(escape(check.description), styles["issue"]) if check.description else ""
        rows.append([
            Paragraph(escape(check.label), styles["label"]),
            Paragraph(escape(check.status.value), badge_style),
            description,
        ])
        commands.append(("BACKGROUND", (1, index), (1, index), background))

    table = Table(rows, colWidths=[width * 0.35, width * 0.15, width * 0.5])
    table.setStyle(TableStyle(commands))
    return table


def _photo_cell(photo: PhotoEntry, data: Optional[bytes], styles, width: float) -> List:
    caption = Paragraph(escape(photo.label), styles["caption"])
    if data:
        try:
            img_width, img_height = ImageReader(io.BytesIO(data)).getSize()
            scale = min(width / img_width, PHOTO_MAX_HEIGHT / img_height)
            return [caption, Image(io.BytesIO(data), width=img_width * scale, height=img_height * scale)]
        except Exception as e:
            logger.warning(f"Skipping undecodable photo {photo.url}: {e}")
    return [caption, Paragraph(f"Image unavailable: {escape(photo.url)}", styles["missing"])]


def _photos_table(section: ReportSection, images: Dict[str, bytes], styles, width: float) -> Table:
    column = width / 2
    cells = [_photo_cell(photo, images.get(photo.url), styles, column - 12) for photo in section.photos]
    rows = [cells[index:index + 2] for index in range(0, len(cells), 2)]
    if len(rows[-1]) == 1:
        rows[-1].append("")

    table = Table(rows, colWidths=[column, column])
    table.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
    ]))
    return table


def _draw_footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(TEXT_MUTED)
    canvas.drawCentredString(PAGE_SIZE[0] / 2, MARGIN / 2, f"PDC Pro - Page {doc.page}")
    canvas.restoreState()


def render_report_pdf(report: InspectionReport, images: Optional[Dict[str, bytes]] = None) -> bytes:
    """Lay out a shaped report; returns the PDF bytes."""
    images = images or {}
    styles = _styles()
    buffer = io.BytesIO()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=PAGE_SIZE,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=report.title,
    )
    width = doc.width

    story = [
        Paragraph(escape(report.title), styles["title"]),
        Paragraph(f"Generated on {report.generated_on.strftime('%B %d, %Y')}", styles["subtitle"]),
        Spacer(1, 4 * mm),
        _rule(width, 1),
    ]

    for section in report.sections:
        heading = [Paragraph(escape(section.title), styles["heading"]), _rule(width), Spacer(1, 2 * mm)]
        if section.details:
            story.append(KeepTogether(heading + [_details_table(section, styles, width)]))
        elif section.checks:
            story.append(KeepTogether(heading + [_checks_table(section, styles, width)]))
        elif section.photos:
            # Photo grids can outgrow a page, so only the heading sticks to the first row
            story.extend(heading)
            story.append(_photos_table(section, images, styles, width))
        story.append(Spacer(1, 4 * mm))

    doc.build(story, onFirstPage=_draw_footer, onLaterPages=_draw_footer)
    return buffer.getvalue()


def render_inspection_pdf(inspection: Inspection, images: Optional[Dict[str, bytes]] = None) -> bytes:
    """Shape and render an inspection in one call."""
    return render_report_pdf(build_report(inspection), images)
