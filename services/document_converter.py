"""Document converter - write paginated text to PDF and DOCX.

Takes the pages computed by the paginator and writes them out one page at
a time, so the exported document breaks exactly where the layout pass did.
"""

import logging
from pathlib import Path

from docx import Document
from docx.enum.text import WD_BREAK
from docx.shared import Pt
from reportlab.pdfgen import canvas

from .models import OutputFormat, Page, PageGeometry
from .paginator import line_positions

logger = logging.getLogger(__name__)

DOCUMENT_TITLE = "Tailored Resume"


def convert_document(
    pages: list[Page],
    output_path: Path,
    output_format: OutputFormat = OutputFormat.PDF,
    geometry: PageGeometry | None = None,
) -> dict[str, Path]:
    """Write pages in the requested output format(s).

    Args:
        pages: Pages from the paginator.
        output_path: Target path; the suffix is replaced per format.
        output_format: pdf, docx, or both.
        geometry: Geometry the pages were laid out with.

    Returns:
        Dict with "pdf" and/or "docx" keys mapping to written Paths.
    """
    geometry = geometry or PageGeometry()
    results = {}

    if output_format in (OutputFormat.PDF, OutputFormat.BOTH):
        results["pdf"] = write_pdf(pages, output_path.with_suffix(".pdf"), geometry)

    if output_format in (OutputFormat.DOCX, OutputFormat.BOTH):
        results["docx"] = write_docx(pages, output_path.with_suffix(".docx"), geometry)

    return results


def write_pdf(pages: list[Page], pdf_path: Path, geometry: PageGeometry) -> Path:
    """Draw each page's lines at their layout positions with reportlab."""
    pdf_path.parent.mkdir(parents=True, exist_ok=True)

    c = canvas.Canvas(str(pdf_path), pagesize=(geometry.page_width, geometry.page_height))
    c.setTitle(DOCUMENT_TITLE)

    for page in pages:
        c.setFont(geometry.font_name, geometry.font_size)
        for y, line in line_positions(page, geometry):
            # reportlab's origin is the bottom-left corner
            c.drawString(geometry.margin_left, geometry.page_height - y, line)
        c.showPage()

    c.save()
    logger.debug("Wrote %d page(s) to %s", len(pages), pdf_path)
    return pdf_path


def write_docx(pages: list[Page], docx_path: Path, geometry: PageGeometry) -> Path:
    """Write one block of paragraphs per page, with hard page breaks between them."""
    docx_path.parent.mkdir(parents=True, exist_ok=True)

    doc = Document()
    doc.core_properties.title = DOCUMENT_TITLE

    # Page setup
    right_margin = max(geometry.page_width - geometry.margin_left - geometry.max_line_width, 0)
    bottom_margin = max(geometry.page_height - geometry.bottom_bound - geometry.line_height, 0)
    for section in doc.sections:
        section.page_width = Pt(geometry.page_width)
        section.page_height = Pt(geometry.page_height)
        section.left_margin = Pt(geometry.margin_left)
        section.right_margin = Pt(right_margin)
        section.top_margin = Pt(max(geometry.margin_top - geometry.line_height, 0))
        section.bottom_margin = Pt(bottom_margin)

    # Configure default font
    style = doc.styles['Normal']
    style.font.name = geometry.font_name
    style.font.size = Pt(geometry.font_size)
    style.paragraph_format.line_spacing = Pt(geometry.line_height)
    style.paragraph_format.space_before = Pt(0)
    style.paragraph_format.space_after = Pt(0)

    for index, page in enumerate(pages):
        paragraph = None
        for line in page.lines:
            paragraph = doc.add_paragraph(line)
        if index < len(pages) - 1:
            if paragraph is None:
                paragraph = doc.add_paragraph()
            paragraph.add_run().add_break(WD_BREAK.PAGE)

    doc.save(str(docx_path))
    logger.debug("Wrote %d page(s) to %s", len(pages), docx_path)
    return docx_path
