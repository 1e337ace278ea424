"""
PDF rendering with ReportLab
"""
import logging
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from verivault.errors import RenderError

from .base import ReportRenderer
from .documents import ReportDocument

logger = logging.getLogger(__name__)

BRAND_COLOR = '#1f3a5f'


class PdfReportRenderer(ReportRenderer):
    """
    Render a report document to PDF bytes

    The watermark goes into the document metadata and is drawn in tiny,
    near-white text at the foot of every page.
    """

    media_type = 'application/pdf'
    extension = '.pdf'

    def __init__(self, pagesize=A4):
        self.pagesize = pagesize
        self.styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            textColor=colors.HexColor(BRAND_COLOR),
            spaceAfter=4,
            alignment=1,
        )
        self.subtitle_style = ParagraphStyle(
            name='ReportSubtitle',
            parent=self.styles['Normal'],
            fontSize=11,
            textColor=colors.grey,
            alignment=1,
        )
        self.heading_style = ParagraphStyle(
            name='SectionHeading',
            parent=self.styles['Heading2'],
            fontSize=13,
            textColor=colors.HexColor(BRAND_COLOR),
            spaceAfter=6,
        )
        self.cell_style = ParagraphStyle(name='Cell', parent=self.styles['Normal'], fontSize=9, leading=11)
        self.footer_style = ParagraphStyle(
            name='Footer', parent=self.styles['Normal'], fontSize=8, textColor=colors.grey, alignment=1
        )

    def render(self, document: ReportDocument) -> bytes:
        buffer = BytesIO()
        watermark = document.watermark or ''
        doc = SimpleDocTemplate(
            buffer, pagesize=self.pagesize,
            leftMargin=2*cm, rightMargin=2*cm, topMargin=2*cm, bottomMargin=2*cm,
            title=document.title,
            author='VeriVault',
            subject=watermark,
            keywords=watermark,
            creator='VeriVault Security Systems',
        )

        def draw_watermark(canvas, _doc):
            if not watermark:
                return
            canvas.saveState()
            canvas.setFont('Helvetica', 4)
            canvas.setFillColor(colors.HexColor('#fdfdfd'))
            canvas.drawString(2*cm, 0.8*cm, watermark)
            canvas.restoreState()

        try:
            doc.build(self._story(document), onFirstPage=draw_watermark, onLaterPages=draw_watermark)
        except Exception as e:
            logger.error(f"Error rendering PDF '{document.title}': {e}", exc_info=True)
            raise RenderError('Error generating report') from e
        return buffer.getvalue()

    def _story(self, document: ReportDocument):
        story = [
            Paragraph(escape(document.title.upper()), self.title_style),
            Paragraph(escape(document.subtitle), self.subtitle_style),
            Spacer(1, 14),
        ]

        if document.meta:
            story.append(self._key_value_table(document.meta))
            story.append(Spacer(1, 14))

        for section in document.sections:
            story.append(Paragraph(escape(section.heading), self.heading_style))
            if section.rows:
                story.append(self._key_value_table(section.rows))
            for paragraph in section.paragraphs:
                story.append(Paragraph(escape(paragraph), self.styles['Normal']))
            story.append(Spacer(1, 10))

        if document.body:
            for block in document.body.split('\n\n'):
                if block.strip():
                    story.append(Paragraph(escape(block).replace('\n', '<br/>'), self.styles['Normal']))
                    story.append(Spacer(1, 6))

        if document.attachments:
            story.append(Paragraph('Attachments', self.heading_style))
            rows = [['File', 'Type', 'Size']]
            rows.extend([name, mimetype, f"{size} bytes"] for name, mimetype, size in document.attachments)
            table = Table(rows, colWidths=[8*cm, 5*cm, 4*cm])
            table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(BRAND_COLOR)),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, -1), 9),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ]))
            story.append(table)
            story.append(Spacer(1, 10))

        if document.verification:
            story.append(Paragraph('PIN Verification', self.heading_style))
            story.append(self._key_value_table([
                ('Verified', 'Yes' if document.verification.get('pinVerified') else 'No'),
                ('User Hash', str(document.verification.get('userHash') or 'N/A')),
                ('Verified At', str(document.verification.get('timestamp') or 'N/A')),
            ]))
            story.append(Spacer(1, 20))

        story.append(Paragraph(
            '<i>This report was generated by VeriVault and is tagged for audit correlation.</i>',
            self.footer_style,
        ))
        return story

    def _key_value_table(self, rows):
        data = [
            [Paragraph(f"<b>{escape(str(label))}</b>", self.cell_style), Paragraph(escape(str(value)), self.cell_style)]
            for label, value in rows
        ]
        table = Table(data, colWidths=[5*cm, 12*cm])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#f5f5f5')),
            ('TEXTCOLOR', (0, 0), (-1, -1), colors.black),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))
        return table
