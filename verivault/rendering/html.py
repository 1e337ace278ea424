"""
Printable HTML rendering

Reports are cut into word-count pages. The first page carries the header
and meta block, the last page the verification footer and the watermark.
"""
import re
from typing import Iterable, List, Optional, Tuple

from markupsafe import Markup, escape

from verivault.utils.timeutil import now_iso

from .base import ReportRenderer
from .documents import ReportDocument
from .pagination import paginate

HEADING_RE = re.compile(r'\*\*(.+?)\*\*')
EMPHASIS_RE = re.compile(r'(?<!\*)\*([^*\n]+)\*(?!\*)')
CAPS_HEADING_RE = re.compile(r'^([A-Z][A-Z0-9 &/\-]{2,}):$')

AUTO_PRINT_SCRIPT = """
<script>
    window.onload = function () {
        setTimeout(function () { window.print(); }, 500);
    };
</script>
"""


def format_page_content(text: str) -> str:
    """Escape page text and turn the lightweight markup into HTML"""
    lines = []
    for line in (text or '').split('\n'):
        stripped = line.strip()
        caps = CAPS_HEADING_RE.match(stripped)
        if caps:
            lines.append(f'<h4>{escape(caps.group(1))}</h4>')
            continue
        safe = HEADING_RE.sub(r'<h3>\1</h3>', str(escape(line)))
        lines.append(EMPHASIS_RE.sub(r'<em>\1</em>', safe))
    return '\n'.join(lines)


def get_report_css():
    """Print CSS for paginated reports"""
    return """
    @page {
        size: letter;
        margin: 0.75in;
    }

    body {
        font-family: Arial, sans-serif;
        font-size: 11pt;
        line-height: 1.5;
        color: #222;
        margin: 0;
    }

    .page {
        position: relative;
        min-height: 9in;
        padding-bottom: 40px;
        page-break-after: always;
    }

    .page:last-child {
        page-break-after: auto;
    }

    .header {
        border-bottom: 3px solid #1f3a5f;
        padding-bottom: 10px;
        margin-bottom: 16px;
        text-align: center;
    }

    .header h1 {
        color: #1f3a5f;
        margin: 0;
        font-size: 20pt;
    }

    .subtitle {
        margin: 4px 0 0;
        color: #666;
    }

    table.meta {
        width: 100%;
        border-collapse: collapse;
        margin-bottom: 16px;
    }

    table.meta td {
        padding: 6px;
        border-bottom: 1px solid #ddd;
    }

    table.meta td:first-child {
        width: 180px;
        font-weight: bold;
        background-color: #f5f5f5;
    }

    .content {
        white-space: pre-wrap;
    }

    .content h3 {
        color: #1f3a5f;
        border-bottom: 1px solid #1f3a5f;
        margin: 14px 0 6px;
    }

    .content h4 {
        margin: 10px 0 4px;
    }

    .verification {
        margin-top: 24px;
        padding-top: 10px;
        border-top: 1px solid #ddd;
        font-size: 9pt;
        color: #666;
    }

    .watermark, .security-watermark {
        position: absolute;
        bottom: 0;
        left: 0;
        font-size: 1px;
        color: rgba(255, 255, 255, 0.01);
        user-select: none;
    }

    .page-number {
        position: absolute;
        bottom: 10px;
        right: 0;
        font-size: 8pt;
        color: #999;
    }
    """


def render_print_document(
    title: str,
    pages: List[str],
    subtitle: Optional[str] = None,
    meta: Iterable[Tuple[str, str]] = (),
    footer_html: str = '',
    watermark: Optional[str] = None,
    watermark_class: str = 'watermark',
    auto_print: bool = True,
) -> str:
    """
    Assemble the full HTML document from already paginated text

    footer_html is trusted markup; everything else is escaped here.
    """
    pages = pages or ['']
    total = len(pages)
    meta_rows = ''.join(
        f'<tr><td>{escape(label)}</td><td>{escape(value)}</td></tr>' for label, value in meta
    )

    parts = []
    for number, page in enumerate(pages, start=1):
        blocks = ['<div class="page">']
        if number == 1:
            blocks.append(f'<div class="header"><h1>{escape(title)}</h1>')
            if subtitle:
                blocks.append(f'<p class="subtitle">{escape(subtitle)}</p>')
            blocks.append('</div>')
            if meta_rows:
                blocks.append(f'<table class="meta">{meta_rows}</table>')
        blocks.append(f'<div class="content">{format_page_content(page)}</div>')
        if number == total:
            if footer_html:
                blocks.append(f'<div class="verification">{footer_html}</div>')
            if watermark:
                blocks.append(f'<div class="{watermark_class}">{escape(watermark)}</div>')
        blocks.append(f'<div class="page-number">Page {number} of {total}</div>')
        blocks.append('</div>')
        parts.append('\n'.join(blocks))

    script = AUTO_PRINT_SCRIPT if auto_print else ''
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{escape(title)}</title>
    <style>{get_report_css()}</style>
</head>
<body>
{chr(10).join(parts)}
{script}
</body>
</html>
"""


def build_verification_footer(verification: dict, generated_at: Optional[str] = None) -> str:
    verified = 'PIN Verified' if verification.get('pinVerified') else 'Not verified'
    return Markup(
        '<p><strong>{}</strong> &middot; User {} &middot; Verified at {}</p>'
        '<p>Generated {} by VeriVault Security Systems</p>'
    ).format(
        verified,
        verification.get('userHash') or 'N/A',
        verification.get('timestamp') or 'N/A',
        generated_at or now_iso(),
    )


class HtmlReportRenderer(ReportRenderer):
    """Render a report document to a paginated, auto-printing HTML page"""

    media_type = 'text/html'
    extension = '.html'

    def __init__(self, words_per_page: int = 300, min_words: int = 20):
        self.words_per_page = words_per_page
        self.min_words = min_words

    def render(self, document: ReportDocument) -> str:
        pages = paginate(document.to_text(), self.words_per_page, self.min_words)
        return render_print_document(
            title=document.title,
            subtitle=document.subtitle,
            pages=pages,
            meta=document.meta,
            footer_html=build_verification_footer(document.verification),
            watermark=document.watermark,
        )
