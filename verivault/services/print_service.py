"""
Print Service
Printable, watermarked HTML from the plain-text output of the CSV analysis
"""
import logging
import re
from typing import Optional

from flask import current_app

from verivault.errors import MissingFieldError
from verivault.rendering import paginate, render_print_document
from verivault.rendering.html import build_verification_footer
from verivault.utils.timeutil import now_iso, today_str
from verivault.utils.watermark import sha256_hex

logger = logging.getLogger(__name__)

HEADER_LINE_RE = re.compile(r'^\s*(CLIENT:|DATE:|RAW SECURITY LOG:|═══).*$')
AUTHENTICATION_BLOCK_RE = re.compile(r'DOCUMENT AUTHENTICATION[\s\S]*$')


def clean_content(content: str) -> str:
    """Drop the header and rule lines and any trailing authentication block"""
    content = AUTHENTICATION_BLOCK_RE.sub('', content)
    lines = [line for line in content.split('\n') if not HEADER_LINE_RE.match(line)]
    return '\n'.join(lines).strip()


def extract_header(content: str, label: str, anywhere: bool = False) -> Optional[str]:
    """Value after the first line carrying label; anywhere also matches mid-line"""
    for line in content.split('\n'):
        if line.startswith(label) or (anywhere and label in line):
            value = line.split(label, 1)[1].strip()
            if value:
                return value
    return None


def content_hash(content: str) -> str:
    """16 upper-case hex characters identifying the printed content"""
    return sha256_hex(content)[:16].upper()


def render_printable_report(content: Optional[str], client_name: Optional[str] = None, report_date: Optional[str] = None) -> str:
    """
    Build the auto-printing HTML document

    Raises:
        MissingFieldError: no content
    """
    if not content:
        raise MissingFieldError('No report content provided')

    client_name = client_name or extract_header(content, 'CLIENT:') or 'Confidential Client'
    report_date = report_date or extract_header(content, 'DATE:') or today_str()
    report_id = extract_header(content, 'Report ID:', anywhere=True)

    body = clean_content(content)
    hash_value = content_hash(body)
    timestamp = now_iso()
    version = current_app.config['WATERMARK_VERSION']

    meta = [('Client', client_name), ('Report Date', report_date)]
    if report_id:
        meta.append(('Report ID', report_id))
    meta += [
        ('Classification', 'CONFIDENTIAL'),
        ('Generated By', 'VeriVault AI Intelligence'),
        ('Document Hash', hash_value),
    ]

    html = render_print_document(
        title='Security Operations Report',
        subtitle='Confidential Security Assessment',
        pages=paginate(body),
        meta=meta,
        footer_html=build_verification_footer(
            {'pinVerified': True, 'userHash': hash_value, 'timestamp': timestamp},
            generated_at=timestamp,
        ),
        watermark=f"WM:{hash_value}|{timestamp}|{version}",
        watermark_class='security-watermark',
    )
    logger.info(f"Printable report rendered for {client_name} ({hash_value})")
    return html
