"""
Report rendering
"""
from .base import ReportRenderer
from .documents import (
    MEDICAL_INCIDENT,
    NON_MEDICAL_INCIDENT,
    SECURITY_AUDIT,
    REPORT_TYPES,
    ReportDocument,
    Section,
    build_sections,
    flatten_report_data,
    normalize_report_type,
)
from .html import HtmlReportRenderer, render_print_document
from .pagination import paginate, split_into_pages, drop_sparse_pages
from .pdf import PdfReportRenderer

__all__ = [
    'ReportRenderer',
    'ReportDocument',
    'Section',
    'MEDICAL_INCIDENT',
    'NON_MEDICAL_INCIDENT',
    'SECURITY_AUDIT',
    'REPORT_TYPES',
    'build_sections',
    'flatten_report_data',
    'normalize_report_type',
    'HtmlReportRenderer',
    'render_print_document',
    'PdfReportRenderer',
    'paginate',
    'split_into_pages',
    'drop_sparse_pages',
]
