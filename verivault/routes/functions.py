"""
Report Functions API Routes
CSV analysis through the LLM and printable report rendering
"""
import logging

from flask import Blueprint, request, jsonify, current_app, make_response

from verivault.errors import VeriVaultError
from verivault.services.llm_service import LLMAnalysisService
from verivault.services.print_service import render_printable_report

logger = logging.getLogger(__name__)

functions_bp = Blueprint('functions', __name__, url_prefix='/api/functions')


def _text_response(body, mimetype):
    response = make_response(body)
    response.headers['Content-Type'] = f'{mimetype}; charset=utf-8'
    return response


@functions_bp.route('/analyze-csv', methods=['POST'])
def analyze_csv():
    """
    Analyze a CSV export with the LLM

    Body:
        csvData (required), clientName, reportDate, reportType
    """
    try:
        data = request.get_json(silent=True) or {}
        service = LLMAnalysisService.from_config(current_app.config)
        report = service.analyze_csv(
            csv_data=data.get('csvData'),
            client_name=data.get('clientName'),
            report_date=data.get('reportDate'),
            report_type=data.get('reportType'),
        )
        return _text_response(report, 'text/plain')

    except VeriVaultError:
        raise
    except Exception as e:
        logger.error(f"Error in CSV analysis: {e}", exc_info=True)
        error_msg = 'Internal server error during CSV analysis' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@functions_bp.route('/generate-pdf', methods=['POST'])
def generate_pdf():
    """
    Render report text as an auto-printing HTML document

    Body:
        content (required), clientName, reportDate
    """
    try:
        data = request.get_json(silent=True) or {}
        html = render_printable_report(
            content=data.get('content'),
            client_name=data.get('clientName'),
            report_date=data.get('reportDate'),
        )
        return _text_response(html, 'text/html')

    except VeriVaultError:
        raise
    except Exception as e:
        logger.error(f"Error generating printable report: {e}", exc_info=True)
        error_msg = 'Error generating report' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500
