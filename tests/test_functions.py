"""
CSV analysis and printable report functions
"""
import json

import httpx
import pytest

CSV = 'time,event\n08:00,Shift start\n09:15,Vendor arrival'

ANALYSIS_TEXT = (
    'CLIENT: Acme\n'
    'DATE: 2024-03-01\n'
    '═══════════\n'
    '**Summary**\n'
    'The shift was quiet. One vendor arrived at 09:15 and signed in at the front desk without issue. '
    'Patrols of the garage and lobby found nothing unusual and all doors were secured at close.\n'
    'DOCUMENT AUTHENTICATION\n'
    'hash: 1234'
)


@pytest.fixture
def llm_requests(app):
    """Route LLM calls to an in-process mock and record their payloads"""
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={'choices': [{'message': {'content': 'All systems nominal.'}}]})

    app.config['OPENAI_API_KEY'] = 'test-key'
    app.config['OPENAI_TRANSPORT'] = httpx.MockTransport(handler)
    return seen


class TestAnalyzeCsv:

    def test_requires_csv_data(self, client):
        response = client.post('/api/functions/analyze-csv', json={'clientName': 'Acme'})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'CSV data is required'

    def test_missing_api_key(self, client):
        response = client.post('/api/functions/analyze-csv', json={'csvData': CSV})
        assert response.status_code == 500
        assert response.get_json()['message'] == 'AI service configuration error'

    def test_returns_formatted_report(self, client, llm_requests):
        response = client.post('/api/functions/analyze-csv', json={
            'csvData': CSV, 'clientName': 'Acme', 'reportDate': '2024-03-01', 'reportType': 'systems-audit',
        })
        assert response.status_code == 200
        assert response.mimetype == 'text/plain'
        text = response.get_data(as_text=True)
        assert text.startswith('CLIENT: Acme\nDATE: 2024-03-01')
        assert 'All systems nominal.' in text
        assert 'DATA SOURCE: CSV Analysis' in text

        payload = llm_requests[0]
        assert payload['model'] == 'gpt-4'
        assert payload['max_tokens'] == 2000
        assert payload['temperature'] == 0.3
        assert 'Security Systems Audit' in payload['messages'][1]['content']
        assert CSV in payload['messages'][1]['content']

    def test_unknown_report_type_uses_daily_log_prompt(self, client, llm_requests):
        client.post('/api/functions/analyze-csv', json={'csvData': CSV, 'reportType': 'mystery'})
        assert 'Daily Operations Log' in llm_requests[0]['messages'][1]['content']

    def test_api_error(self, app, client):
        app.config['OPENAI_API_KEY'] = 'test-key'
        app.config['OPENAI_TRANSPORT'] = httpx.MockTransport(lambda request: httpx.Response(429, text='slow down'))
        response = client.post('/api/functions/analyze-csv', json={'csvData': CSV})
        assert response.status_code == 500
        assert response.get_json()['message'] == 'AI analysis service error'

    def test_network_error(self, app, client):
        def handler(request):
            raise httpx.ConnectError('unreachable', request=request)

        app.config['OPENAI_API_KEY'] = 'test-key'
        app.config['OPENAI_TRANSPORT'] = httpx.MockTransport(handler)
        response = client.post('/api/functions/analyze-csv', json={'csvData': CSV})
        assert response.status_code == 500


class TestGeneratePdf:

    def test_requires_content(self, client):
        response = client.post('/api/functions/generate-pdf', json={})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'No report content provided'

    def test_printable_html(self, client):
        response = client.post('/api/functions/generate-pdf', json={'content': ANALYSIS_TEXT})
        assert response.status_code == 200
        assert response.mimetype == 'text/html'
        html = response.get_data(as_text=True)
        assert '<div class="security-watermark">WM:' in html
        assert '|VV2.0</div>' in html
        assert 'window.print' in html
        assert '<h3>Summary</h3>' in html
        assert 'CLIENT: Acme' not in html
        assert 'DOCUMENT AUTHENTICATION' not in html
        assert '<td>Acme</td>' in html
        assert '<td>2024-03-01</td>' in html

    def test_explicit_client_wins(self, client):
        response = client.post('/api/functions/generate-pdf', json={
            'content': ANALYSIS_TEXT, 'clientName': 'Globex', 'reportDate': '2024-04-02',
        })
        html = response.get_data(as_text=True)
        assert '<td>Globex</td>' in html
        assert '<td>2024-04-02</td>' in html

    def test_inline_headings_and_report_id(self, client):
        content = (
            'CLIENT: Acme\n'
            'DATE: 2024-03-01\n'
            'SECURITY ANALYSIS - Report ID: VV-7Q2K\n'
            '1. **Access Control**: all doors secured at close and badge readers responded normally. '
            'The garage gate was slow to close on the second round and was reported to facilities.'
        )
        html = client.post('/api/functions/generate-pdf', json={'content': content}).get_data(as_text=True)
        assert '1. <h3>Access Control</h3>: all doors secured' in html
        assert '**' not in html
        assert '<tr><td>Report ID</td><td>VV-7Q2K</td></tr>' in html

    def test_no_report_id_row_without_header(self, client):
        html = client.post('/api/functions/generate-pdf', json={'content': ANALYSIS_TEXT}).get_data(as_text=True)
        assert '<td>Report ID</td>' not in html
