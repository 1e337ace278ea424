"""
PIN-verified PDF reports and watermarked HTML reports
"""
import json

from conftest import file_part, listdir, multipart, verify
from verivault.models import ReportRecord
from verivault.rendering import PdfReportRenderer
from verivault.utils.watermark import find_watermark, parse_watermark

MEDICAL_FORM = {
    'injuredPersonInfo': {'firstName': 'Sam', 'lastName': 'Reed', 'department': 'Facilities'},
    'incidentDetails': {'date': '2024-03-01', 'time': '09:40', 'location': 'Loading Dock'},
    'injuryDetails': {'bodyPart': 'Hand', 'severity': 'minor', 'description': 'Cut from a box cutter'},
    'actionsTaken': {'firstAid': True, 'description': 'Bandage applied'},
    'resolution': {'currentStatus': 'Back on shift'},
}

PIN_VERIFICATION = {'userId': 1, 'pin': '1234'}


def generate(client, report_type='medical_incident', form=MEDICAL_FORM, verification=PIN_VERIFICATION, files=None):
    return client.post(
        '/api/reports/generate',
        data=multipart(form, verification, files, reportType=report_type),
        content_type='multipart/form-data',
    )


class TestGenerateReport:

    def test_generate_medical_incident(self, client, stores, reports_dir):
        response = generate(client)
        assert response.status_code == 200
        assert response.mimetype == 'application/pdf'
        assert response.data.startswith(b'%PDF')
        assert response.headers['X-Submission-Id'] == 'RPT-000001'
        assert len(response.headers['X-Watermark-Hash']) == 16
        assert 'medical_incident_report_' in response.headers['Content-Disposition']

        record = stores.reports.get_by_submission_id('RPT-000001')
        assert record.status == 'completed'
        assert record.file_size == len(response.data)
        assert record.verification_data['pinVerified'] is True
        assert len(listdir(reports_dir)) == 1

    def test_watermark_is_recorded(self, client, stores):
        generate(client)
        record = stores.reports.get_by_submission_id('RPT-000001')
        parts = parse_watermark(record.watermark)
        assert parts['submissionId'] == 'RPT-000001'
        assert parts['userHash'] == record.verification_data['userHash']
        assert parts['version'] == 'VV2.0'

    def test_every_report_type_renders(self, client):
        for report_type in ('medical_incident', 'non_medical_incident', 'security_audit'):
            response = generate(client, report_type=report_type, form={})
            assert response.status_code == 200
            assert response.data.startswith(b'%PDF')

    def test_misshaped_nested_fields_still_render(self, client):
        non_medical = {'systemsAffected': ['security'], 'personsInvolved': 'Ana'}
        audit = {'emergencyEquipment': {'alarms': 'ok'}, 'accessControl': {'doors': 'fine'}}
        assert generate(client, report_type='non_medical_incident', form=non_medical).status_code == 200
        assert generate(client, report_type='security_audit', form=audit).status_code == 200

    def test_report_ids_count_up(self, client):
        ids = [generate(client).headers['X-Submission-Id'] for _ in range(2)]
        assert ids == ['RPT-000001', 'RPT-000002']

    def test_generate_with_attachments(self, client, stores, upload_dir):
        response = generate(client, files=[file_part(b'img', 'scene.png', 'image/png')])
        assert response.status_code == 200
        record = stores.reports.get_by_submission_id('RPT-000001')
        assert [a.original_name for a in record.attachments] == ['scene.png']
        assert len(listdir(upload_dir)) == 1

    def test_generate_with_verification_hash(self, client, verification):
        response = generate(client, verification=verification)
        assert response.status_code == 200


class TestGenerateReportValidation:

    def test_invalid_report_type(self, client, stores):
        response = generate(client, report_type='parking_ticket')
        assert response.status_code == 400
        assert response.get_json() == {'success': False, 'message': 'Invalid report type'}
        assert stores.reports.count() == 0

    def test_missing_form_data(self, client):
        response = client.post(
            '/api/reports/generate',
            data=multipart(verification_data=PIN_VERIFICATION, reportType='medical_incident'),
            content_type='multipart/form-data',
        )
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Required fields missing'

    def test_malformed_form_json(self, client):
        response = generate(client, form='{"broken"')
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Invalid JSON in formData'

    def test_unknown_verification_hash(self, client, stores):
        response = generate(client, verification={'verificationHash': '0123456789abcdef'})
        assert response.status_code == 401
        assert stores.reports.count() == 0

    def test_wrong_pin(self, client, stores, upload_dir):
        response = generate(client, verification={'userId': 1, 'pin': '4321'}, files=[file_part()])
        assert response.status_code == 401
        assert stores.reports.count() == 0
        assert listdir(upload_dir) == []

    def test_rendering_failure_leaves_nothing_behind(self, client, stores, upload_dir, reports_dir, monkeypatch):
        def fail(self, document):
            raise RuntimeError('renderer exploded')

        monkeypatch.setattr(PdfReportRenderer, 'render', fail)
        response = generate(client, files=[file_part()])

        assert response.status_code == 500
        assert response.get_json()['success'] is False
        assert stores.reports.count() == 0
        assert listdir(upload_dir) == []
        assert listdir(reports_dir) == []


class TestWatermarkedReport:

    def post(self, client, verification, report_type='medical_incident', report_data=None):
        return client.post('/api/reports/generate-with-watermark', json={
            'reportType': report_type,
            'reportData': report_data if report_data is not None else MEDICAL_FORM,
            'verificationData': verification,
        })

    def test_watermark_in_html(self, client, verification, stores):
        response = self.post(client, verification)
        assert response.status_code == 200
        data = response.get_json()
        assert data['watermarkApplied'] is True
        assert data['submissionId'].startswith('VV-')

        watermark = find_watermark(data['pdfContent'])
        assert watermark is not None
        parts = parse_watermark(watermark)
        assert parts['submissionId'] == data['submissionId']
        assert parts['userHash'] == data['reportMetadata']['watermarkHash']
        assert data['reportMetadata']['verificationHash'] == verification['verificationHash']

        record = stores.reports.get_by_submission_id(data['submissionId'])
        assert record.status == 'generated'

    def test_structured_sections(self, client, verification):
        html = self.post(client, verification).get_json()['pdfContent']
        assert '<h1>Medical Incident Report</h1>' in html
        assert '<h3>Injured Person Information</h3>' in html
        assert 'Loading Dock' in html

    def test_free_form_report_is_paginated(self, client, verification):
        content = ' '.join(f'word{i}' for i in range(650))
        response = self.post(client, verification, report_type='Shift Handover', report_data={'content': content})
        html = response.get_json()['pdfContent']
        assert html.count('class="page"') == 3
        assert 'Page 3 of 3' in html
        assert '<h1>Shift Handover</h1>' in html

    def test_content_is_escaped(self, client, verification):
        response = self.post(
            client, verification, report_type='Note',
            report_data={'content': '<script>alert(1)</script> ' + 'filler ' * 30},
        )
        html = response.get_json()['pdfContent']
        assert '<script>alert(1)</script>' not in html
        assert '&lt;script&gt;' in html

    def test_ids_are_distinct(self, client):
        first = self.post(client, verify(client)).get_json()['submissionId']
        second = self.post(client, verify(client)).get_json()['submissionId']
        assert first != second

    def test_verification_hash_is_single_use(self, client, verification, stores):
        assert self.post(client, verification).status_code == 200
        assert verification['verificationHash'] not in stores.issued_verifications

        response = self.post(client, verification)
        assert response.status_code == 401
        assert response.get_json()['message'] == 'PIN verification required'

    def test_expired_verification_hash(self, client, verification, stores):
        stores.issued_verifications[verification['verificationHash']]['issuedAt'] = 0
        response = self.post(client, verification)
        assert response.status_code == 401
        assert response.get_json()['message'] == 'PIN verification required'

    def test_misshaped_nested_fields_in_html(self, client, verification):
        response = self.post(client, verification, report_type='security_audit', report_data={
            'emergencyEquipment': {'alarms': 'ok'}, 'accessControl': {'doors': 'fine'},
        })
        assert response.status_code == 200
        html = response.get_json()['pdfContent']
        assert 'Alarms: ok' in html
        assert 'Doors: fine' in html

    def test_requires_verification(self, client):
        response = client.post('/api/reports/generate-with-watermark', json={'reportType': 'medical_incident'})
        assert response.status_code == 400

    def test_rejects_unissued_hash(self, client):
        response = self.post(client, {'verificationHash': 'ffffffffffffffff'})
        assert response.status_code == 401
        assert response.get_json()['message'] == 'PIN verification required'


class TestReportQueries:

    def test_list_with_pagination(self, client):
        for _ in range(3):
            generate(client)
        data = client.get('/api/reports?limit=2').get_json()
        assert [r['submissionId'] for r in data['reports']] == ['RPT-000003', 'RPT-000002']
        assert data['pagination'] == {'page': 1, 'limit': 2, 'total': 3, 'pages': 2}

    def test_list_filters_by_status(self, client, verification):
        generate(client)
        client.post('/api/reports/generate-with-watermark', json={
            'reportType': 'Note', 'reportData': {'content': 'x'}, 'verificationData': verification,
        })
        data = client.get('/api/reports?status=generated').get_json()
        assert len(data['reports']) == 1
        assert data['reports'][0]['submissionId'].startswith('VV-')

    def test_list_rejects_unknown_status(self, client):
        assert client.get('/api/reports?status=lost').status_code == 400

    def test_get_and_download(self, client):
        pdf = generate(client).data
        report = client.get('/api/reports/submission/RPT-000001').get_json()['report']
        assert client.get(f"/api/reports/{report['id']}").get_json()['report'] == report

        download = client.get(f"/api/reports/{report['id']}/download")
        assert download.status_code == 200
        assert download.data == pdf

    def test_unverified_record_is_hidden(self, client, stores):
        generate(client)
        hidden = stores.reports.add(ReportRecord(
            submission_id='RPT-000099', report_type='medical_incident', form_data={},
            verification_data={'pinVerified': False}, status='completed',
            file_path=stores.reports.get(1).file_path,
        ))
        assert client.get(f'/api/reports/{hidden.id}').status_code == 404
        assert client.get('/api/reports/submission/RPT-000099').status_code == 404
        assert client.get(f'/api/reports/{hidden.id}/download').status_code == 404
        listed = client.get('/api/reports').get_json()
        assert [r['submissionId'] for r in listed['reports']] == ['RPT-000001']
        assert listed['pagination']['total'] == 1

    def test_unknown_report(self, client):
        assert client.get('/api/reports/42').status_code == 404
        assert client.get('/api/reports/submission/RPT-999999').status_code == 404


class TestDeleteReport:

    def test_officer_cannot_delete(self, client, officer_headers):
        generate(client)
        assert client.delete('/api/reports/1', headers=officer_headers).status_code == 403

    def test_admin_delete_removes_files(self, client, admin_headers, stores, reports_dir, upload_dir):
        generate(client, files=[file_part()])
        response = client.delete('/api/reports/1', headers=admin_headers)
        assert response.status_code == 200
        assert stores.reports.count() == 0
        assert listdir(reports_dir) == []
        assert listdir(upload_dir) == []

    def test_delete_is_audited(self, client, admin_headers, stores):
        generate(client)
        client.delete('/api/reports/1', headers=admin_headers)
        actions = [(a.entity_type, a.action) for a in stores.audit_logs.all()]
        assert ('report', 'delete') in actions


def test_form_may_arrive_as_json_string(client):
    response = generate(client, form=json.dumps(MEDICAL_FORM))
    assert response.status_code == 200
