"""
Daily log submission, attachments and lookups
"""
import os

from conftest import file_part, listdir, multipart

DAILY_LOG_FORM = {
    'reportDate': '2024-03-01',
    'shiftPeriod': 'Day (6AM - 2PM)',
    'officerName': 'Officer Jones',
    'weatherConditions': 'Clear',
    'vendors': [{'name': 'Jane Doe', 'company': 'ABC Cleaning Services'}],
    'guests': [{'name': 'Mike Johnson'}, {'name': 'Ana Lee'}],
    'packages': [],
    'patrolRounds': [{'time': '08:00', 'area': 'Lobby'}, {'time': '', 'area': 'Garage'}],
    'patrolObservations': 'All quiet',
    'equipmentStatus': {'cameras': 'ok', 'radios': 'issue', 'alarms': 'ok', 'doors': 'broken'},
    'generalNotes': 'Nothing to report',
}

PIN_VERIFICATION = {'userId': 1, 'pin': '1234'}


def submit(client, form=DAILY_LOG_FORM, verification=PIN_VERIFICATION, files=None, headers=None):
    return client.post(
        '/api/daily-logs/submit',
        data=multipart(form, verification, files),
        content_type='multipart/form-data',
        headers=headers or {},
    )


class TestSubmitDailyLog:

    def test_submit_returns_summary(self, client):
        response = submit(client)
        assert response.status_code == 201
        data = response.get_json()
        assert data['success'] is True
        assert data['submissionId'].startswith('DL-')
        assert data['dailyLog']['summary'] == {
            'totalVendors': 1,
            'totalGuests': 2,
            'totalPackages': 0,
            'totalAttachments': 0,
            'patrolRoundsCompleted': 1,
            'equipmentIssues': 2,
        }
        assert data['filesUploaded'] == 0

    def test_identical_submissions_get_distinct_ids(self, client):
        first = submit(client).get_json()['submissionId']
        second = submit(client).get_json()['submissionId']
        assert first != second

    def test_activity_entry_lands_in_logs_feed(self, client):
        data = submit(client).get_json()
        entry = data['activityLogEntry']
        assert entry['category'] == 'daily-log'
        assert entry['subject'] == 'Daily Log - 2024-03-01'
        assert entry['action'] == 'Submitted by Officer Jones'
        assert entry['notes'] == '1 vendors, 2 guests, 0 packages, 0 files'

        logs = client.get('/api/logs').get_json()['logs']
        assert [log['submissionId'] for log in logs] == [data['submissionId']]

    def test_submission_with_verification_hash(self, client, verification):
        response = submit(client, verification=verification)
        assert response.status_code == 201

    def test_misshaped_lists_and_status_are_tolerated(self, client, stores):
        form = dict(DAILY_LOG_FORM, vendors='Jane Doe', guests={'name': 'Mike'},
                    patrolRounds='08:00 lobby', equipmentStatus=['cameras', 'radios'])
        response = submit(client, form=form)
        assert response.status_code == 201
        daily_log = stores.daily_logs.all()[0]
        assert daily_log.vendors == []
        assert daily_log.equipment_status == {}
        summary = response.get_json()['dailyLog']['summary']
        assert summary['totalVendors'] == 0
        assert summary['totalGuests'] == 0
        assert summary['patrolRoundsCompleted'] == 0
        assert summary['equipmentIssues'] == 0
        assert client.get('/api/daily-logs/stats/summary').status_code == 200

    def test_submitted_by_comes_from_token(self, client, officer_headers, stores):
        submit(client, headers=officer_headers)
        assert stores.daily_logs.all()[0].submitted_by == 'officer'

    def test_stored_log_is_pin_verified(self, client, stores):
        submit(client)
        daily_log = stores.daily_logs.all()[0]
        assert daily_log.verification_data['pinVerified'] is True
        assert daily_log.verification_data['username'] == 'admin'

    def test_attachments_are_saved(self, client, upload_dir):
        files = [file_part(b'%PDF-1.4 test', 'scan.pdf', 'application/pdf'), file_part(b'abc', 'photo.png', 'image/png')]
        data = submit(client, files=files).get_json()
        assert data['filesUploaded'] == 2
        assert data['dailyLog']['summary']['totalAttachments'] == 2
        assert len(listdir(upload_dir)) == 2


class TestSubmitValidation:

    def test_missing_form_data(self, client):
        response = client.post(
            '/api/daily-logs/submit',
            data=multipart(verification_data=PIN_VERIFICATION),
            content_type='multipart/form-data',
        )
        assert response.status_code == 400
        assert response.get_json() == {'success': False, 'message': 'Required fields missing'}

    def test_malformed_json(self, client):
        response = submit(client, form='{not json')
        assert response.status_code == 400

    def test_short_pin(self, client):
        response = submit(client, verification={'userId': 1, 'pin': '12'})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'PIN must be exactly 4 digits'

    def test_wrong_pin_stores_nothing(self, client, stores, upload_dir):
        response = submit(client, verification={'userId': 1, 'pin': '0000'}, files=[file_part()])
        assert response.status_code == 401
        assert stores.daily_logs.count() == 0
        assert listdir(upload_dir) == []

    def test_unknown_verification_hash(self, client, stores):
        response = submit(client, verification={'verificationHash': 'deadbeefdeadbeef'})
        assert response.status_code == 401
        assert stores.daily_logs.count() == 0

    def test_oversize_file_is_rejected_before_writing(self, app, client, stores, upload_dir):
        app.config['MAX_FILE_SIZE'] = 10
        files = [file_part(b'ok', 'small.txt'), file_part(b'x' * 100, 'big.txt')]
        response = submit(client, files=files)
        assert response.status_code == 400
        assert 'big.txt' in response.get_json()['message']
        assert listdir(upload_dir) == []
        assert stores.daily_logs.count() == 0

    def test_disallowed_mime_type_is_rejected_before_writing(self, client, upload_dir):
        files = [file_part(b'ok', 'small.txt'), file_part(b'MZ', 'tool.exe', 'application/x-msdownload')]
        response = submit(client, files=files)
        assert response.status_code == 400
        assert response.get_json()['message'] == 'File type application/x-msdownload not allowed'
        assert listdir(upload_dir) == []

    def test_too_many_files(self, app, client, upload_dir):
        app.config['MAX_FILES'] = 2
        files = [file_part(filename=f'n{i}.txt') for i in range(3)]
        response = submit(client, files=files)
        assert response.status_code == 400
        assert listdir(upload_dir) == []


class TestDailyLogQueries:

    def test_list_newest_first(self, client):
        first = submit(client).get_json()['submissionId']
        second = submit(client).get_json()['submissionId']
        data = client.get('/api/daily-logs').get_json()
        assert data['total'] == 2
        assert [log['submissionId'] for log in data['dailyLogs']] == [second, first]

    def test_get_by_id_and_submission_id(self, client):
        created = submit(client).get_json()['dailyLog']
        by_id = client.get(f"/api/daily-logs/{created['id']}").get_json()['dailyLog']
        by_sid = client.get(f"/api/daily-logs/submission/{created['submissionId']}").get_json()['dailyLog']
        assert by_id == by_sid
        assert by_id['officerName'] == 'Officer Jones'
        assert by_id['reportType'] == 'Daily Log'

    def test_unknown_log(self, client):
        assert client.get('/api/daily-logs/99').status_code == 404
        response = client.get('/api/daily-logs/submission/DL-NOPE')
        assert response.status_code == 404
        assert response.get_json()['message'] == 'Daily log not found'

    def test_download_attachment(self, client):
        data = submit(client, files=[file_part(b'camera notes', 'notes.txt')]).get_json()
        daily_log = client.get(f"/api/daily-logs/{data['dailyLog']['id']}").get_json()['dailyLog']
        stored = daily_log['attachments'][0]

        response = client.get(f"/api/daily-logs/attachment/{data['submissionId']}/{stored['filename']}")
        assert response.status_code == 200
        assert response.data == b'camera notes'
        assert 'notes.txt' in response.headers['Content-Disposition']

    def test_download_unknown_attachment(self, client):
        sid = submit(client).get_json()['submissionId']
        assert client.get(f'/api/daily-logs/attachment/{sid}/missing.txt').status_code == 404

    def test_stats_summary(self, client):
        submit(client)
        submit(client)
        stats = client.get('/api/daily-logs/stats/summary').get_json()['stats']
        assert stats['totalDailyLogs'] == 2
        assert stats['todayLogs'] == 2
        assert stats['thisWeekLogs'] == 2
        assert stats['totalGuests'] == 4
        assert stats['totalEquipmentIssues'] == 4
        assert stats['averagePatrolRounds'] == 1


class TestDeleteDailyLog:

    def test_delete_requires_token(self, client):
        log_id = submit(client).get_json()['dailyLog']['id']
        assert client.delete(f'/api/daily-logs/{log_id}').status_code == 401

    def test_officer_cannot_delete(self, client, officer_headers):
        log_id = submit(client).get_json()['dailyLog']['id']
        response = client.delete(f'/api/daily-logs/{log_id}', headers=officer_headers)
        assert response.status_code == 403

    def test_admin_delete_removes_files(self, client, admin_headers, upload_dir, stores):
        log_id = submit(client, files=[file_part()]).get_json()['dailyLog']['id']
        assert len(listdir(upload_dir)) == 1

        response = client.delete(f'/api/daily-logs/{log_id}', headers=admin_headers)
        assert response.status_code == 200
        assert listdir(upload_dir) == []
        assert stores.daily_logs.count() == 0
        assert os.path.isdir(upload_dir)
