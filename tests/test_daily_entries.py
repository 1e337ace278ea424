"""
Shift-log rows and the activity feed
"""


def add_entry(client, entry_type='guest', details=None, entered_by='officer'):
    return client.post('/api/daily-entries', json={
        'type': entry_type,
        'details': details or {'name': 'Mike Johnson'},
        'enteredBy': entered_by,
    })


class TestDailyEntries:

    def test_create_and_list_today(self, client):
        assert add_entry(client).status_code == 201
        assert add_entry(client, 'note', {'text': 'Gate 2 stuck'}).status_code == 201

        data = client.get('/api/daily-entries/today').get_json()
        assert data['total'] == 2
        assert data['entries'][0]['type'] == 'note'

    def test_required_fields(self, client):
        response = client.post('/api/daily-entries', json={'type': 'guest'})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Type, details, and enteredBy are required'

    def test_unknown_type(self, client):
        assert add_entry(client, 'parcel').status_code == 400

    def test_list_filters_and_pages(self, client):
        for _ in range(3):
            add_entry(client)
        add_entry(client, 'vendor', {'company': 'ABC'})

        data = client.get('/api/daily-entries?type=guest&limit=2&offset=1').get_json()
        assert data['total'] == 3
        assert len(data['entries']) == 2
        assert data['offset'] == 1

    def test_update_keeps_timestamp(self, client):
        entry = add_entry(client).get_json()['entry']
        response = client.put(f"/api/daily-entries/{entry['id']}", json={
            'details': {'name': 'Ana Lee'}, 'timestamp': '1999-01-01T00:00:00.000Z',
        })
        updated = response.get_json()['entry']
        assert updated['details'] == {'name': 'Ana Lee'}
        assert updated['timestamp'] == entry['timestamp']
        assert updated['updatedAt'] is not None

    def test_unknown_entry(self, client):
        assert client.get('/api/daily-entries/99').get_json()['message'] == 'Entry not found'
        assert client.put('/api/daily-entries/99', json={}).status_code == 404
        assert client.delete('/api/daily-entries/99').status_code == 404

    def test_delete(self, client):
        entry_id = add_entry(client).get_json()['entry']['id']
        assert client.delete(f'/api/daily-entries/{entry_id}').status_code == 200
        assert client.get(f'/api/daily-entries/{entry_id}').status_code == 404

    def test_daily_stats(self, client):
        add_entry(client)
        add_entry(client, 'package', {'recipient': 'Ana'})
        stats = client.get('/api/daily-entries/stats/daily').get_json()['stats']
        assert stats['total'] == 2
        assert stats['guests'] == 1
        assert stats['packages'] == 1
        assert sum(stats['byHour'].values()) == 2
        assert all(isinstance(hour, str) for hour in stats['byHour'])


class TestActivityLogs:

    def test_crud(self, client):
        response = client.post('/api/logs', json={
            'category': 'patrol', 'location': 'Garage', 'subject': 'Round 1', 'action': 'Checked',
        })
        assert response.status_code == 201
        log = response.get_json()['log']
        assert log['priority'] == 'low'

        updated = client.put(f"/api/logs/{log['id']}", json={'priority': 'high'}).get_json()['log']
        assert updated['priority'] == 'high'
        assert updated['updatedBy'] == 'admin'

        assert client.get(f"/api/logs/{log['id']}").status_code == 200
        assert client.delete(f"/api/logs/{log['id']}").status_code == 200
        response = client.get(f"/api/logs/{log['id']}")
        assert response.status_code == 404
        assert response.get_json()['message'] == 'Log entry not found'

    def test_feed_is_newest_first(self, client):
        client.post('/api/logs', json={'subject': 'first', 'timestamp': '2024-01-01T08:00:00.000Z'})
        client.post('/api/logs', json={'subject': 'second', 'timestamp': '2024-01-01T09:00:00.000Z'})
        subjects = [log['subject'] for log in client.get('/api/logs').get_json()['logs']]
        assert subjects == ['second', 'first']
