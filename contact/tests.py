"""
Tests for contact form intake and submission management.
"""
import json
import re
from urllib.parse import quote
from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from rest_framework import status

from contact import services
from contact.storage import JsonFileSubmissionStore, StorageError, SubmissionNotFound


ID_PATTERN = r'\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z'


def make_record(submission_id, when, status_value=None, **fields):
    record = {'id': submission_id, 'nombre': submission_id, 'telefono': '555-0000'}
    record['submissionDate'] = when.isoformat().replace('+00:00', 'Z')
    if status_value is not None:
        record['status'] = status_value
    record.update(fields)
    return record


@pytest.fixture
def sample_submission(store):
    return services.submit({'nombre': 'Ana Gómez', 'telefono': '555-2222'}, store)


class TestSubmissionIds:
    """Test id derivation from the submitted name."""

    def test_accents_are_folded(self):
        now = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=dt_timezone.utc)
        assert services.make_submission_id('José Ruiz', now) == 'jose_ruiz-2026-01-02T03-04-05-678Z'

    def test_special_characters_collapse(self):
        assert services.sanitize_name('  María--del  Carmen!! ') == 'maria_del_carmen'
        assert services.sanitize_name('Ñandú Müller') == 'nandu_muller'

    def test_empty_name_falls_back_to_prefix(self):
        submission_id = services.make_submission_id('***')
        assert re.fullmatch(rf'submission-{ID_PATTERN}', submission_id)


class TestSubmitService:
    """Test the intake operation."""

    def test_submit_creates_pending_record(self, store):
        submission_id = services.submit({'nombre': 'José Ruiz', 'telefono': '555-1111'}, store)

        assert re.fullmatch(rf'jose_ruiz-{ID_PATTERN}', submission_id)
        record = store.get(submission_id)
        assert record['status'] == 'Pending'
        assert record['id'] == submission_id
        assert record['nombre'] == 'José Ruiz'
        assert record['submissionDate'].endswith('Z')

    def test_repeated_names_get_distinct_ids(self, store):
        first = services.submit({'nombre': 'José Ruiz', 'telefono': '555-1111'}, store)
        second = services.submit({'nombre': 'José Ruiz', 'telefono': '555-1111'}, store)

        assert first != second
        assert len(store.list()) == 2

    def test_same_millisecond_gets_numeric_suffix(self, store, monkeypatch):
        frozen = datetime(2026, 5, 1, 12, 0, 0, tzinfo=dt_timezone.utc)
        monkeypatch.setattr(services.timezone, 'now', lambda: frozen)

        first = services.submit({'name': 'Ana', 'phone': '1'}, store)
        second = services.submit({'name': 'Ana', 'phone': '1'}, store)

        assert second == f'{first}-2'

    def test_english_field_names_accepted(self, store):
        submission_id = services.submit({'name': 'Ana', 'phone': '555'}, store)
        assert submission_id.startswith('ana-')

    @pytest.mark.parametrize('fields', [
        {'telefono': '555-1111'},
        {'nombre': 'José'},
        {'nombre': '   ', 'telefono': '555-1111'},
        {'nombre': 'José', 'telefono': ''},
    ])
    def test_missing_required_fields(self, store, fields):
        with pytest.raises(services.ValidationError):
            services.submit(fields, store)
        assert store.list() == []

    def test_caller_cannot_choose_status(self, store):
        submission_id = services.submit(
            {'nombre': 'Ana', 'telefono': '1', 'status': 'Completed', 'id': '../x'}, store
        )
        record = store.get(submission_id)
        assert record['status'] == 'Pending'
        assert record['id'] == submission_id

    def test_caller_cannot_stamp_updated_at(self, store):
        submission_id = services.submit(
            {'nombre': 'Ana', 'telefono': '1', 'updatedAt': '2020-01-01T00:00:00.000Z'}, store
        )
        assert 'updatedAt' not in store.get(submission_id)


class TestSummarize:
    """Test listing counts, ordering and truncation."""

    def test_counts_and_order(self):
        base = datetime(2026, 1, 1, tzinfo=dt_timezone.utc)
        records = [
            make_record('a', base, 'Pending'),
            make_record('b', base + timedelta(days=2), 'Completed'),
            make_record('c', base + timedelta(days=1), 'Urgent'),
            make_record('d', base + timedelta(days=3)),
        ]

        summary = services.summarize(records)

        assert summary['total'] == 4
        assert summary['completed'] == 1
        assert summary['pending'] == 2
        assert summary['urgent'] == 1
        assert [r['id'] for r in summary['submissions']] == ['d', 'b', 'c', 'a']

    def test_limit_keeps_full_counts(self):
        base = datetime(2026, 1, 1, tzinfo=dt_timezone.utc)
        records = [
            make_record(f'r{i:03d}', base + timedelta(minutes=i), 'Completed' if i % 2 else 'Pending')
            for i in range(105)
        ]

        summary = services.summarize(records, limit=100)

        assert len(summary['submissions']) == 100
        assert summary['total'] == 105
        assert summary['completed'] == 52
        assert summary['pending'] == 53
        assert summary['submissions'][0]['id'] == 'r104'
        assert summary['submissions'][-1]['id'] == 'r005'

    def test_legacy_labels_and_date_field(self):
        records = [
            {'id': 'old', 'fechaSolicitud': '2025-01-01T00:00:00.000Z', 'status': 'Completado'},
            {'id': 'older', 'fechaSolicitud': '2024-01-01T00:00:00.000Z', 'status': 'Urgente'},
            {'id': 'new', 'submissionDate': '2026-01-01T00:00:00.000Z', 'status': 'Pendiente'},
            {'id': 'undated'},
        ]

        summary = services.summarize(records)

        assert (summary['completed'], summary['pending'], summary['urgent']) == (1, 2, 1)
        assert [r['id'] for r in summary['submissions']] == ['new', 'old', 'older', 'undated']

    def test_status_filter_narrows_list_only(self):
        base = datetime(2026, 1, 1, tzinfo=dt_timezone.utc)
        records = [
            make_record('a', base, 'Urgent'),
            make_record('b', base, 'Pending'),
        ]

        summary = services.summarize(records, status='Urgent')

        assert summary['total'] == 2
        assert [r['id'] for r in summary['submissions']] == ['a']


class TestCompleteAndDelete:
    """Test admin mutations at the service level."""

    def test_complete_sets_status_and_timestamp(self, store, sample_submission):
        services.complete(sample_submission, store)

        record = store.get(sample_submission)
        assert record['status'] == 'Completed'
        assert record['updatedAt']

    def test_complete_urgent_record(self, store):
        store.put(make_record('urgent_one', datetime(2026, 1, 1, tzinfo=dt_timezone.utc), 'Urgent'))
        services.complete('urgent_one', store)
        assert store.get('urgent_one')['status'] == 'Completed'

    def test_complete_unknown_id(self, store):
        with pytest.raises(SubmissionNotFound):
            services.complete('nobody-2026', store)
        assert store.list() == []

    def test_delete(self, store, sample_submission):
        services.delete(sample_submission, store)

        with pytest.raises(SubmissionNotFound):
            store.get(sample_submission)

    def test_delete_unknown_id(self, store):
        with pytest.raises(SubmissionNotFound):
            services.delete('nobody-2026', store)


class TestJsonFileStore:
    """Test the filesystem store."""

    def test_one_file_per_record(self, settings, store, sample_submission):
        path = settings.SUBMISSIONS_DIR / f'{sample_submission}.json'
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        assert data['nombre'] == 'Ana Gómez'
        assert not [p for p in settings.SUBMISSIONS_DIR.iterdir() if p.suffix == '.tmp']

    def test_list_on_missing_directory(self, tmp_path):
        assert JsonFileSubmissionStore(tmp_path / 'nope').list() == []

    def test_list_uses_file_name_as_id(self, settings, store):
        settings.SUBMISSIONS_DIR.mkdir(parents=True, exist_ok=True)
        (settings.SUBMISSIONS_DIR / 'legacy-1.json').write_text('{"nombre": "X"}', encoding='utf-8')

        assert store.list() == [{'nombre': 'X', 'id': 'legacy-1'}]

    def test_accented_legacy_file_is_addressable(self, settings, store):
        legacy_id = 'maría_pérez-2025-01-01T00-00-00-000Z'
        settings.SUBMISSIONS_DIR.mkdir(parents=True, exist_ok=True)
        (settings.SUBMISSIONS_DIR / f'{legacy_id}.json').write_text(
            '{"nombre": "María Pérez", "status": "Pendiente"}', encoding='utf-8'
        )

        assert [r['id'] for r in store.list()] == [legacy_id]
        assert store.exists(legacy_id)
        assert store.get(legacy_id)['nombre'] == 'María Pérez'

        services.complete(legacy_id, store)
        assert store.get(legacy_id)['status'] == 'Completed'

        services.delete(legacy_id, store)
        assert store.list() == []

    @pytest.mark.parametrize('bad_id', ['../data/admin', '.hidden', '', 'a/b', 'a\\b', 'a\x00b', 'x\n', None])
    def test_unsafe_ids_are_not_found(self, store, bad_id):
        with pytest.raises(SubmissionNotFound):
            store.get(bad_id)
        assert store.exists(bad_id) is False

    def test_corrupt_file_raises_storage_error(self, settings, store):
        settings.SUBMISSIONS_DIR.mkdir(parents=True, exist_ok=True)
        (settings.SUBMISSIONS_DIR / 'broken.json').write_text('{not json', encoding='utf-8')

        with pytest.raises(StorageError):
            store.get('broken')

    def test_put_rejects_unsafe_id(self, store):
        with pytest.raises(StorageError):
            store.put({'id': '../escape'})


class TestSubmitFormEndpoint:
    """Test public contact form submission."""

    def test_submit_valid_form(self, api_client, store):
        response = api_client.post('/api/submit-form', {
            'nombre': 'José Ruiz',
            'telefono': '555-1111',
            'mensaje': 'Necesito una cotización',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert re.fullmatch(rf'jose_ruiz-{ID_PATTERN}', response.data['submissionId'])
        assert store.get(response.data['submissionId'])['mensaje'] == 'Necesito una cotización'

    def test_submit_missing_required_fields(self, api_client, store):
        response = api_client.post('/api/submit-form', {'nombre': 'José Ruiz'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert 'error' in response.data
        assert store.list() == []

    def test_submit_nested_values_rejected(self, api_client, store):
        response = api_client.post('/api/submit-form', {
            'nombre': 'José', 'telefono': '1', 'extra': {'nested': True}
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert store.list() == []

    def test_submit_scalar_values_stringified(self, api_client, store):
        response = api_client.post('/api/submit-form', {
            'nombre': 'Ana', 'telefono': '1', 'empresa': None, 'acepta': True, 'edad': 30,
        })

        assert response.status_code == status.HTTP_200_OK
        record = store.get(response.data['submissionId'])
        assert record['empresa'] == ''
        assert record['acepta'] == 'true'
        assert record['edad'] == '30'

    def test_submit_list_value_rejected(self, api_client, store):
        response = api_client.post('/api/submit-form', {
            'nombre': 'Ana', 'telefono': '1', 'intereses': ['a', 'b']
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'intereses' in response.data['fields']
        assert store.list() == []

    def test_submit_strips_markup(self, api_client, store):
        response = api_client.post('/api/submit-form', {
            'nombre': '<b>Ana</b>', 'telefono': '555', 'mensaje': '<script>x</script>hola'
        })

        record = store.get(response.data['submissionId'])
        assert record['nombre'] == 'Ana'
        assert '<script>' not in record['mensaje']

    def test_submit_ignores_bad_bearer_token(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = api_client.post('/api/submit-form', {'nombre': 'Ana', 'telefono': '1'})
        assert response.status_code == status.HTTP_200_OK

    def test_storage_failure_returns_500(self, api_client, monkeypatch):
        def fail(self, record):
            raise StorageError('disk full')

        monkeypatch.setattr(JsonFileSubmissionStore, 'put', fail)
        response = api_client.post('/api/submit-form', {'nombre': 'Ana', 'telefono': '1'})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['success'] is False

    def test_get_not_allowed(self, api_client):
        response = api_client.get('/api/submit-form')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.data['success'] is False


class TestSubmissionListView:
    """Test admin submission list view."""

    def test_unauthenticated_access(self, api_client):
        response = api_client.get('/api/admin/submissions')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['success'] is False

    def test_invalid_token_forbidden(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = api_client.get('/api/admin/submissions')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['success'] is False

    def test_admin_can_list(self, admin_client, sample_submission):
        response = admin_client.get('/api/admin/submissions')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['total'] == 1
        assert response.data['pending'] == 1
        assert response.data['completed'] == 0
        assert response.data['urgent'] == 0
        assert response.data['submissions'][0]['id'] == sample_submission

    def test_filter_by_status(self, admin_client, store, sample_submission):
        services.submit({'nombre': 'Otro', 'telefono': '2'}, store)
        services.complete(sample_submission, store)

        response = admin_client.get('/api/admin/submissions?status=Completed')

        assert response.data['total'] == 2
        assert [r['id'] for r in response.data['submissions']] == [sample_submission]

    def test_invalid_status_filter(self, admin_client):
        response = admin_client.get('/api/admin/submissions?status=Done')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_capped(self, admin_client, store):
        base = datetime(2026, 1, 1, tzinfo=dt_timezone.utc)
        for i in range(103):
            store.put(make_record(f'rec{i:03d}', base + timedelta(hours=i)))

        response = admin_client.get('/api/admin/submissions')

        assert response.data['total'] == 103
        assert len(response.data['submissions']) == 100
        assert response.data['submissions'][0]['id'] == 'rec102'


class TestSubmissionDetailView:
    """Test admin detail, complete and delete endpoints."""

    def test_get_submission(self, admin_client, sample_submission):
        response = admin_client.get(f'/api/admin/submissions/{sample_submission}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['nombre'] == 'Ana Gómez'
        assert response.data['status'] == 'Pending'

    def test_get_unknown(self, admin_client):
        response = admin_client.get('/api/admin/submissions/nobody-2026')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['success'] is False

    def test_get_requires_token(self, api_client, sample_submission):
        response = api_client.get(f'/api/admin/submissions/{sample_submission}')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_complete(self, admin_client, sample_submission):
        response = admin_client.put(f'/api/admin/submissions/{sample_submission}/complete')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True

        detail = admin_client.get(f'/api/admin/submissions/{sample_submission}')
        assert detail.data['status'] == 'Completed'
        assert detail.data['updatedAt']

    def test_complete_unknown_creates_nothing(self, admin_client, settings):
        response = admin_client.put('/api/admin/submissions/nobody-2026/complete')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert not settings.SUBMISSIONS_DIR.exists() or not any(settings.SUBMISSIONS_DIR.iterdir())

    def test_delete(self, admin_client, sample_submission):
        response = admin_client.delete(f'/api/admin/submissions/{sample_submission}')
        assert response.status_code == status.HTTP_200_OK

        assert admin_client.get(f'/api/admin/submissions/{sample_submission}').status_code == 404
        listing = admin_client.get('/api/admin/submissions')
        assert listing.data['total'] == 0
        assert listing.data['submissions'] == []

    def test_delete_unknown(self, admin_client):
        response = admin_client.delete('/api/admin/submissions/nobody-2026')
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_requires_token(self, api_client, store, sample_submission):
        response = api_client.delete(f'/api/admin/submissions/{sample_submission}')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert store.exists(sample_submission)

    def test_accented_legacy_submission_via_api(self, admin_client, settings):
        legacy_id = 'maría_pérez-2025-01-01T00-00-00-000Z'
        settings.SUBMISSIONS_DIR.mkdir(parents=True, exist_ok=True)
        (settings.SUBMISSIONS_DIR / f'{legacy_id}.json').write_text(
            '{"nombre": "María Pérez", "fechaSolicitud": "2025-01-01T00:00:00.000Z"}',
            encoding='utf-8'
        )
        url = f'/api/admin/submissions/{quote(legacy_id)}'

        listing = admin_client.get('/api/admin/submissions')
        assert [r['id'] for r in listing.data['submissions']] == [legacy_id]

        assert admin_client.get(url).status_code == status.HTTP_200_OK
        assert admin_client.put(f'{url}/complete').status_code == status.HTTP_200_OK
        assert admin_client.get(url).data['status'] == 'Completed'
        assert admin_client.delete(url).status_code == status.HTTP_200_OK
        assert admin_client.get(url).status_code == status.HTTP_404_NOT_FOUND

    def test_hidden_file_id_not_found(self, admin_client):
        response = admin_client.get('/api/admin/submissions/.admin')
        assert response.status_code == status.HTTP_404_NOT_FOUND
