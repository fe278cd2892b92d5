"""
End-to-end Test for the Submission Lifecycle

Tests cover:
1. Public intake through /api/submit-form
2. Admin login and bearer token use
3. Listing with status counts
4. Completing, fetching and deleting a submission

Run with: pytest tests/integration/test_submission_lifecycle.py -v
"""
import re

import pytest
from rest_framework import status
from rest_framework.test import APIClient


@pytest.fixture
def public_client():
    return APIClient()


@pytest.fixture
def console_client():
    client = APIClient()
    response = client.post('/api/admin/login', {'username': 'admin', 'password': 'admin123'})
    assert response.status_code == status.HTTP_200_OK
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['token']}")
    return client


def test_submit_complete_delete(public_client, console_client):
    submitted = public_client.post('/api/submit-form', {
        'nombre': 'José Ruiz',
        'telefono': '555-1111',
        'servicio': 'Mudanza',
    })
    assert submitted.status_code == status.HTTP_200_OK
    submission_id = submitted.data['submissionId']
    assert re.match(r'^jose_ruiz-\d{4}-', submission_id)

    twin = public_client.post('/api/submit-form', {'nombre': 'José Ruiz', 'telefono': '555-1111'})
    assert twin.data['submissionId'] != submission_id

    listing = console_client.get('/api/admin/submissions')
    assert listing.data['total'] == 2
    assert listing.data['pending'] == 2
    assert {r['id'] for r in listing.data['submissions']} == {submission_id, twin.data['submissionId']}

    completed = console_client.put(f'/api/admin/submissions/{submission_id}/complete')
    assert completed.status_code == status.HTTP_200_OK

    detail = console_client.get(f'/api/admin/submissions/{submission_id}')
    assert detail.data['status'] == 'Completed'
    assert detail.data['servicio'] == 'Mudanza'

    listing = console_client.get('/api/admin/submissions')
    assert (listing.data['completed'], listing.data['pending']) == (1, 1)

    deleted = console_client.delete(f'/api/admin/submissions/{submission_id}')
    assert deleted.status_code == status.HTTP_200_OK

    listing = console_client.get('/api/admin/submissions')
    assert listing.data['total'] == 1
    assert submission_id not in {r['id'] for r in listing.data['submissions']}

    missing = console_client.get(f'/api/admin/submissions/{submission_id}')
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_public_client_cannot_manage(public_client):
    submitted = public_client.post('/api/submit-form', {'nombre': 'Ana', 'telefono': '1'})
    submission_id = submitted.data['submissionId']

    assert public_client.get('/api/admin/submissions').status_code == status.HTTP_401_UNAUTHORIZED
    assert public_client.put(
        f'/api/admin/submissions/{submission_id}/complete'
    ).status_code == status.HTTP_401_UNAUTHORIZED
    assert public_client.delete(
        f'/api/admin/submissions/{submission_id}'
    ).status_code == status.HTTP_401_UNAUTHORIZED
