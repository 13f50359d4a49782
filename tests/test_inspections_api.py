"""
Inspection API tests
"""
from datetime import datetime

import httpx
import pytest
from httpx import AsyncClient

from pdc_pro.api import inspections as inspections_api
from pdc_pro.core.config import settings
from pdc_pro.services.report_service import generate_inspection_report

J_DOE = {
    'vehicleDetails': {
        'clientName': 'J. Doe',
        'vehicleMake': 'Toyota',
        'vehicleModel': 'Corolla',
        'yearOfManufacture': 2022,
        'mileage': 12000
    },
    'exteriorCondition': {
        'paintCondition': {'status': 'Issue', 'description': 'scratch on door'}
    }
}


def without_timestamps(record: dict) -> dict:
    return {key: value for key, value in record.items() if key not in ('createdAt', 'updatedAt')}


async def create(client: AsyncClient, headers: dict, payload: dict = None) -> dict:
    response = await client.post('/api/inspections', json=payload or {}, headers=headers)
    assert response.status_code == 201
    return response.json()['inspection']


@pytest.mark.asyncio
async def test_list_is_empty_for_new_user(client: AsyncClient, auth_headers):
    response = await client.get('/api/inspections', headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {'inspections': []}


@pytest.mark.asyncio
async def test_routes_require_auth(client: AsyncClient):
    assert (await client.get('/api/inspections')).status_code == 401
    assert (await client.post('/api/inspections', json={})).status_code == 401


@pytest.mark.asyncio
async def test_create_with_empty_body_uses_defaults(client: AsyncClient, auth_headers):
    inspection = await create(client, auth_headers)

    assert inspection['id']
    assert inspection['status'] == 'Draft'
    assert inspection['createdAt'] == inspection['updatedAt']
    assert inspection['vehicleDetails']['clientName'] == ''
    assert inspection['exteriorCondition']['paintCondition'] == {'status': 'OK', 'description': ''}
    assert inspection['engineConditions']['oilCondition']['status'] == 'OK'
    assert inspection['additionalChecks']['brakeSystem']['status'] == 'OK'
    assert inspection['images']['frontPhoto'] == ''
    assert inspection['images']['additionalPhotos'] == []


@pytest.mark.asyncio
async def test_create_and_read_back(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers, J_DOE)

    assert created['vehicleDetails']['clientName'] == 'J. Doe'
    assert created['exteriorCondition']['paintCondition'] == {'status': 'Issue', 'description': 'scratch on door'}
    assert created['exteriorCondition']['tireCondition']['status'] == 'OK'

    response = await client.get(f"/api/inspections/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()['inspection'] == created

    listing = await client.get('/api/inspections', headers=auth_headers)
    assert [item['id'] for item in listing.json()['inspections']] == [created['id']]


@pytest.mark.asyncio
async def test_list_keeps_creation_order(client: AsyncClient, auth_headers):
    first = await create(client, auth_headers)
    second = await create(client, auth_headers, J_DOE)

    listing = await client.get('/api/inspections', headers=auth_headers)
    assert [item['id'] for item in listing.json()['inspections']] == [first['id'], second['id']]


@pytest.mark.asyncio
async def test_update_replaces_only_supplied_groups(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers, J_DOE)

    response = await client.put(
        f"/api/inspections/{created['id']}",
        json={'engineConditions': {'oilCondition': {'status': 'Issue', 'description': 'low'}}},
        headers=auth_headers
    )

    assert response.status_code == 200
    updated = response.json()['inspection']
    assert updated['engineConditions']['oilCondition'] == {'status': 'Issue', 'description': 'low'}
    assert updated['vehicleDetails'] == created['vehicleDetails']
    assert updated['exteriorCondition'] == created['exteriorCondition']
    assert updated['createdAt'] == created['createdAt']
    assert datetime.fromisoformat(updated['updatedAt']) >= datetime.fromisoformat(created['updatedAt'])


@pytest.mark.asyncio
async def test_update_is_idempotent(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers)
    url = f"/api/inspections/{created['id']}"

    first = await client.put(url, json=J_DOE, headers=auth_headers)
    second = await client.put(url, json=J_DOE, headers=auth_headers)

    assert without_timestamps(first.json()['inspection']) == without_timestamps(second.json()['inspection'])


@pytest.mark.asyncio
async def test_complete_inspection(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers, J_DOE)

    payload = dict(J_DOE, status='Completed')
    response = await client.put(f"/api/inspections/{created['id']}", json=payload, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()['inspection']['status'] == 'Completed'


@pytest.mark.asyncio
async def test_update_ignores_server_fields(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers)

    response = await client.put(
        f"/api/inspections/{created['id']}",
        json={'id': 'something-else', 'createdAt': '2001-01-01T00:00:00', 'status': 'Draft'},
        headers=auth_headers
    )

    inspection = response.json()['inspection']
    assert inspection['id'] == created['id']
    assert inspection['createdAt'] == created['createdAt']


@pytest.mark.asyncio
async def test_blank_numeric_inputs_become_null(client: AsyncClient, auth_headers):
    inspection = await create(client, auth_headers, {
        'vehicleDetails': {'clientName': 'A', 'yearOfManufacture': '', 'mileage': '54000'}
    })

    assert inspection['vehicleDetails']['yearOfManufacture'] is None
    assert inspection['vehicleDetails']['mileage'] == 54000


@pytest.mark.asyncio
@pytest.mark.parametrize('payload', [
    {'status': 'Done'},
    {'exteriorCondition': {'paintCondition': {'status': 'Broken'}}},
])
async def test_invalid_values_are_rejected(client: AsyncClient, auth_headers, payload):
    response = await client.post('/api/inspections', json=payload, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_inspection_is_404(client: AsyncClient, auth_headers):
    for method in ('GET', 'PUT', 'DELETE'):
        kwargs = {'json': {}} if method == 'PUT' else {}
        response = await client.request(method, '/api/inspections/does-not-exist', headers=auth_headers, **kwargs)
        assert response.status_code == 404
        assert response.json()['detail'] == 'Inspection not found'


@pytest.mark.asyncio
async def test_other_users_inspection_is_invisible(client: AsyncClient, auth_headers, other_headers):
    created = await create(client, auth_headers, J_DOE)
    url = f"/api/inspections/{created['id']}"

    assert (await client.get(url, headers=other_headers)).status_code == 404
    assert (await client.put(url, json={'status': 'Completed'}, headers=other_headers)).status_code == 404
    assert (await client.delete(url, headers=other_headers)).status_code == 404
    assert (await client.get(f'{url}/report', headers=other_headers)).status_code == 404

    other_list = await client.get('/api/inspections', headers=other_headers)
    assert other_list.json()['inspections'] == []

    untouched = await client.get(url, headers=auth_headers)
    assert untouched.json()['inspection'] == created


@pytest.mark.asyncio
async def test_delete(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers)
    url = f"/api/inspections/{created['id']}"

    response = await client.delete(url, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {'message': 'Inspection deleted successfully'}

    assert (await client.get(url, headers=auth_headers)).status_code == 404
    assert (await client.delete(url, headers=auth_headers)).status_code == 404

    listing = await client.get('/api/inspections', headers=auth_headers)
    assert listing.json()['inspections'] == []


# ============================================================================
# Uploads
# ============================================================================

@pytest.mark.asyncio
async def test_upload_image(client: AsyncClient, auth_headers, uploader):
    response = await client.post(
        '/api/inspections/temp/upload',
        files={'image': ('front.jpg', b'\xff\xd8\xff-jpeg-bytes', 'image/jpeg')},
        headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()['imageUrl'].startswith('https://res.cloudinary.com/')
    assert uploader.calls == [(b'\xff\xd8\xff-jpeg-bytes', 'image/jpeg', 'front.jpg')]


@pytest.mark.asyncio
async def test_upload_without_file(client: AsyncClient, auth_headers, uploader):
    response = await client.post(
        '/api/inspections/temp/upload',
        files={'other': ('notes.txt', b'hello', 'text/plain')},
        headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()['detail'] == 'No file uploaded'
    assert uploader.calls == []


@pytest.mark.asyncio
async def test_upload_empty_file(client: AsyncClient, auth_headers):
    response = await client.post(
        '/api/inspections/temp/upload',
        files={'image': ('front.jpg', b'', 'image/jpeg')},
        headers=auth_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_upload_rejects_non_images(client: AsyncClient, auth_headers, uploader):
    response = await client.post(
        '/api/inspections/temp/upload',
        files={'image': ('notes.txt', b'hello', 'text/plain')},
        headers=auth_headers
    )

    assert response.status_code == 400
    assert uploader.calls == []


@pytest.mark.asyncio
async def test_upload_too_large(client: AsyncClient, auth_headers, uploader, monkeypatch):
    monkeypatch.setattr(settings, 'MAX_UPLOAD_BYTES', 8)

    response = await client.post(
        '/api/inspections/temp/upload',
        files={'image': ('front.jpg', b'0123456789', 'image/jpeg')},
        headers=auth_headers
    )

    assert response.status_code == 413
    assert uploader.calls == []


@pytest.mark.asyncio
async def test_upload_host_failure(client: AsyncClient, auth_headers, uploader):
    uploader.fail = True

    response = await client.post(
        '/api/inspections/temp/upload',
        files={'image': ('front.jpg', b'jpeg', 'image/jpeg')},
        headers=auth_headers
    )

    assert response.status_code == 500
    assert response.json()['detail'] == 'Image upload failed'


@pytest.mark.asyncio
async def test_upload_requires_auth(client: AsyncClient, uploader):
    response = await client.post(
        '/api/inspections/temp/upload',
        files={'image': ('front.jpg', b'jpeg', 'image/jpeg')}
    )

    assert response.status_code == 401
    assert uploader.calls == []


# ============================================================================
# Report
# ============================================================================

@pytest.mark.asyncio
async def test_download_report(client: AsyncClient, auth_headers):
    created = await create(client, auth_headers, J_DOE)

    response = await client.get(f"/api/inspections/{created['id']}/report", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers['content-type'] == 'application/pdf'
    assert response.content.startswith(b'%PDF')
    disposition = response.headers['content-disposition']
    assert disposition.startswith('attachment; filename="PDC_Report_J._Doe_Toyota_Corolla_')
    assert disposition.endswith('.pdf"')


@pytest.mark.asyncio
async def test_report_only_downloads_photos_from_image_host(client: AsyncClient, auth_headers, monkeypatch):
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(404)

    async def generate_with_transport(inspection):
        return await generate_inspection_report(inspection, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(inspections_api, 'generate_inspection_report', generate_with_transport)
    hosted = 'https://images.example.invalid/c_limit/pdc/front.jpg'
    created = await create(client, auth_headers, {
        **J_DOE,
        'images': {
            'frontPhoto': 'http://127.0.0.1:8080/admin/secrets',
            'rhsSidePhoto': hosted,
            'additionalPhotos': ['https://169.254.169.254/latest/meta-data/']
        }
    })

    response = await client.get(f"/api/inspections/{created['id']}/report", headers=auth_headers)

    assert response.status_code == 200
    assert response.content.startswith(b'%PDF')
    assert requested == [hosted]
