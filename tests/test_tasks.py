import pytest
from rest_framework import status

from apps.operations.models import Task

pytestmark = pytest.mark.django_db

TASKS_URL = '/api/v1/tasks/'


@pytest.fixture
def task(manager, worker):
    return Task.objects.create(
        description='Clean drinkers in Shed A',
        assigned_to=worker,
        created_by=manager,
    )


def test_manager_creates_task(manager_client, manager, worker):
    response = manager_client.post(TASKS_URL, {
        'description': 'Vaccinate pullets',
        'assigned_to': str(worker.pk),
        'due_date': '2024-06-01',
    }, format='json')

    assert response.status_code == status.HTTP_201_CREATED
    assert response.data['status'] == Task.STATUS_PENDING
    assert response.data['assigned_to_name'] == 'Wally Worker'

    created = Task.objects.get()
    assert created.created_by == manager


def test_unassigned_option_clears_assignee(manager_client):
    response = manager_client.post(TASKS_URL, {
        'description': 'Restock feed store',
        'assigned_to': 'unassigned',
    }, format='json')

    assert response.status_code == status.HTTP_201_CREATED
    assert response.data['assigned_to'] is None
    assert response.data['assigned_to_name'] is None


def test_description_required(manager_client):
    response = manager_client.post(TASKS_URL, {'description': ''}, format='json')

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data['description'] == ['Description is required.']


def test_worker_sees_only_assigned_tasks(worker_client, task, manager):
    Task.objects.create(description='Someone else', assigned_to=manager, created_by=manager)

    response = worker_client.get(TASKS_URL)

    assert response.status_code == status.HTTP_200_OK
    assert response.data['count'] == 1
    assert response.data['results'][0]['id'] == str(task.pk)


def test_worker_updates_progress_only(worker_client, task):
    response = worker_client.patch(f'{TASKS_URL}{task.pk}/', {
        'status': Task.STATUS_IN_PROGRESS,
        'notes': 'Half done',
        'description': 'Something else',
    }, format='json')

    assert response.status_code == status.HTTP_200_OK
    task.refresh_from_db()
    assert task.status == Task.STATUS_IN_PROGRESS
    assert task.notes == 'Half done'
    assert task.description == 'Clean drinkers in Shed A'


def test_worker_cannot_create_or_delete(worker_client, task):
    create = worker_client.post(TASKS_URL, {'description': 'Self-assigned'}, format='json')
    delete = worker_client.delete(f'{TASKS_URL}{task.pk}/')

    assert create.status_code == status.HTTP_403_FORBIDDEN
    assert delete.status_code == status.HTTP_403_FORBIDDEN
    assert Task.objects.count() == 1


def test_invalid_status_rejected(manager_client, task):
    response = manager_client.patch(f'{TASKS_URL}{task.pk}/', {'status': 'DONE'}, format='json')

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_manager_deletes_task(manager_client, task):
    response = manager_client.delete(f'{TASKS_URL}{task.pk}/')

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert not Task.objects.exists()
