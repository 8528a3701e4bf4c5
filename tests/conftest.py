"""
Shared pytest fixtures for the farm operations tests.
"""
import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from apps.operations.models import FarmConfig, User


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test so page versions start fresh."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def manager(db):
    return User.objects.create_user(
        email='manager@farm.test',
        password='testpass123',
        full_name='Mary Manager',
        role=User.ROLE_MANAGER,
    )


@pytest.fixture
def worker(db):
    return User.objects.create_user(
        email='worker@farm.test',
        password='testpass123',
        full_name='Wally Worker',
        role=User.ROLE_WORKER,
        assigned_shed='Shed A',
    )


@pytest.fixture
def unassigned_worker(db):
    return User.objects.create_user(
        email='new.worker@farm.test',
        password='testpass123',
        full_name='Nina New',
        role=User.ROLE_WORKER,
    )


@pytest.fixture
def sales_rep(db):
    return User.objects.create_user(
        email='sales@farm.test',
        password='testpass123',
        full_name='Sam Sales',
        role=User.ROLE_SALES_REP,
    )


@pytest.fixture
def manager_client(api_client, manager):
    api_client.force_authenticate(user=manager)
    return api_client


@pytest.fixture
def worker_client(worker):
    client = APIClient()
    client.force_authenticate(user=worker)
    return client


@pytest.fixture
def sales_client(sales_rep):
    client = APIClient()
    client.force_authenticate(user=sales_rep)
    return client


@pytest.fixture
def farm_config(db):
    config = FarmConfig.load()
    config.initial_bird_count = 1000
    config.save()
    return config
