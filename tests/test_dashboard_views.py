from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.utils import timezone
from rest_framework import status

from apps.operations.models import (
    EggCollection,
    FeedAllocation,
    FeedStock,
    MortalityRecord,
    Sale,
    Task,
)

pytestmark = pytest.mark.django_db

DASHBOARD_URL = '/api/v1/dashboard/'


def test_manager_dashboard(manager_client, farm_config):
    today = timezone.localdate()
    yesterday = today - timedelta(days=1)
    EggCollection.objects.create(date=yesterday, shed='Shed A', total_eggs=400)
    EggCollection.objects.create(date=today, shed='Shed A', total_eggs=440, broken_eggs=4)
    FeedStock.objects.create(date=today, feed_type='Layers Mash', quantity=50)
    FeedStock.objects.create(date=today, feed_type='Layers Mash', quantity=30)
    FeedAllocation.objects.create(date=today, shed='Shed A', feed_type='Layers Mash', quantity_allocated=20)

    response = manager_client.get(DASHBOARD_URL)

    assert response.status_code == status.HTTP_200_OK
    assert response.data['role'] == 'MANAGER'
    payload = response.data['dashboard']
    assert payload['available'] is True
    assert payload['kpis']['egg_production_rate'] == {'value': '44.0%', 'trend': '+4.0% from yesterday'}
    assert payload['kpis']['crates_and_pieces']['value'] == '14 Crates, 20 Pieces'
    assert payload['kpis']['feed_inventory']['value'] == '60 Bags'
    assert payload['kpis']['feed_consumption']['value'] == '20 bag/day'
    assert payload['kpis']['active_birds']['value'] == '1,000'
    assert payload['activity_log'][0]['type'] in ('feed_allocation', 'feed_stock')
    assert len(payload['activity_log']) == 3


def test_active_birds_subtracts_all_mortality(manager_client, farm_config):
    MortalityRecord.objects.create(date=timezone.localdate() - timedelta(days=400), shed='Shed A', count=25)
    MortalityRecord.objects.create(date=timezone.localdate(), shed='Shed B', count=5)

    payload = manager_client.get(DASHBOARD_URL).data['dashboard']

    assert payload['metrics']['active_birds'] == 970


def test_dashboard_falls_back_when_data_unavailable(manager_client):
    with patch('apps.operations.dashboard.fetch_dashboard_source', side_effect=DatabaseError('connection lost')):
        response = manager_client.get(DASHBOARD_URL)

    assert response.status_code == status.HTTP_200_OK
    payload = response.data['dashboard']
    assert payload['available'] is False
    assert all(kpi['value'] == 'N/A' for kpi in payload['kpis'].values())


def test_failed_dashboard_is_not_cached(manager_client, farm_config):
    with patch('apps.operations.dashboard.fetch_dashboard_source', side_effect=DatabaseError('connection lost')):
        manager_client.get(DASHBOARD_URL)

    payload = manager_client.get(DASHBOARD_URL).data['dashboard']

    assert payload['available'] is True


def test_dashboard_cached_until_write(manager_client, farm_config):
    today = timezone.localdate()
    assert manager_client.get(DASHBOARD_URL).data['dashboard']['metrics']['total_eggs_today'] == 0

    with patch('apps.operations.dashboard.fetch_dashboard_source') as fetch:
        manager_client.get(DASHBOARD_URL)
    fetch.assert_not_called()

    EggCollection.objects.create(date=today, shed='Shed C', total_eggs=90)

    assert manager_client.get(DASHBOARD_URL).data['dashboard']['metrics']['total_eggs_today'] == 90


def test_worker_dashboard(worker_client, worker, manager):
    today = timezone.localdate()
    EggCollection.objects.create(date=today, shed='Shed A', total_eggs=100, user=worker)
    EggCollection.objects.create(date=today, shed='Shed A', total_eggs=50, user=worker)
    EggCollection.objects.create(date=today, shed='Shed B', total_eggs=70, user=manager)
    MortalityRecord.objects.create(date=today, shed='Shed A', count=1, user=worker)
    Task.objects.create(description='Collect eggs', assigned_to=worker)
    Task.objects.create(description='Done already', assigned_to=worker, status=Task.STATUS_COMPLETED)

    response = worker_client.get(DASHBOARD_URL)

    assert response.data['role'] == 'WORKER'
    payload = response.data['dashboard']
    assert payload['assigned_shed'] == 'Shed A'
    assert payload['kpis'] == {
        'total_eggs': 150,
        'egg_collection_entries': 2,
        'mortality_entries': 1,
        'feed_allocation_entries': 0,
        'open_tasks': 1,
    }


def test_sales_dashboard(sales_client):
    today = timezone.localdate()
    Sale.objects.create(date=today, item_sold='Eggs', quantity=10, unit='crates', unit_price=Decimal('3.00'))
    Sale.objects.create(date=today, item_sold='Spent hens', quantity=2, unit='birds', unit_price=Decimal('5.50'))
    Sale.objects.create(date=today - timedelta(days=2), item_sold='Manure', quantity=1, unit='bags', unit_price=Decimal('4.00'))

    response = sales_client.get(DASHBOARD_URL)

    assert response.data['role'] == 'SALES_REP'
    payload = response.data['dashboard']
    assert payload['kpis']['total_revenue'] == Decimal('41.00')
    assert payload['kpis']['total_sales'] == 2
    assert len(payload['recent_sales']) == 3


def test_page_versions_endpoint(worker_client):
    response = worker_client.get('/api/v1/pages/versions/')

    assert response.status_code == status.HTTP_200_OK
    assert response.data['dashboard'] >= 1
    assert 'reports' in response.data


def test_health_ping_needs_no_credentials(api_client):
    response = api_client.get('/api/v1/health/ping/')

    assert response.status_code == status.HTTP_200_OK
    assert response.data['status'] == 'ok'
