"""
Egg collection, mortality, feed and sales endpoints.
"""
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from apps.operations import cache as page_cache
from apps.operations.context import NO_ASSIGNED_SHED_MESSAGE
from apps.operations.models import (
    EggCollection,
    FeedAllocation,
    FeedStock,
    FeedType,
    MortalityRecord,
    Sale,
)

pytestmark = pytest.mark.django_db

EGGS_URL = '/api/v1/egg-collections/'
MORTALITY_URL = '/api/v1/mortality/'
STOCK_URL = '/api/v1/feed-stock/'
ALLOCATION_URL = '/api/v1/feed-allocations/'
FEED_TYPES_URL = '/api/v1/feed-types/'
SALES_URL = '/api/v1/sales/'


def today():
    return timezone.localdate().isoformat()


class TestEggCollection:
    def test_manager_records_collection_with_derived_crates(self, manager_client, manager):
        response = manager_client.post(EGGS_URL, {
            'date': today(),
            'shed': 'Shed C',
            'total_eggs': 95,
            'broken_eggs': 3,
            # client-computed values are ignored
            'crates': 10,
            'pieces': 10,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['crates'] == 3
        assert response.data['pieces'] == 5
        assert response.data['shed'] == 'Shed C'
        assert response.data['collected_by'] == 'Mary Manager'

        record = EggCollection.objects.get()
        assert record.user == manager

    def test_worker_collection_uses_assigned_shed(self, worker_client):
        response = worker_client.post(EGGS_URL, {
            'date': today(),
            'shed': 'Shed E',
            'total_eggs': 60,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['shed'] == 'Shed A'
        assert response.data['collected_by'] == 'Wally Worker'

    def test_manager_must_name_a_shed(self, manager_client):
        response = manager_client.post(EGGS_URL, {'date': today(), 'total_eggs': 60}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'shed' in response.data

    def test_broken_eggs_cannot_exceed_total(self, manager_client):
        response = manager_client.post(EGGS_URL, {
            'date': today(),
            'shed': 'Shed A',
            'total_eggs': 10,
            'broken_eggs': 11,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'broken_eggs' in response.data
        assert not EggCollection.objects.exists()

    def test_sales_rep_cannot_record_collections(self, sales_client):
        response = sales_client.post(EGGS_URL, {
            'date': today(),
            'shed': 'Shed A',
            'total_eggs': 10,
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_recomputes_crates(self, manager_client):
        record = EggCollection.objects.create(date=timezone.localdate(), shed='Shed B', total_eggs=30)

        response = manager_client.patch(f'{EGGS_URL}{record.pk}/', {'total_eggs': 61}, format='json')

        assert response.status_code == status.HTTP_200_OK
        record.refresh_from_db()
        assert (record.crates, record.pieces) == (2, 1)
        assert record.shed == 'Shed B'

    def test_worker_cannot_edit_someone_elses_record(self, worker_client, manager):
        record = EggCollection.objects.create(
            date=timezone.localdate(), shed='Shed A', total_eggs=30, user=manager
        )

        response = worker_client.delete(f'{EGGS_URL}{record.pk}/')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert EggCollection.objects.filter(pk=record.pk).exists()

    def test_write_bumps_page_versions(self, manager_client):
        before = page_cache.page_versions()

        manager_client.post(EGGS_URL, {'date': today(), 'shed': 'Shed A', 'total_eggs': 30}, format='json')

        after = page_cache.page_versions()
        assert after['egg-collection'] == before['egg-collection'] + 1
        assert after['dashboard'] == before['dashboard'] + 1
        assert after['sales'] == before['sales']

    def test_list_is_paginated_newest_first(self, manager_client):
        EggCollection.objects.create(date='2024-01-01', shed='Shed A', total_eggs=10)
        EggCollection.objects.create(date='2024-01-03', shed='Shed A', total_eggs=20)

        response = manager_client.get(EGGS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert [row['date'] for row in response.data['results']] == ['2024-01-03', '2024-01-01']


class TestMortality:
    def test_worker_shed_is_overridden(self, worker_client, worker):
        response = worker_client.post(MORTALITY_URL, {
            'shed': 'Shed Z',
            'count': 2,
            'cause': 'Heat stress',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        record = MortalityRecord.objects.get()
        assert record.shed == 'Shed A'
        assert record.recorded_by == 'Wally Worker'
        assert record.user == worker
        assert record.date == timezone.localdate()

    def test_worker_without_shed_is_denied(self, unassigned_worker):
        client = APIClient()
        client.force_authenticate(user=unassigned_worker)
        response = client.post(MORTALITY_URL, {'shed': 'Shed B', 'count': 1}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['detail'] == NO_ASSIGNED_SHED_MESSAGE
        assert not MortalityRecord.objects.exists()

    def test_count_must_be_positive(self, manager_client):
        response = manager_client.post(MORTALITY_URL, {'shed': 'Shed B', 'count': 0}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['count'] == ['Count must be at least 1']


class TestInventory:
    def test_only_manager_records_stock(self, manager_client, worker_client):
        payload = {'date': today(), 'feed_type': 'Layers Mash', 'quantity': 50, 'unit': 'bags', 'cost': '1250.00'}

        assert worker_client.post(STOCK_URL, payload, format='json').status_code == status.HTTP_403_FORBIDDEN

        response = manager_client.post(STOCK_URL, payload, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        assert FeedStock.objects.get().cost == Decimal('1250.00')

    def test_worker_allocates_to_assigned_shed(self, worker_client):
        response = worker_client.post(ALLOCATION_URL, {
            'date': today(),
            'shed': 'Shed D',
            'feed_type': 'Layers Mash',
            'quantity_allocated': 3,
            'unit': 'bags',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        allocation = FeedAllocation.objects.get()
        assert allocation.shed == 'Shed A'
        assert allocation.allocated_by == 'Wally Worker'

    def test_invalid_unit_rejected(self, manager_client):
        response = manager_client.post(ALLOCATION_URL, {
            'date': today(),
            'shed': 'Shed A',
            'feed_type': 'Layers Mash',
            'quantity_allocated': 3,
            'unit': 'tons',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'unit' in response.data

    def test_feed_types(self, manager_client, worker_client):
        response = manager_client.post(FEED_TYPES_URL, {'name': 'Growers Mash'}, format='json')
        assert response.status_code == status.HTTP_201_CREATED

        duplicate = manager_client.post(FEED_TYPES_URL, {'name': 'Growers Mash'}, format='json')
        assert duplicate.status_code == status.HTTP_400_BAD_REQUEST

        listing = worker_client.get(FEED_TYPES_URL)
        assert listing.status_code == status.HTTP_200_OK
        assert [item['name'] for item in listing.data] == ['Growers Mash']

        feed_type = FeedType.objects.get()
        assert worker_client.delete(f'{FEED_TYPES_URL}{feed_type.pk}/').status_code == status.HTTP_403_FORBIDDEN
        assert manager_client.delete(f'{FEED_TYPES_URL}{feed_type.pk}/').status_code == status.HTTP_204_NO_CONTENT


class TestIssueReports:
    URL = '/api/v1/issue-reports/'

    def test_worker_report_is_tied_to_shed_and_resolved_by_manager(self, worker_client, manager_client):
        response = worker_client.post(self.URL, {
            'category': 'WATER',
            'description': 'Drinker line leaking',
            'shed': 'Shed C',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['shed'] == 'Shed A'
        assert response.data['reported_by'] == 'Wally Worker'
        assert response.data['status'] == 'OPEN'

        issue_id = response.data['id']
        assert worker_client.post(f'{self.URL}{issue_id}/resolve/').status_code == status.HTTP_403_FORBIDDEN

        resolved = manager_client.post(f'{self.URL}{issue_id}/resolve/')
        assert resolved.status_code == status.HTTP_200_OK
        assert resolved.data['status'] == 'RESOLVED'
        assert resolved.data['resolved_at'] is not None

    def test_workers_only_see_their_own_reports(self, worker_client, manager_client):
        manager_client.post(self.URL, {'category': 'OTHER', 'description': 'Fence gap'}, format='json')
        worker_client.post(self.URL, {'category': 'HEALTH', 'description': 'Lethargic birds'}, format='json')

        assert worker_client.get(self.URL).data['count'] == 1
        assert manager_client.get(self.URL).data['count'] == 2


class TestSales:
    def test_total_price_computed_server_side(self, sales_client, sales_rep):
        response = sales_client.post(SALES_URL, {
            'date': today(),
            'item_sold': 'Eggs (crate)',
            'quantity': 10,
            'unit': 'crates',
            'unit_price': '2.50',
            'total_price': '999.00',
            'customer_name': 'Corner Shop',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total_price'] == '25.00'
        assert response.data['recorded_by'] == 'Sam Sales'

        sale = Sale.objects.get()
        assert sale.total_price == Decimal('25.00')
        assert sale.user == sales_rep

    def test_worker_cannot_record_sales(self, worker_client):
        response = worker_client.post(SALES_URL, {
            'date': today(),
            'item_sold': 'Eggs',
            'quantity': 1,
            'unit': 'crates',
            'unit_price': '2.50',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_quantity_must_be_positive(self, sales_client):
        response = sales_client.post(SALES_URL, {
            'date': today(),
            'item_sold': 'Eggs',
            'quantity': 0,
            'unit': 'crates',
            'unit_price': '2.50',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'quantity' in response.data


def test_storage_failure_surfaces_backend_message(manager_client):
    with patch('apps.operations.models.EggCollection.save', side_effect=DatabaseError('disk I/O error')):
        response = manager_client.post(EGGS_URL, {
            'date': today(),
            'shed': 'Shed A',
            'total_eggs': 30,
        }, format='json')

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data['detail'] == 'Failed to save record: disk I/O error'
