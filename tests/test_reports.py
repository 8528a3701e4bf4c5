from datetime import date, timedelta

import pytest
from django.utils import timezone
from rest_framework import status

from apps.operations.models import EggCollection, FeedAllocation, MortalityRecord
from apps.operations.reports import broken_percentage, build_report, period_start

pytestmark = pytest.mark.django_db

REPORTS_URL = '/api/v1/reports/'


def test_period_start():
    today = date(2024, 5, 31)
    assert period_start('daily', today) == date(2024, 5, 30)
    assert period_start('weekly', today) == date(2024, 5, 24)
    assert period_start('monthly', today) == date(2024, 4, 30)
    assert period_start('quarterly', today) == date(2024, 2, 29)


def test_broken_percentage():
    assert broken_percentage(5, 200) == '2.5%'
    assert broken_percentage(3, 0) == '0.0%'


def test_egg_collection_report_rows_newest_first():
    today = date(2024, 5, 15)
    EggCollection.objects.create(date=today - timedelta(days=3), shed='Shed A', total_eggs=300, broken_eggs=2)
    EggCollection.objects.create(date=today, shed='Shed B', total_eggs=280)
    EggCollection.objects.create(date=today - timedelta(days=20), shed='Shed A', total_eggs=310)

    report = build_report('eggCollection', 'weekly', today)

    assert report['headers'] == ['Date', 'Shed', 'Total Eggs', 'Broken Eggs']
    assert report['rows'] == [
        ['2024-05-15', 'Shed B', 280, 0],
        ['2024-05-12', 'Shed A', 300, 2],
    ]


def test_broken_eggs_report_skips_clean_collections():
    today = date(2024, 5, 15)
    EggCollection.objects.create(date=today, shed='Shed A', total_eggs=200, broken_eggs=5)
    EggCollection.objects.create(date=today, shed='Shed B', total_eggs=200)

    report = build_report('brokenEggs', 'daily', today)

    assert report['rows'] == [['2024-05-15', 'Shed A', 5, '2.5%']]


def test_feed_and_mortality_reports():
    today = date(2024, 5, 15)
    FeedAllocation.objects.create(date=today, shed='Shed C', feed_type='Layers Mash', quantity_allocated=4, unit='bags')
    MortalityRecord.objects.create(date=today, shed='Shed C', count=2)

    assert build_report('feedUsage', 'daily', today)['rows'] == [['2024-05-15', 'Shed C', 'Layers Mash', '4 bags']]
    assert build_report('mortality', 'daily', today)['rows'] == [['2024-05-15', 'Shed C', 2, 'Unknown']]


def test_report_endpoint(worker_client):
    EggCollection.objects.create(date=timezone.localdate(), shed='Shed A', total_eggs=120, broken_eggs=1)

    response = worker_client.get(REPORTS_URL, {'type': 'eggCollection', 'period': 'monthly'})

    assert response.status_code == status.HTTP_200_OK
    assert response.data['type'] == 'eggCollection'
    assert len(response.data['rows']) == 1


def test_report_requires_type_and_period(worker_client):
    response = worker_client.get(REPORTS_URL, {'type': 'profits'})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert 'type' in response.data
    assert 'period' in response.data


def test_csv_export(manager_client):
    MortalityRecord.objects.create(date=timezone.localdate(), shed='Shed D', count=3, cause='Predator')

    response = manager_client.get(REPORTS_URL, {'type': 'mortality', 'period': 'weekly', 'export': 'csv'})

    assert response.status_code == status.HTTP_200_OK
    assert response['Content-Type'] == 'text/csv'
    assert response['Content-Disposition'] == 'attachment; filename="mortality_weekly_report.csv"'
    lines = response.content.decode().splitlines()
    assert lines[0] == 'Date,Shed,Mortality Count,Suspected Cause'
    assert lines[1].endswith('Shed D,3,Predator')


def test_report_cache_refreshes_after_write(manager_client):
    params = {'type': 'mortality', 'period': 'daily'}
    assert manager_client.get(REPORTS_URL, params).data['rows'] == []

    MortalityRecord.objects.create(date=timezone.localdate(), shed='Shed D', count=1)

    assert len(manager_client.get(REPORTS_URL, params).data['rows']) == 1
