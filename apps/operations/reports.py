"""
Tabular farm reports (egg collection, feed usage, broken eggs, mortality).
"""
import csv
from datetime import timedelta

from dateutil.relativedelta import relativedelta
from django.http import HttpResponse

from .models import EggCollection, FeedAllocation, MortalityRecord

REPORT_EGG_COLLECTION = 'eggCollection'
REPORT_FEED_USAGE = 'feedUsage'
REPORT_BROKEN_EGGS = 'brokenEggs'
REPORT_MORTALITY = 'mortality'

REPORT_HEADERS = {
    REPORT_EGG_COLLECTION: ['Date', 'Shed', 'Total Eggs', 'Broken Eggs'],
    REPORT_FEED_USAGE: ['Date', 'Shed', 'Feed Type', 'Quantity Used'],
    REPORT_BROKEN_EGGS: ['Date', 'Shed', 'Broken Eggs', 'Percentage of Total'],
    REPORT_MORTALITY: ['Date', 'Shed', 'Mortality Count', 'Suspected Cause'],
}
REPORT_TYPES = tuple(REPORT_HEADERS)
REPORT_PERIODS = ('daily', 'weekly', 'monthly', 'quarterly')


def period_start(period, today):
    if period == 'daily':
        return today - timedelta(days=1)
    if period == 'weekly':
        return today - timedelta(weeks=1)
    if period == 'monthly':
        return today - relativedelta(months=1)
    return today - relativedelta(months=3)


def broken_percentage(broken_eggs, total_eggs):
    if total_eggs <= 0:
        return '0.0%'
    return f"{broken_eggs / total_eggs * 100:.1f}%"


def _egg_collection_rows(since):
    records = EggCollection.objects.filter(date__gte=since).order_by('-date', '-created_at')
    return [[r.date.isoformat(), r.shed, r.total_eggs, r.broken_eggs] for r in records]


def _feed_usage_rows(since):
    records = FeedAllocation.objects.filter(date__gte=since).order_by('-date', '-created_at')
    return [[r.date.isoformat(), r.shed, r.feed_type, f"{r.quantity_allocated} {r.unit}"] for r in records]


def _broken_eggs_rows(since):
    records = EggCollection.objects.filter(date__gte=since, broken_eggs__gt=0).order_by('-date', '-created_at')
    return [
        [r.date.isoformat(), r.shed, r.broken_eggs, broken_percentage(r.broken_eggs, r.total_eggs)]
        for r in records
    ]


def _mortality_rows(since):
    records = MortalityRecord.objects.filter(date__gte=since).order_by('-date', '-created_at')
    return [[r.date.isoformat(), r.shed, r.count, r.cause or 'Unknown'] for r in records]


ROW_BUILDERS = {
    REPORT_EGG_COLLECTION: _egg_collection_rows,
    REPORT_FEED_USAGE: _feed_usage_rows,
    REPORT_BROKEN_EGGS: _broken_eggs_rows,
    REPORT_MORTALITY: _mortality_rows,
}


def build_report(report_type, period, today):
    since = period_start(period, today)
    return {
        'type': report_type,
        'period': period,
        'start_date': since.isoformat(),
        'headers': REPORT_HEADERS[report_type],
        'rows': ROW_BUILDERS[report_type](since),
    }


def report_csv_response(report):
    filename = f"{report['type']}_{report['period']}_report.csv"
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'

    writer = csv.writer(response)
    writer.writerow(report['headers'])
    for row in report['rows']:
        writer.writerow(row)
    return response
