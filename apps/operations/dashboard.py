"""
Dashboard aggregation.

Rows are read once at the fetch boundary into typed, immutable records and
handed to ``build_dashboard``, a pure function of (today, rows) that returns
the KPI cards, chart series and activity log rendered by the dashboard page.
"""
import logging
from dataclasses import dataclass, fields
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta
from django.db import DatabaseError
from django.db.models import Count, Sum

from .models import (
    EGGS_PER_CRATE,
    EggCollection,
    FarmConfig,
    FeedAllocation,
    FeedStock,
    MortalityRecord,
    Sale,
    Task,
)

logger = logging.getLogger(__name__)

NOT_AVAILABLE = 'N/A'
SERIES_WEEKS = 6
SERIES_MONTHS = 6
MORTALITY_WINDOW_DAYS = 30
DAILY_MORTALITY_DAYS = 7
ACTIVITY_LIMIT = 3
RECENT_SALES_LIMIT = 5
BAGS = 'bags'

KPI_KEYS = (
    'egg_production_rate',
    'total_eggs_today',
    'crates_and_pieces',
    'feed_consumption',
    'mortality_rate',
    'broken_eggs',
    'feed_inventory',
    'active_birds',
)
CHART_KEYS = (
    'egg_production_trend',
    'mortality_trend',
    'daily_mortality',
    'egg_collection_per_shed',
    'feed_consumption_analysis',
)


@dataclass(frozen=True)
class EggRow:
    date: date
    shed: str
    total_eggs: int
    broken_eggs: int = 0
    crates: int = 0
    pieces: int = 0
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MortalityRow:
    date: date
    shed: str
    count: int
    cause: str = ''
    recorded_by: str = ''
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AllocationRow:
    date: date
    shed: str
    feed_type: str
    quantity_allocated: int
    unit: str = BAGS
    allocated_by: str = ''
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StockRow:
    date: date
    feed_type: str
    quantity: int
    unit: str = BAGS
    supplier: str = ''
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DashboardSource:
    eggs: Sequence[EggRow]
    mortalities: Sequence[MortalityRow]
    allocations: Sequence[AllocationRow]
    stocks: Sequence[StockRow]
    total_mortality: int
    bird_start_count: int

    @property
    def active_birds(self) -> int:
        return self.bird_start_count - self.total_mortality


# Arithmetic

def production_rate(eggs_collected: int, active_birds: int) -> float:
    if active_birds <= 0:
        return 0.0
    return eggs_collected / active_birds * 100


def mortality_rates(current_deaths: int, prior_deaths: int, active_birds: int) -> Tuple[float, float]:
    """
    Rates for the current and prior mortality windows.

    Both windows share one base population (active birds plus the current
    window's deaths) so the two rates are directly comparable.
    """
    if active_birds <= 0:
        return 0.0, 0.0
    base = active_birds + current_deaths
    return current_deaths / base * 100, prior_deaths / base * 100


def feed_inventory(stocks: Iterable[StockRow], allocations: Iterable[AllocationRow]) -> int:
    stocked = sum(row.quantity for row in stocks if row.unit == BAGS)
    allocated = sum(row.quantity_allocated for row in allocations if row.unit == BAGS)
    return stocked - allocated


def crates_and_pieces(eggs: Iterable[EggRow]) -> Tuple[int, int]:
    crates = 0
    pieces = 0
    for row in eggs:
        crates += row.crates
        pieces += row.pieces
    extra_crates, pieces = divmod(pieces, EGGS_PER_CRATE)
    return crates + extra_crates, pieces


def _rounded_delta(current: float, previous: float) -> float:
    # + 0.0 folds -0.0 into 0.0 so the sign prefix stays "+"
    return round(round(current, 1) - round(previous, 1), 1) + 0.0


def _bags_allocated_on(allocations: Iterable[AllocationRow], day: date) -> int:
    return sum(row.quantity_allocated for row in allocations if row.date == day and row.unit == BAGS)


# Series

def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def weekly_egg_series(eggs: Iterable[EggRow], today: date, weeks: int = SERIES_WEEKS) -> List[Dict]:
    """Total eggs per completed Monday-start week, oldest first; empty weeks are 0."""
    current = week_start(today)
    starts = [current - timedelta(weeks=offset) for offset in range(weeks, 0, -1)]
    totals = dict.fromkeys(starts, 0)
    for row in eggs:
        bucket = week_start(row.date)
        if bucket in totals:
            totals[bucket] += row.total_eggs
    return [
        {'date': start.strftime('%d %b'), 'start': start.isoformat(), 'value': totals[start]}
        for start in starts
    ]


def monthly_mortality_series(mortalities: Iterable[MortalityRow], today: date, months: int = SERIES_MONTHS) -> List[Dict]:
    """Total deaths per completed calendar month, oldest first; empty months are 0."""
    current = today.replace(day=1)
    starts = [current - relativedelta(months=offset) for offset in range(months, 0, -1)]
    totals = dict.fromkeys(starts, 0)
    for row in mortalities:
        bucket = row.date.replace(day=1)
        if bucket in totals:
            totals[bucket] += row.count
    return [
        {'date': start.strftime('%b'), 'start': start.isoformat(), 'value': totals[start]}
        for start in starts
    ]


def daily_mortality_series(mortalities: Iterable[MortalityRow], today: date, days: int = DAILY_MORTALITY_DAYS) -> List[Dict]:
    window = [today - timedelta(days=offset) for offset in range(days, -1, -1)]
    totals = dict.fromkeys(window, 0)
    for row in mortalities:
        if row.date in totals:
            totals[row.date] += row.count
    return [{'date': day.strftime('%d/%m'), 'value': totals[day]} for day in window]


def feed_by_shed(allocations: Iterable[AllocationRow]) -> List[Dict]:
    totals: Dict[str, int] = {}
    for row in allocations:
        totals[row.shed] = totals.get(row.shed, 0) + row.quantity_allocated
    return [{'category': shed, 'current': total} for shed, total in sorted(totals.items())]


def eggs_per_shed(eggs: Iterable[EggRow]) -> List[Dict]:
    totals: Dict[str, int] = {}
    for row in eggs:
        totals[row.shed] = totals.get(row.shed, 0) + row.total_eggs
    return [{'shed': shed, 'eggs': total} for shed, total in sorted(totals.items())]


# Activity log

def _recency(row) -> Tuple[date, float]:
    created = row.created_at.timestamp() if row.created_at else 0.0
    return row.date, created


def _describe_allocation(row: AllocationRow) -> str:
    return f"{row.quantity_allocated} {row.unit} of {row.feed_type} allocated to {row.shed}"


def _describe_mortality(row: MortalityRow) -> str:
    cause = row.cause or 'Unknown'
    return f"{row.count} bird(s) lost in {row.shed} ({cause})"


def _describe_stock(row: StockRow) -> str:
    supplier = f" from {row.supplier}" if row.supplier else ''
    return f"{row.quantity} {row.unit} of {row.feed_type} received{supplier}"


def activity_feed(
    allocations: Iterable[AllocationRow],
    mortalities: Iterable[MortalityRow],
    stocks: Iterable[StockRow],
    limit: int = ACTIVITY_LIMIT,
) -> List[Dict]:
    """
    Take the ``limit`` latest records of each source, merge them, newest
    first, and keep the top ``limit`` overall.
    """
    candidates = []
    for kind, rows, describe in (
        ('feed_allocation', allocations, _describe_allocation),
        ('mortality', mortalities, _describe_mortality),
        ('feed_stock', stocks, _describe_stock),
    ):
        for row in sorted(rows, key=_recency, reverse=True)[:limit]:
            candidates.append((_recency(row), kind, row, describe))

    candidates.sort(key=lambda candidate: candidate[0], reverse=True)
    return [
        {
            'type': kind,
            'date': row.date.isoformat(),
            'shed': getattr(row, 'shed', None),
            'description': describe(row),
        }
        for _, kind, row, describe in candidates[:limit]
    ]


# View models

def build_dashboard(source: DashboardSource, today: date, low_stock_threshold: int = 20) -> Dict:
    yesterday = today - timedelta(days=1)
    active = source.active_birds

    eggs_today = [row for row in source.eggs if row.date == today]
    eggs_yesterday = [row for row in source.eggs if row.date == yesterday]
    total_today = sum(row.total_eggs for row in eggs_today)
    total_yesterday = sum(row.total_eggs for row in eggs_yesterday)
    broken_today = sum(row.broken_eggs for row in eggs_today)
    broken_yesterday = sum(row.broken_eggs for row in eggs_yesterday)

    rate_today = production_rate(total_today, active)
    rate_yesterday = production_rate(total_yesterday, active)

    feed_today = _bags_allocated_on(source.allocations, today)
    feed_yesterday = _bags_allocated_on(source.allocations, yesterday)

    window_start = today - timedelta(days=MORTALITY_WINDOW_DAYS - 1)
    prior_start = window_start - timedelta(days=MORTALITY_WINDOW_DAYS)
    current_deaths = sum(row.count for row in source.mortalities if window_start <= row.date <= today)
    prior_deaths = sum(row.count for row in source.mortalities if prior_start <= row.date < window_start)
    mortality_now, mortality_prior = mortality_rates(current_deaths, prior_deaths, active)

    inventory = feed_inventory(source.stocks, source.allocations)
    low_stock = inventory < low_stock_threshold
    crates, pieces = crates_and_pieces(eggs_today)

    return {
        'available': True,
        'kpis': {
            'egg_production_rate': {
                'value': f"{rate_today:.1f}%",
                'trend': f"{_rounded_delta(rate_today, rate_yesterday):+.1f}% from yesterday",
            },
            'total_eggs_today': {'value': f"{total_today} Eggs", 'trend': None},
            'crates_and_pieces': {'value': f"{crates} Crates, {pieces} Pieces", 'trend': None},
            'feed_consumption': {
                'value': f"{feed_today} bag/day",
                'trend': f"{feed_today - feed_yesterday:+d} bags from yesterday",
            },
            'mortality_rate': {
                'value': f"{mortality_now:.1f}%",
                'trend': f"{_rounded_delta(mortality_now, mortality_prior):+.1f}% from last month",
            },
            'broken_eggs': {
                'value': f"{broken_today}/day",
                'trend': f"{broken_today - broken_yesterday:+d} from yesterday",
            },
            'feed_inventory': {
                'value': f"{inventory} Bags",
                'trend': 'Low stock alert' if low_stock else 'Stock level OK',
            },
            'active_birds': {'value': f"{active:,}", 'trend': None},
        },
        'metrics': {
            'egg_production_rate': round(rate_today, 1),
            'feed_consumption': feed_today,
            'mortality_rate': round(mortality_now, 1),
            'broken_eggs': broken_today,
            'feed_inventory': inventory,
            'low_feed_stock': low_stock,
            'active_birds': active,
            'total_eggs_today': total_today,
            'crates': crates,
            'pieces': pieces,
        },
        'charts': {
            'egg_production_trend': weekly_egg_series(source.eggs, today),
            'mortality_trend': monthly_mortality_series(source.mortalities, today),
            'daily_mortality': daily_mortality_series(source.mortalities, today),
            'egg_collection_per_shed': eggs_per_shed(eggs_today),
            'feed_consumption_analysis': feed_by_shed(source.allocations),
        },
        'activity_log': activity_feed(source.allocations, source.mortalities, source.stocks),
    }


def empty_dashboard() -> Dict:
    return {
        'available': False,
        'kpis': {key: {'value': NOT_AVAILABLE, 'trend': None} for key in KPI_KEYS},
        'metrics': {},
        'charts': {key: [] for key in CHART_KEYS},
        'activity_log': [],
    }


# Fetch boundary

def _rows(queryset, row_type):
    names = [field.name for field in fields(row_type)]
    return [row_type(**values) for values in queryset.values(*names)]


def fetch_dashboard_source(today: date) -> DashboardSource:
    eggs_since = week_start(today) - timedelta(weeks=SERIES_WEEKS)
    mortality_since = min(
        today.replace(day=1) - relativedelta(months=SERIES_MONTHS),
        today - timedelta(days=2 * MORTALITY_WINDOW_DAYS),
    )

    eggs = _rows(EggCollection.objects.filter(date__gte=eggs_since, date__lte=today), EggRow)
    mortalities = _rows(MortalityRecord.objects.filter(date__gte=mortality_since, date__lte=today), MortalityRow)
    allocations = _rows(FeedAllocation.objects.all(), AllocationRow)
    stocks = _rows(FeedStock.objects.all(), StockRow)
    total_mortality = MortalityRecord.objects.aggregate(total=Sum('count'))['total'] or 0
    bird_start_count = FarmConfig.objects.filter(pk=1).values_list('initial_bird_count', flat=True).first() or 0

    return DashboardSource(
        eggs=tuple(eggs),
        mortalities=tuple(mortalities),
        allocations=tuple(allocations),
        stocks=tuple(stocks),
        total_mortality=total_mortality,
        bird_start_count=bird_start_count,
    )


def manager_dashboard(today: date, low_stock_threshold: int = 20) -> Dict:
    try:
        source = fetch_dashboard_source(today)
    except DatabaseError:
        logger.exception("Dashboard data fetch error")
        return empty_dashboard()
    return build_dashboard(source, today, low_stock_threshold)


def worker_dashboard(user, today: date) -> Dict:
    """Today's entries made by one worker."""
    try:
        eggs = EggCollection.objects.filter(user=user, date=today).aggregate(
            total=Sum('total_eggs'), entries=Count('id')
        )
        mortality_entries = MortalityRecord.objects.filter(user=user, date=today).count()
        feed_entries = FeedAllocation.objects.filter(user=user, date=today).count()
        open_tasks = Task.objects.filter(assigned_to=user).exclude(status=Task.STATUS_COMPLETED).count()
    except DatabaseError:
        logger.exception("Worker dashboard fetch error for %s", user)
        return {
            'available': False,
            'assigned_shed': user.assigned_shed,
            'kpis': dict.fromkeys(
                ('total_eggs', 'egg_collection_entries', 'mortality_entries', 'feed_allocation_entries', 'open_tasks'),
                NOT_AVAILABLE,
            ),
        }

    return {
        'available': True,
        'assigned_shed': user.assigned_shed,
        'kpis': {
            'total_eggs': eggs['total'] or 0,
            'egg_collection_entries': eggs['entries'],
            'mortality_entries': mortality_entries,
            'feed_allocation_entries': feed_entries,
            'open_tasks': open_tasks,
        },
    }


def sales_dashboard(today: date) -> Dict:
    try:
        totals = Sale.objects.filter(date=today).aggregate(revenue=Sum('total_price'), count=Count('id'))
        recent = list(
            Sale.objects.order_by('-date', '-created_at').values(
                'id', 'date', 'item_sold', 'quantity', 'unit', 'unit_price', 'total_price', 'customer_name'
            )[:RECENT_SALES_LIMIT]
        )
    except DatabaseError:
        logger.exception("Sales dashboard fetch error")
        return {
            'available': False,
            'kpis': {'total_revenue': NOT_AVAILABLE, 'total_sales': NOT_AVAILABLE},
            'recent_sales': [],
        }

    return {
        'available': True,
        'kpis': {
            'total_revenue': totals['revenue'] or 0,
            'total_sales': totals['count'],
        },
        'recent_sales': recent,
    }
