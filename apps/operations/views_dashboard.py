import logging

from django.conf import settings
from django.utils import timezone
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from . import cache as page_cache
from .dashboard import manager_dashboard, sales_dashboard, worker_dashboard
from .models import User

logger = logging.getLogger(__name__)


def cached_manager_dashboard(today):
    """Manager dashboard for ``today``, cached until a source record changes."""
    return page_cache.cached_page(
        page_cache.PAGE_DASHBOARD,
        ['manager', today.isoformat()],
        lambda: manager_dashboard(today, settings.LOW_FEED_STOCK_THRESHOLD),
        cache_when=lambda payload: payload['available'],
    )


@extend_schema(
    tags=['Dashboard'],
    summary='Role-based dashboard',
    description=(
        "Managers get farm-wide KPIs, trend deltas, chart series and the activity log. "
        "Workers get their own entries for today. Sales reps get today's sales summary. "
        "If the data cannot be loaded every KPI is 'N/A' and 'available' is false."
    ),
    responses={200: OpenApiResponse(description='Dashboard payload for the caller\'s role')},
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request, version=None):
    user = request.user
    today = timezone.localdate()

    if user.role == User.ROLE_SALES_REP:
        payload = sales_dashboard(today)
    elif user.is_manager:
        payload = cached_manager_dashboard(today)
    else:
        payload = worker_dashboard(user, today)

    return Response({
        'role': user.role,
        'date': today.isoformat(),
        'dashboard': payload,
    })
