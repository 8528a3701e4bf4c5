import logging

from django.db import DatabaseError
from django.utils import timezone
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from . import cache as page_cache
from .api_docs import REPORT_PARAMETERS
from .reports import build_report, report_csv_response
from .serializers import ReportQuerySerializer

logger = logging.getLogger(__name__)


@extend_schema(
    tags=['Reports'],
    summary='Generate report',
    description='Rows for the selected report type and period, newest first. Add export=csv to download.',
    parameters=REPORT_PARAMETERS,
    responses={
        200: OpenApiResponse(description='Report headers and rows, or a CSV attachment'),
        400: OpenApiResponse(description='Missing or invalid report type/period'),
    },
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def report(request, version=None):
    query = ReportQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

    report_type = query.validated_data['type']
    period = query.validated_data['period']
    today = timezone.localdate()

    try:
        data = page_cache.cached_page(
            page_cache.PAGE_REPORTS,
            [report_type, period, today.isoformat()],
            lambda: build_report(report_type, period, today),
        )
    except DatabaseError as e:
        logger.exception("Report generation failed for %s/%s", report_type, period)
        return Response({'error': f"Failed to generate report: {e}"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    if query.validated_data.get('export') == 'csv':
        logger.info("[REPORT] %s exported %s", request.user.email, report_type)
        return report_csv_response(data)
    return Response(data)
