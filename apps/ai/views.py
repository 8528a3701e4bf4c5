import logging

from django.utils import timezone
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.operations.permissions import IsManager
from apps.operations.views_dashboard import cached_manager_dashboard
from .models import OptimizationRequest
from .serializers import (
    OptimizationInputSerializer,
    OptimizationRequestSerializer,
    OptimizationResultSerializer,
)
from .services import FarmOptimizerService, OptimizationServiceError

logger = logging.getLogger(__name__)


def _percentage(value):
    # Prefill must stay inside the optimize form's 0-100 range
    return min(max(float(value), 0.0), 100.0)


class OptimizeAPIView(APIView):
    """
    Farm Optimization API
    Sends the submitted farm metrics to the language model and returns suggestions.
    """
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        request=OptimizationInputSerializer,
        responses={
            200: OptimizationResultSerializer,
            400: OpenApiResponse(description="Bad Request"),
            502: OpenApiResponse(description="Suggestion service unavailable")
        },
        summary="Get optimization suggestions",
        description="Submit egg production rate, feed consumption, mortality rate and bird count to receive suggestions."
    )
    def post(self, request):
        serializer = OptimizationInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        metrics = serializer.validated_data
        try:
            result = FarmOptimizerService().suggest(metrics)
        except OptimizationServiceError as e:
            return Response(
                {'error': f'Failed to get suggestions: {e}'},
                status=status.HTTP_502_BAD_GATEWAY
            )

        record = OptimizationRequest.objects.create(
            user=request.user,
            egg_production_rate=metrics['egg_production_rate'],
            feed_consumption=metrics['feed_consumption'],
            mortality_rate=metrics['mortality_rate'],
            number_of_birds=metrics['number_of_birds'],
            suggestions=result['suggestions'],
            model_used=result['model_used'],
            tokens_used=result['tokens_used'],
            response_time_ms=result['response_time_ms']
        )
        logger.info("[AI] suggestions for %s in %sms", request.user.email, result['response_time_ms'])

        return Response({'id': str(record.id), **result}, status=status.HTTP_200_OK)


class OptimizeDefaultsAPIView(APIView):
    """
    Current dashboard metrics, used to prefill the optimization form.
    """
    permission_classes = [permissions.IsAuthenticated, IsManager]

    @extend_schema(
        request=None,
        responses={
            200: OptimizationInputSerializer,
            503: OpenApiResponse(description="Dashboard metrics unavailable")
        },
        summary="Optimization form defaults"
    )
    def get(self, request):
        payload = cached_manager_dashboard(timezone.localdate())
        if not payload['available']:
            return Response(
                {'error': 'Farm metrics are currently unavailable'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

        metrics = payload['metrics']
        return Response({
            'egg_production_rate': _percentage(metrics['egg_production_rate']),
            'feed_consumption': max(metrics['feed_consumption'], 0),
            'mortality_rate': _percentage(metrics['mortality_rate']),
            'number_of_birds': max(metrics['active_birds'], 1),
        })


class OptimizationHistoryAPIView(APIView):
    """
    Recent optimization requests of the current user.
    """
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        responses={200: OptimizationRequestSerializer(many=True)},
        summary="Optimization history"
    )
    def get(self, request):
        requests = OptimizationRequest.objects.filter(user=request.user)[:10]
        serializer = OptimizationRequestSerializer(requests, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)
