"""
Farm settings: farm configuration, birds per shed and notification preferences.
"""
import logging

from django.db import DatabaseError
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from . import services
from .models import SHEDS, FarmConfig, ShedBirdCount
from .serializers import (
    BirdsPerShedSerializer,
    FarmConfigSerializer,
    NotificationPreferencesSerializer,
    ShedBirdCountSerializer,
)

logger = logging.getLogger(__name__)

MANAGER_ONLY_MESSAGE = 'Permission denied. Only managers can update farm settings.'


def _birds_per_shed():
    counts = {entry.shed: entry.count for entry in ShedBirdCount.objects.all()}
    sheds = list(SHEDS) + sorted(shed for shed in counts if shed not in SHEDS)
    return [{'shed': shed, 'count': counts.get(shed, 0)} for shed in sheds]


def _manager_required(request):
    if not request.user.is_manager:
        return Response({'detail': MANAGER_ONLY_MESSAGE}, status=status.HTTP_403_FORBIDDEN)
    return None


@extend_schema(
    tags=['Settings'],
    summary='Settings overview',
    responses={
        200: OpenApiResponse(description='Farm configuration, birds per shed and notification preferences'),
        503: OpenApiResponse(description='Settings could not be loaded'),
    },
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def settings_overview(request, version=None):
    try:
        payload = {
            'farm': FarmConfigSerializer(FarmConfig.load()).data,
            'birds_per_shed': _birds_per_shed(),
            'notifications': NotificationPreferencesSerializer(request.user).data,
            'can_edit_farm': request.user.is_manager,
        }
    except DatabaseError as e:
        logger.exception("Failed to load settings")
        return Response(
            {'error': f"Could not load farm settings: {e}"},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response(payload)


@extend_schema(
    tags=['Settings'],
    summary='Farm configuration',
    request=FarmConfigSerializer,
    responses={200: FarmConfigSerializer, 400: OpenApiResponse(description='Invalid form data')},
)
@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def farm_configuration(request, version=None):
    config = FarmConfig.load()
    if request.method == 'GET':
        return Response(FarmConfigSerializer(config).data)

    denied = _manager_required(request)
    if denied:
        return denied

    serializer = FarmConfigSerializer(config, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    serializer.save()
    logger.info("[SETTINGS] farm configuration updated by %s", request.user.email)
    return Response(serializer.data)


@extend_schema(
    tags=['Settings'],
    summary='Birds per shed',
    description='Saving replaces every shed count and sets the farm starting bird count to their sum.',
    request=BirdsPerShedSerializer,
    responses={200: ShedBirdCountSerializer(many=True)},
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def birds_per_shed(request, version=None):
    if request.method == 'GET':
        return Response({
            'sheds': _birds_per_shed(),
            'initial_bird_count': FarmConfig.load().initial_bird_count,
        })

    denied = _manager_required(request)
    if denied:
        return denied

    serializer = BirdsPerShedSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    config = services.save_birds_per_shed(serializer.validated_data['sheds'])
    logger.info("[SETTINGS] birds per shed updated by %s, total %s", request.user.email, config.initial_bird_count)
    return Response({
        'sheds': _birds_per_shed(),
        'initial_bird_count': config.initial_bird_count,
    })


@extend_schema(
    tags=['Settings'],
    summary='Notification preferences',
    request=NotificationPreferencesSerializer,
    responses={200: NotificationPreferencesSerializer},
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def notification_preferences(request, version=None):
    if request.method == 'GET':
        return Response(NotificationPreferencesSerializer(request.user).data)

    serializer = NotificationPreferencesSerializer(request.user, data=request.data, partial=True)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    serializer.save()
    return Response(serializer.data)
