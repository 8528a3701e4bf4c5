import logging

from django.contrib.auth import get_user_model
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import filters, mixins, permissions, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import cache as page_cache
from . import services
from .api_docs import (
    AUTH_ERROR_RESPONSE,
    EGG_COLLECTION_EXAMPLES,
    INVITE_EXAMPLES,
    MORTALITY_EXAMPLES,
    SALE_EXAMPLES,
    VALIDATION_ERROR_RESPONSE,
    extend_schema_auth,
    extend_schema_list,
)
from .context import RequestContext
from .models import (
    EggCollection,
    FeedAllocation,
    FeedStock,
    FeedType,
    IssueReport,
    MortalityRecord,
    Sale,
    Task,
)
from .permissions import HasWriteRole, IsManager, IsManagerOrOwner, IsManagerOrReadOnly
from .serializers import (
    AcceptInvitationSerializer,
    EggCollectionSerializer,
    FeedAllocationSerializer,
    FeedStockSerializer,
    FeedTypeSerializer,
    InviteUserSerializer,
    IssueReportSerializer,
    MortalityRecordSerializer,
    PasswordUpdateSerializer,
    SaleSerializer,
    TaskProgressSerializer,
    TaskSerializer,
    UserProfileSerializer,
    UserSerializer,
    UserUpdateSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()

FIELD_STAFF = (User.ROLE_MANAGER, User.ROLE_WORKER)
SALES_STAFF = (User.ROLE_MANAGER, User.ROLE_SALES_REP)


# Auth & profile

@extend_schema_auth(
    summary='Get profile',
    description='Profile of the signed-in user.',
    responses={status.HTTP_200_OK: UserProfileSerializer},
    methods=['GET'],
)
@extend_schema_auth(
    summary='Update profile',
    description='Update the display name or notification preferences of the signed-in user.',
    request=UserProfileSerializer,
    responses={status.HTTP_200_OK: UserProfileSerializer},
    methods=['PATCH'],
)
class UserProfileView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserProfileSerializer

    def get(self, request, version=None):
        return Response(UserProfileSerializer(request.user).data)

    def patch(self, request, version=None):
        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
        return Response(serializer.data)


@extend_schema_auth(
    summary='Change password',
    request=PasswordUpdateSerializer,
    responses={status.HTTP_200_OK: OpenApiResponse(description='Password updated')},
)
class PasswordUpdateView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, version=None):
        serializer = PasswordUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        services.update_password(request.user, serializer.validated_data['password'])
        return Response({'detail': 'Password updated successfully.'})


@extend_schema_auth(
    summary='Accept invitation',
    description='Set a password for an invited account and activate it.',
    request=AcceptInvitationSerializer,
    responses={status.HTTP_200_OK: UserProfileSerializer},
)
class AcceptInvitationView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, version=None):
        serializer = AcceptInvitationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        user = services.accept_invitation(**serializer.validated_data)
        return Response(UserProfileSerializer(user).data)


# User management

@extend_schema_view(
    list=extend_schema_list(tags=['Users'], summary='List users'),
    retrieve=extend_schema(tags=['Users'], summary='Retrieve user'),
    create=extend_schema(
        tags=['Users'],
        summary='Invite user',
        description='Creates an inactive account and emails the invitee a link to set their password.',
        request=InviteUserSerializer,
        examples=INVITE_EXAMPLES,
        responses={status.HTTP_201_CREATED: UserSerializer, **VALIDATION_ERROR_RESPONSE, **AUTH_ERROR_RESPONSE},
    ),
    update=extend_schema(tags=['Users'], summary='Update user', request=UserUpdateSerializer),
    partial_update=extend_schema(tags=['Users'], summary='Partially update user', request=UserUpdateSerializer),
    destroy=extend_schema(tags=['Users'], summary='Delete user'),
)
class UserViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, IsManager]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['role', 'status', 'assigned_shed']
    search_fields = ['email', 'full_name']
    ordering_fields = ['full_name', 'email', 'created_at']

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return User.objects.none()
        return User.objects.all()

    def get_serializer_class(self):
        if self.action == 'create':
            return InviteUserSerializer
        if self.action in ('update', 'partial_update'):
            return UserUpdateSerializer
        return UserSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.invite_user(RequestContext.from_request(request), **serializer.validated_data)
        data = UserSerializer(user).data
        data['detail'] = 'Successfully sent invitation.'
        return Response(data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        user = self.get_object()
        serializer = self.get_serializer(user, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("[USERS] %s updated %s", request.user.email, user.email)
        return Response(UserSerializer(user).data)

    def perform_destroy(self, instance):
        services.delete_user(RequestContext.from_request(self.request), instance)


# Farm records

class FarmRecordViewSet(viewsets.ModelViewSet):
    """
    Shared behaviour for shed-scoped farm records. Writes go through
    services.save_record so the worker shed override and the attribution
    stamp are applied server-side.
    """
    permission_classes = [IsAuthenticated, HasWriteRole, IsManagerOrOwner]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    write_roles = FIELD_STAFF
    stamp_field = None
    has_shed = True

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return self.queryset.none()
        return self.queryset.all()

    def perform_create(self, serializer):
        services.save_record(
            RequestContext.from_request(self.request),
            serializer,
            stamp_field=self.stamp_field,
            has_shed=self.has_shed,
        )

    def perform_update(self, serializer):
        services.save_record(
            RequestContext.from_request(self.request),
            serializer,
            stamp_field=self.stamp_field,
            has_shed=self.has_shed,
        )

    def perform_destroy(self, instance):
        services.delete_record(RequestContext.from_request(self.request), instance)


@extend_schema_view(
    list=extend_schema_list(tags=['Egg Collection'], summary='List egg collections'),
    create=extend_schema(
        tags=['Egg Collection'],
        summary='Record egg collection',
        description='Crates and pieces are derived from total_eggs (30 eggs per crate).',
        examples=EGG_COLLECTION_EXAMPLES,
    ),
)
class EggCollectionViewSet(FarmRecordViewSet):
    queryset = EggCollection.objects.all()
    serializer_class = EggCollectionSerializer
    stamp_field = 'collected_by'
    filterset_fields = ['date', 'shed']
    search_fields = ['shed', 'collected_by']
    ordering_fields = ['date', 'created_at', 'total_eggs']


@extend_schema_view(
    list=extend_schema_list(tags=['Mortality'], summary='List mortality records'),
    create=extend_schema(
        tags=['Mortality'],
        summary='Record dead birds',
        description="Workers always record against their assigned shed.",
        examples=MORTALITY_EXAMPLES,
    ),
)
class MortalityRecordViewSet(FarmRecordViewSet):
    queryset = MortalityRecord.objects.all()
    serializer_class = MortalityRecordSerializer
    stamp_field = 'recorded_by'
    filterset_fields = ['date', 'shed', 'cause']
    search_fields = ['shed', 'cause', 'recorded_by']
    ordering_fields = ['date', 'created_at', 'count']


@extend_schema_view(
    list=extend_schema_list(tags=['Inventory'], summary='List feed allocations'),
    create=extend_schema(tags=['Inventory'], summary='Allocate feed to a shed'),
)
class FeedAllocationViewSet(FarmRecordViewSet):
    queryset = FeedAllocation.objects.all()
    serializer_class = FeedAllocationSerializer
    stamp_field = 'allocated_by'
    filterset_fields = ['date', 'shed', 'feed_type', 'unit']
    search_fields = ['shed', 'feed_type', 'allocated_by']
    ordering_fields = ['date', 'created_at', 'quantity_allocated']


@extend_schema_view(
    list=extend_schema_list(tags=['Inventory'], summary='List feed stock deliveries'),
    create=extend_schema(tags=['Inventory'], summary='Record feed stock'),
)
class FeedStockViewSet(FarmRecordViewSet):
    queryset = FeedStock.objects.all()
    serializer_class = FeedStockSerializer
    write_roles = (User.ROLE_MANAGER,)
    has_shed = False
    filterset_fields = ['date', 'feed_type', 'unit', 'supplier']
    search_fields = ['feed_type', 'supplier']
    ordering_fields = ['date', 'created_at', 'quantity']


@extend_schema_view(
    list=extend_schema_list(tags=['Sales'], summary='List sales'),
    create=extend_schema(
        tags=['Sales'],
        summary='Record sale',
        description='total_price is computed server-side as quantity x unit_price.',
        examples=SALE_EXAMPLES,
    ),
)
class SaleViewSet(FarmRecordViewSet):
    queryset = Sale.objects.all()
    serializer_class = SaleSerializer
    write_roles = SALES_STAFF
    stamp_field = 'recorded_by'
    has_shed = False
    filterset_fields = ['date', 'item_sold', 'customer_name']
    search_fields = ['item_sold', 'customer_name']
    ordering_fields = ['date', 'created_at', 'total_price']


@extend_schema_view(
    list=extend_schema(tags=['Inventory'], summary='List feed types'),
    create=extend_schema(tags=['Inventory'], summary='Add feed type'),
    destroy=extend_schema(tags=['Inventory'], summary='Remove feed type'),
)
class FeedTypeViewSet(mixins.ListModelMixin,
                      mixins.CreateModelMixin,
                      mixins.DestroyModelMixin,
                      viewsets.GenericViewSet):
    queryset = FeedType.objects.all()
    serializer_class = FeedTypeSerializer
    permission_classes = [IsAuthenticated, IsManagerOrReadOnly]
    pagination_class = None


@extend_schema_view(
    list=extend_schema_list(tags=['Inventory'], summary='List issue reports'),
    create=extend_schema(tags=['Inventory'], summary='Report an issue'),
)
class IssueReportViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         mixins.CreateModelMixin,
                         viewsets.GenericViewSet):
    serializer_class = IssueReportSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'category', 'shed']
    ordering_fields = ['created_at']

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return IssueReport.objects.none()
        queryset = IssueReport.objects.all()
        if not self.request.user.is_manager:
            queryset = queryset.filter(user=self.request.user)
        return queryset

    def perform_create(self, serializer):
        ctx = RequestContext.from_request(self.request)
        # Shed is optional here, but a worker's report still belongs to their shed
        if ctx.is_worker and ctx.assigned_shed:
            serializer.validated_data['shed'] = ctx.assigned_shed
        services.save_record(ctx, serializer, stamp_field='reported_by', has_shed=False)

    @extend_schema(tags=['Inventory'], summary='Mark issue resolved', request=None)
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsManager])
    def resolve(self, request, pk=None, version=None):
        issue = self.get_object()
        services.resolve_issue(RequestContext.from_request(request), issue)
        return Response(self.get_serializer(issue).data)


# Tasks

@extend_schema_view(
    list=extend_schema_list(tags=['Tasks'], summary='List tasks'),
    create=extend_schema(tags=['Tasks'], summary='Add task'),
    partial_update=extend_schema(
        tags=['Tasks'],
        summary='Update task',
        description='Managers can change every field; assignees can change status and notes.',
    ),
)
class TaskViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'assigned_to', 'due_date']
    search_fields = ['description', 'notes']
    ordering_fields = ['created_at', 'due_date', 'status']

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Task.objects.none()
        queryset = Task.objects.select_related('assigned_to')
        if not self.request.user.is_manager:
            queryset = queryset.filter(assigned_to=self.request.user)
        return queryset

    def get_serializer_class(self):
        if self.request is not None and getattr(self.request.user, 'role', None) != User.ROLE_MANAGER:
            return TaskProgressSerializer
        return TaskSerializer

    def check_permissions(self, request):
        super().check_permissions(request)
        if self.action in ('create', 'destroy', 'update') and not request.user.is_manager:
            self.permission_denied(request, message='Permission denied. Only managers can manage tasks.')

    def perform_create(self, serializer):
        services.save_record(
            RequestContext.from_request(self.request),
            serializer,
            has_shed=False,
            owner_field='created_by',
        )

    def perform_update(self, serializer):
        services.save_record(RequestContext.from_request(self.request), serializer, has_shed=False)

    def perform_destroy(self, instance):
        services.delete_record(RequestContext.from_request(self.request), instance)


# Misc

@extend_schema(
    tags=['Pages'],
    summary='Page versions',
    description='Version counter per page; a changed value means cached data for that page is stale.',
    responses={200: OpenApiResponse(description='Mapping of page name to version')},
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def page_versions(request, version=None):
    return Response(page_cache.page_versions())


class HealthViewSet(viewsets.ViewSet):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(tags=['Health'], summary='Liveness probe', responses={200: OpenApiResponse(description='ok')})
    @action(detail=False, methods=['get'])
    def ping(self, request, version=None):
        return Response({'status': 'ok', 'time': timezone.now().isoformat()})
