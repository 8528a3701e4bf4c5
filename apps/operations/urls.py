from django.http import JsonResponse
from django.urls import include, path
from django.views.decorators.csrf import ensure_csrf_cookie
from rest_framework.routers import DefaultRouter

from .authentication import (
    CookieTokenLogoutView,
    CookieTokenObtainPairView,
    CookieTokenRefreshView,
)
from .views import (
    AcceptInvitationView,
    EggCollectionViewSet,
    FeedAllocationViewSet,
    FeedStockViewSet,
    FeedTypeViewSet,
    HealthViewSet,
    IssueReportViewSet,
    MortalityRecordViewSet,
    PasswordUpdateView,
    SaleViewSet,
    TaskViewSet,
    UserProfileView,
    UserViewSet,
    page_versions,
)
from .views_dashboard import dashboard
from .views_reports import report
from .views_settings import (
    birds_per_shed,
    farm_configuration,
    notification_preferences,
    settings_overview,
)

router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')
router.register(r'egg-collections', EggCollectionViewSet, basename='egg-collection')
router.register(r'mortality', MortalityRecordViewSet, basename='mortality')
router.register(r'feed-stock', FeedStockViewSet, basename='feed-stock')
router.register(r'feed-allocations', FeedAllocationViewSet, basename='feed-allocation')
router.register(r'feed-types', FeedTypeViewSet, basename='feed-type')
router.register(r'issue-reports', IssueReportViewSet, basename='issue-report')
router.register(r'sales', SaleViewSet, basename='sale')
router.register(r'tasks', TaskViewSet, basename='task')
router.register(r'health', HealthViewSet, basename='health')


@ensure_csrf_cookie
def csrf_view(request, version=None):
    return JsonResponse({'detail': 'CSRF cookie set'})


urlpatterns = [
    path('auth/csrf/', csrf_view, name='csrf'),
    path('auth/login/', CookieTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/logout/', CookieTokenLogoutView.as_view(), name='token_logout'),
    path('auth/profile/', UserProfileView.as_view(), name='profile'),
    path('auth/password/', PasswordUpdateView.as_view(), name='password_update'),
    path('auth/invitations/accept/', AcceptInvitationView.as_view(), name='accept_invitation'),

    path('dashboard/', dashboard, name='dashboard'),
    path('reports/', report, name='report'),
    path('pages/versions/', page_versions, name='page_versions'),

    path('settings/', settings_overview, name='settings'),
    path('settings/farm/', farm_configuration, name='farm_configuration'),
    path('settings/birds-per-shed/', birds_per_shed, name='birds_per_shed'),
    path('settings/notifications/', notification_preferences, name='notification_preferences'),

    path('', include(router.urls)),
]
