"""
URL configuration for the farm operations backend.

All API routes live under ``api/<version>/`` (URLPathVersioning); the AI
routes are registered first so ``api/v1/ai/`` is not captured by the
versioned include.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    # Admin site
    path('admin/', admin.site.urls),

    # AI routes
    path('api/v1/ai/', include('apps.ai.urls')),

    # API schema & docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # API routes (URLPathVersioning)
    path('api/<str:version>/', include('apps.operations.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
