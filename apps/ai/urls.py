from django.urls import path
from .views import OptimizeAPIView, OptimizeDefaultsAPIView, OptimizationHistoryAPIView

urlpatterns = [
    path('optimize/', OptimizeAPIView.as_view(), name='ai-optimize'),
    path('optimize/defaults/', OptimizeDefaultsAPIView.as_view(), name='ai-optimize-defaults'),
    path('optimize/history/', OptimizationHistoryAPIView.as_view(), name='ai-optimize-history'),
]
