from django.contrib import admin
from .models import OptimizationRequest


@admin.register(OptimizationRequest)
class OptimizationRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'number_of_birds', 'egg_production_rate', 'mortality_rate', 'suggestions_preview', 'created_at']
    list_filter = ['model_used', 'created_at']
    search_fields = ['user__email', 'suggestions']
    readonly_fields = ['id', 'created_at', 'response_time_ms', 'tokens_used']

    def suggestions_preview(self, obj):
        return obj.suggestions[:100] + '...' if len(obj.suggestions) > 100 else obj.suggestions
    suggestions_preview.short_description = 'Suggestions'
