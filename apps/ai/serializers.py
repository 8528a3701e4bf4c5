from decimal import Decimal

from rest_framework import serializers
from .models import OptimizationRequest


class OptimizationInputSerializer(serializers.Serializer):
    """Farm metrics submitted for suggestions"""
    egg_production_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'),
        help_text='Percentage of birds laying today (0-100)'
    )
    feed_consumption = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'),
        help_text='Feed used per day, in bags'
    )
    mortality_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'),
        help_text='Mortality rate over the last 30 days (0-100)'
    )
    number_of_birds = serializers.IntegerField(min_value=1)


class OptimizationResultSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    suggestions = serializers.CharField()
    model_used = serializers.CharField()
    tokens_used = serializers.IntegerField()
    response_time_ms = serializers.IntegerField()


class OptimizationRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = OptimizationRequest
        fields = [
            'id', 'created_at', 'egg_production_rate', 'feed_consumption',
            'mortality_rate', 'number_of_birds', 'suggestions',
            'model_used', 'tokens_used', 'response_time_ms'
        ]
        read_only_fields = fields
