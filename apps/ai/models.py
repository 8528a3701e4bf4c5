import uuid
from django.db import models
from django.conf import settings


class OptimizationRequest(models.Model):
    """
    One request for farm optimization suggestions.
    Stores the metrics sent to the language model and what came back.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='optimization_requests')
    created_at = models.DateTimeField(auto_now_add=True)

    # Submitted metrics
    egg_production_rate = models.DecimalField(max_digits=5, decimal_places=2)
    feed_consumption = models.DecimalField(max_digits=10, decimal_places=2)
    mortality_rate = models.DecimalField(max_digits=5, decimal_places=2)
    number_of_birds = models.PositiveIntegerField()

    suggestions = models.TextField()

    # AI metadata
    model_used = models.CharField(max_length=50, null=True, blank=True)
    tokens_used = models.IntegerField(null=True, blank=True)
    response_time_ms = models.IntegerField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='optreq_user_created_idx'),
        ]

    def __str__(self):
        return f"Optimization {self.id} - {self.user.email}"
