"""
Farm Optimization Service
Sends current farm metrics to OpenAI and returns management suggestions.
"""
import logging
import time
from typing import Dict

from django.conf import settings
from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)


class OptimizationServiceError(Exception):
    """The language model call failed or returned nothing usable."""


class FarmOptimizerService:
    """
    Service class for farm optimization suggestions.
    One completion per request; failures are raised, never retried.
    """

    def __init__(self, client=None):
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)
        self.model = settings.OPENAI_MODEL

    def build_prompt(self, metrics: Dict) -> str:
        """
        Build the user prompt from the submitted farm metrics.
        """
        return f"""You are an expert in poultry farm management. Analyze the following farm data and provide specific, actionable suggestions to optimize operations.

Current Farm Data:
- Egg Production Rate: {metrics['egg_production_rate']}%
- Feed Consumption: {metrics['feed_consumption']} bags per day
- Mortality Rate: {metrics['mortality_rate']}%
- Number of Birds: {metrics['number_of_birds']}

Provide suggestions on:
1. Feed optimization
2. Improving egg production
3. Reducing mortality

Keep each suggestion practical for a small to medium layer farm."""

    def suggest(self, metrics: Dict) -> Dict:
        """
        Get optimization suggestions for the given metrics.

        Returns:
            {
                'suggestions': str,
                'model_used': str,
                'tokens_used': int,
                'response_time_ms': int
            }
        """
        start_time = time.time()

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You give concise, practical advice to poultry farm managers."},
                    {"role": "user", "content": self.build_prompt(metrics)},
                ],
                temperature=0.7,
                max_tokens=700
            )
        except OpenAIError as e:
            logger.error("Optimization request to %s failed: %s", self.model, e)
            raise OptimizationServiceError(str(e)) from e

        suggestions = (response.choices[0].message.content or '').strip()
        if not suggestions:
            raise OptimizationServiceError('The model returned no suggestions.')

        usage = getattr(response, 'usage', None)
        return {
            'suggestions': suggestions,
            'model_used': self.model,
            'tokens_used': usage.total_tokens if usage else 0,
            'response_time_ms': int((time.time() - start_time) * 1000),
        }
