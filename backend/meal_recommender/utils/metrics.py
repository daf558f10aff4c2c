"""Prometheus metrics configuration"""

from prometheus_client import Counter, Histogram, Info
from prometheus_fastapi_instrumentator import Instrumentator
from typing import Callable
import time
from functools import wraps

# Application info
app_info = Info('meal_recommendations', 'Meal Recommendations Service Information')
app_info.info({
    'version': '1.0.0',
    'service': 'recommendations'
})

# Recommendation metrics
recommendations_generated_total = Counter(
    'recommendations_generated_total',
    'Total recipes recommended',
    ['algorithm']
)

recommendation_generation_duration_seconds = Histogram(
    'recommendation_generation_duration_seconds',
    'Time taken to score and rank recipes',
    ['algorithm']
)

preference_fallbacks_total = Counter(
    'preference_fallbacks_total',
    'Preference requests answered by the random fallback'
)

# Cooking history metrics
cooking_events_logged_total = Counter(
    'cooking_events_logged_total',
    'Total cooking events appended',
    ['rated']
)

# Recommendation log metrics
recommendation_log_rows_total = Counter(
    'recommendation_log_rows_total',
    'Recommendation log rows by outcome',
    ['outcome']  # written, failed
)


def setup_metrics(app):
    """
    Setup Prometheus metrics for FastAPI app

    Args:
        app: FastAPI application instance
    """
    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", "/health"],
        env_var_name="ENABLE_METRICS",
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True
    )

    instrumentator.instrument(app).expose(app, endpoint="/metrics")

    return instrumentator


def track_recommendation_time(func: Callable):
    """
    Decorator to track recommendation generation time

    The wrapped method must take the algorithm as its second parameter
    after ``self`` or as the ``algorithm`` keyword.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        algorithm = kwargs.get("algorithm", args[2] if len(args) > 2 else "unknown")
        start_time = time.time()
        try:
            return func(*args, **kwargs)
        finally:
            duration = time.time() - start_time
            recommendation_generation_duration_seconds.labels(
                algorithm=getattr(algorithm, "value", str(algorithm))
            ).observe(duration)

    return wrapper


def record_recommendation(algorithm: str, count: int = 1):
    """Record recommendation generation"""
    recommendations_generated_total.labels(algorithm=algorithm).inc(count)


def record_preference_fallback():
    preference_fallbacks_total.inc()


def record_cooking_event(rated: bool):
    """Record cooking event creation"""
    cooking_events_logged_total.labels(rated=str(rated).lower()).inc()


def record_recommendation_log(outcome: str, count: int = 1):
    """Record recommendation log rows written or failed"""
    recommendation_log_rows_total.labels(outcome=outcome).inc(count)
