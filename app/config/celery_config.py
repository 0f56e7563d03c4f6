"""Celery configuration for the storefront's background tasks."""
import os

# Email delivery and the abandoned-order sweep share the Redis broker.
broker_url = os.getenv('CELERY_BROKER_URL', 'redis://localhost:6379/0')
result_backend = os.getenv('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0')

task_serializer = 'json'
accept_content = ['json']
result_serializer = 'json'
timezone = 'UTC'
enable_utc = True

# Confirmation emails are deduplicated in Redis, so redelivery after a crash is safe.
task_acks_late = True
task_reject_on_worker_lost = True

# Nothing reads task results beyond debugging.
result_expires = 3600

ABANDONED_ORDER_SWEEP_SECONDS = 1800.0

beat_schedule = {
    'cancel-abandoned-orders': {
        'task': 'app.tasks.order_tasks.cancel_abandoned_orders',
        'schedule': ABANDONED_ORDER_SWEEP_SECONDS,
    },
}
