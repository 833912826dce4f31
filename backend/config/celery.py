# config/celery.py
import os
import logging
from celery import Celery
from celery.schedules import crontab
from celery.signals import before_task_publish, task_prerun, task_postrun, task_failure
from kombu import Queue

# Set default settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('config')
app.config_from_object('django.conf:settings', namespace='CELERY')

# ------------------------------------------------------------------------------
# RELIABILITY: Queue Definitions
# ------------------------------------------------------------------------------
app.conf.task_queues = (
    Queue('default', routing_key='default'),
)

app.conf.task_default_queue = 'default'
app.conf.task_default_exchange = 'default'
app.conf.task_default_routing_key = 'default'

# Worker Reliability Defaults
app.conf.task_acks_late = True
app.conf.worker_prefetch_multiplier = 1
app.conf.task_reject_on_worker_lost = True
app.conf.broker_connection_retry_on_startup = True

app.autodiscover_tasks()

# ------------------------------------------------------------------------------
# TRACING: Propagate Request ID from Web to Worker
# ------------------------------------------------------------------------------
from apps.core.middleware import get_correlation_id, set_correlation_id, reset_correlation_id  # noqa: E402

_task_tokens = {}


@before_task_publish.connect
def transfer_correlation_id(headers=None, **kwargs):
    if headers is None:
        return
    request_id = get_correlation_id()
    if request_id:
        headers['X-Request-ID'] = request_id


@task_prerun.connect
def restore_correlation_id(task_id=None, task=None, **kwargs):
    request_id = (task.request.headers or {}).get('X-Request-ID') if task else None
    if request_id:
        _task_tokens[task_id] = set_correlation_id(request_id)


@task_postrun.connect
def clear_correlation_id(task_id=None, **kwargs):
    token = _task_tokens.pop(task_id, None)
    if token is not None:
        reset_correlation_id(token)

# ------------------------------------------------------------------------------
# DB HARDENING
# ------------------------------------------------------------------------------
@task_prerun.connect
def close_old_connections(**kwargs):
    """
    Prevents 'connection already closed' errors with PgBouncer/Docker.
    """
    from django.db import close_old_connections
    close_old_connections()

# ------------------------------------------------------------------------------
# DEAD LETTER LOGGING
# ------------------------------------------------------------------------------
logger = logging.getLogger('celery.dlq')


@task_failure.connect
def handle_task_failure(sender=None, task_id=None, exception=None, args=None, kwargs=None, traceback=None, **opts):
    task_name = sender.name if sender else 'unknown_task'
    logger.critical(
        f"[DLQ] Task Failed Permanently: {task_name} (ID: {task_id})",
        extra={
            'metadata': {
                'task_name': task_name,
                'task_id': task_id,
                'args': args,
                'kwargs': kwargs,
                'exception': str(exception),
            }
        }
    )

# ------------------------------------------------------------------------------
# BEAT SCHEDULE
# ------------------------------------------------------------------------------
app.conf.beat_schedule = {
    'geocode-missing-reviews-nightly': {
        'task': 'apps.locations.tasks.bulk_geocode_reviews',
        'schedule': crontab(hour=3, minute=0),
    },
}

app.conf.task_routes = {
    'apps.reviews.tasks.*': {'queue': 'default'},
    'apps.locations.tasks.*': {'queue': 'default'},
}
