"""Central Celery app factory and configuration binding."""
from __future__ import annotations

from celery import Celery

from app.config.settings import settings
from app.config import celery_config as cfg


def create_celery_app() -> Celery:
    app = Celery("kitchen_storefront")

    # Core broker/backend
    app.conf.broker_url = settings.CELERY_BROKER_URL or cfg.broker_url
    app.conf.result_backend = settings.CELERY_RESULT_BACKEND or cfg.result_backend

    app.conf.update(
        task_serializer=cfg.task_serializer,
        accept_content=cfg.accept_content,
        result_serializer=cfg.result_serializer,
        timezone=cfg.timezone,
        enable_utc=cfg.enable_utc,
        task_acks_late=cfg.task_acks_late,
        task_reject_on_worker_lost=cfg.task_reject_on_worker_lost,
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
        result_expires=cfg.result_expires,
    )

    app.conf.beat_schedule = cfg.beat_schedule  # type: ignore

    app.autodiscover_tasks(["app.tasks"], related_name="notification_tasks")
    app.autodiscover_tasks(["app.tasks"], related_name="order_tasks")

    return app


celery_app = create_celery_app()
