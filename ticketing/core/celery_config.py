from celery import Celery

from ticketing.core.config import get_celery_broker_url

CONFIRMATION_QUEUE = "confirmations"


def make_celery(app_name: str = "ticketing") -> Celery:
    """Celery app for post-purchase work.

    Confirmations are fire-and-forget, so there is no result backend.
    """
    celery = Celery(app_name, broker=get_celery_broker_url(), include=["ticketing.tasks"])
    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        task_ignore_result=True,
        # Redeliver a confirmation if the worker dies mid-task
        task_acks_late=True,
        task_routes={"ticketing.tasks.send_purchase_confirmation_task": {"queue": CONFIRMATION_QUEUE}},
        broker_connection_retry_on_startup=True,
    )
    return celery


celery_app = make_celery()
