# apps/reviews/tasks.py
from botocore.exceptions import ClientError, BotoCoreError
from celery import shared_task
from celery.utils.log import get_task_logger
from .images import ReviewImageService

logger = get_task_logger(__name__)


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=30,
    queue="default",
)
def delete_review_image(self, key):
    """
    Removes an image that was replaced or whose review was deleted.
    """
    try:
        ReviewImageService.delete(key)
    except (ClientError, BotoCoreError) as e:
        logger.warning(f"Image delete failed for {key}: {e}. Retrying...")
        raise self.retry(exc=e)
