# apps/reviews/images.py
import uuid
import logging
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from django.conf import settings

from apps.utils.exceptions import BusinessLogicException

logger = logging.getLogger(__name__)

IMAGE_KINDS = ("before", "after")

ALLOWED_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}

MIN_IMAGE_BYTES = 100
KEY_PREFIX = "reviews/"


def _client():
    return boto3.client(
        "s3",
        endpoint_url=settings.AWS_S3_ENDPOINT_URL or None,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        region_name=settings.AWS_S3_REGION_NAME,
    )


def _bucket():
    bucket_name = settings.AWS_STORAGE_BUCKET_NAME
    if not bucket_name:
        raise BusinessLogicException("Storage configuration missing", code="config_error")
    return bucket_name


class ReviewImageService:
    """
    Before/after photos live in an S3 compatible bucket (Cloudflare R2).
    Browsers upload directly with a presigned POST; the API only stores keys.
    """

    @staticmethod
    def is_review_key(key):
        return isinstance(key, str) and key.startswith(KEY_PREFIX) and ".." not in key

    @staticmethod
    def generate_presigned_post(kind, content_type):
        """
        Enforces:
        1. Known image slot (before/after)
        2. File Size Limit (REVIEW_IMAGE_MAX_BYTES, 5MB)
        3. JPEG/PNG/WebP Content-Type
        """
        if kind not in IMAGE_KINDS:
            raise BusinessLogicException("Unknown image type", code="invalid_image_kind")
        if content_type not in ALLOWED_TYPES:
            raise BusinessLogicException("Unsupported file type", code="unsupported_file_type")

        bucket_name = _bucket()
        object_name = f"{KEY_PREFIX}{kind}/{uuid.uuid4().hex}{ALLOWED_TYPES[content_type]}"

        try:
            response = _client().generate_presigned_post(
                Bucket=bucket_name,
                Key=object_name,
                Fields={
                    'Content-Type': content_type,
                },
                Conditions=[
                    ['content-length-range', MIN_IMAGE_BYTES, settings.REVIEW_IMAGE_MAX_BYTES],
                    {'Content-Type': content_type}
                ],
                ExpiresIn=300
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 Presign Error: {e}")
            raise BusinessLogicException("Storage service unavailable", code="storage_unavailable")

        return {
            "post_data": response,
            "key": object_name,
            "public_url": ReviewImageService.public_url(object_name),
        }

    @staticmethod
    def validate_upload(key):
        """
        Checks that the object exists and matches the upload policy.
        Objects that fail the check are removed from the bucket.
        """
        if not ReviewImageService.is_review_key(key):
            raise BusinessLogicException("Invalid image key", code="invalid_image_key")

        bucket_name = _bucket()
        s3_client = _client()
        try:
            head_response = s3_client.head_object(Bucket=bucket_name, Key=key)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            if error_code in ("404", "NoSuchKey", "NotFound"):
                raise BusinessLogicException("Image not found. Please upload again.", code="image_not_found")
            logger.error(f"S3 Validation Error for {key}: {e}")
            raise BusinessLogicException("Unable to validate image upload", code="storage_unavailable")

        size = head_response.get("ContentLength", 0)
        content_type = head_response.get("ContentType", "")

        if size < MIN_IMAGE_BYTES or size > settings.REVIEW_IMAGE_MAX_BYTES:
            s3_client.delete_object(Bucket=bucket_name, Key=key)
            raise BusinessLogicException("Image must be between 100 bytes and 5 MB", code="invalid_image_size")

        if content_type not in ALLOWED_TYPES:
            logger.warning(f"Rejected upload {key} with content type {content_type}")
            s3_client.delete_object(Bucket=bucket_name, Key=key)
            raise BusinessLogicException("Only JPEG, PNG and WebP images are allowed", code="unsupported_file_type")

        return {"key": key, "size": size, "content_type": content_type}

    @staticmethod
    def delete(key):
        if not ReviewImageService.is_review_key(key):
            return
        _client().delete_object(Bucket=_bucket(), Key=key)
        logger.info(f"Deleted review image {key}")

    @staticmethod
    def public_url(key):
        if not key:
            return None
        if settings.R2_PUBLIC_URL:
            return f"{settings.R2_PUBLIC_URL.rstrip('/')}/{key}"
        try:
            return _client().generate_presigned_url(
                "get_object",
                Params={"Bucket": _bucket(), "Key": key},
                ExpiresIn=3600,
            )
        except (ClientError, BotoCoreError, BusinessLogicException) as e:
            logger.error(f"Could not build URL for {key}: {e}")
            return None
