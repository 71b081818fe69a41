# core/storage/s3.py
"""
S3 storage for generated list images.

The bucket is private. Images are served through routes that redirect to
short-lived presigned URLs.
"""

import logging
import threading
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from core import config

logger = logging.getLogger(__name__)

IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"

_client = None
_client_lock = threading.Lock()


class StorageError(Exception):
    """Raised when an object storage call fails."""


def get_client():
    """Return the process-wide S3 client, creating it on first use."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = boto3.client(
                    "s3",
                    region_name=config.AWS_REGION,
                    endpoint_url=config.S3_ENDPOINT_URL,
                    config=Config(signature_version="s3v4"),
                )
    return _client


def reset_client() -> None:
    global _client
    with _client_lock:
        _client = None


def image_key(list_id: str, version: int, variant: str) -> str:
    return f"lists/{list_id}/v{version}/{variant}.png"


def upload_image(key: str, data: bytes, bucket: Optional[str] = None) -> str:
    """Upload a PNG.

    Args:
        key: Object key, e.g. "lists/<id>/v2/og.png"
        data: PNG bytes
        bucket: Override for the configured bucket

    Returns:
        The key that was written

    Raises:
        StorageError: If the upload fails
    """
    try:
        get_client().put_object(
            Bucket=bucket or config.S3_BUCKET,
            Key=key,
            Body=data,
            ContentType="image/png",
            CacheControl=IMMUTABLE_CACHE_CONTROL,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Failed to upload {key}: {e}")
        raise StorageError(f"Failed to upload {key}") from e
    logger.info(f"Uploaded {key} ({len(data)} bytes)")
    return key


def get_signed_image_url(key: str, expires_in: int = config.URL_EXPIRY_SECONDS,
                         bucket: Optional[str] = None) -> str:
    """Presign a GET for an object.

    Raises:
        StorageError: If the URL cannot be generated
    """
    try:
        return get_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket or config.S3_BUCKET, "Key": key},
            ExpiresIn=expires_in,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Failed to presign {key}: {e}")
        raise StorageError(f"Failed to presign {key}") from e
