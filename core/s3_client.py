# core/s3_client.py

import re
import uuid
from typing import Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.config import settings
from core.logging_config import logger


def get_s3() -> Tuple[boto3.client, str, str]:
    """
    Get S3 client, bucket name, and region.
    Returns: (s3_client, bucket_name, region)
    Raises RuntimeError if AWS credentials are missing.
    """
    key = settings.AWS_ACCESS_KEY_ID
    secret = settings.AWS_SECRET_ACCESS_KEY
    bucket = settings.AWS_BUCKET_NAME
    region = settings.AWS_REGION

    if not all([key, secret, bucket]):
        raise RuntimeError("Missing AWS credentials")

    client = boto3.client(
        "s3",
        aws_access_key_id=key,
        aws_secret_access_key=secret,
        region_name=region,
    )

    return client, bucket, region


# -----------------------------------------------------
# Filename sanitizer
# -----------------------------------------------------
def safe_filename(filename: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", filename or "file")


def build_object_key(folder: str, owner_id: str, filename: str) -> str:
    """folder/owner/<random>-<filename>; the prefix keeps re-uploads from colliding."""
    return f"{folder}/{owner_id}/{uuid.uuid4().hex[:12]}-{safe_filename(filename)}"


def upload_bytes(key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
    """
    Store a blob and return its URL.
    Storage failures surface as RuntimeError for the route to translate.
    """
    s3, bucket, region = get_s3()

    try:
        s3.put_object(
            Bucket=bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
    except (ClientError, BotoCoreError) as e:
        logger.error(f"S3 upload failed for {key}: {e}")
        raise RuntimeError(f"Upload failed: {e}") from e

    logger.info(f"Uploaded {len(data)} bytes to s3://{bucket}/{key}")
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"
