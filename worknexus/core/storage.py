"""
File storage abstraction layer supporting both local filesystem and AWS S3.

Used for identity verification documents. Local storage is the
development default; S3 is selected with USE_S3=true.
"""

import logging
import os
import uuid
from typing import BinaryIO
import boto3
from botocore.exceptions import ClientError
from worknexus.core.config import settings

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'pdf': 'application/pdf',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
}


def get_content_type(filename: str) -> str:
    """Determine content type based on file extension"""
    extension = filename.lower().rsplit('.', 1)[-1]
    return CONTENT_TYPES.get(extension, 'application/octet-stream')


class StorageError(Exception):
    """Raised when a storage backend cannot complete an operation."""


class StorageBackend:
    """Abstract base class for storage backends"""

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "documents") -> str:
        """Upload file and return storage path/URL"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "uploads"):
        self.base_dir = base_dir
        os.makedirs(self.base_dir, exist_ok=True)

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "documents") -> str:
        # Unique name prevents collisions and path traversal via the client filename
        unique_filename = f"{uuid.uuid4()}_{os.path.basename(filename)}"
        target_dir = os.path.join(self.base_dir, folder)
        os.makedirs(target_dir, exist_ok=True)
        file_path = os.path.join(target_dir, unique_filename)

        with open(file_path, "wb") as buffer:
            buffer.write(file.read())

        return file_path


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self):
        self.bucket_name = settings.S3_BUCKET_NAME

        # Without explicit keys boto3 falls back to IAM roles / instance profile
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION
            )
        else:
            self.s3_client = boto3.client('s3', region_name=settings.AWS_REGION)

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "documents") -> str:
        s3_key = f"{folder}/{uuid.uuid4()}_{os.path.basename(filename)}"

        try:
            self.s3_client.upload_fileobj(
                file,
                self.bucket_name,
                s3_key,
                ExtraArgs={
                    'ContentType': get_content_type(filename),
                    'ServerSideEncryption': 'AES256'
                }
            )
            return f"s3://{self.bucket_name}/{s3_key}"

        except ClientError as e:
            logger.error(f"Error uploading to S3: {e}")
            raise StorageError(f"Failed to upload file to S3: {e}") from e


def get_storage() -> StorageBackend:
    """Get storage backend based on USE_S3 setting"""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage(settings.LOCAL_UPLOAD_DIR)


# Singleton instance
storage = get_storage()
