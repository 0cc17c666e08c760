"""S3 service for storing uploaded pictures and portfolio media"""

import logging
import re
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from tradehub.config import Settings

logger = logging.getLogger(__name__)


class S3ServiceError(Exception):
    """Base exception for S3 service errors"""
    pass


class S3ConnectionError(S3ServiceError):
    """S3 connection error"""
    pass


class InvalidFileTypeError(S3ServiceError):
    """Invalid file type error"""
    pass


class FileTooLargeError(S3ServiceError):
    """File too large error"""
    pass


@dataclass
class FileUpload:
    """An uploaded file read into memory"""
    filename: str
    content_type: Optional[str]
    body: bytes

    @property
    def size(self) -> int:
        return len(self.body)


class S3Service:
    """Service for S3 operations: validates an upload and stores it under a time-prefixed key"""

    ALLOWED_MIME_TYPES = {"image/jpeg", "image/png", "image/webp"}
    EXTENSION_MIME_TYPES = {
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".webp": "image/webp",
    }

    def __init__(self, settings: Settings):
        """Initialize S3 client; uploads are single-attempt"""
        self.bucket = settings.s3_bucket
        self.region = settings.aws_region
        self.endpoint_url = settings.aws_endpoint_url
        self.max_file_size = settings.max_upload_size_mb * 1024 * 1024

        retry_config = Config(
            retries={
                "max_attempts": 1,
                "mode": "standard",
            },
            connect_timeout=5,
            read_timeout=10,
        )

        client_kwargs = {
            "region_name": settings.aws_region,
            "config": retry_config,
        }

        # Add credentials if provided (not needed for IAM roles)
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
            client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key

        # Use custom endpoint for local development (MinIO)
        if settings.aws_endpoint_url:
            client_kwargs["endpoint_url"] = settings.aws_endpoint_url

        try:
            self.s3_client = boto3.client("s3", **client_kwargs)
            logger.info(f"S3 client initialized for bucket: {self.bucket}")
        except Exception as e:
            logger.error(f"Failed to initialize S3 client: {e}")
            raise S3ConnectionError(f"Failed to initialize S3 client: {e}")

    def resolve_content_type(self, upload: FileUpload) -> str:
        """
        Content type of an upload.

        Some mobile clients send application/octet-stream, so the filename
        extension is used when the declared type is not an allowed image type.

        Raises:
            InvalidFileTypeError: If neither the declared type nor the extension is allowed
        """
        content_type = (upload.content_type or "").lower()
        if content_type in self.ALLOWED_MIME_TYPES:
            return content_type

        extension = PurePath(upload.filename or "").suffix.lower()
        if extension in self.EXTENSION_MIME_TYPES:
            return self.EXTENSION_MIME_TYPES[extension]

        raise InvalidFileTypeError(
            f"File type of '{upload.filename}' not allowed. Upload a JPEG, PNG or WebP image."
        )

    def validate_file(self, upload: FileUpload) -> str:
        """
        Validate file size and type.

        Returns:
            The resolved content type

        Raises:
            FileTooLargeError: If file is empty or exceeds maximum size
            InvalidFileTypeError: If the type is not allowed
        """
        if upload.size == 0:
            raise FileTooLargeError(f"File '{upload.filename}' is empty")

        if upload.size > self.max_file_size:
            raise FileTooLargeError(
                f"File size {upload.size} bytes exceeds maximum of {self.max_file_size} bytes"
            )

        return self.resolve_content_type(upload)

    def generate_s3_key(self, folder: str, filename: str) -> str:
        """
        Generate S3 key following the structure:
        {folder}/{epoch_millis}-{filename}

        The time prefix keeps repeated uploads of the same filename apart.
        """
        safe_name = re.sub(r"[^A-Za-z0-9._-]+", "-", PurePath(filename or "upload").name).strip("-")
        return f"{folder}/{int(time.time() * 1000)}-{safe_name or 'upload'}"

    def object_url(self, s3_key: str) -> str:
        """Public URL of an object"""
        if self.endpoint_url:
            # For local development with MinIO
            return f"{self.endpoint_url}/{self.bucket}/{s3_key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{s3_key}"

    def upload_bytes(
        self, file_bytes: bytes, s3_key: str, content_type: str = "application/octet-stream"
    ) -> str:
        """
        Upload bytes to S3.

        Args:
            file_bytes: Bytes to upload
            s3_key: S3 key for the object
            content_type: Content type of the file

        Returns:
            S3 URL of uploaded object

        Raises:
            S3ConnectionError: If upload fails
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=s3_key,
                Body=file_bytes,
                ContentType=content_type,
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"Error uploading bytes: {error_code} - {e}")
            raise S3ConnectionError(f"Failed to upload bytes: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error uploading bytes: {e}")
            raise S3ConnectionError(f"Failed to upload bytes: {str(e)}")

        s3_url = self.object_url(s3_key)
        logger.info(f"Uploaded {len(file_bytes)} bytes to {s3_url}")
        return s3_url

    def store(self, upload: FileUpload, folder: str = "uploads") -> str:
        """
        Validate and store an upload.

        Args:
            upload: File read from the request
            folder: Key prefix grouping uploads of one kind

        Returns:
            Public URL of the stored object
        """
        content_type = self.validate_file(upload)
        s3_key = self.generate_s3_key(folder, upload.filename)
        return self.upload_bytes(upload.body, s3_key, content_type=content_type)
