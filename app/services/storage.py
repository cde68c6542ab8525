import logging
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class StorageAdapter(ABC):
    """Key-in, URL-out contract for lesson and video assets."""

    @abstractmethod
    def put(self, key: str, data: bytes) -> str:
        ...

    @abstractmethod
    def url(self, key: str) -> str:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    def resolve(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None
        if key.startswith(("http://", "https://")):
            return key
        return self.url(key)


class LocalStorage(StorageAdapter):

    def __init__(self, root: str = None, public_url: str = None):
        self.root = Path(root or settings.STORAGE_LOCAL_ROOT)
        self.public_url = (public_url or settings.STORAGE_PUBLIC_URL).rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageError(f"Invalid storage key: {key}")
        return path

    def put(self, key: str, data: bytes) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Stored {len(data)} bytes at {key}")
        return key

    def url(self, key: str) -> str:
        return f"{self.public_url}/{key.lstrip('/')}"

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()
            logger.info(f"Deleted {key}")


class S3Storage(StorageAdapter):

    def __init__(self, bucket_name: str = None, region: str = None, client=None):
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.region = region or settings.AWS_REGION
        self.s3_client = client or boto3.client("s3", region_name=self.region)

    def put(self, key: str, data: bytes) -> str:
        content_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except ClientError as e:
            raise StorageError(f"Failed to upload {key}: {str(e)}") from e
        return key

    def url(self, key: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key.lstrip('/')}"

    def delete(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            raise StorageError(f"Failed to delete {key}: {str(e)}") from e


def get_storage() -> StorageAdapter:
    if settings.STORAGE_DRIVER == "s3":
        return S3Storage()
    return LocalStorage()
