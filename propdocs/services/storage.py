from __future__ import annotations

import io
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Optional
from urllib.parse import urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import settings


def s3_client() -> Any:
    kwargs: dict[str, Any] = {"region_name": settings.aws.region, "config": Config(retries={"max_attempts": 3})}
    if settings.aws.access_key_id and settings.aws.secret_access_key:
        kwargs["aws_access_key_id"] = settings.aws.access_key_id
        kwargs["aws_secret_access_key"] = settings.aws.secret_access_key
    if settings.aws.s3_endpoint_url:
        kwargs["endpoint_url"] = settings.aws.s3_endpoint_url
    return boto3.client("s3", **kwargs)


@dataclass
class StoredFile:
    key: str
    file_url: str


def storage_key_from_url(file_url: str | None) -> str | None:
    """Object key for ``s3://bucket/key`` URLs; ``None`` for anything stored elsewhere."""
    if not file_url:
        return None
    parsed = urlparse(file_url)
    if parsed.scheme != "s3" or not parsed.path.strip("/"):
        return None
    return parsed.path.lstrip("/")


class StorageService:
    def __init__(self, bucket: Optional[str] = None) -> None:
        self.bucket = bucket or settings.aws.s3_bucket
        self._client = s3_client()

    def _build_key(self, tenant_id: int, building_id: int, original_name: str) -> str:
        suffix = Path(original_name).suffix.lower() or ".bin"
        return f"{tenant_id}/{building_id}/{uuid.uuid4()}{suffix}"

    def upload_fileobj(
        self,
        tenant_id: int,
        building_id: int,
        file_obj: BinaryIO | bytes,
        filename: str,
        content_type: str,
    ) -> StoredFile:
        buffer: BinaryIO
        if isinstance(file_obj, (bytes, bytearray)):
            buffer = io.BytesIO(file_obj)
        else:
            buffer = file_obj
            buffer.seek(0)

        key = self._build_key(tenant_id, building_id, filename)
        extra_args = {"ContentType": content_type}

        try:
            self._client.upload_fileobj(buffer, self.bucket, key, ExtraArgs=extra_args)
        except (BotoCoreError, ClientError) as exc:
            raise RuntimeError(f"Failed to upload to S3: {exc}") from exc

        return StoredFile(key=key, file_url=f"s3://{self.bucket}/{key}")

    def delete(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise RuntimeError(f"Failed to delete S3 object: {exc}") from exc

    def open_stream(self, key: str):
        try:
            obj = self._client.get_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise RuntimeError(f"Failed to download S3 object: {exc}") from exc

        body = obj["Body"]
        metadata = {
            "content_type": obj.get("ContentType", "application/octet-stream"),
            "content_length": obj.get("ContentLength"),
        }

        def iterator(chunk_size: int = 1024 * 64):
            try:
                for chunk in body.iter_chunks(chunk_size):
                    if chunk:
                        yield chunk
            finally:
                body.close()

        return iterator, metadata


def get_storage_service() -> StorageService:
    return StorageService()
