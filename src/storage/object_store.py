import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from src.core.config import Settings
from src.core.errors import MissingCredentialsError, StorageUnavailableError

logger = logging.getLogger(__name__)

PUBLIC_ACCESS = "public"

# S3 DeleteObjects accepts at most 1000 keys per request
MAX_DELETE_BATCH = 1000


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str


class ObjectStore:
    """
    Thin wrapper around an S3 bucket.

    The credential is taken from Settings once, when the client is built.
    Every call checks that a credential is configured before talking to
    the store, unless the service runs in production where the ambient
    boto3 credential chain is used instead.
    """

    def __init__(self, settings: Settings, s3_client=None, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        self.bucket = settings.AWS_S3_BUCKET
        self.public_base_url = settings.public_base_url
        self.s3_client = s3_client or self._build_s3_client(settings)
        self.http_client = http_client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)

    @staticmethod
    def _build_s3_client(settings: Settings):
        credentials = {}
        if settings.has_credentials:
            credentials = {
                "aws_access_key_id": settings.AWS_ACCESS_KEY_ID,
                "aws_secret_access_key": settings.AWS_SECRET_ACCESS_KEY,
            }
        return boto3.client(
            "s3",
            region_name=settings.AWS_REGION,
            endpoint_url=settings.AWS_S3_ENDPOINT_URL,
            **credentials,
        )

    def ensure_credentials(self):
        if not self.bucket:
            raise MissingCredentialsError("AWS_S3_BUCKET is not set in environment variables.")
        if not self.settings.has_credentials and not self.settings.is_production:
            raise MissingCredentialsError(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY are required when not running in production."
            )

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def put(self, key: str, body: Union[bytes, str], content_type: str, access: str = PUBLIC_ACCESS) -> StoredObject:
        self.ensure_credentials()
        if isinstance(body, str):
            body = body.encode("utf-8")

        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }
        if access == PUBLIC_ACCESS and self.settings.AWS_S3_OBJECT_ACL:
            params["ACL"] = self.settings.AWS_S3_OBJECT_ACL

        try:
            self.s3_client.put_object(**params)
        except NoCredentialsError as e:
            raise MissingCredentialsError("AWS credentials not found") from e
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(f"Failed to put object {key}: {e}") from e

        logger.debug("Stored object %s (%d bytes)", key, len(body))
        return StoredObject(key=key, url=self.url_for(key))

    def list(self, prefix: str) -> List[StoredObject]:
        self.ensure_credentials()
        objects = []
        try:
            paginator = self.s3_client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    objects.append(StoredObject(key=obj["Key"], url=self.url_for(obj["Key"])))
        except NoCredentialsError as e:
            raise MissingCredentialsError("AWS credentials not found") from e
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(f"Failed to list objects under {prefix}: {e}") from e

        return objects

    def delete(self, keys: Iterable[str]):
        """Removes objects by key, batching them into DeleteObjects requests."""
        self.ensure_credentials()
        keys = list(keys)
        if not keys:
            return

        for start in range(0, len(keys), MAX_DELETE_BATCH):
            batch = keys[start:start + MAX_DELETE_BATCH]
            try:
                response = self.s3_client.delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
            except NoCredentialsError as e:
                raise MissingCredentialsError("AWS credentials not found") from e
            except (BotoCoreError, ClientError) as e:
                raise StorageUnavailableError(f"Failed to delete objects {batch}: {e}") from e

            errors = response.get("Errors") or []
            if errors:
                failed = ", ".join(f"{err.get('Key')} ({err.get('Code')})" for err in errors)
                raise StorageUnavailableError(f"Failed to delete objects: {failed}")

    def fetch(self, url: str) -> bytes:
        """Downloads a public object with a plain HTTP GET."""
        try:
            response = self.http_client.get(url, headers={"Cache-Control": "no-cache"})
        except httpx.HTTPError as e:
            raise StorageUnavailableError(f"Failed to fetch {url}: {e}") from e

        if response.is_error:
            raise StorageUnavailableError(f"Failed to fetch {url} ({response.status_code})")
        return response.content

    def close(self):
        self.http_client.close()
