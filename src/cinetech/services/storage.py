# COMPONENT: STORAGE SERVICE
# REQUIREMENTS SATISFIED: key-value persistence sink with S3, local and in-memory backends
"""
src/cinetech/services/storage.py

Defines the key-value persistence sink used by the catalog store.

Every backend exposes the same two-call contract:

    save(key, value)  -> None
    load(key)         -> str | None

Values are serialized JSON text. A key that was never written loads as
None; the catalog store decides what malformed content means, not the
storage layer.

Backends:
    - S3Storage     : one object per key under a bucket prefix (boto3)
    - LocalStorage  : one file per key in a directory
    - MemoryStorage : dict-backed, for tests and throwaway runs

The backend is selected at runtime from Settings via get_storage().
"""
import os
from typing import Dict, Optional

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from cinetech.config import Settings
from cinetech.utils.logging import logger


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def save(self, key: str, value: str) -> None:
        self._data[key] = value

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)


class LocalStorage:
    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def save(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        with open(self._path(key), "w", encoding="utf-8") as f:
            f.write(value)

    def load(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()


class S3Storage:
    def __init__(self, bucket: str, prefix: str = "", region: Optional[str] = None, client=None):
        self.bucket = bucket
        self.prefix = prefix
        self._s3 = client or self._client(region)

    @staticmethod
    def _client(region: Optional[str]):
        """
        In Lambda boto3 picks the region up from the runtime env; locally
        it uses the AWS config unless a region is passed explicitly.
        """
        config = Config(signature_version="s3v4")
        if region:
            return boto3.client("s3", region_name=region, config=config)
        return boto3.client("s3", config=config)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}.json"

    def save(self, key: str, value: str) -> None:
        self._s3.put_object(
            Bucket=self.bucket,
            Key=self._key(key),
            Body=value.encode("utf-8"),
            ContentType="application/json",
        )

    def load(self, key: str) -> Optional[str]:
        try:
            obj = self._s3.get_object(Bucket=self.bucket, Key=self._key(key))
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404"):
                return None
            raise
        return obj["Body"].read().decode("utf-8")


def get_storage(settings: Settings):
    if settings.local_storage:
        logger.info("Storage: local directory %s", settings.local_storage_dir)
        return LocalStorage(settings.local_storage_dir)
    if settings.s3_bucket:
        logger.info("Storage: s3://%s/%s", settings.s3_bucket, settings.s3_prefix)
        return S3Storage(settings.s3_bucket, settings.s3_prefix, settings.aws_region)
    logger.info("Storage: in-memory (no LOCAL_STORAGE or S3_BUCKET configured)")
    return MemoryStorage()
