"""
Blob Storage
Stores payment proof images and returns a durable public URL
"""

import logging
import mimetypes
import os

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from app.services.errors import StoreError

logger = logging.getLogger(__name__)


class BlobStore:
    """Interface: put(path, data) -> url"""

    def put(self, path: str, data: bytes, content_type: str = None) -> str:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Writes blobs under a directory; URLs are served by the app's /uploads route"""

    def __init__(self, root: str, url_prefix: str = '/uploads'):
        self.root = root
        self.url_prefix = url_prefix.rstrip('/')

    def _full_path(self, path: str) -> str:
        full = os.path.abspath(os.path.join(self.root, path))
        if not full.startswith(os.path.abspath(self.root) + os.sep):
            raise StoreError(f"Invalid blob path: {path}")
        return full

    def put(self, path: str, data: bytes, content_type: str = None) -> str:
        full = self._full_path(path)
        try:
            os.makedirs(os.path.dirname(full), exist_ok=True)
            with open(full, 'wb') as fh:
                fh.write(data)
        except OSError as e:
            logger.error(f"Local blob write failed for {path}: {str(e)}")
            raise StoreError(f"Failed to store {path}: {str(e)}") from e

        logger.info(f"Stored blob {path} ({len(data)} bytes)")
        return f"{self.url_prefix}/{path}"


class S3BlobStore(BlobStore):
    """S3 / MinIO backed blob store"""

    def __init__(self, client, bucket_name: str, public_base: str = '', endpoint_url: str = None, region: str = None):
        self.s3_client = client
        self.bucket_name = bucket_name
        self.public_base = (public_base or '').rstrip('/')
        self.endpoint_url = (endpoint_url or '').rstrip('/')
        self.region = region

    @classmethod
    def from_config(cls, config):
        client = boto3.client(
            's3',
            endpoint_url=config.get('S3_ENDPOINT_URL'),
            aws_access_key_id=config.get('S3_ACCESS_KEY'),
            aws_secret_access_key=config.get('S3_SECRET_KEY'),
            region_name=config.get('S3_REGION'),
            config=BotoConfig(signature_version='s3v4', s3={'addressing_style': 'path'}),
        )
        return cls(
            client,
            bucket_name=config.get('S3_BUCKET_NAME'),
            public_base=config.get('S3_PUBLIC_BASE'),
            endpoint_url=config.get('S3_ENDPOINT_URL'),
            region=config.get('S3_REGION'),
        )

    def url(self, key: str) -> str:
        """
        Public URL for an object
        priority: S3_PUBLIC_BASE, then endpoint + path-style, then AWS virtual-host
        """
        key = key.lstrip('/')
        if self.public_base:
            return f"{self.public_base}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def put(self, path: str, data: bytes, content_type: str = None) -> str:
        content_type = content_type or mimetypes.guess_type(path)[0] or 'application/octet-stream'
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=path,
                Body=data,
                ContentType=content_type,
                ACL='public-read',
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 client error storing {path}: {str(e)}")
            raise StoreError(f"Failed to store {path}: {str(e)}") from e

        logger.info(f"Uploaded blob {path} to bucket {self.bucket_name}")
        return self.url(path)


def create_blob_store(config) -> BlobStore:
    """Build the blob store selected by BLOB_STORE"""
    backend = (config.get('BLOB_STORE') or 'local').lower()
    if backend == 's3':
        return S3BlobStore.from_config(config)
    if backend == 'local':
        return LocalBlobStore(config.get('UPLOAD_FOLDER'), config.get('UPLOAD_URL_PREFIX', '/uploads'))
    raise ValueError(f"Unknown BLOB_STORE backend: {backend}")
