"""Blob storage for uploaded location photos."""

import abc
import functools
import logging
import os
import pathlib
import uuid

import httpx

from .errors import StorageError, UploadError
from .settings import get_settings

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = '.jpg'
UPLOADS_PREFIX = 'uploads'


def make_photo_filename(original_filename: str | None) -> str:
    """Generate a unique filename that keeps the original extension."""
    extension = os.path.splitext(original_filename or '')[1].lower()
    return f'{uuid.uuid4()}{extension or DEFAULT_EXTENSION}'


def photo_url(reference: str | None) -> str | None:
    """Turn a stored photo reference into a URL the browser can fetch."""
    if not reference:
        return None
    if reference.startswith(('http://', 'https://')):
        return reference
    return '/' + reference.lstrip('/')


class PhotoStorage(abc.ABC):
    """A place to durably keep uploaded photo bytes."""

    @abc.abstractmethod
    async def save(
        self, content: bytes, filename: str | None, content_type: str | None
    ) -> str:
        """Store the photo and return a reference for photo_url()."""


class LocalPhotoStorage(PhotoStorage):
    """Stores photos in a directory served under /uploads."""

    def __init__(self, upload_dir: pathlib.Path | str):
        """Initialize the service with upload directory."""
        self.upload_dir = pathlib.Path(upload_dir)

    async def save(
        self, content: bytes, filename: str | None, content_type: str | None
    ) -> str:
        unique_filename = make_photo_filename(filename)
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            (self.upload_dir / unique_filename).write_bytes(content)
        except OSError as exc:
            logger.exception('Failed to write photo %s', unique_filename)
            raise UploadError(f'Could not write {unique_filename}') from exc

        logger.info('Saved photo %s (%d bytes)', unique_filename, len(content))
        return f'{UPLOADS_PREFIX}/{unique_filename}'


class RemotePhotoStorage(PhotoStorage):
    """Stores photos in an object storage bucket over its REST API.

    A missing bucket is created (public read) and the upload retried once.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        bucket: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.bucket = bucket
        self.transport = transport
        self.timeout = timeout

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                'Authorization': f'Bearer {self.api_key}',
                'apikey': self.api_key,
            },
            timeout=self.timeout,
            transport=self.transport,
        )

    def object_url(self, name: str) -> str:
        """Public URL of an object in the bucket."""
        return f'{self.base_url}/storage/v1/object/public/{self.bucket}/{name}'

    async def save(
        self, content: bytes, filename: str | None, content_type: str | None
    ) -> str:
        name = make_photo_filename(filename)
        try:
            async with self._make_client() as client:
                response = await self._upload(client, name, content, content_type)
                if _is_missing_bucket(response):
                    logger.warning('Bucket %s not found; creating it', self.bucket)
                    await self._create_bucket(client)
                    response = await self._upload(client, name, content, content_type)
        except httpx.HTTPError as exc:
            logger.exception('Photo upload to %s failed', self.base_url)
            raise UploadError(f'Could not upload {name}') from exc

        if response.is_error:
            logger.error(
                'Photo upload rejected with %s: %s', response.status_code, response.text
            )
            raise UploadError(f'Could not upload {name}: HTTP {response.status_code}')

        logger.info('Uploaded photo %s to bucket %s', name, self.bucket)
        return self.object_url(name)

    async def _upload(
        self,
        client: httpx.AsyncClient,
        name: str,
        content: bytes,
        content_type: str | None,
    ) -> httpx.Response:
        return await client.post(
            f'/storage/v1/object/{self.bucket}/{name}',
            content=content,
            headers={
                'Content-Type': content_type or 'application/octet-stream',
                'x-upsert': 'false',
            },
        )

    async def _create_bucket(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            '/storage/v1/bucket',
            json={'id': self.bucket, 'name': self.bucket, 'public': True},
        )
        # 409 means another request created it first
        if response.is_error and response.status_code != 409:
            raise UploadError(
                f'Could not create bucket {self.bucket}: HTTP {response.status_code}'
            )


def _is_missing_bucket(response: httpx.Response) -> bool:
    """Object storage reports a missing bucket as a 400 or 404 with this text."""
    if response.status_code not in (400, 404):
        return False
    return 'bucket not found' in response.text.lower()


@functools.cache
def get_photo_storage() -> PhotoStorage:
    """Return the configured photo storage, created on first use."""
    settings = get_settings()
    if settings.storage_backend == 'remote':
        if not (settings.storage_url and settings.storage_key):
            raise StorageError(
                'Remote photo storage needs STORAGE_URL and STORAGE_KEY'
            )
        return RemotePhotoStorage(
            settings.storage_url, settings.storage_key, settings.storage_bucket
        )
    return LocalPhotoStorage(settings.upload_dir)
