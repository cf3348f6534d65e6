"""WebHDFS REST client implementing the backing-store capability set."""

import io
import posixpath
import uuid
from typing import BinaryIO, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from common.constants import DEFAULT_TIMEOUT_SECONDS, REQUEST_ID_HEADER
from common.logging_config import get_logger
from common.types import BackingFileStatus, BlockLocationRecord
from backing.schemas import (
    BlockLocationsResponse,
    BooleanResponse,
    FileStatusResponse,
    ListStatusResponse,
    RemoteExceptionResponse,
    WebHdfsFileStatus,
)
from overlay.exceptions import BackingStoreError, PathExistsError, PathNotFoundError

logger = get_logger(__name__)

WEBHDFS_PREFIX = "/webhdfs/v1"

_EXCEPTION_TYPES = {
    'FileNotFoundException': PathNotFoundError,
    'FileAlreadyExistsException': PathExistsError,
}


class HttpInputStream(io.RawIOBase):
    """Raw readable stream over a streaming httpx response."""

    def __init__(self, response: httpx.Response):
        super().__init__()
        self._response = response
        self._chunks = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        n = min(len(buffer), len(self._pending))
        buffer[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


class WebHdfsOutputStream(io.BytesIO):
    """
    Writable stream that uploads its content to WebHDFS when closed.
    """

    def __init__(self, client: "WebHdfsClient", path: str, params: dict):
        super().__init__()
        self._client = client
        self._path = path
        self._params = params
        self._committed = False

    def close(self) -> None:
        if not self._committed and not self.closed:
            self._committed = True
            self._client._upload(self._path, self._params, self.getvalue())
        super().close()


class WebHdfsClient:
    """
    Backing store adapter speaking the WebHDFS REST API.

    Paths are absolute raw HDFS paths. Every failure is raised as a
    BackingStoreError subclass; nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        user: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize WebHDFS client.

        Args:
            base_url: Namenode HTTP address (e.g., "http://namenode:9870")
            user: Value for the user.name parameter, if any
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.user = user
        self.session = httpx.Client(base_url=self.base_url, timeout=timeout)
        logger.info(f"Initialized WebHdfsClient [base_url={self.base_url}]")

    def _url(self, path: str) -> str:
        if not path.startswith('/'):
            path = '/' + path
        return WEBHDFS_PREFIX + quote(path, safe='/')

    def _params(self, op: str, **extra) -> dict:
        params = {'op': op}
        if self.user:
            params['user.name'] = self.user
        for key, value in extra.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            params[key] = str(value)
        return params

    def _request(self, method: str, url: str, path: str, **kwargs) -> httpx.Response:
        """
        Send a request and translate failures.

        Raises:
            BackingStoreError: On transport failure or an error status
        """
        headers = kwargs.pop('headers', {})
        headers[REQUEST_ID_HEADER] = str(uuid.uuid4())
        op = kwargs.get('params', {}).get('op', '')
        logger.debug(f"WebHDFS request: {method} {op} {path}")

        try:
            response = self.session.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException:
            raise BackingStoreError(f"WebHDFS request timed out: {op} {path}")
        except httpx.HTTPError as e:
            raise BackingStoreError(f"Cannot reach WebHDFS at {self.base_url}: {e}")

        self._raise_for_status(response, path)
        return response

    def _raise_for_status(self, response: httpx.Response, path: str) -> None:
        if response.status_code < 400:
            return

        response.read()

        try:
            remote = RemoteExceptionResponse.model_validate(response.json()).remote_exception
            exc_type = _EXCEPTION_TYPES.get(remote.exception, BackingStoreError)
            message = remote.message or remote.exception
        except (ValueError, ValidationError):
            exc_type = PathNotFoundError if response.status_code == 404 else BackingStoreError
            message = response.text or f"HTTP {response.status_code}"

        raise exc_type(f"{message} [path={path}]", status_code=response.status_code)

    def _parse(self, model, response: httpx.Response, path: str):
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise BackingStoreError(f"Malformed WebHDFS response for {path}: {e}", status_code=response.status_code)

    def _to_status(self, path: str, status: WebHdfsFileStatus) -> BackingFileStatus:
        return BackingFileStatus(
            path=path,
            length=status.length,
            is_directory=status.type == 'DIRECTORY',
            replication=status.replication,
            block_size=status.block_size,
            modification_time=status.modification_time,
            access_time=status.access_time,
            permission=status.permission,
            owner=status.owner,
            group=status.group,
        )

    def stat(self, path: str) -> BackingFileStatus:
        response = self._request('GET', self._url(path), path, params=self._params('GETFILESTATUS'))
        return self._to_status(path, self._parse(FileStatusResponse, response, path).file_status)

    def list(self, path: str) -> List[BackingFileStatus]:
        """List children of a directory in the order the namenode returns them."""
        response = self._request('GET', self._url(path), path, params=self._params('LISTSTATUS'))
        statuses = self._parse(ListStatusResponse, response, path).file_statuses.file_status
        return [
            self._to_status(posixpath.join(path, status.path_suffix) if status.path_suffix else path, status)
            for status in statuses
        ]

    def open(self, path: str, buffer_size: int) -> BinaryIO:
        request = self.session.build_request(
            'GET', self._url(path), params=self._params('OPEN', buffersize=buffer_size)
        )
        logger.debug(f"WebHDFS request: GET OPEN {path}")
        try:
            response = self.session.send(request, stream=True, follow_redirects=True)
        except httpx.HTTPError as e:
            raise BackingStoreError(f"Cannot open {path} on WebHDFS: {e}")

        try:
            self._raise_for_status(response, path)
        finally:
            if response.status_code >= 400:
                response.close()

        return io.BufferedReader(HttpInputStream(response), buffer_size=max(buffer_size, 1))

    def create(
        self,
        path: str,
        permission: Optional[str],
        overwrite: bool,
        buffer_size: int,
        replication: int,
        block_size: Optional[int],
    ) -> BinaryIO:
        """Return a stream whose content is written to path when closed."""
        params = self._params(
            'CREATE',
            overwrite=overwrite,
            permission=permission,
            buffersize=buffer_size,
            replication=replication,
            blocksize=block_size,
        )
        return WebHdfsOutputStream(self, path, params)

    def _upload(self, path: str, params: dict, data: bytes) -> None:
        """Two-step CREATE: ask the namenode for a datanode location, then send the data there."""
        response = self._request(
            'PUT', self._url(path), path, params=params, follow_redirects=False
        )

        location = response.headers.get('Location')
        if not location and response.status_code == 200:
            location = self._parse_location(response)
        if not location:
            raise BackingStoreError(f"WebHDFS CREATE returned no datanode location [path={path}]")

        self._request('PUT', location, path, content=data)
        logger.info(f"Wrote {len(data)} bytes to {path}")

    def _parse_location(self, response: httpx.Response) -> Optional[str]:
        try:
            return response.json().get('Location')
        except ValueError:
            return None

    def delete(self, path: str, recursive: bool) -> bool:
        response = self._request('DELETE', self._url(path), path, params=self._params('DELETE', recursive=recursive))
        return self._parse(BooleanResponse, response, path).boolean

    def mkdir(self, path: str, permission: Optional[str]) -> bool:
        response = self._request('PUT', self._url(path), path, params=self._params('MKDIRS', permission=permission))
        return self._parse(BooleanResponse, response, path).boolean

    def rename(self, src: str, dst: str) -> bool:
        response = self._request('PUT', self._url(src), src, params=self._params('RENAME', destination=dst))
        return self._parse(BooleanResponse, response, src).boolean

    def locate(self, path: str, start: int, length: int) -> List[BlockLocationRecord]:
        response = self._request(
            'GET', self._url(path), path,
            params=self._params('GETFILEBLOCKLOCATIONS', offset=start, length=length),
        )
        blocks = self._parse(BlockLocationsResponse, response, path).block_locations.block_location
        return [
            BlockLocationRecord(
                names=tuple(block.names),
                hosts=tuple(block.hosts),
                offset=block.offset,
                length=block.length,
            )
            for block in blocks
        ]

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
