"""
API Client Module

HTTP client for the Iterate survey API. Builds authenticated requests,
POSTs a JSON body and decodes the ``{results, error}`` envelope into a
typed result. Failures are reported through the completion callback;
nothing is retried.
"""

import asyncio
import logging
from typing import Any, Optional, Set, Tuple, Type, TypeVar, Union

import httpx

from ..config import config
from .completion import Completion, CompletionCallback
from .errors import (
    APIError,
    APIRequestError,
    InvalidAPIResponse,
    InvalidAPIUrl,
    IterateError,
    JSONDecodingError,
)
from .models import JSONCodec
from .paths import APIPath
from .transport import background_loop, shared_transport


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_API_HOST = config.api.default_host

# Tasks must stay referenced until they finish or the loop may drop them
_pending_tasks: Set[asyncio.Task] = set()


def _build_url(raw: str) -> Optional[httpx.URL]:
    """Parse ``raw`` as an absolute http(s) URL, or return None."""
    if not raw or any(ch.isspace() for ch in raw):
        return None

    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL:
        return None

    if url.scheme not in config.api.allowed_schemes or not url.host:
        return None

    return url


class APIClient:
    """
    HTTP client for the Iterate API.

    Holds only immutable configuration (host and API key) and is safe to
    share between concurrent callers. The transport defaults to the shared
    ``httpx.AsyncClient`` of the running loop; pass ``transport`` to
    substitute one.
    """

    def __init__(
        self,
        api_key: str,
        api_host: str = DEFAULT_API_HOST,
        transport: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the API client.

        Args:
            api_key: Iterate API key, found in the Iterate dashboard.
            api_host: API host, the production host unless testing.
            transport: Optional HTTP client to use instead of the shared one.
        """
        self._api_key = api_key
        self._api_host = api_host
        self._transport = transport
        self.codec = JSONCodec()
        logger.info(f"APIClient initialized (api_host: {self._api_host})")

    @property
    def api_host(self) -> str:
        return self._api_host

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def transport(self) -> httpx.AsyncClient:
        return self._transport if self._transport is not None else shared_transport()

    # Request methods

    def post(
        self,
        path: Union[APIPath, str],
        data: bytes,
        complete: CompletionCallback,
        result_type: Optional[Type[T]] = None
    ) -> None:
        """
        POST ``data`` and deliver the decoded results to ``complete``.

        ``complete`` is called exactly once with ``(result, None)`` or
        ``(None, error)``. When the URL cannot be built it is called before
        this method returns; otherwise it is called from the task running
        the request. Outside an event loop the request runs on the
        background loop thread and ``complete`` is called from there.

        Args:
            path: Endpoint to call.
            data: JSON body, already serialized.
            complete: Results callback.
            result_type: Type to decode the envelope's ``results`` into.
        """
        completion = Completion.wrap(complete)

        # Always the embed endpoint, whatever path was passed
        request = self.request(APIPath.SURVEYS_EMBED, method="POST", content=data)
        if request is None:
            logger.warning(f"Invalid API URL for host {self._api_host!r}")
            completion(None, InvalidAPIUrl())
            return

        self.data_task(request, completion, result_type)

    async def post_async(
        self,
        path: Union[APIPath, str],
        data: bytes,
        result_type: Optional[Type[T]] = None
    ) -> Optional[T]:
        """
        Awaitable form of ``post``.

        Returns:
            The envelope's results.

        Raises:
            IterateError: The same failure ``post`` would report.
        """
        request = self.request(APIPath.SURVEYS_EMBED, method="POST", content=data)
        if request is None:
            logger.warning(f"Invalid API URL for host {self._api_host!r}")
            raise InvalidAPIUrl()

        result, error = await self._perform(request, result_type)
        if error is not None:
            raise error
        return result

    # Helpers

    def encode(self, value: Any) -> bytes:
        """Serialize a request body with snake_case keys."""
        return self.codec.encode(value)

    def request(
        self,
        path: Union[APIPath, str],
        method: str = "GET",
        content: Optional[bytes] = None
    ) -> Optional[httpx.Request]:
        """
        Build a request with the content type and authentication set.

        Args:
            path: API path to request.
            method: HTTP method.
            content: Request body.

        Returns:
            The request, or None if host and path do not form a valid URL.
        """
        url = _build_url(f"{self._api_host}{getattr(path, 'value', path)}")
        if url is None:
            return None

        headers = {
            "Content-Type": config.api.content_type,
            "Authorization": f"{config.api.auth_scheme} {self._api_key}",
        }
        return httpx.Request(method, url, headers=headers, content=content)

    def data_task(
        self,
        request: httpx.Request,
        complete: CompletionCallback,
        result_type: Optional[Type[T]] = None
    ) -> None:
        """
        Start ``request`` on the running loop and report to ``complete``.

        Args:
            request: Request to run, see ``request`` to construct it.
            complete: Results callback.
            result_type: Type to decode the envelope's ``results`` into.
        """
        completion = Completion.wrap(complete)
        run = self._run(request, completion, result_type)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            background_loop().submit(run)
            logger.debug(f"Dispatched {request.method} {request.url} on background loop")
            return

        task = loop.create_task(run)
        _pending_tasks.add(task)
        task.add_done_callback(_pending_tasks.discard)

        logger.debug(f"Dispatched {request.method} {request.url}")

    async def _run(
        self,
        request: httpx.Request,
        completion: Completion,
        result_type: Optional[Type[T]]
    ) -> None:
        try:
            result, error = await self._perform(request, result_type)
        except Exception as e:
            logger.error(f"Request to {request.url} failed unexpectedly: {e!r}")
            result, error = None, APIRequestError()
            error.__cause__ = e

        try:
            completion(result, error)
        except Exception:
            logger.exception("Completion callback raised")

    async def _perform(
        self,
        request: httpx.Request,
        result_type: Optional[Type[T]]
    ) -> Tuple[Optional[T], Optional[IterateError]]:
        """Send ``request`` and map the outcome to ``(result, error)``."""
        try:
            response = await self.transport.send(request)
        except httpx.HTTPError as e:
            logger.warning(f"Request to {request.url} failed: {e}")
            error = APIRequestError()
            error.__cause__ = e
            return None, error
        except Exception as e:
            # e.g. RuntimeError from a connection bound to a closed loop
            logger.error(f"Transport failed for {request.url}: {e!r}")
            error = APIRequestError()
            error.__cause__ = e
            return None, error

        if not response.content:
            logger.warning(f"Empty response from {request.url} (status {response.status_code})")
            return None, InvalidAPIResponse()

        try:
            envelope = self.codec.decode(response.content, result_type)
        except JSONDecodingError as e:
            logger.warning(f"Could not decode response from {request.url}")
            return None, e

        if envelope.error is not None:
            logger.warning(f"API error from {request.url}: {envelope.error}")
            return None, APIError(envelope.error)

        return envelope.results, None
