# ============================================================================
# MANIFEST LOADER
# ============================================================================
# STATUS: Infrastructure - Fetch, timeout and run-once memoization
# PURPOSE: Load JSON documents through the injected fetch capability
# CREATED: 18 OCT 2026
# ============================================================================
"""
Manifest Loader

Two building blocks used by the catalog resolver and the entity facades:

AsyncOnce
    An awaitable handle around a zero-argument coroutine factory. The first
    call schedules the work as a task; every later or concurrent call awaits
    that same task, so the work runs at most once per handle. Failures are
    memoized like results. Callers await through asyncio.shield so one
    cancelled caller does not cancel the shared work.

ManifestLoader
    fetch_with_timeout(url)  - race the fetch capability against a timeout
    get_manifest(url)        - add query params, fetch, check status, parse

Every failure of get_manifest is reported as ManifestUnavailableError with
the original failure on ``.cause``.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from emsclient.core.config import EMS_LOAD_TIMEOUT_SECONDS, FetchFunction
from emsclient.core.errors import (
    FetchFailedError,
    ManifestUnavailableError,
    RequestTimeoutError,
)
from emsclient.core.logging import get_logger, ComponentType
from emsclient.infrastructure.urls import with_query_params

logger = get_logger(__name__, ComponentType.TRANSPORT)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


# ============================================================================
# RUN-ONCE HANDLE
# ============================================================================

class AsyncOnce(Generic[T]):
    """
    Lazily started, memoized async computation.

    The task is created on the first call, inside the caller's event loop,
    before the caller yields control. That ordering is what makes concurrent
    first calls share one task without a lock.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]], name: str = ""):
        self._factory = factory
        self._name = name
        self._task: Optional[asyncio.Future] = None

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    async def __call__(self) -> T:
        if self._task is None:
            self._task = asyncio.ensure_future(self._factory())
            # Mark failures retrieved: the exception is re-raised to awaiters
            self._task.add_done_callback(_consume_exception)
        return await asyncio.shield(self._task)

    def __repr__(self) -> str:
        state = "done" if self.done else ("running" if self.started else "idle")
        return f"AsyncOnce({self._name or self._factory!r}, {state})"


def _consume_exception(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


# ============================================================================
# LOADER
# ============================================================================

def is_success(response: Any) -> bool:
    """2xx check for httpx-style (status_code/is_success) or fetch-style (ok/status) responses."""
    flag = getattr(response, "is_success", None)
    if isinstance(flag, bool):
        return flag
    flag = getattr(response, "ok", None)
    if isinstance(flag, bool):
        return flag
    status = getattr(response, "status_code", getattr(response, "status", None))
    return isinstance(status, int) and 200 <= status < 300


def response_status(response: Any) -> Optional[int]:
    status = getattr(response, "status_code", getattr(response, "status", None))
    return status if isinstance(status, int) else None


async def read_json(response: Any) -> Any:
    """Call ``response.json()``, awaiting it when the transport is async."""
    body = response.json()
    if inspect.isawaitable(body):
        body = await body
    return body


class ManifestLoader:
    """
    Fetches and parses JSON documents with a bounded wait.

    The query-parameter set is read through a callable so the loader always
    sees the parameters of the current configuration epoch.
    """

    def __init__(
        self,
        fetch_function: FetchFunction,
        query_params: Callable[[], Mapping[str, str]],
        timeout_seconds: float = EMS_LOAD_TIMEOUT_SECONDS,
    ):
        self._fetch_function = fetch_function
        self._query_params = query_params
        self.timeout_seconds = timeout_seconds

    async def fetch_with_timeout(self, url: str) -> Any:
        """
        Race the fetch capability against the load timeout.

        On timeout the transport call is left running; its late result is
        discarded.

        Raises:
            RequestTimeoutError: No answer within the timeout.
            FetchFailedError: The fetch capability raised.
        """
        logger.debug(f"Fetching {url}")
        try:
            pending = asyncio.ensure_future(self._fetch_function(url))
        except Exception as e:
            raise FetchFailedError(url, cause=e) from e
        pending.add_done_callback(_consume_exception)

        try:
            return await asyncio.wait_for(asyncio.shield(pending), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(url, self.timeout_seconds) from e
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise FetchFailedError(url, cause=e) from e

    async def get_manifest(self, url: str) -> Any:
        """
        Fetch ``url`` with the current query parameters and return its JSON body.

        Raises:
            ManifestUnavailableError: Timeout, transport failure, non-success
                status or unparseable body.
        """
        try:
            extended_url = with_query_params(url, self._query_params())
            response = await self.fetch_with_timeout(extended_url)
            if not is_success(response):
                raise FetchFailedError(extended_url, status_code=response_status(response))
            return await read_json(response)
        except ManifestUnavailableError:
            raise
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise ManifestUnavailableError(url, cause=e) from e


def parse_manifest(url: str, body: Any, model: Type[M]) -> M:
    """
    Validate a fetched body against ``model``.

    Raises:
        ManifestUnavailableError: The body does not match the wire shape.
    """
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise ManifestUnavailableError(url, cause=e) from e


__all__ = [
    "AsyncOnce",
    "ManifestLoader",
    "parse_manifest",
    "is_success",
    "read_json",
]
