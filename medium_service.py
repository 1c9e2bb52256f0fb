import logging
from concurrent.futures import Executor, Future
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

import requests

from models import ENDPOINT, TOP_PATH, FeedResponse, decode_feed

# Networking
# Use short connect timeout and reasonable read timeout to avoid hangs
DEFAULT_TIMEOUT = (5, 15)

T = TypeVar("T")


class Transport(Protocol):
    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response: ...


def create_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return session


class PendingRequest(Generic[T]):
    """A request that has been described but not sent.

    Nothing touches the network until ``execute`` runs. Every call to
    ``execute`` sends a fresh request, so one instance may be reused.
    """

    def __init__(
        self,
        transport: Transport,
        method: str,
        url: str,
        decoder: Callable[[str], T],
        timeout=DEFAULT_TIMEOUT,
    ):
        self._transport = transport
        self._decoder = decoder
        self._timeout = timeout
        self.method = method
        self.url = url

    def execute(self) -> T:
        logging.debug(f"{self.method} {self.url}")
        response = self._transport.request(self.method, self.url, timeout=self._timeout)
        response.raise_for_status()
        return self._decoder(response.text)

    def submit(self, executor: Executor) -> "Future[T]":
        return executor.submit(self.execute)

    def __repr__(self) -> str:
        return f"PendingRequest({self.method} {self.url})"


class MediumService:
    def __init__(self, session: Optional[Transport] = None, timeout=DEFAULT_TIMEOUT):
        self._session = session if session is not None else create_session()
        self._timeout = timeout

    def top(self) -> PendingRequest[FeedResponse]:
        return PendingRequest(
            self._session, "GET", f"{ENDPOINT}{TOP_PATH}", decode_feed, timeout=self._timeout
        )

    fetch_top_stories = top
