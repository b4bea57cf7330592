from typing import Callable, Dict, List, Union

import httpx
import pytest


Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class RoutedTransport(httpx.MockTransport):
    """MockTransport that answers by host and remembers every request."""

    def __init__(self, routes: Dict[str, Route]):
        self.routes = routes
        self.requests: List[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.host)
        if route is None:
            return httpx.Response(404, json={"error": "no route"})
        if callable(route):
            return route(request)
        return route

    @property
    def hosts(self) -> List[str]:
        return [request.url.host for request in self.requests]


@pytest.fixture
def routed_transport() -> Callable[[Dict[str, Route]], RoutedTransport]:
    return RoutedTransport
