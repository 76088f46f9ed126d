from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from niftyboard.services.http_client import ProviderError
from niftyboard.utils.cache import SimpleCache


class FakeHttpClient:
    """
    In-memory stand-in for HttpClient. `routes` maps a URL fragment to a JSON
    payload, an exception to raise, or a callable(url, params) returning either.
    The first matching fragment wins.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes = routes or {}
        self.calls: List[Tuple[str, Optional[dict]]] = []
        self.warmups: List[str] = []

    async def get_json(self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> Any:
        self.calls.append((url, params))
        for fragment, response in self.routes.items():
            if fragment in url:
                if callable(response):
                    response = response(url, params)
                if isinstance(response, Exception):
                    raise response
                return response
        raise ProviderError(f"Error 404: no route for {url}", status=404)

    async def warm_up(self, url: str, headers: Optional[dict] = None) -> None:
        self.warmups.append(url)

    def calls_to(self, fragment: str) -> List[Tuple[str, Optional[dict]]]:
        return [call for call in self.calls if fragment in call[0]]


def raising(message: str = "upstream down") -> Callable[..., Any]:
    def _raise(*args, **kwargs):
        raise RuntimeError(message)
    return _raise


@pytest.fixture
def fake_http():
    return FakeHttpClient()


@pytest.fixture
def store():
    return SimpleCache(ttl_seconds=60)
