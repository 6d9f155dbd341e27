"""
Pytest fixtures - in-memory search engine, mocked content API, stream records.
No network: Elasticsearch is faked and the content API runs on httpx.MockTransport.
"""

import copy
from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import BadRequestError, NotFoundError
from httpx import ASGITransport, AsyncClient

from content_search.config import Settings
from content_search.indexing.registry import build_registry
from content_search.main import app
from content_search.search.elasticsearch_client import get_elasticsearch

SITE = "acme"
STREAM_ARN = "arn:aws:dynamodb:us-east-1:123456789012:table/RELEASE.{table}/stream/2018-02-13T17:05:47.123"


def api_error(cls, status: int, error_type: str):
    """Elasticsearch ApiError as the client raises it for an error response."""
    meta = ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )
    return cls(message=error_type, meta=meta, body={"error": {"type": error_type}, "status": status})


class FakeIndices:
    def __init__(self, es: "FakeElasticsearch"):
        self.es = es

    async def exists(self, index: str):
        self.es.calls.append(("exists", index))
        self.es.raise_if_failing("exists")
        return index in self.es.docs

    async def create(self, index: str, settings=None, mappings=None):
        self.es.calls.append(("create", index))
        self.es.raise_if_failing("create")
        if index in self.es.docs:
            raise api_error(BadRequestError, 400, "resource_already_exists_exception")
        self.es.docs[index] = {}
        self.es.templates[index] = {"settings": settings, "mappings": mappings}
        return {"acknowledged": True, "index": index}


class FakeElasticsearch:
    """Just enough of AsyncElasticsearch for the gateway and the suggest service."""

    def __init__(self):
        self.docs: dict[str, dict[str, dict]] = {}
        self.templates: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}
        self.search_hits: dict[str, list[dict]] = {}
        self.indices = FakeIndices(self)
        self.closed = False
        self.unreachable = False

    def raise_if_failing(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]

    async def index(self, index: str, id: str, document: dict, refresh=None):
        self.calls.append(("index", index, id))
        self.raise_if_failing("index")
        self.docs.setdefault(index, {})[id] = copy.deepcopy(document)
        return {"result": "created", "_id": id}

    async def delete(self, index: str, id: str, refresh=None):
        self.calls.append(("delete", index, id))
        self.raise_if_failing("delete")
        if id not in self.docs.get(index, {}):
            raise api_error(NotFoundError, 404, "not_found")
        del self.docs[index][id]
        return {"result": "deleted", "_id": id}

    async def search(self, index: str, size: int, min_score: float, query: dict):
        content_type = query["bool"]["filter"]["term"]["type"]
        self.calls.append(("search", index, content_type))
        self.raise_if_failing(f"search:{content_type}")
        hits = [{"_source": source} for source in self.search_hits.get(content_type, [])]
        return {"hits": {"total": {"value": len(hits)}, "hits": hits[:size]}}

    async def ping(self):
        return not self.unreachable

    async def close(self):
        self.closed = True


class FakeContentAPI:
    """Serves tokens and content records; records keyed by (resource path, id)."""

    def __init__(self):
        self.records: dict[tuple[str, str], Any] = {}
        self.errors: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, content_id: str, payload: Any) -> None:
        self.records[(path, content_id)] = payload

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.errors:
            return httpx.Response(self.errors[path], json={"error": "unavailable"})
        site = request.url.params.get("site")
        if path.startswith("/identity/"):
            identity = path.rsplit("/", 1)[-1]
            return httpx.Response(200, json={"authorizationToken": f"{identity}:{site}"})
        content_id = request.url.params.get("ids") or request.url.params.get("id")
        payload = self.records.get((path, content_id))
        if payload is None:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(200, json=payload)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def settings() -> Settings:
    return Settings(stage="release", es_suggest_skip="a,the,of,in,to", es_shards=1, es_replicas=0)


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def content_api() -> FakeContentAPI:
    return FakeContentAPI()


@pytest_asyncio.fixture
async def http(content_api: FakeContentAPI):
    async with httpx.AsyncClient(transport=httpx.MockTransport(content_api.handle)) as client:
        yield client


@pytest.fixture
def registry(fake_es: FakeElasticsearch, http: httpx.AsyncClient, settings: Settings):
    return build_registry(fake_es, http, settings)


@pytest.fixture
def make_record() -> Callable[..., dict]:
    """Raw stream record as delivered by the change source."""

    def _make(
        table: str,
        event_name: str = "INSERT",
        site: str = SITE,
        content_id: str = "v1",
        new_image: dict | None = None,
        old_image: dict | None = None,
    ) -> dict:
        stream: dict[str, Any] = {"Keys": {"site": {"S": site}, "id": {"S": content_id}}}
        if new_image is not None:
            stream["NewImage"] = new_image
        if old_image is not None:
            stream["OldImage"] = old_image
        return {
            "eventID": "1",
            "eventName": event_name,
            "eventSource": "aws:dynamodb",
            "eventSourceARN": STREAM_ARN.format(table=table),
            "dynamodb": stream,
        }

    return _make


@pytest.fixture
def video_record() -> dict:
    return {
        "id": "v1",
        "gist": {
            "title": "X",
            "description": "d",
            "primaryCategory": {"title": "Action"},
            "isTrailer": False,
            "free": True,
            "year": 2020,
        },
        "categories": [{"title": "C1"}],
        "tags": [],
        "contentDetails": {"status": "PUBLISHED"},
        "creditBlocks": [],
    }


@pytest_asyncio.fixture
async def client(fake_es: FakeElasticsearch):
    async def override_get_elasticsearch():
        return fake_es

    app.dependency_overrides[get_elasticsearch] = override_get_elasticsearch
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
