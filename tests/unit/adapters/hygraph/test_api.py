# hygraph/test_api.py

import json

import httpx
import pytest

from schema_audit.adapters.hygraph import api
from schema_audit.adapters.hygraph.api import build_count_query, fetch_content_counts
from schema_audit.adapters.hygraph.config import HygraphConfig
from schema_audit.schemas import ContentCount, SchemaEntity

pytestmark = pytest.mark.unit

_CONFIG = HygraphConfig(endpoint="https://content.example.com/graphql")

_COUNT_PAYLOAD = {
    "data": {
        "draft": {"aggregate": {"count": 2}},
        "published": {"aggregate": {"count": 5}},
    },
}


def _client_factory(handler):
    """
    Build a client factory whose requests are answered by ``handler``.

    Args:
        handler: Callable mapping an httpx.Request to an httpx.Response.

    Returns:
        Callable[[], httpx.AsyncClient]: Factory for mock-transport clients.
    """
    return lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _query(request: httpx.Request) -> str:
    return json.loads(request.content)["query"]


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=_COUNT_PAYLOAD, request=request)


@pytest.fixture
def retry_hints(monkeypatch: pytest.MonkeyPatch) -> list[str | None]:
    """
    Make retries immediate while recording each retried response's hint.

    Returns:
        list[str | None]: Retry-After values seen, one per retry.
    """
    hints: list[str | None] = []

    def immediate(response: httpx.Response, attempt: int, **_: float) -> float:
        hints.append(response.headers.get("Retry-After"))
        return 0.0

    monkeypatch.setattr(api, "retry_delay", immediate)
    return hints


async def test_fetch_content_counts_parses_both_stages() -> None:
    """
    ARRANGE: API reporting 2 draft and 5 published entries
    ACT:     fetch_content_counts for one model
    ASSERT:  ContentCount(draft=2, published=5)
    """
    expected = {"Article": ContentCount(draft=2, published=5)}

    actual = await fetch_content_counts(
        (SchemaEntity(name="Article"),),
        config=_CONFIG,
        client_factory=_client_factory(_ok),
    )

    assert actual == expected


async def test_fetch_content_counts_skips_components_and_system_models() -> None:
    """
    ARRANGE: a model, a sub-structure and a platform model
    ACT:     fetch_content_counts
    ASSERT:  only the model is requested
    """
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(_query(request))
        return _ok(request)

    entities = (
        SchemaEntity(name="Article"),
        SchemaEntity(name="Quote", is_component=True),
        SchemaEntity(name="Asset"),
    )

    actual = await fetch_content_counts(
        entities,
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert (list(actual), len(requested)) == (["Article"], 1)


async def test_fetch_content_counts_skips_only_failing_entity() -> None:
    """
    ARRANGE: API failing with 500 for the Author count
    ACT:     fetch_content_counts for Article and Author
    ASSERT:  Article counted, Author left out
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if "authorsConnection" in _query(request):
            return httpx.Response(500, request=request)
        return _ok(request)

    actual = await fetch_content_counts(
        (SchemaEntity(name="Article"), SchemaEntity(name="Author")),
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert list(actual) == ["Article"]


async def test_fetch_content_counts_skips_graphql_errors() -> None:
    """
    ARRANGE: API answering 200 with a GraphQL error body
    ACT:     fetch_content_counts
    ASSERT:  entity left out
    """

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"errors": [{"message": "field not found"}]},
            request=request,
        )

    actual = await fetch_content_counts(
        (SchemaEntity(name="Article"),),
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert actual == {}


async def test_fetch_content_counts_retries_rate_limited_request(
    retry_hints: list[str | None],
) -> None:
    """
    ARRANGE: API answering 429 once, then 200
    ACT:     fetch_content_counts
    ASSERT:  entity counted after two calls
    """
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) == 1:
            return httpx.Response(429, request=request)
        return _ok(request)

    actual = await fetch_content_counts(
        (SchemaEntity(name="Article"),),
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert (actual["Article"].total, len(calls)) == (7, 2)


async def test_fetch_content_counts_skips_after_retries_exhausted(
    retry_hints: list[str | None],
) -> None:
    """
    ARRANGE: API always answering 503
    ACT:     fetch_content_counts
    ASSERT:  entity left out after one call plus every retry
    """
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503, request=request)

    actual = await fetch_content_counts(
        (SchemaEntity(name="Article"),),
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert (actual, len(calls)) == ({}, 5)


async def test_fetch_content_counts_passes_retry_after_to_schedule(
    retry_hints: list[str | None],
) -> None:
    """
    ARRANGE: API answering 429 with Retry-After: 3, then 200
    ACT:     fetch_content_counts
    ASSERT:  retry schedule sees the server's hint
    """
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) == 1:
            return httpx.Response(429, headers={"Retry-After": "3"}, request=request)
        return _ok(request)

    await fetch_content_counts(
        (SchemaEntity(name="Article"),),
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert retry_hints == ["3"]


async def test_fetch_content_counts_does_not_retry_client_errors(
    retry_hints: list[str | None],
) -> None:
    """
    ARRANGE: API answering 401
    ACT:     fetch_content_counts
    ASSERT:  one call, no retry, entity left out
    """
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(401, request=request)

    actual = await fetch_content_counts(
        (SchemaEntity(name="Article"),),
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert (actual, len(calls), retry_hints) == ({}, 1, [])


async def test_fetch_content_counts_skips_transport_errors() -> None:
    """
    ARRANGE: transport raising ConnectError
    ACT:     fetch_content_counts
    ASSERT:  entity left out, no exception raised
    """

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    actual = await fetch_content_counts(
        (SchemaEntity(name="Article"),),
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert actual == {}


async def test_fetch_content_counts_sends_authorization_header() -> None:
    """
    ARRANGE: configuration with a token
    ACT:     fetch_content_counts
    ASSERT:  bearer token sent
    """
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return _ok(request)

    await fetch_content_counts(
        (SchemaEntity(name="Article"),),
        config=HygraphConfig(endpoint=_CONFIG.endpoint, token="secret"),
        client_factory=_client_factory(handler),
    )

    assert seen == ["Bearer secret"]


async def test_fetch_content_counts_counts_every_batch() -> None:
    """
    ARRANGE: three models with a batch size of one
    ACT:     fetch_content_counts
    ASSERT:  all three counted
    """
    entities = tuple(SchemaEntity(name=name) for name in ("Article", "Author", "Tag"))

    actual = await fetch_content_counts(
        entities,
        config=HygraphConfig(endpoint=_CONFIG.endpoint, batch_size=1),
        client_factory=_client_factory(_ok),
    )

    assert sorted(actual) == ["Article", "Author", "Tag"]


async def test_fetch_content_counts_empty_input_returns_empty_dict() -> None:
    """
    ARRANGE: no entities
    ACT:     fetch_content_counts
    ASSERT:  empty dict without any request
    """

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    actual = await fetch_content_counts(
        (),
        config=_CONFIG,
        client_factory=_client_factory(handler),
    )

    assert actual == {}


def test_build_count_query_uses_default_plural() -> None:
    """
    ARRANGE: model without a plural API id
    ACT:     build_count_query
    ASSERT:  query targets articlesConnection
    """
    actual = build_count_query(SchemaEntity(name="Article"))

    assert "articlesConnection(stage: DRAFT)" in actual


def test_build_count_query_uses_declared_plural() -> None:
    """
    ARRANGE: model with plural API id BlogPosts
    ACT:     build_count_query
    ASSERT:  query targets blogPostsConnection
    """
    actual = build_count_query(SchemaEntity(name="BlogPost", plural_api_id="BlogPosts"))

    assert "blogPostsConnection(stage: PUBLISHED)" in actual
