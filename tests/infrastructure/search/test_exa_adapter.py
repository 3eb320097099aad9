"""Tests for the Exa search adapter."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio
from pydantic import ValidationError

from claim_checker.domain.errors import SchemaViolationError, SearchError
from claim_checker.infrastructure.search.exa_adapter import ExaConfig, ExaSearchAdapter

SEARCH_URL = "https://api.exa.ai/search"


def _response(status_code: int, json_data=None, text: str = None) -> httpx.Response:
    """Build a response bound to a real request so raise_for_status works."""
    request = httpx.Request("POST", SEARCH_URL)
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, request=request)
    return httpx.Response(status_code, text=text or "", request=request)


def _results(count: int):
    return {
        "results": [
            {"url": f"https://r{n}.org", "title": f"Result {n}", "text": f"Body {n}"}
            for n in range(1, count + 1)
        ]
    }


@pytest_asyncio.fixture
async def exa_adapter():
    """Provide an initialized Exa adapter with no retry delay."""
    adapter = ExaSearchAdapter(ExaConfig(api_key="test-key", retry_delay=0.0, max_retries=2))
    await adapter.initialize()
    yield adapter
    await adapter.shutdown()


@pytest.mark.asyncio
async def test_search(exa_adapter):
    """Test that results are mapped to documents and the payload is correct."""
    mock_post = AsyncMock(return_value=_response(200, _results(3)))
    exa_adapter._client.post = mock_post

    documents = await exa_adapter.search("How tall is the Eiffel Tower?", num_results=3)

    assert [d.url for d in documents] == ["https://r1.org", "https://r2.org", "https://r3.org"]
    assert documents[0].title == "Result 1"
    assert documents[0].text == "Body 1"

    path = mock_post.call_args.args[0]
    payload = mock_post.call_args.kwargs["json"]
    assert path == "/search"
    assert payload["query"] == "How tall is the Eiffel Tower?"
    assert payload["numResults"] == 3
    assert payload["contents"] == {"text": True, "livecrawl": "always"}


@pytest.mark.asyncio
async def test_search_caps_results(exa_adapter):
    """Test that surplus results are dropped."""
    exa_adapter._client.post = AsyncMock(return_value=_response(200, _results(5)))

    documents = await exa_adapter.search("query", num_results=2)

    assert len(documents) == 2


@pytest.mark.asyncio
async def test_search_missing_text(exa_adapter):
    """Test that missing text and title are tolerated."""
    exa_adapter._client.post = AsyncMock(
        return_value=_response(200, {"results": [{"url": "https://r1.org"}]})
    )

    documents = await exa_adapter.search("query")

    assert documents[0].text == ""
    assert documents[0].title is None


@pytest.mark.asyncio
async def test_search_malformed_result(exa_adapter):
    """Test that a result without a url is a schema violation."""
    exa_adapter._client.post = AsyncMock(
        return_value=_response(200, {"results": [{"title": "No url"}]})
    )

    with pytest.raises(SchemaViolationError) as exc_info:
        await exa_adapter.search("query")

    assert isinstance(exc_info.value.__cause__, ValidationError)


@pytest.mark.asyncio
async def test_retry_on_server_error(exa_adapter):
    """Test that retryable statuses are retried."""
    mock_post = AsyncMock(side_effect=[
        _response(503, text="unavailable"),
        _response(200, _results(1)),
    ])
    exa_adapter._client.post = mock_post

    documents = await exa_adapter.search("query")

    assert len(documents) == 1
    assert mock_post.await_count == 2


@pytest.mark.asyncio
async def test_retries_exhausted(exa_adapter):
    """Test that persistent failures raise a search error."""
    mock_post = AsyncMock(return_value=_response(429, text="rate limited"))
    exa_adapter._client.post = mock_post

    with pytest.raises(SearchError, match="HTTP 429"):
        await exa_adapter.search("query")

    assert mock_post.await_count == 3


@pytest.mark.asyncio
async def test_client_error_not_retried(exa_adapter):
    """Test that non-retryable statuses fail immediately."""
    mock_post = AsyncMock(return_value=_response(401, text="bad key"))
    exa_adapter._client.post = mock_post

    with pytest.raises(SearchError, match="HTTP 401"):
        await exa_adapter.search("query")

    assert mock_post.await_count == 1


@pytest.mark.asyncio
async def test_transport_error(exa_adapter):
    """Test that transport errors are retried then raised."""
    request = httpx.Request("POST", SEARCH_URL)
    mock_post = AsyncMock(side_effect=httpx.ConnectError("refused", request=request))
    exa_adapter._client.post = mock_post

    with pytest.raises(SearchError, match="ConnectError"):
        await exa_adapter.search("query")

    assert mock_post.await_count == 3


@pytest.mark.asyncio
async def test_invalid_json(exa_adapter):
    """Test that a non-JSON body raises a search error."""
    exa_adapter._client.post = AsyncMock(return_value=_response(200, text="<html>"))

    with pytest.raises(SearchError, match="invalid JSON"):
        await exa_adapter.search("query")


@pytest.mark.asyncio
async def test_initialize_requires_api_key():
    """Test that a missing API key fails initialization."""
    adapter = ExaSearchAdapter(ExaConfig(api_key=""))

    with pytest.raises(ConnectionError):
        await adapter.initialize()

    assert not adapter.is_available


@pytest.mark.asyncio
async def test_search_requires_initialization():
    """Test that search fails before initialization."""
    adapter = ExaSearchAdapter(ExaConfig(api_key="test-key"))

    with pytest.raises(RuntimeError, match="Provider not initialized"):
        await adapter.search("query")


@pytest.mark.asyncio
async def test_shutdown(exa_adapter):
    """Test that shutdown releases the client."""
    await exa_adapter.shutdown()

    assert not exa_adapter.is_available
    assert exa_adapter._client is None


def test_config_from_env():
    """Test reading configuration from the environment."""
    env = {"EXA_API_KEY": "env-key", "EXA_LIVECRAWL": "fallback", "EXA_MAX_RETRIES": "0"}
    with patch.dict("os.environ", env):
        config = ExaConfig.from_env()

    assert config.api_key == "env-key"
    assert config.livecrawl == "fallback"
    assert config.max_retries == 0
    assert ExaSearchAdapter(config).capabilities["retry_mechanism"] is False


def test_adapter_from_env():
    """Test building the adapter straight from the environment."""
    with patch.dict("os.environ", {"EXA_API_KEY": "env-key"}):
        adapter = ExaSearchAdapter.from_env(livecrawl="never")

    assert adapter._config.api_key == "env-key"
    assert adapter.capabilities["live_crawl"] is False
    assert not adapter.is_available
