"""Tests for the webhook primitives using mocked HTTP responses."""

import json

import pytest

# Skip all tests if httpx is not installed
pytest.importorskip("httpx")
pytest.importorskip("respx")

import httpx
import respx

from tagscope import PrimitiveError, collect_tags, create_cache
from tagscope.adapters.webhook import WebhookPrimitives
from tests.schemas import SIMPLE_SCHEMA

URL = "https://app.test.dev/api/revalidate"


@pytest.fixture
def webhook() -> WebhookPrimitives:
    """Create a WebhookPrimitives with test configuration."""
    return WebhookPrimitives(URL, token="test-token")


class TestWebhookPrimitives:
    """Tests for WebhookPrimitives with mocked responses."""

    @respx.mock
    def test_invalidate_stale(self, webhook: WebhookPrimitives) -> None:
        """Test that stale invalidations post the tag and profile."""
        route = respx.post(URL).mock(return_value=httpx.Response(200, json={"ok": True}))

        webhook.invalidate_stale("admin/users", "max")

        request = route.calls[0].request
        assert json.loads(request.content) == {
            "tag": "admin/users",
            "mode": "stale",
            "profile": "max",
        }
        assert request.headers["Authorization"] == "Bearer test-token"

    @respx.mock
    def test_invalidate_immediate(self, webhook: WebhookPrimitives) -> None:
        """Test that immediate invalidations post expire mode."""
        route = respx.post(URL).mock(return_value=httpx.Response(204))

        webhook.invalidate_immediate("users/byId:1")

        assert json.loads(route.calls[0].request.content) == {
            "tag": "users/byId:1",
            "mode": "expire",
        }

    @respx.mock
    def test_error_from_body(self, webhook: WebhookPrimitives) -> None:
        """Test that the endpoint's error message is surfaced."""
        respx.post(URL).mock(
            return_value=httpx.Response(401, json={"error": "Invalid token"})
        )

        with pytest.raises(PrimitiveError, match="Invalid token"):
            webhook.invalidate_stale("users", "max")

    @respx.mock
    def test_error_without_json(self, webhook: WebhookPrimitives) -> None:
        """Test that a non-JSON failure reports the status code."""
        respx.post(URL).mock(return_value=httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(PrimitiveError, match="HTTP 502"):
            webhook.invalidate_immediate("users")

    @respx.mock
    def test_no_token_no_auth_header(self) -> None:
        """Test that the Authorization header is omitted without a token."""
        route = respx.post(URL).mock(return_value=httpx.Response(200))

        WebhookPrimitives(URL).invalidate_immediate("users")

        assert "Authorization" not in route.calls[0].request.headers

    def test_register_tags_is_local(self, webhook: WebhookPrimitives) -> None:
        """Test that registration feeds the collector without HTTP."""
        with respx.mock(assert_all_called=False) as mock:
            route = mock.post(URL)
            with collect_tags() as tags:
                webhook.register_tags(["users/list", "users"])
            assert not route.called
        assert tags == ["users/list", "users"]

    def test_invalid_timeout(self) -> None:
        """Test that a non-positive timeout is rejected."""
        with pytest.raises(ValueError, match="timeout"):
            WebhookPrimitives(URL, timeout=0)

    @respx.mock
    def test_behind_cache(self, webhook: WebhookPrimitives) -> None:
        """Test that node operations reach the endpoint."""
        route = respx.post(URL).mock(return_value=httpx.Response(200, json={}))
        cache = create_cache(SIMPLE_SCHEMA, ["admin"], webhook)

        cache.admin.users.byId.revalidate_tag(id="9")

        assert json.loads(route.calls[0].request.content)["tag"] == "admin/users/byId:9"
