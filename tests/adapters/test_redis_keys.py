"""Unit tests for the Redis primitives against a mocked client."""

import json
from unittest.mock import ANY, MagicMock

import pytest

from tagscope.adapters.redis import RedisPrimitives


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


class TestRedisPrimitivesKeys:
    """Tests for the keys and commands RedisPrimitives issues."""

    def test_invalidate_stale_sets_marker(self, client: MagicMock) -> None:
        """Test that stale invalidations are written with retention."""
        RedisPrimitives(client, prefix="test").invalidate_stale("admin/users", "max")

        client.set.assert_called_once_with("test:tag:admin/users", ANY, px=86_400_000)
        marker = json.loads(client.set.call_args.args[1])
        assert marker["mode"] == "stale"
        assert isinstance(marker["at"], int)

    def test_invalidate_immediate_custom_retention(self, client: MagicMock) -> None:
        """Test that the retention duration is parsed."""
        RedisPrimitives(client, retention="5m").invalidate_immediate("users")

        client.set.assert_called_once_with("tagscope:tag:users", ANY, px=300_000)
        assert json.loads(client.set.call_args.args[1])["mode"] == "expire"

    def test_get_decodes_bytes(self, client: MagicMock) -> None:
        """Test reading a marker stored as bytes."""
        client.get.return_value = b'{"mode": "expire", "at": 1000}'
        result = RedisPrimitives(client, prefix="test").get_invalidation("users")

        client.get.assert_called_once_with("test:tag:users")
        assert result is not None
        assert result.mode == "expire"
        assert result.at == 1000

    def test_latest_queries_deduplicated_prefixes(self, client: MagicMock) -> None:
        """Test that prefixes of all tags are fetched once, in order."""
        client.mget.return_value = [None, b'{"mode": "stale", "at": 5}', None]
        primitives = RedisPrimitives(client, prefix="test")

        result = primitives.latest_invalidation(["users/byId:1", "users"])

        client.mget.assert_called_once_with(
            [
                "test:tag:users",
                "test:tag:users/byId",
                "test:tag:users/byId:1",
            ]
        )
        assert result is not None
        assert result.tag == "users/byId"

    def test_latest_prefers_newest(self, client: MagicMock) -> None:
        """Test that the most recent marker wins."""
        client.mget.return_value = [
            b'{"mode": "expire", "at": 9}',
            b'{"mode": "stale", "at": 5}',
        ]
        result = RedisPrimitives(client).latest_invalidation(["users/list"])
        assert result is not None
        assert result.tag == "users"
        assert result.at == 9

    def test_latest_of_nothing_skips_redis(self, client: MagicMock) -> None:
        """Test that no tags means no round trip."""
        assert RedisPrimitives(client).latest_invalidation([]) is None
        client.mget.assert_not_called()

    def test_clear_scans_prefix(self, client: MagicMock) -> None:
        """Test that clear walks the scan cursor until it wraps."""
        client.scan.side_effect = [(7, [b"test:tag:a"]), (0, [b"test:tag:b"])]

        RedisPrimitives(client, prefix="test").clear()

        client.scan.assert_any_call(0, match="test:tag:*", count=100)
        client.scan.assert_any_call(7, match="test:tag:*", count=100)
        assert client.delete.call_count == 2

    def test_empty_prefix_rejected(self, client: MagicMock) -> None:
        with pytest.raises(ValueError, match="prefix"):
            RedisPrimitives(client, prefix="")

    def test_zero_retention_rejected(self, client: MagicMock) -> None:
        with pytest.raises(ValueError, match="retention"):
            RedisPrimitives(client, retention=0)
