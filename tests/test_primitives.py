"""Tests for the primitives protocol and bundled doubles."""

import pytest

from tagscope import (
    CachePrimitives,
    NoopPrimitives,
    RecordingPrimitives,
    create_cache,
    create_primitives,
)
from tests.schemas import SIMPLE_SCHEMA


class TestProtocol:
    """Runtime protocol checks."""

    @pytest.mark.parametrize("impl", [NoopPrimitives(), RecordingPrimitives()])
    def test_bundled_doubles_satisfy_protocol(self, impl: object) -> None:
        assert isinstance(impl, CachePrimitives)

    def test_incomplete_object_does_not(self) -> None:
        class OnlyRegister:
            def register_tags(self, tags: list[str]) -> None:
                pass

        assert not isinstance(OnlyRegister(), CachePrimitives)


class TestRecordingPrimitives:
    """Tests for the recording test double."""

    def test_records_in_order(self) -> None:
        recorder = RecordingPrimitives()
        recorder.register_tags(["a", "b"])
        recorder.invalidate_stale("a", "max")
        recorder.invalidate_immediate("b")
        assert recorder.registered == [["a", "b"]]
        assert recorder.stale == [("a", "max")]
        assert recorder.expired == ["b"]
        assert [name for name, _ in recorder.calls] == [
            "register_tags",
            "invalidate_stale",
            "invalidate_immediate",
        ]

    def test_copies_registered_lists(self) -> None:
        recorder = RecordingPrimitives()
        tags = ["a"]
        recorder.register_tags(tags)
        tags.append("b")
        assert recorder.registered == [["a"]]

    def test_reset(self) -> None:
        recorder = RecordingPrimitives()
        recorder.invalidate_immediate("a")
        recorder.reset()
        assert recorder.expired == []
        assert recorder.calls == []


class TestCreatePrimitives:
    """Tests for wrapping plain callables."""

    def test_wraps_functions(self) -> None:
        seen: list[tuple[str, object]] = []
        primitives = create_primitives(
            register_tags=lambda tags: seen.append(("register", tags)),
            invalidate_stale=lambda tag, profile: seen.append(("stale", (tag, profile))),
            invalidate_immediate=lambda tag: seen.append(("expire", tag)),
        )
        cache = create_cache(SIMPLE_SCHEMA, ["admin"], primitives)
        cache.admin.users.byId.cache_tag(id="7")
        cache.users.revalidate_tag()
        cache.admin.config.update_tag()
        assert seen == [
            (
                "register",
                ["admin/users/byId:7", "admin/users", "admin", "users/byId:7", "users"],
            ),
            ("stale", ("users", "max")),
            ("expire", "admin/config"),
        ]

    def test_rejects_non_callables(self) -> None:
        with pytest.raises(TypeError, match="invalidate_stale"):
            create_primitives(
                register_tags=lambda tags: None,
                invalidate_stale="nope",  # type: ignore[arg-type]
                invalidate_immediate=lambda tag: None,
            )

    def test_satisfies_protocol(self) -> None:
        primitives = create_primitives(
            register_tags=print, invalidate_stale=print, invalidate_immediate=print
        )
        assert isinstance(primitives, CachePrimitives)
