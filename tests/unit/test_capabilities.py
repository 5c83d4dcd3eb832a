"""Tests for the Capabilities registry."""

from __future__ import annotations

import asyncio

import pytest

from unitkit.core.capabilities import Capabilities
from unitkit.core.errors import InvalidCapabilityError, UnknownCapabilityError


def _echo(*args):
    return args


class TestCreate:
    def test_lists_in_insertion_order(self):
        caps = Capabilities.create("u", {"b": _echo, "a": _echo, "c": _echo})
        assert caps.list() == ["b", "a", "c"]

    def test_non_callable_rejected(self):
        with pytest.raises(InvalidCapabilityError, match="'broken'"):
            Capabilities.create("u", {"ok": _echo, "broken": 42})

    def test_error_names_owner(self):
        with pytest.raises(InvalidCapabilityError) as excinfo:
            Capabilities.create("owner-x", {"broken": "not a function"})
        assert excinfo.value.owner_id == "owner-x"
        assert excinfo.value.name == "broken"

    def test_empty_registry(self):
        caps = Capabilities.create("u", {})
        assert caps.list() == []
        assert len(caps) == 0


class TestLookup:
    def test_has(self):
        caps = Capabilities.create("u", {"get": _echo})
        assert caps.has("get")
        assert not caps.has("post")
        assert "get" in caps

    def test_get_returns_same_callable(self):
        caps = Capabilities.create("u", {"get": _echo})
        assert caps.get("get") is _echo
        assert caps.get("missing") is None

    def test_list_is_a_copy(self):
        caps = Capabilities.create("u", {"get": _echo})
        names = caps.list()
        names.append("injected")
        assert caps.list() == ["get"]


class TestExecute:
    def test_passes_positional_args(self):
        caps = Capabilities.create("u", {"echo": _echo})
        assert caps.execute("echo", 1, "two", {"three": 3}) == (1, "two", {"three": 3})

    def test_unknown_capability_raises(self):
        caps = Capabilities.create("u", {"get": _echo})
        with pytest.raises(UnknownCapabilityError, match="'post'") as excinfo:
            caps.execute("post", "/x")
        assert excinfo.value.available == ["get"]

    def test_implementation_errors_propagate_unchanged(self):
        boom = RuntimeError("simulated network failure")

        def failing(*_):
            raise boom

        caps = Capabilities.create("u", {"fail": failing})
        with pytest.raises(RuntimeError) as excinfo:
            caps.execute("fail")
        assert excinfo.value is boom

    @pytest.mark.asyncio
    async def test_async_result_returned_for_caller_to_await(self):
        async def slow(value):
            await asyncio.sleep(0)
            return value * 2

        caps = Capabilities.create("u", {"slow": slow})
        pending = caps.execute("slow", 21)
        assert asyncio.iscoroutine(pending)
        assert await pending == 42

    @pytest.mark.asyncio
    async def test_async_errors_surface_on_await(self):
        async def failing():
            raise ValueError("rejected")

        caps = Capabilities.create("u", {"fail": failing})
        with pytest.raises(ValueError, match="rejected"):
            await caps.execute("fail")

    def test_execute_does_not_validate(self):
        # No schema involved: whatever arguments arrive are forwarded.
        caps = Capabilities.create("u", {"echo": _echo})
        assert caps.execute("echo") == ()
