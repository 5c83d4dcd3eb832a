"""Integration: materialize the network unit from text, call it, teach it.

Exercises the full path: definition text -> engine -> unit type ->
create() -> build() -> validated dispatch -> teaching to another unit.
"""

import asyncio

import pytest

from unitkit.core.enums import UnitState
from unitkit.core.errors import UnknownCapabilityError, ValidationError
from unitkit.units.definitions import (
    NETWORK_UNIT_SOURCE,
    TYPED_NETWORK_UNIT_SOURCE,
    network_dependencies,
)
from unitkit.units.network import NetworkUnit


class TestMaterializedNetworkUnit:
    def test_identity(self, materialized_network_type):
        unit = materialized_network_type.create({"baseUrl": "https://test.api.com"})
        identity = unit.whoami()
        assert "materialized-network" in identity
        assert "1.0.0" in identity
        assert unit.state == UnitState.READY

    def test_capabilities(self, materialized_network_type):
        unit = materialized_network_type.create({"baseUrl": "https://test.api.com"})
        assert unit.capabilities().list() == ["get", "post"]
        assert [d.name for d in unit.schema().list()] == ["get", "post"]

    @pytest.mark.asyncio
    async def test_get(self, materialized_network_type):
        unit = materialized_network_type.create({"baseUrl": "https://test.api.com"})
        result = await unit.execute("get", "/test")
        assert result["status"] == 200
        assert result["data"]["path"] == "/test"
        assert "MATERIALIZED" in result["data"]["message"]

    @pytest.mark.asyncio
    async def test_post(self, materialized_network_type):
        unit = materialized_network_type.create({"baseUrl": "https://test.api.com"})
        result = await unit.execute("post", "/create", {"name": "John"})
        assert result["status"] == 201
        assert result["data"]["received"]["name"] == "John"

    @pytest.mark.asyncio
    async def test_validation_at_the_boundary(self, materialized_network_type):
        unit = materialized_network_type.create()
        with pytest.raises(ValidationError) as excinfo:
            await unit.execute("post", None, [1, 2])
        assert len(excinfo.value.issues) == 2

    @pytest.mark.asyncio
    async def test_unknown_capability(self, materialized_network_type):
        unit = materialized_network_type.create()
        with pytest.raises(UnknownCapabilityError):
            await unit.execute("delete", "/x")

    @pytest.mark.asyncio
    async def test_instances_are_independent(self, materialized_network_type):
        a = materialized_network_type.create({"baseUrl": "https://a"})
        b = materialized_network_type.create({"baseUrl": "https://b"})
        assert (a.base_url, b.base_url) == ("https://a", "https://b")
        assert a.capabilities() is not b.capabilities()


class TestTeaching:
    @pytest.mark.asyncio
    async def test_learned_capability_matches_mentor(self, materialized_network_type):
        mentor = materialized_network_type.create({"baseUrl": "https://test.api.com"})
        learner = NetworkUnit.create()

        learned = learner.learn([mentor.teach()])

        assert learned == ["materialized-network.get", "materialized-network.post"]
        assert learner.can("materialized-network.get")
        direct = await mentor.execute("get", "/shared")
        via_learner = await learner.execute("materialized-network.get", "/shared")
        assert via_learner["status"] == direct["status"]
        assert via_learner["data"] == direct["data"]

    def test_learned_schema_is_namespaced(self, materialized_network_type):
        mentor = materialized_network_type.create()
        learner = NetworkUnit.create()
        learner.learn([mentor.teach()])
        descriptor = learner.schema().get("materialized-network.post")
        assert descriptor is not None
        assert descriptor.name == "materialized-network.post"
        assert mentor.schema().get("post").name == "post"

    @pytest.mark.asyncio
    async def test_learned_call_is_validated_by_learner(self, materialized_network_type):
        learner = NetworkUnit.create()
        learner.learn([materialized_network_type.create().teach()])
        with pytest.raises(ValidationError):
            await learner.execute("materialized-network.get", 42)

    def test_learning_shares_mentor_state(self, counter_factory, materialized_network_type):
        counter = counter_factory.create()
        learner = materialized_network_type.create()
        learner.learn([counter.teach()])

        learner.capabilities().execute("counter.increment", 5)

        assert counter.peek() == 5
        assert learner.capabilities().execute("counter.peek") == 5

    def test_mentor_unaffected_by_learning(self, materialized_network_type):
        mentor = materialized_network_type.create()
        learner = NetworkUnit.create()
        learner.learn([mentor.teach()])
        assert mentor.capabilities().list() == ["get", "post"]


class TestModes:
    def test_secure_mode(self, engine):
        unit_type = engine.materialize_secure(NETWORK_UNIT_SOURCE, network_dependencies())
        assert "materialized-network" in unit_type.create().whoami()

    @pytest.mark.asyncio
    async def test_typed_mode(self, engine):
        unit_type = await engine.materialize_typed(
            TYPED_NETWORK_UNIT_SOURCE, network_dependencies()
        )
        unit = unit_type.create({"baseUrl": "https://typed.api.com"})
        result = await unit.execute("post", "/typed", {"ok": True})
        assert result["status"] == 201
        assert result["data"]["received"] == {"ok": True}

    @pytest.mark.asyncio
    async def test_concurrent_materialized_calls(self, materialized_network_type):
        unit = materialized_network_type.create()
        results = await asyncio.gather(
            *(unit.execute("get", f"/p{i}") for i in range(5))
        )
        assert [r["data"]["path"] for r in results] == [f"/p{i}" for i in range(5)]


class TestStrictOption:
    def test_materialized_unit_honours_strict_mode(self, materialized_network_type):
        assert materialized_network_type.create().validator().strict_mode is False
        unit = materialized_network_type.create({"strictMode": True})
        assert unit.validator().strict_mode is True

    @pytest.mark.asyncio
    async def test_typed_unit_honours_strict_mode(self, engine):
        unit_type = await engine.materialize_typed(
            TYPED_NETWORK_UNIT_SOURCE, network_dependencies()
        )
        unit = unit_type.create({"strict_mode": True})
        with pytest.raises(ValidationError):
            await unit.execute("get", "/x", "extra")
