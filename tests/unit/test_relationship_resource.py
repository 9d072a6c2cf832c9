"""Unit tests for the relationship reconciler against a scripted session."""

from __future__ import annotations

import pytest

from neoform.errors import BackendError
from neoform.errors import NotFoundError
from neoform.errors import ReplacementRequiredError
from neoform.errors import ValidationError
from neoform.identity import UUID_V4_PATTERN
from neoform.models import RelationshipModel
from neoform.resources.relationship import RelationshipResource
from neoform.resources.schema import PlanAction

_START = "11111111-1111-4111-8111-111111111111"
_END = "22222222-2222-4222-8222-222222222222"
_OTHER = "33333333-3333-4333-8333-333333333333"
_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"


@pytest.fixture()
def relationships(fake_session) -> RelationshipResource:
    return RelationshipResource(fake_session)


def _plan(**overrides) -> RelationshipModel:
    fields = {"type": "KNOWS", "start_node_id": _START, "end_node_id": _END}
    fields.update(overrides)
    return RelationshipModel(**fields)


def _record(**overrides) -> dict:
    record = {
        "type": "KNOWS",
        "properties": {"uuid": _ID},
        "start_node_id": _START,
        "end_node_id": _END,
    }
    record.update(overrides)
    return record


class TestCreate:
    async def test_create_assigns_uuid(self, relationships, fake_session):
        fake_session.queue({"uuid": "ignored"})

        created = await relationships.create(_plan(properties={"since": 2020}))

        assert UUID_V4_PATTERN.match(created.id)
        assert created.properties == {"since": "2020"}
        query, params = fake_session.calls[0]
        assert "CREATE (s)-[r:$($type)]->(e)" in query
        assert params == {
            "uuid": created.id,
            "start_uuid": _START,
            "end_uuid": _END,
            "type": "KNOWS",
            "properties": {"since": 2020},
        }

    async def test_self_loop(self, relationships, fake_session):
        fake_session.queue({"uuid": "ignored"})

        created = await relationships.create(_plan(type="foo", end_node_id=_START))

        assert created.properties is None
        assert fake_session.last_params["start_uuid"] == fake_session.last_params["end_uuid"]

    async def test_missing_endpoint_fails_fast(self, relationships, fake_session):
        with pytest.raises(NotFoundError, match="endpoint node"):
            await relationships.create(_plan())
        assert len(fake_session.calls) == 1

    async def test_missing_required_attribute(self, relationships, fake_session):
        with pytest.raises(ValidationError, match="start_node_id"):
            await relationships.create(_plan(start_node_id=None))
        assert fake_session.calls == []

    async def test_blank_type_rejected(self, relationships, fake_session):
        with pytest.raises(ValidationError, match="invalid relationship type"):
            await relationships.create(_plan(type=" "))
        assert fake_session.calls == []

    async def test_reserved_key_rejected(self, relationships, fake_session):
        with pytest.raises(ValidationError, match="uuid is reserved"):
            await relationships.create(_plan(properties={"uuid": "x"}))
        assert fake_session.calls == []

    async def test_backend_error_propagates(self, relationships, fake_session):
        fake_session.error = BackendError("Neo.TransientError.General.Unknown")

        with pytest.raises(BackendError):
            await relationships.create(_plan())


class TestRead:
    async def test_read_rebuilds_model(self, relationships, fake_session):
        fake_session.queue(_record(properties={"uuid": _ID, "since": 2020, "weight": 0.5}))
        state = _plan(id=_ID, properties={"since": "2020", "weight": "0.5"})

        assert await relationships.read(state) == state

    async def test_absent_properties_stay_absent(self, relationships, fake_session):
        fake_session.queue(_record(type="foo"))

        refreshed = await relationships.read(_plan(id=_ID, type="foo"))

        assert refreshed.properties is None
        assert refreshed.type == "foo"

    async def test_empty_properties_stay_empty(self, relationships, fake_session):
        fake_session.queue(_record())

        refreshed = await relationships.read(_plan(id=_ID, properties={}))

        assert refreshed.properties == {}

    async def test_missing_relationship_raises(self, relationships):
        with pytest.raises(NotFoundError, match="no relationship found"):
            await relationships.read(_plan(id=_ID))


class TestUpdate:
    async def test_update_replaces_properties(self, relationships, fake_session):
        fake_session.queue({"matched": 1})
        state = _plan(id=_ID, properties={"since": "2020"})

        updated = await relationships.update(_plan(properties={"until": "2024"}), state)

        assert updated == _plan(id=_ID, properties={"until": "2024"})
        query, params = fake_session.calls[0]
        assert "SET r = $properties, r.uuid = $uuid" in query
        assert params == {"uuid": _ID, "properties": {"until": 2024}}

    @pytest.mark.parametrize(
        ("field", "value"),
        [("start_node_id", _OTHER), ("end_node_id", _OTHER), ("type", "LIKES")],
    )
    async def test_immutable_change_refused(self, relationships, fake_session, field, value):
        with pytest.raises(ReplacementRequiredError) as excinfo:
            await relationships.update(_plan(**{field: value}), _plan(id=_ID))
        assert excinfo.value.attributes == (field,)
        assert fake_session.calls == []

    async def test_update_missing_relationship_raises(self, relationships, fake_session):
        fake_session.queue({"matched": 0})

        with pytest.raises(NotFoundError):
            await relationships.update(_plan(), _plan(id=_ID))


class TestDelete:
    async def test_delete_only_removes_edge(self, relationships, fake_session):
        fake_session.queue({"deleted": 1})

        deleted = await relationships.delete(_plan(id=_ID))

        assert deleted == RelationshipModel()
        query, _ = fake_session.calls[0]
        assert "DELETE r" in query
        assert "DETACH" not in query


class TestImportState:
    async def test_import_recovers_endpoints(self, relationships, fake_session):
        fake_session.queue(_record(properties={"uuid": _ID, "since": 2020}))

        imported = await relationships.import_state(_ID)

        assert imported == _plan(id=_ID, properties={"since": "2020"})

    async def test_import_without_properties(self, relationships, fake_session):
        fake_session.queue(_record())

        imported = await relationships.import_state(_ID)

        assert imported.properties is None

    async def test_import_missing_relationship_raises(self, relationships):
        with pytest.raises(NotFoundError):
            await relationships.import_state(_ID)


class TestPlan:
    def test_endpoint_change_is_a_replacement(self, relationships):
        diff = relationships.plan(_plan(id=_ID), _plan(start_node_id=_OTHER))
        assert diff.action == PlanAction.replace
        assert diff.replace_triggers == ("start_node_id",)
