"""Tests for Engine: identity, registry, globals."""

import logging

import pytest

from refgraph import (
    Engine,
    EngineConfiguration,
    PropertyConfiguration,
    Reference,
    ReservedNameCollision,
)


class TestIdentity:
    def test_ids_are_sequential(self):
        engine = Engine()
        a = engine.create_reference(1)
        b = engine.create_reference(2)
        assert b.id == a.id + 1

    def test_children_get_their_own_ids(self):
        engine = Engine()
        root = engine.create_reference({"a": 1, "b": [2, 3]})
        ids = {root.id, root.child("a").id, root.child("b").id}
        ids.update(child.id for child in root.child("b").get())
        assert len(ids) == 5
        assert len(engine) == 5

    def test_ids_never_reused(self):
        engine = Engine()
        root = engine.create_reference({"a": 1})
        old_child = root.child("a")
        root.assign({"a": 2})
        assert root.child("a").id != old_child.id


class TestRegistry:
    def test_get_reference(self):
        engine = Engine()
        r = engine.create_reference(1)
        assert engine.get_reference(r.id) is r
        assert r.id in engine

    def test_get_reference_missing(self):
        engine = Engine()
        assert engine.get_reference(999) is None
        assert engine.get_reference(None) is None

    def test_parent_link(self):
        engine = Engine()
        root = engine.create_reference({"a": 1})
        assert root.child("a").parent is root
        assert root.parent is None

    def test_parent_by_id(self):
        engine = Engine()
        root = engine.create_reference({})
        child = engine.create_reference(1, parent=root.id)
        assert child.parent is root

    def test_reserved_name_rejected(self):
        engine = Engine()
        with pytest.raises(ReservedNameCollision):
            engine.create_reference({"on": 1})

    def test_nested_reserved_name_rejected(self):
        engine = Engine()
        with pytest.raises(ReservedNameCollision):
            engine.create_reference({"a": {"valueOf": 1}})

    def test_configuration_accepted(self):
        engine = Engine()
        r = engine.create_reference(PropertyConfiguration(3))
        assert r.get() == 3

    def test_default_value_is_none(self):
        assert Engine().create_reference().get() is None


class TestGlobals:
    def test_seeded_from_configuration(self):
        config = EngineConfiguration().with_global_properties(
            {"property": "aString", "counter": PropertyConfiguration({"n": 0})}
        )
        engine = Engine(config)
        assert engine.global_reference("property").get() == "aString"
        assert isinstance(engine.globals["counter"], Reference)
        assert list(engine.globals) == ["property", "counter"]

    def test_globals_read_only(self):
        engine = Engine(EngineConfiguration().with_global_properties({"x": 1}))
        with pytest.raises(TypeError):
            engine.globals["y"] = None

    def test_unknown_global(self):
        with pytest.raises(KeyError):
            Engine().global_reference("nope")

    def test_seeding_logged(self, caplog):
        config = EngineConfiguration().with_global_properties({"x": 1, "y": 2})
        with caplog.at_level(logging.INFO, logger="refgraph.engine"):
            Engine(config)
        assert "2 global properties" in caplog.text

    def test_engine_update_runs_each_global(self):
        config = EngineConfiguration().with_global_properties(
            {
                "a": PropertyConfiguration(0, lambda current, parent, engine: current + 1),
                "b": PropertyConfiguration(10, lambda current, parent, engine: current * 2),
            }
        )
        engine = Engine(config)
        engine.update()
        assert engine.global_reference("a").get() == 1
        assert engine.global_reference("b").get() == 20


class TestFailedConstruction:
    def test_nested_reserved_name_leaves_registry_untouched(self):
        engine = Engine()
        with pytest.raises(ReservedNameCollision):
            engine.create_reference({"a": 1, "b": {"set": 1}})
        assert len(engine) == 0

    def test_reserved_name_inside_array_leaves_registry_untouched(self):
        engine = Engine()
        with pytest.raises(ReservedNameCollision):
            engine.create_reference([1, [{"get": 2}]])
        assert len(engine) == 0

    def test_failed_assign_leaves_registry_and_value_untouched(self):
        engine = Engine()
        r = engine.create_reference({})
        with pytest.raises(ReservedNameCollision):
            r.assign({"a": 1, "b": {"on": 1}})
        assert len(engine) == 1
        assert r.get() == {}

    def test_next_id_follows_last_registered(self):
        engine = Engine()
        first = engine.create_reference(1)
        with pytest.raises(ReservedNameCollision):
            engine.create_reference({"x": {"valueOf": 1}})
        assert engine.create_reference(2).id == first.id + 1
