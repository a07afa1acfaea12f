"""
Tests for storykit/ordered_map.py
"""

from __future__ import annotations

import json
import threading

from pydantic import BaseModel

from storykit.ordered_map import OrderedMap, encode_json
from storykit.types import NumberControl


class Person(BaseModel):
    name: str
    age: int
    tags: dict[str, int] = {}


class TestInsertionOrder:
    def test_empty_map(self):
        assert OrderedMap().serialize() == "{}"

    def test_keys_keep_insertion_order(self):
        m = OrderedMap()
        for key in ["zeta", "alpha", "mid"]:
            m.add(key, key.upper())
        assert m.serialize() == '{"zeta":"ZETA","alpha":"ALPHA","mid":"MID"}'
        assert m.keys() == ["zeta", "alpha", "mid"]

    def test_order_survives_many_keys(self):
        m = OrderedMap()
        keys = [f"k{i}" for i in reversed(range(50))]
        for i, key in enumerate(keys):
            m.add(key, i)
        decoded = json.loads(m.serialize())
        assert list(decoded) == keys

    def test_repeated_key_is_emitted_twice(self):
        """A repeated add appends again; both occurrences carry the latest value."""
        m = OrderedMap()
        m.add("a", 1)
        m.add("b", 2)
        m.add("a", 3)
        assert m.serialize() == '{"a":3,"b":2,"a":3}'
        assert len(m) == 3
        assert m["a"] == 3


class TestValueEncoding:
    def test_nested_values_are_compact(self):
        m = OrderedMap()
        m.add("obj", {"b": 1, "a": [1, 2]})
        assert m.serialize() == '{"obj":{"a":[1,2],"b":1}}'

    def test_nested_ordered_map_keeps_its_order(self):
        inner = OrderedMap()
        inner.add("y", 1)
        inner.add("x", 2)
        outer = OrderedMap()
        outer.add("inner", inner)
        assert outer.serialize() == '{"inner":{"y":1,"x":2}}'

    def test_pydantic_values_drop_unset_bounds(self):
        assert encode_json({"control": NumberControl(min=1)}) == '{"control":{"type":"number","min":1}}'

    def test_pydantic_fields_keep_declaration_order(self):
        m = OrderedMap()
        m.add("person", Person(name="Ada", age=36, tags={"z": 1, "a": 2}))
        assert m.serialize() == '{"person":{"name":"Ada","age":36,"tags":{"a":2,"z":1}}}'

    def test_unicode_is_not_escaped(self):
        m = OrderedMap()
        m.add("greeting", "héllo")
        assert m.serialize() == '{"greeting":"héllo"}'


class TestConcurrency:
    def test_concurrent_adds_are_all_recorded(self):
        m = OrderedMap()

        def worker(n: int):
            for i in range(100):
                m.add(f"w{n}-{i}", i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(m) == 800
        assert len(json.loads(m.serialize())) == 800
