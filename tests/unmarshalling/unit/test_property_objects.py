"""Tagged unmarshalling result tests."""

from __future__ import annotations

from dataclasses import dataclass

from simple_property_mapper.unmarshalling.property_objects import PropertyObject


@dataclass
class Customer:
    name: str = ""


@dataclass
class Supplier:
    name: str = ""


def test_equality_ignores_the_wrapped_object() -> None:
    first = PropertyObject(type_=Customer, instance_name="dan", obj=Customer(name="Daniel"))
    second = PropertyObject(type_=Customer, instance_name="dan", obj=Customer(name="Other"))

    assert first == second
    assert hash(first) == hash(second)
    assert first != PropertyObject(type_=Supplier, instance_name="dan", obj=Supplier())


def test_from_mapping_tags_each_value_with_its_runtime_type() -> None:
    tagged = PropertyObject.from_mapping({"dan": Customer(name="Daniel"), "acme": Supplier()})

    assert {(item.type_, item.instance_name) for item in tagged} == {
        (Customer, "dan"),
        (Supplier, "acme"),
    }


def test_to_mapping_restores_names() -> None:
    objects = {"dan": Customer(name="Daniel"), "eve": Customer(name="Eve")}

    assert PropertyObject.to_mapping(PropertyObject.from_mapping(objects)) == objects
