from typing import Optional

import pytest
from pydantic import Field

from campaignflow import Shape, ValidationError, validate
from campaignflow.schema import compatibility_problems, instantiate


class Contact(Shape):
    name: str = Field(min_length=1)
    age: int
    email: Optional[str] = None


class Person(Shape):
    name: str
    age: int


class Scored(Shape):
    score: float


class Counted(Shape):
    score: int


class MaybeNamed(Shape):
    name: Optional[str] = None
    age: int


def test_validate_normalizes_and_omits_absent_optionals():
    value = validate(Contact, {"name": "  Ada ", "age": "36", "extra": "dropped"})
    assert value == {"name": "Ada", "age": 36}


def test_validate_reports_every_violated_field():
    with pytest.raises(ValidationError) as exc_info:
        validate(Contact, {"name": ""})

    error = exc_info.value
    assert error.fields == ["name", "age"]
    assert error.message.startswith("Invalid Contact: ")
    assert str(error) == error.message


def test_validate_accepts_model_instances():
    assert validate(Person, Contact(name="Ada", age=36)) == {"name": "Ada", "age": 36}


def test_validate_without_shape_requires_an_object():
    assert validate(None, None) == {}
    assert validate(None, {"a": (1, 2)}) == {"a": [1, 2]}
    with pytest.raises(ValidationError):
        validate(None, ["not", "an", "object"])


def test_instantiate_rebuilds_shape_instances():
    person = instantiate(Person, {"name": "Ada", "age": 36})
    assert isinstance(person, Person)
    assert person.age == 36
    assert instantiate(Person, None) is None
    assert instantiate(None, {"x": 1}) == {"x": 1}


def test_compatible_shapes_report_no_problems():
    assert compatibility_problems(Contact, Person) == []
    assert compatibility_problems(Counted, Scored) == []
    assert compatibility_problems(None, None) == []


def test_missing_optional_and_mistyped_fields_are_reported():
    assert compatibility_problems(Scored, Person) == [
        "Person.name is not provided by Scored",
        "Person.age is not provided by Scored",
    ]
    assert compatibility_problems(MaybeNamed, Person) == ["Person.name is optional in MaybeNamed"]
    problems = compatibility_problems(Scored, Counted)
    assert len(problems) == 1
    assert problems[0].startswith("Counted.score expects")


def test_shapeless_producer_cannot_feed_required_fields():
    problems = compatibility_problems(None, Person)
    assert problems and "declares no shape" in problems[0]
