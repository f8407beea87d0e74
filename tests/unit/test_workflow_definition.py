import pytest

from campaignflow import DefinitionError, Shape, Step, WorkflowDefinition, step


class Text(Shape):
    text: str


class Count(Shape):
    count: int


@step(input=Text, output=Text)
def shout_text(ctx):
    """Upper-case the text."""
    return {"text": ctx.input.text.upper()}


@step("count", input=Text, output=Count, requires=("counter",))
def count_text(ctx):
    return {"count": ctx.deps["counter"](ctx.input.text)}


def test_step_decorator_defaults():
    assert isinstance(shout_text, Step)
    assert shout_text.name == "shout-text"
    assert shout_text.description == "Upper-case the text."
    assert not shout_text.resumable
    assert count_text.requires == ("counter",)


def test_build_checks_and_exposes_definition():
    workflow = WorkflowDefinition.build(
        "text", [shout_text, count_text], Text, Count, collaborators={"counter": len, "other": 1}
    )
    assert workflow.id == "text"
    assert len(workflow) == 2
    assert workflow.step_at(1) is count_text
    assert workflow.index_of("count") == 1
    assert workflow.deps_for(count_text) == {"counter": len}
    assert workflow.deps_for(shout_text) == {}


def test_build_rejects_duplicate_step_names():
    with pytest.raises(DefinitionError, match="duplicate step name"):
        WorkflowDefinition.build("dup", [shout_text, shout_text], Text, Text)


def test_build_rejects_incompatible_boundaries():
    with pytest.raises(DefinitionError, match="count -> output"):
        WorkflowDefinition.build(
            "mismatch", [shout_text, count_text], Text, Text, collaborators={"counter": len}
        )
    with pytest.raises(DefinitionError, match="input -> shout-text"):
        WorkflowDefinition.build("bad-input", [shout_text], Count, Text)


def test_build_rejects_missing_collaborators():
    with pytest.raises(DefinitionError, match="missing collaborators \\['counter'\\]"):
        WorkflowDefinition.build("no-deps", [count_text], Text, Count)


def test_build_rejects_empty_workflows():
    with pytest.raises(DefinitionError):
        WorkflowDefinition.build("empty", [], Text, Text)
    with pytest.raises(DefinitionError):
        WorkflowDefinition.build("", [shout_text], Text, Text)
