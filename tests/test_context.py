import pytest

from jsonnet_core.context import Context, ContextBuilder
from jsonnet_core.errors import ErrorKind, JsonnetError
from jsonnet_core.pending import Pending, evaluated


def make_context(**values):
    builder = ContextBuilder(state="state")
    for name, value in values.items():
        builder.bind(name, evaluated(value))
    return builder.build()


def test_builder_binds_values():
    ctx = make_context(x=1, y=2)
    assert ctx.binding("x").evaluate() == 1
    assert ctx.binding("y").evaluate() == 2
    assert ctx.contains_binding("x") is True
    assert ctx.contains_binding("z") is False
    assert ctx.state == "state"


def test_builder_rejects_double_bind():
    builder = ContextBuilder()
    builder.bind("x", evaluated(1))
    with pytest.raises(ValueError):
        builder.bind("x", evaluated(2))


def test_missing_binding_suggests_similar():
    ctx = make_context(value=1, other=2)
    with pytest.raises(JsonnetError) as info:
        ctx.binding("valeu")
    assert info.value.kind is ErrorKind.VARIABLE_IS_NOT_DEFINED
    assert info.value.details[1] == ["value"]
    assert info.value.message.endswith(
        "There is variable with similar name present: value"
    )


def test_missing_binding_without_suggestions():
    ctx = make_context()
    with pytest.raises(JsonnetError) as info:
        ctx.binding("q")
    assert info.value.message == "variable is not defined: q"


def test_with_var_shadows_without_touching_parent():
    parent = make_context(x=1)
    child = parent.with_var("x", 5)
    assert child.binding("x").evaluate() == 5
    assert parent.binding("x").evaluate() == 1
    assert child.contains_binding("x")


def test_extend_keeps_objects_unless_overridden():
    base = Context(state="s", dollar="top", this="self-obj")
    child = base.extend({}, this="inner")
    assert child.dollar == "top"
    assert child.this == "inner"
    assert child.super_obj is None
    assert child is not base


def test_extend_sees_parent_bindings():
    parent = make_context(a=1)
    child = parent.extend({"b": evaluated(2)})
    assert child.binding("a").evaluate() == 1
    assert child.binding("b").evaluate() == 2
    assert not parent.contains_binding("b")


def test_into_future_fills_pending():
    cell = Pending()
    ctx = make_context(a=1)
    assert ctx.into_future(cell) is ctx
    assert cell.unwrap() is ctx


def test_dummy_state_fails_but_bindings_work():
    builder = ContextBuilder()
    builder.bind("a", evaluated(7))
    ctx = builder.build()
    assert ctx.binding("a").evaluate() == 7
    assert ctx.contains_binding("a") is True
    with pytest.raises(RuntimeError):
        _ = ctx.state
    assert ContextBuilder(state="real").build().state == "real"


def test_contexts_equal_only_by_identity():
    a = make_context(x=1)
    b = make_context(x=1)
    assert a == a
    assert not (a == b)


def test_extending_builder():
    parent = make_context(a=1)
    child = ContextBuilder.extending(parent).bind("b", evaluated(2)).build()
    assert child.binding("a").evaluate() == 1
    assert child.binding("b").evaluate() == 2
    assert child.state == "state"