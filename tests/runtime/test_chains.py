# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""
Tests for coercion and resolution chains.

Key behaviors to verify:
1. Pre-existing coercers always run before constraint checks (c ∘ f)
2. A coercer failure propagates unchanged and no check runs
3. Violations are converted to CoercionError at the element path
4. Output checks skip null results
"""
from __future__ import annotations

from types import SimpleNamespace
from typing import Any, List

import pytest
from graphql.pyutils import Path as ResponsePath

from schemaguard.constraints import Constraint, LengthConstraint
from schemaguard.exceptions import CoercionError, ConstraintViolation, ResultConstraintError
from schemaguard.path import Path
from schemaguard.runtime.chains import CoercionChain, CoercionContext, ResolutionChain


class RecordingConstraint(Constraint):
    """Spy constraint that records every value it is asked to check."""

    name = "recording"
    directive_sdl = "directive @recording on INPUT_FIELD_DEFINITION"

    def __init__(self):
        super().__init__()
        self.seen: List[Any] = []

    def check(self, value, path):
        self.seen.append(value)


def _ctx(*segments) -> CoercionContext:
    return CoercionContext(path=Path.of(*segments), coordinate="BookInput.title")


def _info(*keys):
    path = None
    for key in keys:
        path = ResponsePath(path, key, None)
    return SimpleNamespace(path=path, field_name=keys[-1], context=None)


@pytest.mark.anyio
async def test_value_within_bounds_is_returned_unchanged():
    chain = CoercionChain.build("BookInput.title", constraints=[LengthConstraint(max=10)])

    assert await chain("short", _ctx("book", "title")) == "short"


@pytest.mark.anyio
async def test_checks_see_the_coerced_value():
    """
    GIVEN: A trimming coercer and @length(max: 5)
    WHEN: A padded value whose trimmed form fits is coerced
    THEN: The check validates the trimmed value and the chain returns it
    """
    chain = CoercionChain.build(
        "BookInput.title",
        coercers=[lambda value, _ctx: value.strip()],
        constraints=[LengthConstraint(max=5)],
    )

    assert await chain("   short   ", _ctx("book", "title")) == "short"


@pytest.mark.anyio
async def test_build_orders_coercers_before_checks():
    def trim(value, _ctx):
        return value.strip()

    chain = CoercionChain.build("BookInput.title", [trim], [LengthConstraint(max=5)])

    assert chain.describe() == [f"coerce:{trim.__qualname__}", "check:@length"]
    assert chain.constraints[0].max == 5


@pytest.mark.anyio
async def test_async_coercers_are_awaited():
    async def upper(value, _ctx):
        return value.upper()

    chain = CoercionChain.build("BookInput.title", [upper], [LengthConstraint(max=10)])

    assert await chain("abc", _ctx("title")) == "ABC"


@pytest.mark.anyio
async def test_coercer_failure_propagates_unchanged_and_skips_checks():
    spy = RecordingConstraint()
    failure = ValueError("not a title")

    def explode(_value, _ctx):
        raise failure

    chain = CoercionChain.build("BookInput.title", [explode], [spy])

    with pytest.raises(ValueError) as exc_info:
        await chain("anything", _ctx("title"))

    assert exc_info.value is failure
    assert spy.seen == []


@pytest.mark.anyio
async def test_violation_becomes_coercion_error_at_path():
    chain = CoercionChain.build("BookInput.title", constraints=[LengthConstraint(max=10)])

    with pytest.raises(CoercionError) as exc_info:
        await chain("hello world!", _ctx("book", "title"))

    error = exc_info.value
    assert error.path.as_list() == ["book", "title"]
    assert isinstance(error.original_error, ConstraintViolation)
    assert str(error) == "book.title: length: expected 12 to be at most 10"


@pytest.mark.anyio
async def test_coercion_context_exposes_request_context():
    seen = []

    def remember(value, ctx):
        seen.append((ctx.path.as_list(), ctx.context))
        return value

    info = SimpleNamespace(context={"user": "alice"})
    chain = CoercionChain.build("BookInput.title", [remember])

    await chain("x", CoercionContext(Path.of("book", "title"), "BookInput.title", info))

    assert seen == [(["book", "title"], {"user": "alice"})]


@pytest.mark.anyio
async def test_resolution_chain_checks_non_null_results():
    chain = ResolutionChain(
        "Book.title",
        lambda parent, info: parent["title"],
        (LengthConstraint(max=10),),
    )

    with pytest.raises(ResultConstraintError) as exc_info:
        await chain({"title": "far too long a title"}, _info("createBook", "title"))

    violation = exc_info.value.violation
    assert violation.path.as_list() == ["createBook", "title"]
    assert exc_info.value.message == "Result is incorrect"


@pytest.mark.anyio
async def test_resolution_chain_never_checks_null():
    spy = RecordingConstraint()
    chain = ResolutionChain("Book.title", lambda parent, info: None, (spy,))

    assert await chain({}, _info("book", "title")) is None
    assert spy.seen == []


@pytest.mark.anyio
async def test_resolution_chain_defaults_to_field_projection():
    chain = ResolutionChain("Book.title", None, (LengthConstraint(max=10),))

    assert await chain({"title": "short"}, _info("book", "title")) == "short"


@pytest.mark.anyio
async def test_resolution_chain_awaits_async_resolvers_and_propagates_failures():
    async def failing(parent, info):
        raise RuntimeError("database down")

    chain = ResolutionChain("Book.title", failing, (LengthConstraint(max=10),))

    with pytest.raises(RuntimeError, match="database down"):
        await chain({}, _info("book", "title"))
