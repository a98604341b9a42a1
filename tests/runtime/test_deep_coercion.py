"""
Tests for deep argument coercion.

Key behaviors to verify:
1. Every violation in a nested argument tree is collected (no short-circuit)
2. Errors come out depth-first in declaration/index order, also when sibling
   branches run concurrently and finish out of order
3. Paths locate the exact offending element, list indices included
4. Null values never reach coercers or checks
"""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

import anyio
import pytest
from graphql import GraphQLList, GraphQLNonNull, GraphQLSchema, build_schema

from schemaguard.constraints import LengthConstraint
from schemaguard.exceptions import CoercionError
from schemaguard.path import Path
from schemaguard.runtime.coercion import ArgumentCoercer, CoercionPlan
from schemaguard.visitor import apply_constraints


LIBRARY_SDL = LengthConstraint.directive_sdl + """

type Query {
  books: [Book]
}

type Book {
  title: String
}

type Mutation {
  createBooks(books: [BookInput!]!, note: String @length(max: 4)): [Book]
}

input BookInput {
  title: String! @length(max: 10)
  tags: [String!] @length(max: 2)
  author: AuthorInput
}

input AuthorInput {
  name: String @length(max: 5)
}
"""


async def _coerce(library, values: Dict[str, Any], *, concurrent: bool = True):
    schema, plan = library
    field = schema.mutation_type.fields["createBooks"]
    errors: List[CoercionError] = []
    coerced = await ArgumentCoercer(plan, concurrent=concurrent).coerce_arguments(
        "Mutation", "createBooks", field, values, errors.append
    )
    return coerced, errors


@pytest.fixture()
def library() -> Tuple[GraphQLSchema, CoercionPlan]:
    schema = build_schema(LIBRARY_SDL)
    return schema, apply_constraints(schema)


@pytest.mark.anyio
@pytest.mark.parametrize("concurrent", [True, False])
async def test_all_violations_are_collected_in_declaration_order(library, concurrent):
    """
    GIVEN: Three independent leaf violations spread over two list items
    WHEN: The arguments are deep-coerced
    THEN: Exactly three errors are reported, depth-first in declaration order
    """
    values = {
        "books": [
            {"title": "a title that is too long", "tags": ["x"], "author": {"name": "Ursula K."}},
            {"title": "fine", "tags": ["a", "b", "c"]},
        ],
        "note": "ok",
    }

    _, errors = await _coerce(library, values, concurrent=concurrent)

    assert [e.path.as_list() for e in errors] == [
        ["books", 0, "title"],
        ["books", 0, "author", "name"],
        ["books", 1, "tags"],
    ]


@pytest.mark.anyio
async def test_argument_level_constraint_is_enforced(library):
    _, errors = await _coerce(library, {"books": [], "note": "too long"})

    [error] = errors
    assert error.path == Path.of("note")


@pytest.mark.anyio
async def test_valid_values_are_returned_unchanged(library):
    values = {
        "books": [{"title": "short", "tags": ["a", "b"], "author": {"name": "Le G"}}],
    }

    coerced, errors = await _coerce(library, values)

    assert errors == []
    assert coerced == values


@pytest.mark.anyio
async def test_null_values_skip_checks(library):
    values = {"books": [{"title": "short", "tags": None, "author": None}], "note": None}

    coerced, errors = await _coerce(library, values)

    assert errors == []
    assert coerced == values


@pytest.mark.anyio
async def test_parent_chain_does_not_run_when_children_failed():
    """
    GIVEN: A list argument whose item violates its own constraint
    WHEN: The list also carries an argument-level constraint that would fail
    THEN: Only the item-level error is reported
    """
    schema = build_schema(
        LengthConstraint.directive_sdl
        + """
        type Query { search(terms: [TermInput!] @length(max: 1)): [String] }
        input TermInput { text: String @length(max: 3) }
        """
    )
    plan = apply_constraints(schema)
    errors: List[CoercionError] = []

    await ArgumentCoercer(plan).coerce_arguments(
        "Query",
        "search",
        schema.query_type.fields["search"],
        {"terms": [{"text": "toolong"}, {"text": "ok"}]},
        errors.append,
    )

    assert [e.path.as_list() for e in errors] == [["terms", 0, "text"]]


@pytest.mark.anyio
async def test_concurrent_siblings_keep_deterministic_error_order():
    """
    GIVEN: Async coercers where the first sibling finishes last
    WHEN: Sibling branches run concurrently
    THEN: Errors are still reported in declaration order, on every run
    """
    schema = build_schema(
        LengthConstraint.directive_sdl
        + """
        type Query { echo(input: EchoInput): String }
        input EchoInput { first: String, second: String, third: String }
        """
    )

    def failing_after(delay: float, label: str):
        async def coercer(value, ctx):
            await anyio.sleep(delay)
            raise ValueError(f"{label} rejected")

        return coercer

    coercers = {
        "EchoInput.first": failing_after(0.03, "first"),
        "EchoInput.second": failing_after(0.02, "second"),
        "EchoInput.third": failing_after(0.0, "third"),
    }
    plan = apply_constraints(schema, coercers=coercers)
    field = schema.query_type.fields["echo"]

    for _ in range(3):
        errors: List[CoercionError] = []
        await ArgumentCoercer(plan, concurrent=True).coerce_arguments(
            "Query",
            "echo",
            field,
            {"input": {"first": "a", "second": "b", "third": "c"}},
            errors.append,
        )
        assert [e.message for e in errors] == ["first rejected", "second rejected", "third rejected"]
        assert isinstance(errors[0].original_error, ValueError)


@pytest.mark.anyio
async def test_coercers_replace_values_before_resolution():
    schema = build_schema(
        LengthConstraint.directive_sdl
        + """
        type Query { echo(input: EchoInput): String }
        input EchoInput { text: String @length(max: 5) }
        """
    )
    plan = apply_constraints(schema, coercers={"EchoInput.text": lambda value, ctx: value.strip()})
    errors: List[CoercionError] = []

    coerced = await ArgumentCoercer(plan).coerce_arguments(
        "Query",
        "echo",
        schema.query_type.fields["echo"],
        {"input": {"text": "   hello   "}},
        errors.append,
    )

    assert errors == []
    assert coerced == {"input": {"text": "hello"}}


@pytest.mark.anyio
async def test_coerce_value_on_list_appends_indices():
    schema = build_schema(
        LengthConstraint.directive_sdl
        + """
        type Query { ping: String }
        input TagInput { label: String @length(max: 2) }
        """
    )
    plan = apply_constraints(schema)
    tag_type = schema.get_type("TagInput")
    value, errors = await ArgumentCoercer(plan).coerce_value(
        [{"label": "ok"}, {"label": "nope"}, {"label": "no"}],
        GraphQLNonNull(GraphQLList(GraphQLNonNull(tag_type))),
        Path.of("tags"),
    )

    assert value[0] == {"label": "ok"}
    assert [e.path.as_list() for e in errors] == [["tags", 1, "label"]]
