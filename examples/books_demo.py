# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

import logging
import pathlib
import tempfile

import anyio
from graphql import graphql

from schemaguard import Settings, make_executable_schema

# Basic logging setup; rejected arguments are reported at INFO
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


TYPE_DEFS = """
type Query {
  books: [Book]
}

type Book {
  title: String @length(max: 10)
  author: String
}

type Mutation {
  createBook(book: BookInput): Book
}

input BookInput {
  title: String! @length(max: 10)
  author: String
}
"""

# Extra constraints kept next to the deployment instead of inside the SDL.
BINDINGS_YAML = """
constraints:
  BookInput.author:
    length: {max: 20}
"""

CREATE_BOOK = """
mutation CreateBook($title: String!, $author: String) {
  createBook(book: {title: $title, author: $author}) {
    title
    author
  }
}
"""

BOOKS = [{"title": "Dune", "author": "Frank Herbert"}]


async def create_book(_parent, _info, book):
    BOOKS.append(book)
    return book


def list_books(_parent, _info):
    # One stored title predates the constraint and is too long
    return BOOKS + [{"title": "The Left Hand of Darkness", "author": "Ursula K. Le Guin"}]


async def run(schema, query, **variables):
    result = await graphql(schema, query, variable_values=variables or None)
    print(f"  -> data:   {result.data}")
    for error in result.errors or []:
        print(f"  -> error:  {error.message} at {error.path}")
    return result


async def main():
    with tempfile.TemporaryDirectory() as tmp:
        bindings_file = pathlib.Path(tmp) / "constraints.yaml"
        bindings_file.write_text(BINDINGS_YAML, encoding="utf-8")

        schema = make_executable_schema(
            TYPE_DEFS,
            {
                "Query": {"books": list_books},
                "Mutation": {"createBook": create_book},
            },
            coercers={"BookInput.title": lambda value, _ctx: value.strip()},
            settings=Settings(constraints_file=bindings_file),
        )

    print("\nCreating a book with a short title (should be ACCEPTED)")
    await run(schema, CREATE_BOOK, title="  Emma  ", author="Jane Austen")

    print("\nCreating a book with a long title (should be REJECTED before the resolver runs)")
    await run(schema, CREATE_BOOK, title="hello world!", author="Anonymous")

    print("\nCreating a book with a long author from the bindings file (should be REJECTED)")
    await run(schema, CREATE_BOOK, title="Short", author="A very long author name indeed")

    print("\nListing books (the legacy title fails the output check)")
    await run(schema, "{ books { title author } }")

    print(f"\nStored books: {BOOKS}")


if __name__ == "__main__":
    anyio.run(main)
