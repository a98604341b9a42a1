"""Pytest fixtures for the schemaguard test-suite."""
from __future__ import annotations

import pytest

from schemaguard.config import CONCURRENT_COERCION_ENV, CONSTRAINTS_FILE_ENV, Settings


BOOK_SDL = """
type Query {
  books: [Book]
}

type Book {
  title: String @length(max: 10)
}

type Mutation {
  createBook(book: BookInput): Book
}

input BookInput {
  title: String! @length(max: 10)
}
"""


@pytest.fixture()
def book_sdl() -> str:  # noqa: D401
    """The books schema: one input constraint, one output constraint."""
    return BOOK_SDL


@pytest.fixture()
def settings() -> Settings:
    """Explicit settings so tests never depend on the caller's environment."""
    return Settings(concurrent_coercion=True, constraints_file=None)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    monkeypatch.delenv(CONCURRENT_COERCION_ENV, raising=False)
    monkeypatch.delenv(CONSTRAINTS_FILE_ENV, raising=False)
    yield


@pytest.fixture(autouse=True)
def _silence_logging(caplog):  # noqa: D401
    """Reduce noise – most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield


@pytest.fixture()
def anyio_backend():  # noqa: D401
    """Force *anyio* tests to use the standard asyncio backend only."""
    return "asyncio"
