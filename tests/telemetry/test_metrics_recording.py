# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric helpers: label sets and failure isolation."""

from __future__ import annotations

import logging

import pytest
from graphql import graphql

from schemaguard import make_executable_schema
from schemaguard.telemetry import metrics as metrics_module


class _Recorder:
    def __init__(self):
        self.calls = []

    def add(self, amount, attributes=None):
        self.calls.append((amount, dict(attributes or {})))

    def record(self, amount, attributes=None):
        self.calls.append((amount, dict(attributes or {})))


class _Exploding:
    def add(self, *_args, **_kwargs):
        raise RuntimeError("exporter down")

    record = add


def test_record_violation_labels_constraint_and_direction(monkeypatch):
    recorder = _Recorder()
    monkeypatch.setattr(metrics_module, "constraint_violation_total", recorder)

    metrics_module.record_violation("length", "input")

    assert recorder.calls == [(1, {"constraint": "length", "direction": "input"})]


def test_metric_failures_never_propagate(monkeypatch, caplog):
    monkeypatch.setattr(metrics_module, "constraint_violation_total", _Exploding())
    monkeypatch.setattr(metrics_module, "field_coercion_latency_ms", _Exploding())

    with caplog.at_level(logging.DEBUG, logger="schemaguard.telemetry.metrics"):
        metrics_module.record_violation("length", "output")
        metrics_module.record_field_metrics("Mutation.createBook", "resolved", 1.5)

    assert "Failed to record" in caplog.text


@pytest.mark.anyio
async def test_gate_records_terminal_state(monkeypatch, book_sdl, settings):
    latency = _Recorder()
    invocations = _Recorder()
    monkeypatch.setattr(metrics_module, "field_coercion_latency_ms", latency)
    monkeypatch.setattr(metrics_module, "field_invocation_total", invocations)

    schema = make_executable_schema(
        book_sdl, {"Mutation": {"createBook": lambda _p, _i, book: book}}, settings=settings
    )
    await graphql(schema, 'mutation { createBook(book: {title: "hello world!"}) { title } }')

    assert invocations.calls == [(1, {"field": "Mutation.createBook", "status": "rejected"})]
    [(elapsed, labels)] = latency.calls
    assert elapsed >= 0
    assert labels["status"] == "rejected"
