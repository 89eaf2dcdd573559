"""Tests for entry-point discovery helpers."""

from __future__ import annotations

import importlib.metadata

import pytest

from atf_common.discovery.entrypoints import discover_entrypoints, load_entrypoint


pytestmark = pytest.mark.unit_common


def test_discover_entrypoints_handles_errors(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def raise_error():
        raise RuntimeError("boom")

    monkeypatch.setattr(importlib.metadata, "entry_points", raise_error)

    assert discover_entrypoints(["atf_runner.backends"]) == {}


def test_discover_entrypoints_keeps_first_name(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    first = importlib.metadata.EntryPoint(
        name="demo", value="demo.module:BACKEND", group="atf_runner.backends"
    )
    shadowed = importlib.metadata.EntryPoint(
        name="demo", value="other.module:BACKEND", group="atf_runner.backends"
    )

    class FakeEntries:
        def select(self, group: str):
            assert group == "atf_runner.backends"
            return [first, shadowed]

    monkeypatch.setattr(importlib.metadata, "entry_points", lambda: FakeEntries())

    result = discover_entrypoints(["atf_runner.backends"])
    assert result == {"demo": first}


def test_load_entrypoint_skips_missing_modules() -> None:
    entry = importlib.metadata.EntryPoint(
        name="ghost", value="atf_no_such_module:BACKEND", group="atf_runner.backends"
    )

    assert load_entrypoint(entry, label="backend") is None


def test_load_entrypoint_returns_object() -> None:
    entry = importlib.metadata.EntryPoint(
        name="json",
        value="atf_runner.backends.json_backend:BACKEND",
        group="atf_runner.backends",
    )

    backend = load_entrypoint(entry)

    assert backend.name == "json"
