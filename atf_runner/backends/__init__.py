"""Backend registry: built-in backends plus entry-point plugins."""

from __future__ import annotations

import logging

from atf_common.discovery.entrypoints import discover_entrypoints, load_entrypoint
from atf_common.errors import ConfigError
from atf_runner.contracts import RunnerBackend

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "atf_runner.backends"


def _builtin_backends() -> dict[str, RunnerBackend]:
    from atf_runner.backends.json_backend import BACKEND as json_backend

    return {json_backend.name: json_backend}


def backend_origins() -> dict[str, str]:
    """Map every known backend name to where it comes from."""
    origins = {name: "builtin" for name in _builtin_backends()}
    for name, entry_point in discover_entrypoints([ENTRYPOINT_GROUP]).items():
        origins[name] = entry_point.value
    return dict(sorted(origins.items()))


def available_backends() -> list[str]:
    return list(backend_origins())


def get_backend(name: str) -> RunnerBackend:
    """Resolve a backend by name; entry points override built-ins."""
    pending = discover_entrypoints([ENTRYPOINT_GROUP])
    entry_point = pending.get(name)
    if entry_point is not None:
        backend = load_entrypoint(entry_point, label="backend")
        if isinstance(backend, RunnerBackend):
            return backend
        if backend is not None:
            logger.warning("Entry point %s is not a RunnerBackend, ignoring it", name)
    builtin = _builtin_backends().get(name)
    if builtin is None:
        raise ConfigError(
            f"Unknown backend '{name}'",
            context={"backend": name, "available": available_backends()},
        )
    return builtin


__all__ = ["ENTRYPOINT_GROUP", "available_backends", "backend_origins", "get_backend"]
