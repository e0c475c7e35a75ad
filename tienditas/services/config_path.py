"""Nested-path reads and writes over the JSON form of the store collection.

A path is a tuple of steps. A ``str`` step addresses a key of a mapping and an
``int`` step addresses a position in a list, e.g.
``("sachacacao", "products", 0, "price")``.
"""

import copy
from collections.abc import Sequence
from typing import Any

PathStep = str | int
ConfigPath = tuple[PathStep, ...]


class ConfigPathError(ValueError):
    """A path does not address a valid location in the configuration tree."""


def _is_index(step: Any) -> bool:
    # bool is an int subclass but never a valid list index here
    return isinstance(step, int) and not isinstance(step, bool)


def parse_path(raw: Any) -> ConfigPath:
    """Validate an untyped path (e.g. a JSON array) into a ConfigPath.

    Raises:
        ConfigPathError: If the path is empty or contains an invalid step.
    """
    if isinstance(raw, str) or not isinstance(raw, Sequence):
        raise ConfigPathError("Path must be a list of keys and indexes.")
    if not raw:
        raise ConfigPathError("Path must not be empty.")

    steps: list[PathStep] = []
    for step in raw:
        if _is_index(step):
            if step < 0:
                raise ConfigPathError(f"Negative index in path: {step}")
            steps.append(step)
        elif isinstance(step, str):
            if not step:
                raise ConfigPathError("Empty key in path.")
            steps.append(step)
        else:
            raise ConfigPathError(f"Invalid path step: {step!r}")
    return tuple(steps)


def _child(container: Any, step: PathStep, path: ConfigPath) -> Any:
    """Resolve one existing step, failing on any type or bounds mismatch."""
    if isinstance(step, str):
        if not isinstance(container, dict):
            raise ConfigPathError(f"Key {step!r} does not address an object in {list(path)}")
        if step not in container:
            raise ConfigPathError(f"Missing key {step!r} in {list(path)}")
        return container[step]

    if not isinstance(container, list):
        raise ConfigPathError(f"Index {step} does not address a list in {list(path)}")
    if step >= len(container):
        raise ConfigPathError(f"Index {step} out of range in {list(path)}")
    return container[step]


def get_in(tree: Any, path: ConfigPath) -> Any:
    """Read the value at ``path``.

    Raises:
        ConfigPathError: If any step cannot be resolved.
    """
    current = tree
    for step in path:
        current = _child(current, step, path)
    return current


def set_in(tree: Any, path: ConfigPath, value: Any) -> Any:
    """Return a deep copy of ``tree`` with ``value`` written at ``path``.

    Every intermediate container must already exist. The final step may name a
    new key of a mapping (new theme slots, for instance) but list indexes must
    be in range. ``tree`` itself is never modified.

    Raises:
        ConfigPathError: If the path cannot be resolved.
    """
    if not path:
        raise ConfigPathError("Path must not be empty.")

    updated = copy.deepcopy(tree)
    parent = get_in(updated, path[:-1])
    last = path[-1]

    if isinstance(last, str):
        if not isinstance(parent, dict):
            raise ConfigPathError(f"Key {last!r} does not address an object in {list(path)}")
        parent[last] = copy.deepcopy(value)
    else:
        if not isinstance(parent, list):
            raise ConfigPathError(f"Index {last} does not address a list in {list(path)}")
        if last >= len(parent):
            raise ConfigPathError(f"Index {last} out of range in {list(path)}")
        parent[last] = copy.deepcopy(value)

    return updated
