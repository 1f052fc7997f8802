# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read and write the TOML and YAML descriptors exchanged with the lifecycle."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, TypeVar

import tomli_w
import yaml
from pydantic import BaseModel, ValidationError

from ..errors import DescriptorDecodeError

ModelT = TypeVar("ModelT", bound=BaseModel)

_NUMERIC_TAGS: Final[frozenset[str]] = frozenset({"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"})


class TextScalarLoader(yaml.SafeLoader):
    """Safe YAML loader that keeps numeric-looking plain scalars as strings.

    Manifest versions such as ``3.10`` or ``8`` must reach the models verbatim.
    """


TextScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, pattern) for tag, pattern in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def read_toml(path: Path) -> dict[str, Any]:
    """Return the TOML document stored at ``path``.

    Args:
        path: Location of the TOML document.

    Returns:
        dict[str, Any]: Parsed document.

    Raises:
        DescriptorDecodeError: If the file is not valid UTF-8 TOML.
        OSError: If the file cannot be read.
    """

    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise DescriptorDecodeError(path, str(exc)) from exc


def write_toml(path: Path, document: Mapping[str, Any]) -> None:
    """Serialise ``document`` as TOML into ``path``, creating parent directories."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        tomli_w.dump(dict(document), handle)


def read_yaml(path: Path) -> Any:
    """Return the YAML document stored at ``path`` (``None`` for an empty file).

    Plain numeric scalars are returned as strings; see :class:`TextScalarLoader`.

    Raises:
        DescriptorDecodeError: If the file is not valid UTF-8 YAML.
    """

    with path.open("r", encoding="utf-8") as handle:
        try:
            # Bandit: TextScalarLoader derives from SafeLoader.
            return yaml.load(handle, Loader=TextScalarLoader)  # nosec B506
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise DescriptorDecodeError(path, str(exc)) from exc


def write_yaml(path: Path, document: Mapping[str, Any]) -> None:
    """Serialise ``document`` as YAML into ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(dict(document), handle, default_flow_style=False, sort_keys=False)


def validate_document(path: Path, payload: Any, model: type[ModelT]) -> ModelT:
    """Validate ``payload`` read from ``path`` against ``model``.

    Raises:
        DescriptorDecodeError: If the payload does not satisfy ``model``.
    """

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DescriptorDecodeError(path, str(exc)) from exc


def load_toml_model(path: Path, model: type[ModelT]) -> ModelT:
    """Decode the TOML descriptor at ``path`` into ``model``."""

    return validate_document(path, read_toml(path), model)


def dump_model(model: BaseModel) -> dict[str, Any]:
    """Return the document for ``model`` with unset optionals dropped.

    Native values such as TOML datetimes are kept so they round-trip unchanged.
    """

    return model.model_dump(mode="python", exclude_none=True)


def save_toml_model(path: Path, model: BaseModel) -> None:
    """Encode ``model`` as TOML into ``path``."""

    write_toml(path, dump_model(model))


def load_yaml_model(path: Path, model: type[ModelT], *, empty: Any = None) -> ModelT:
    """Decode the YAML document at ``path`` into ``model``.

    Args:
        path: YAML file to read.
        model: Pydantic model describing the document.
        empty: Payload substituted when the file holds no document.

    Returns:
        ModelT: Validated model instance.
    """

    payload = read_yaml(path)
    if payload is None:
        payload = empty
    return validate_document(path, payload, model)


__all__ = [
    "TextScalarLoader",
    "dump_model",
    "load_toml_model",
    "load_yaml_model",
    "read_toml",
    "read_yaml",
    "save_toml_model",
    "validate_document",
    "write_toml",
    "write_yaml",
]
