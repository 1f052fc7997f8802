# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discover and merge the order fragments left by legacy supply steps."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .constants import ORDER_FRAGMENT_PREFIX, SIDECAR_SUFFIX
from .errors import NoFragmentsFound
from .metadata import Order, load_toml_model, save_toml_model

_FRAGMENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"^{ORDER_FRAGMENT_PREFIX}(?P<index>\d+){re.escape(SIDECAR_SUFFIX)}$"
)


@dataclass(slots=True, frozen=True)
class OrderFragment:
    """Order declared by the legacy buildpack at deps ``index``."""

    index: int
    path: Path
    order: Order


def discover_fragments(order_dir: Path) -> list[OrderFragment]:
    """Return the order fragments stored in ``order_dir`` sorted by deps index.

    Args:
        order_dir: Directory populated by the supply steps with ``order<N>.toml`` files.

    Returns:
        list[OrderFragment]: Decoded fragments, lowest index first. Missing
        directories yield an empty list.
    """

    if not order_dir.is_dir():
        return []
    candidates: list[tuple[int, Path]] = []
    for path in order_dir.iterdir():
        match = _FRAGMENT_PATTERN.match(path.name)
        if match is None or not path.is_file():
            continue
        candidates.append((int(match.group("index")), path))
    return [
        OrderFragment(index=index, path=path, order=load_toml_model(path, Order))
        for index, path in sorted(candidates)
    ]


def combine_orders(orders: Sequence[Order]) -> Order:
    """Concatenate the groups of ``orders`` preserving their relative ordering.

    Raises:
        ValueError: If ``orders`` is empty.
    """

    if not orders:
        raise ValueError("at least one order is required")
    groups = [group.model_copy(deep=True) for order in orders for group in order.groups]
    return Order(groups=groups)


def merge_order_fragments(order_dir: Path, destination: Path) -> Order:
    """Merge every fragment in ``order_dir`` and write the result to ``destination``.

    Args:
        order_dir: Directory holding the supply-step fragments.
        destination: Merged order file consumed by the lifecycle detector.

    Returns:
        Order: The merged order, also persisted at ``destination``.

    Raises:
        NoFragmentsFound: If ``order_dir`` holds no fragment.
    """

    fragments = discover_fragments(order_dir)
    if not fragments:
        raise NoFragmentsFound(order_dir)
    merged = combine_orders([fragment.order for fragment in fragments])
    save_toml_model(destination, merged)
    return merged


__all__ = ["OrderFragment", "combine_orders", "discover_fragments", "merge_order_fragments"]
