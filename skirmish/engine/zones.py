from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ..models.enums import Direction, ZoneKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..models.board import Slot
    from ..models.pieces import Piece, ZoneSpec

# A diagonal step is sqrt(2) long while ranges are given in orthogonal cells.
DIAGONAL_FACTOR = 1.4142
DIAGONAL_SLACK = 0.4142


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def diagonal_range(rng: float) -> float:
    return rng * DIAGONAL_FACTOR + DIAGONAL_SLACK


def on_orthogonal(slot: Slot, ox: int, oy: int) -> bool:
    return slot.x == ox or slot.y == oy


def on_diagonal(slot: Slot, ox: int, oy: int) -> bool:
    # only the x == y axis through the origin
    return slot.x - ox == slot.y - oy


def resolve_zone(spec: ZoneSpec, slots: Iterable[Slot], ox: int, oy: int) -> list[Slot]:
    """Slots covered by ``spec`` from (ox, oy): orthogonal hits first, then diagonal.

    A single-family zone leaves out the origin; BOTH keeps it in each family,
    so it shows up twice. Callers dedupe when they need to.
    """
    with_orth = spec.direction in (Direction.ORTHOGONAL, Direction.BOTH)
    with_diag = spec.direction in (Direction.DIAGONAL, Direction.BOTH)
    keep_origin = spec.direction == Direction.BOTH
    diag_rng = diagonal_range(spec.range)

    orthogonal: list[Slot] = []
    diagonal: list[Slot] = []
    for slot in slots:
        if not keep_origin and slot.x == ox and slot.y == oy:
            continue
        d = distance(ox, oy, slot.x, slot.y)
        if with_orth and on_orthogonal(slot, ox, oy) and d <= spec.range:
            orthogonal.append(slot)
        if with_diag and on_diagonal(slot, ox, oy) and d <= diag_rng:
            diagonal.append(slot)
    return orthogonal + diagonal


class ZoneResolver:
    """Move / reveal / kill zones of one piece."""

    def __init__(self, move: ZoneSpec, reveal: ZoneSpec, kill: ZoneSpec) -> None:
        self.specs: dict[ZoneKind, ZoneSpec] = {
            ZoneKind.MOVE: move,
            ZoneKind.REVEAL: reveal,
            ZoneKind.KILL: kill,
        }

    @classmethod
    def for_piece(cls, piece: Piece) -> ZoneResolver:
        return cls(piece.move_zone, piece.reveal_zone, piece.kill_zone)

    def resolve(
        self, kind: ZoneKind, slots: Iterable[Slot], ox: int, oy: int
    ) -> list[Slot]:
        return resolve_zone(self.specs[kind], slots, ox, oy)
