"""Cartesian process topologies of a CUBE profile."""

from __future__ import annotations

from typing import Any, Sequence, TextIO


class Cartesian:
    """A cartesian topology mapping threads to coordinates."""

    def __init__(self, dims: Sequence[int], periods: Sequence[int]) -> None:
        if len(periods) != len(dims):
            raise ValueError("dims and periods must have the same length")
        self.dims = list(dims)
        self.periods = [int(p) for p in periods]
        locations = 1
        for d in self.dims:
            locations *= d
        self._slots: list[tuple[Any, tuple[int, ...]] | None] = [None] * max(
            locations, 0
        )

    @property
    def ndims(self) -> int:
        return len(self.dims)

    def define_coords(self, thread: Any, coords: Sequence[int]) -> None:
        """Place ``thread`` at ``coords``."""
        if len(coords) != self.ndims:
            raise ValueError(
                f"expected {self.ndims} coordinates, got {len(coords)}"
            )
        pos = 0
        factor = 1
        for coord, dim in zip(coords, self.dims):
            pos += coord * factor
            factor *= dim
        if not 0 <= pos < len(self._slots):
            raise IndexError(f"coordinates {tuple(coords)} outside topology")
        self._slots[pos] = (thread, tuple(coords))

    def write_xml(self, fp: TextIO) -> None:
        """Write the ``<cart>`` element."""
        indent = "    "
        fp.write(f'{indent}  <cart ndims="{self.ndims}">\n')
        for dim, period in zip(self.dims, self.periods):
            periodic = "false" if period == 0 else "true"
            fp.write(f'{indent}    <dim size="{dim}" periodic="{periodic}"/>\n')
        for slot in self._slots:
            if slot is None:
                continue
            thread, coords = slot
            values = " ".join(str(c) for c in coords)
            fp.write(f'{indent}    <coord thrdId="{thread.id}">{values}</coord>\n')
        fp.write(f"{indent}  </cart>\n")