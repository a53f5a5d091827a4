"""Metric definitions of a CUBE profile and their XML form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO


@dataclass(eq=False)
class Metric:
    """A metric in the metric tree; a child registers itself with its parent."""

    disp_name: str
    uniq_name: str = ""
    dtype: str = ""
    uom: str = ""
    val: str = ""
    url: str = ""
    descr: str = ""
    parent: Metric | None = field(default=None, repr=False)
    id: int = 0
    children: list[Metric] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.parent is not None:
            self.parent.add_child(self)

    def add_child(self, child: Metric) -> None:
        """Append ``child`` to the children of this metric."""
        self.children.append(child)

    def level(self) -> int:
        """Depth in the metric tree; a root metric is at level 0."""
        return 0 if self.parent is None else self.parent.level() + 1

    def assign_ids(self, start: int) -> int:
        """Number this metric and its subtree depth-first; return the next free id."""
        self.id = start
        next_id = start + 1
        for child in self.children:
            next_id = child.assign_ids(next_id)
        return next_id

    def write_xml(self, fp: TextIO) -> None:
        """Write the ``<metric>`` element of this subtree."""
        ind = "  " * self.level()
        fp.write(f'{ind}    <metric id="{self.id}">\n')
        fp.write(f"{ind}      <disp_name>{self.disp_name}</disp_name>\n")
        fp.write(f"{ind}      <uniq_name>{self.uniq_name}</uniq_name>\n")
        fp.write(f"{ind}      <dtype>{self.dtype}</dtype>\n")
        fp.write(f"{ind}      <uom>{self.uom}</uom>\n")
        if self.val:
            fp.write(f"{ind}      <val>{self.val}</val>\n")
        fp.write(f"{ind}      <url>{self.url}</url>\n")
        fp.write(f"{ind}      <descr>{self.descr}</descr>\n")
        for child in self.children:
            child.write_xml(fp)
        fp.write(f"{ind}    </metric>\n")

    def matches(self, other: Metric) -> bool:
        """Two metrics are the same when their unique names agree."""
        return self.uniq_name == other.uniq_name