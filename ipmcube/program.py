"""Source regions and call-tree nodes of a CUBE profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO

_ESCAPES = {"<": "lt;", ">": "gt;", "&": "amp;"}


def escape_region_name(name: str) -> str:
    """Replace ``<``, ``>`` and ``&`` the way the CUBE writer does for region names."""
    return "".join(_ESCAPES.get(ch, ch) for ch in name)


@dataclass(eq=False)
class Region:
    """A region of the program with the call-tree nodes that it calls."""

    name: str
    begln: int = 0
    endln: int = 0
    url: str = ""
    descr: str = ""
    mod: str = ""
    id: int = 0
    cnodes: list[Cnode] = field(default_factory=list, repr=False)

    def begin_line(self) -> int:
        """First line, or -1 when unknown."""
        return self.begln if self.begln > 0 else -1

    def end_line(self) -> int:
        """Last line, or -1 when unknown."""
        return self.endln if self.endln > 0 else -1

    def add_cnode(self, cnode: Cnode) -> None:
        """Record ``cnode`` unless an equal one is already recorded."""
        if any(cnode.matches(existing) for existing in self.cnodes):
            return
        self.cnodes.append(cnode)

    def write_xml(self, fp: TextIO) -> None:
        """Write the ``<region>`` element."""
        fp.write(
            f'    <region id="{self.id}" mod="{self.mod}" '
            f'begin="{self.begin_line()}" end="{self.end_line()}">\n'
        )
        fp.write(f"      <name>{escape_region_name(self.name)}</name>\n")
        fp.write(f"      <url>{self.url}</url>\n")
        fp.write(f"      <descr>{self.descr}</descr>\n")
        fp.write("    </region>\n")

    def matches(self, other: Region) -> bool:
        """Regions are equal when name and module agree."""
        return self.name == other.name and self.mod == other.mod


@dataclass(eq=False)
class Cnode:
    """A call-tree node; a child registers itself with its parent."""

    callee: Region
    mod: str = ""
    line: int = 0
    parent: Cnode | None = field(default=None, repr=False)
    id: int = 0
    children: list[Cnode] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.parent is not None:
            self.parent.add_child(self)

    def add_child(self, child: Cnode) -> None:
        """Append ``child`` to the children of this node."""
        self.children.append(child)

    def line_number(self) -> int:
        """Call-site line, or -1 when unknown."""
        return self.line if self.line > 0 else -1

    def caller(self) -> Region | None:
        """The region called by the parent node, if any."""
        return None if self.parent is None else self.parent.callee

    def level(self) -> int:
        """Depth in the call tree; a root node is at level 0."""
        return 0 if self.parent is None else self.parent.level() + 1

    def assign_ids(self, start: int) -> int:
        """Number this node and its subtree depth-first; return the next free id."""
        self.id = start
        next_id = start + 1
        for child in self.children:
            next_id = child.assign_ids(next_id)
        return next_id

    def write_xml(self, fp: TextIO) -> None:
        """Write the ``<cnode>`` element of this subtree."""
        ind = "  " * self.level()
        fp.write(f'{ind}    <cnode id="{self.id}" ')
        if self.line_number() != -1:
            fp.write(f'line="{self.line_number()}" ')
        if self.mod:
            fp.write(f'mod="{self.mod}" ')
        fp.write(f'calleeId="{self.callee.id}">\n')
        for child in self.children:
            child.write_xml(fp)
        fp.write(f"{ind}    </cnode>\n")

    def matches(self, other: Cnode) -> bool:
        """Nodes are equal when module, callee and line agree."""
        return (
            self.mod == other.mod
            and self.callee.matches(other.callee)
            and self.line_number() == other.line_number()
        )