"""System hierarchy of a CUBE profile: machines, nodes, processes, threads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO


@dataclass(eq=False)
class Machine:
    """A machine made of nodes."""

    name: str
    desc: str = ""
    id: int = 0
    children: list[Node] = field(default_factory=list, repr=False)

    def level(self) -> int:
        """Machines are always at the top of the hierarchy."""
        return 0

    def write_xml(self, fp: TextIO) -> None:
        """Write the ``<machine>`` element with its nodes."""
        ind = "  " * self.level()
        fp.write(f'{ind}    <machine Id="{self.id}">\n')
        fp.write(f"{ind}      <name>{self.name}</name>\n")
        if self.desc:
            fp.write(f"{ind}      <descr>{self.desc}</descr>\n")
        for node in self.children:
            node.write_xml(fp)
        fp.write(f"{ind}    </machine>\n")

    def matches(self, other: Machine) -> bool:
        """Machines are equal when their names agree."""
        return self.name == other.name


@dataclass(eq=False)
class Node:
    """A node of a machine; it registers itself with its machine."""

    name: str
    parent: Machine | None = field(default=None, repr=False)
    id: int = 0
    children: list[Process] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.parent is not None:
            self.parent.children.append(self)

    def level(self) -> int:
        """Depth below the machine."""
        return 0 if self.parent is None else self.parent.level() + 1

    def write_xml(self, fp: TextIO) -> None:
        """Write the ``<node>`` element with its processes."""
        ind = "  " * self.level()
        fp.write(f'{ind}    <node Id="{self.id}">\n')
        fp.write(f"{ind}      <name>{self.name}</name>\n")
        for proc in self.children:
            proc.write_xml(fp)
        fp.write(f"{ind}    </node>\n")

    def matches(self, other: Node) -> bool:
        """Nodes are equal when their names agree."""
        return self.name == other.name


@dataclass(eq=False)
class Process:
    """A process on a node; it registers itself with its node."""

    name: str
    rank: int = 0
    parent: Node | None = field(default=None, repr=False)
    id: int = 0
    children: list[Thread] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.parent is not None:
            self.parent.children.append(self)

    def level(self) -> int:
        """Depth below the machine."""
        return 0 if self.parent is None else self.parent.level() + 1

    def write_xml(self, fp: TextIO) -> None:
        """Write the ``<process>`` element with its threads."""
        ind = "  " * self.level()
        fp.write(f'{ind}    <process Id="{self.id}">\n')
        fp.write(f"{ind}      <name>{self.name}</name>\n")
        fp.write(f"{ind}      <rank>{self.rank}</rank>\n")
        for thread in self.children:
            thread.write_xml(fp)
        fp.write(f"{ind}    </process>\n")

    def matches(self, other: Process) -> bool:
        """Processes are equal when their ranks agree."""
        return self.rank == other.rank


@dataclass(eq=False)
class Thread:
    """A thread of a process; it registers itself with its process."""

    name: str
    rank: int = 0
    parent: Process | None = field(default=None, repr=False)
    id: int = 0

    def __post_init__(self) -> None:
        if self.parent is not None:
            self.parent.children.append(self)

    def level(self) -> int:
        """Depth below the machine."""
        return 0 if self.parent is None else self.parent.level() + 1

    def write_xml(self, fp: TextIO) -> None:
        """Write the ``<thread>`` element."""
        ind = "  " * self.level()
        fp.write(f'{ind}    <thread Id="{self.id}">\n')
        fp.write(f"{ind}      <name>{self.name}</name>\n")
        fp.write(f"{ind}      <rank>{self.rank}</rank>\n")
        fp.write(f"{ind}    </thread>\n")

    def matches(self, other: Thread) -> bool:
        """Threads are equal when their ranks and their processes' ranks agree."""
        if self.rank != other.rank:
            return False
        if self.parent is None or other.parent is None:
            return self.parent is None and other.parent is None
        return self.parent.rank == other.parent.rank