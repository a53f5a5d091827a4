"""In-memory model of an IPM profile: modules, functions, regions and tasks."""

from __future__ import annotations

import itertools
import sys
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import TextIO

_entity_ids = itertools.count()
_region_ids = itertools.count()


class OutForm(Enum):
    """What the converter produces."""

    TERSE = "terse"
    FULL = "full"
    HTML = "html"
    CUBE = "cube"


@dataclass
class TopoSpec:
    """A requested processor topology of up to three dimensions."""

    x: int = 0
    y: int = 0
    z: int = 0
    valid: bool = True


@dataclass
class FuncData:
    """Inclusive and exclusive time and call count."""

    time: float = 0.0
    count: int = 0
    time_x: float = 0.0
    count_x: int = 0


@dataclass(eq=False)
class IpmModule:
    """A module (MPI, POSIXIO, ...) grouping monitored functions."""

    name: str
    funcs: list[IpmFunc] = field(default_factory=list, repr=False)
    funcsum: FuncData = field(default_factory=FuncData)
    id: int = field(default_factory=lambda: next(_entity_ids))


@dataclass(eq=False)
class IpmFunc:
    """A monitored function; ``active`` once it appeared in a profile entry."""

    name: str
    module: IpmModule | None = field(default=None, repr=False)
    cid: int = 0
    active: bool = False
    id: int = field(default_factory=lambda: next(_entity_ids))


@dataclass(eq=False)
class IpmRegion:
    """A user region; ``ipm_main`` is the root for the whole application."""

    name: str = ""
    parent: IpmRegion | None = field(default=None, repr=False)
    level: int = 0
    xmlid: int = 0
    id: int = field(default_factory=lambda: next(_region_ids))
    subregions: list[IpmRegion] = field(default_factory=list, repr=False)

    def find_by_xmlid(self, xmlid: int) -> IpmRegion | None:
        """Find a region by its profile id among the children, then below the first child."""
        for sub in self.subregions:
            if sub.xmlid == xmlid:
                return sub
        if self.subregions:
            return self.subregions[0].find_by_xmlid(xmlid)
        return None


@dataclass(eq=False)
class HostNode:
    """A host and the tasks that ran on it."""

    name: str
    tasks: list[int] = field(default_factory=list)


@dataclass
class RegData:
    """Per-task wallclock time of a region."""

    wtime: float = 0.0
    wtime_x: float = 0.0
    funcsum: FuncData = field(default_factory=FuncData)


@dataclass(eq=False)
class TaskData:
    """Everything recorded for one task."""

    hostname: str = ""
    node: HostNode | None = None
    procmem: float = 0.0
    regdata: defaultdict[IpmRegion, RegData] = field(
        default_factory=lambda: defaultdict(RegData)
    )
    funcdata: defaultdict[tuple[int, int], FuncData] = field(
        default_factory=lambda: defaultdict(FuncData)
    )


@dataclass(eq=False)
class Job:
    """A whole profiled job and the options that control its conversion."""

    inname: str = ""
    outname: str = ""
    outform: OutForm = OutForm.TERSE
    quiet: bool = False
    ntasks: int = 0
    taskid: int = 0
    topologies: list[TopoSpec] = field(default_factory=list)
    nodes: list[HostNode] = field(default_factory=list)
    machinename: str = ""
    hostname: str = ""
    username: str = ""
    cmdline: str = ""
    realpath: str = ""
    start: int = 0
    final: int = 0
    taskdata: list[TaskData] = field(default_factory=list)
    modulemap: dict[str, IpmModule] = field(default_factory=dict)
    funcmap: dict[str, IpmFunc] = field(default_factory=dict)
    ipm_main: IpmRegion = field(default_factory=lambda: IpmRegion("ipm_main"))

    def diag(self, message: str) -> None:
        """Write a diagnostic to standard error unless the job is quiet."""
        if not self.quiet:
            sys.stderr.write(message)

    def compute_xdata(self) -> None:
        """Derive exclusive times and counts for every task and region."""
        for taskid in range(self.ntasks):
            self._compute_xdata_region(self.ipm_main, taskid)

    def _compute_xdata_region(self, reg: IpmRegion, taskid: int) -> None:
        td = self.taskdata[taskid]
        rd = td.regdata[reg]
        xtime = rd.wtime
        rd.funcsum.time_x = rd.funcsum.time
        rd.funcsum.count_x = rd.funcsum.count
        for sub in reg.subregions:
            sub_rd = td.regdata[sub]
            xtime -= sub_rd.wtime
            rd.funcsum.count_x -= sub_rd.funcsum.count
            rd.funcsum.time_x -= sub_rd.funcsum.time
        rd.wtime_x = xtime

        if reg is not self.ipm_main:
            for func in self.funcmap.values():
                if not func.active:
                    continue
                fd = td.funcdata[(reg.id, func.id)]
                fd.time_x = fd.time
                for sub in reg.subregions:
                    fd.time_x -= td.funcdata[(sub.id, func.id)].time

        for sub in reg.subregions:
            self._compute_xdata_region(sub, taskid)

    def find_region_by_xmlid(self, xmlid: int) -> IpmRegion | None:
        """Find a region below ``ipm_main`` by its profile id."""
        return self.ipm_main.find_by_xmlid(xmlid)

    def dump(self, fp: TextIO) -> None:
        """List the modules and their functions."""
        for name in sorted(self.modulemap):
            mod = self.modulemap[name]
            fp.write(f"MODULE: {mod.name}\n")
            for func in mod.funcs:
                fp.write(f" - '{func.name}'\n")
            fp.write("\n")