"""In-memory CUBE profile: definitions plus the severity matrix."""

from __future__ import annotations

import sys
from typing import Sequence

from .cartesian import Cartesian
from .metric import Metric
from .program import Cnode, Region
from .system import Machine, Node, Process, Thread

MAX_CART_DIMS = 3


class CubeError(Exception):
    """Raised when a CUBE profile is used inconsistently."""


class Cube:
    """Holds the metric, program and system dimensions and the severities."""

    def __init__(self) -> None:
        self.metrics: list[Metric] = []
        self.root_metrics: list[Metric] = []
        self.regions: list[Region] = []
        self.cnodes: list[Cnode] = []
        self.root_cnodes: list[Cnode] = []
        self.machines: list[Machine] = []
        self.nodes: list[Node] = []
        self.processes: list[Process] = []
        self.threads: list[Thread] = []
        self.carts: list[Cartesian] = []
        self.mirrors: list[str] = []
        self.attrs: list[tuple[str, str]] = []
        self._sev: dict[tuple[Metric, Cnode], dict[Thread, float]] | None = None

    @property
    def severities_ready(self) -> bool:
        """True once the severity matrix has been set up."""
        return self._sev is not None

    def _ensure_sev(self) -> dict[tuple[Metric, Cnode], dict[Thread, float]]:
        if self._sev is None:
            # Only regions defined: a flat profile gets one top-level cnode each.
            if not self.cnodes and self.regions:
                for region in list(self.regions):
                    self.def_cnode(region, None)
            self.assign_ids()
            self._sev = {}
        return self._sev

    def def_attr(self, key: str, value: str) -> None:
        """Add a metadata attribute."""
        self.attrs.append((key, value))

    def def_mirror(self, url: str) -> None:
        """Add a documentation mirror URL."""
        self.mirrors.append(url)

    def def_met(
        self,
        disp_name: str,
        uniq_name: str,
        dtype: str,
        uom: str,
        val: str,
        url: str,
        descr: str,
        parent: Metric | None,
    ) -> Metric:
        """Define a metric, as a root metric when it has no parent."""
        met = Metric(disp_name, uniq_name, dtype, uom, val, url, descr, parent)
        if parent is None:
            self.root_metrics.append(met)
        self.metrics.append(met)
        return met

    def def_region(
        self, name: str, begln: int, endln: int, url: str, descr: str, mod: str
    ) -> Region:
        """Define a source region."""
        reg = Region(name, begln, endln, url, descr, mod)
        self.regions.append(reg)
        return reg

    def def_cnode_cs(
        self, callee: Region, mod: str, line: int, parent: Cnode | None
    ) -> Cnode:
        """Define a call-tree node with call-site information."""
        cnode = Cnode(callee, mod, line, parent)
        if parent is None:
            self.root_cnodes.append(cnode)
        else:
            parent.callee.add_cnode(cnode)
        self.cnodes.append(cnode)
        return cnode

    def def_cnode(self, callee: Region, parent: Cnode | None) -> Cnode:
        """Define a call-tree node without call-site information."""
        return self.def_cnode_cs(callee, "", 0, parent)

    def def_mach(self, name: str, desc: str) -> Machine:
        """Define a machine."""
        mach = Machine(name, desc, id=len(self.machines))
        self.machines.append(mach)
        return mach

    def def_node(self, name: str, mach: Machine | None) -> Node:
        """Define a node of ``mach``."""
        node = Node(name, mach, id=len(self.nodes))
        self.nodes.append(node)
        return node

    def def_proc(self, name: str, rank: int, node: Node | None) -> Process:
        """Define a process on ``node``."""
        proc = Process(name, rank, node, id=len(self.processes))
        self.processes.append(proc)
        return proc

    def def_thrd(self, name: str, rank: int, proc: Process | None) -> Thread:
        """Define a thread of ``proc``."""
        thrd = Thread(name, rank, proc, id=len(self.threads))
        self.threads.append(thrd)
        return thrd

    def def_cart(
        self, ndims: int, dims: Sequence[int], periods: Sequence[int]
    ) -> Cartesian | None:
        """Define a cartesian topology; more than three dimensions are refused."""
        if ndims > MAX_CART_DIMS:
            sys.stderr.write(
                "cubew: WARNING: CUBE3 doesn't support Cartesian topologies "
                f"with {ndims} dimensions\n"
            )
            return None
        cart = Cartesian(list(dims)[:ndims], list(periods)[:ndims])
        self.carts.append(cart)
        return cart

    def def_coords(
        self, cart: Cartesian | None, thread: Thread, coords: Sequence[int]
    ) -> None:
        """Place ``thread`` in ``cart``; nothing happens without a topology."""
        if cart is None:
            return
        cart.define_coords(thread, coords)

    def set_sev(self, met: Metric, cnode: Cnode, thrd: Thread, value: float) -> None:
        """Store a severity; a value already stored for the triple is added to."""
        row = self._ensure_sev().setdefault((met, cnode), {})
        row[thrd] = row.get(thrd, 0.0) + value

    def _cnode_for_region(self, region: Region, caller: str) -> Cnode:
        for cnode in self.cnodes:
            if cnode.callee.matches(region):
                return cnode
        raise CubeError(
            f"{caller}: Region undefined or trying to create a mixed "
            "flat/calltree profile"
        )

    def set_sev_reg(
        self, met: Metric, region: Region, thrd: Thread, value: float
    ) -> None:
        """Store a severity for the first call-tree node calling ``region``."""
        self._ensure_sev()
        cnode = self._cnode_for_region(region, "set_sev_reg")
        self.set_sev(met, cnode, thrd, value)

    def add_sev(self, met: Metric, cnode: Cnode, thrd: Thread, incr: float) -> None:
        """Store the current severity plus ``incr`` through :meth:`set_sev`."""
        self._ensure_sev()
        val = self.get_sev(met, cnode, thrd)
        self.set_sev(met, cnode, thrd, val + incr)

    def add_sev_reg(
        self, met: Metric, region: Region, thrd: Thread, incr: float
    ) -> None:
        """As :meth:`add_sev`, for the first call-tree node calling ``region``."""
        self._ensure_sev()
        cnode = self._cnode_for_region(region, "add_sev_reg")
        val = self.get_sev(met, cnode, thrd)
        self.set_sev(met, cnode, thrd, val + incr)

    def get_sev(self, met: Metric, cnode: Cnode, thrd: Thread) -> float:
        """The stored severity, or 0.0 when none is stored."""
        if self._sev is None:
            return 0.0
        return self._sev.get((met, cnode), {}).get(thrd, 0.0)

    def assign_ids(self) -> None:
        """Number metrics and cnodes depth-first and regions in order."""
        next_id = 0
        for met in self.root_metrics:
            next_id = met.assign_ids(next_id)
        for index, region in enumerate(self.regions):
            region.id = index
        next_id = 0
        for cnode in self.root_cnodes:
            next_id = cnode.assign_ids(next_id)