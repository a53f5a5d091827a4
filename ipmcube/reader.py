"""Reading IPM XML profiles into a :class:`~ipmcube.job.Job`."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import IO

from .job import HostNode, IpmFunc, IpmModule, IpmRegion, Job, TaskData

_INT = re.compile(r"\s*([+-]?\d+)")
_FLOAT = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?"
    r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

CUDA_EXEC_PREFIX = "@CUDA_EXEC_STRM"


def _atoi(text: str) -> int:
    """Leading integer of ``text``, or 0 when there is none."""
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    """Leading floating-point number of ``text``, or 0.0 when there is none."""
    match = _FLOAT.match(text)
    return float(match.group(1)) if match else 0.0


def _attr(elem: ET.Element, name: str) -> str:
    value = elem.get(name)
    if value is None:
        raise ValueError(f"<{elem.tag}> element lacks the '{name}' attribute")
    return value


def _words(elem: ET.Element) -> list[str]:
    """The whitespace-separated words of the text before the first child."""
    return (elem.text or "").split()


def _first_word(elem: ET.Element) -> str | None:
    words = _words(elem)
    return words[0] if words else None


class _Reader:
    """Streaming parser state for one profile."""

    def __init__(self, job: Job) -> None:
        self.job = job
        self.ptrtable: dict[str, str] = {}
        self.root: ET.Element | None = None
        self.seen_task = False

    def run(self, stream: IO) -> None:
        for event, elem in ET.iterparse(stream, events=("start", "end")):
            if self.root is None:
                self.root = elem
            if elem.tag != "task":
                continue
            if event == "start":
                self._open_task(elem)
            else:
                self._parse_task(elem)
                elem.clear()

    # -- task boundaries -------------------------------------------------

    def _open_task(self, elem: ET.Element) -> None:
        job = self.job
        if not self.seen_task:
            self.seen_task = True
            job.ntasks = _atoi(_attr(elem, "mpi_size"))
            job.username = _attr(elem, "username")
            for topo in job.topologies:
                if topo.x * topo.y * topo.z < job.ntasks:
                    job.diag(
                        f"Topology [{topo.x}x{topo.y}x{topo.z}] is not large enough"
                        f" for this job with {job.ntasks} tasks, ignorning it...\n"
                    )
                    topo.valid = False
            while len(job.taskdata) < job.ntasks:
                job.taskdata.append(TaskData())
            assert self.root is not None
            self._parse_calltable(self.root)

        job.taskid = _atoi(_attr(elem, "mpi_rank"))
        pct = 100.0 * job.taskid / job.ntasks if job.ntasks else float("nan")
        job.diag(f"\rParsing task {job.taskid:5d} of {job.ntasks:5d} ({pct:5.2f}%)")

    def _task_data(self) -> TaskData:
        job = self.job
        if not 0 <= job.taskid < len(job.taskdata):
            raise ValueError(
                f"task rank {job.taskid} outside a job of {job.ntasks} tasks"
            )
        return job.taskdata[job.taskid]

    # -- calltable -------------------------------------------------------

    def _parse_calltable(self, root: ET.Element) -> None:
        job = self.job
        table = root.find(".//calltable")
        if table is None:
            # Older profiles carry no calltable: assume a single MPI module.
            job.modulemap["MPI"] = IpmModule("MPI")
            return
        for section in table:
            modname = section.get("module")
            if modname is None:
                continue
            mod = IpmModule(modname)
            job.modulemap[modname] = mod
            for entry in section:
                fname = entry.get("name")
                if fname is None:
                    continue
                func = IpmFunc(fname, mod)
                job.funcmap[fname] = func
                mod.funcs.append(func)

    # -- task contents ---------------------------------------------------

    def _parse_task(self, task: ET.Element) -> None:
        job = self.job

        elem = task.find(".//job")
        if elem is not None:
            self._parse_job(elem)

        elem = task.find(".//regions")
        if elem is not None:
            self._parse_regions(elem, job.ipm_main)
        else:
            job.diag(f"No <regions> entry found for task {job.taskid}\n")

        elem = task.find(".//perf")
        if elem is not None:
            self._parse_perf(elem)
        else:
            job.diag(f"No <perf> entry found for task {job.taskid}\n")

        elem = task.find(".//cmdline")
        if elem is not None:
            self._parse_cmdline(elem)
        else:
            job.diag(f"No <cmdline> entry found for task {job.taskid}\n")

        elem = task.find(".//host")
        if elem is not None:
            self._parse_host(elem)
        else:
            job.diag(f"No <host> entry found for task {job.taskid}\n")

        elem = task.find(".//ptrtable")
        if elem is not None:
            self._parse_ptrtable(elem)

        elem = task.find(".//hash")
        if elem is not None:
            self._parse_hash(elem)

    def _parse_job(self, elem: ET.Element) -> None:
        job = self.job
        if job.start == 0 or job.final == 0:
            start = _atoi(_attr(elem, "start"))
            final = _atoi(_attr(elem, "final"))
            job.start = start
            job.final = final

    def _parse_regions(self, elem: ET.Element, parent: IpmRegion) -> None:
        for child in elem:
            if child.tag == "region":
                self._parse_region(child, parent)

    def _parse_region(self, elem: ET.Element, parent: IpmRegion) -> None:
        td = self._task_data()
        label = _attr(elem, "label")

        reg: IpmRegion | None = None
        for sub in parent.subregions:
            if sub.name == label:
                reg = sub
        if reg is None:
            xmlid_text = elem.get("id")
            reg = IpmRegion(
                name=label,
                parent=parent,
                level=parent.level + 1,
                xmlid=_atoi(xmlid_text) if xmlid_text is not None else 0,
            )
            parent.subregions.append(reg)

        td.regdata[reg].wtime = _atof(_attr(elem, "wtime"))

        for child in elem:
            if child.tag == "func":
                self._parse_func(child, reg)
            elif child.tag == "regions":
                self._parse_regions(child, reg)

    def _parse_func(self, elem: ET.Element, reg: IpmRegion) -> None:
        job = self.job
        td = self._task_data()
        name = _attr(elem, "name")
        word = _first_word(elem)
        time = _atof(word) if word is not None else 0.0

        # Without a calltable the module is unknown; assume MPI.
        func = job.funcmap.get(name)
        if func is None:
            mpi = job.modulemap.get("MPI")
            if mpi is None:
                mpi = IpmModule("MPI")
                job.modulemap["MPI"] = mpi
            func = IpmFunc(name, mpi)
            job.funcmap[name] = func
            mpi.funcs.append(func)
        mod = func.module
        if mod is None:
            raise ValueError(f"function '{name}' belongs to no module")

        func.active = True
        td.funcdata[(reg.id, func.id)].time += time
        if not name.startswith("@"):
            td.funcdata[(reg.id, mod.id)].time += time
            if reg.parent is job.ipm_main:
                td.funcdata[(job.ipm_main.id, mod.id)].time += time

        count_text = _attr(elem, "count")
        count = _atoi(count_text)
        td.funcdata[(reg.id, func.id)].count += count
        # The '@' test here looks at the count text, so counts always reach the module.
        if not count_text.startswith("@"):
            td.funcdata[(reg.id, mod.id)].count += count
            if reg.parent is job.ipm_main:
                td.funcdata[(job.ipm_main.id, mod.id)].count += count

        td.regdata[reg].funcsum.time += time
        td.regdata[reg].funcsum.count += count

    def _parse_perf(self, elem: ET.Element) -> None:
        td = self._task_data()
        td.regdata[self.job.ipm_main].wtime = _atof(_attr(elem, "wtime"))
        td.procmem = _atof(_attr(elem, "gbyte"))

    def _parse_host(self, elem: ET.Element) -> None:
        job = self.job
        if not job.machinename:
            job.machinename = _attr(elem, "mach_name")

        hostname = _first_word(elem)
        if hostname is None:
            return
        td = self._task_data()
        td.hostname = hostname
        if not job.hostname:
            job.hostname = hostname

        node = next((n for n in job.nodes if n.name == hostname), None)
        if node is None:
            node = HostNode(hostname)
            job.nodes.append(node)
        node.tasks.append(job.taskid)
        td.node = node

    def _parse_cmdline(self, elem: ET.Element) -> None:
        job = self.job
        if job.cmdline:
            return
        word = _first_word(elem)
        if word is not None:
            job.cmdline = word
        realpath = elem.get("realpath")
        if realpath is not None:
            job.realpath = realpath

    def _parse_ptrtable(self, elem: ET.Element) -> None:
        for child in elem:
            if child.tag == "ptr":
                name = _first_word(child)
                if name is not None:
                    self.ptrtable[_attr(child, "addr")] = name

    def _parse_hash(self, elem: ET.Element) -> None:
        for child in elem:
            if child.tag == "hent":
                self._parse_hent(child)

    def _parse_hent(self, elem: ET.Element) -> None:
        job = self.job
        _attr(elem, "count")
        call = _attr(elem, "call")
        if not call.startswith(CUDA_EXEC_PREFIX):
            return
        ptr = _attr(elem, "ptr")
        if job.funcmap.get(call) is None:
            job.diag(f"No func found for '{call}'!\n")
            return
        if not self.ptrtable.get(ptr, ""):
            job.diag(f"Not found in ptrtable: {ptr}\n")
            return
        xmlid = _atoi(_attr(elem, "region"))
        if job.find_region_by_xmlid(xmlid) is None:
            job.diag(f"Could not find region for xml id {xmlid}\n")


def read_ipm(job: Job, stream: IO) -> None:
    """Read an IPM XML profile from ``stream`` into ``job``."""
    _Reader(job).run(stream)
    job.diag("\rParsing done.                               \n")