# ipmcube

`ipmcube` is a Python library for two jobs. It reads XML performance
profiles written by IPM (the Integrated Performance Monitoring tool for
parallel programs). It also models profile data in the CUBE 3 format.

The package uses only the standard library.

## Installation

```
pip install .
```

To run the test suite, install the `test` extra and run pytest:

```
pip install ".[test]"
pytest
```

## Reading an IPM profile

`ipmcube.reader.read_ipm(job, stream)` parses an IPM XML stream and fills an
`ipmcube.job.Job` with the data. The stream is read one task at a time.

From the profile it collects:

- the calltable: modules and functions;
- the nested regions;
- per-task wallclock time, memory use and function times and counts;
- the hosts, and which tasks ran on each;
- the command line and the start and end times.

Progress and diagnostics go to standard error unless `Job.quiet` is set.

```python
import sys

from ipmcube.job import Job
from ipmcube.reader import read_ipm

job = Job(quiet=True)
with open("profile.xml", "rb") as src:
    read_ipm(job, src)

job.compute_xdata()   # exclusive times and counts per region
print(job.ntasks, job.username, job.machinename)
for node in job.nodes:
    print(node.name, node.tasks)
job.dump(sys.stdout)  # modules and their functions
```

Members of `ipmcube.job`:

- `Job.find_region_by_xmlid(xmlid)` looks up a region by its id in the
  profile.
- Per-task data lives in `Job.taskdata`. Each entry is a `TaskData`, with
  `regdata` keyed by region and `funcdata` keyed by `(region id, function or
  module id)`.

A topology request is a `TopoSpec`. When `read_ipm` meets the first task, it
marks as not valid every topology in `Job.topologies` that has fewer cells
than the job has tasks.

## Parsing options

`ipmcube.options` understands this argument syntax:

```
[options] <IPM XML input> [[-o] <output file>]
```

The options are:

| Option | Meaning |
| --- | --- |
| `-full` | ask for the full banner |
| `-html` | ask for an HTML report |
| `-cube` | ask for CUBE output |
| `-q` | quiet |
| `-o` | output name is the input name with `.cube` appended |
| `-t n1xn2[xn3][,l1xl2[xl3]...]` | one or more processor topologies |

```python
from ipmcube.options import parse_options, parse_topospec

opts = parse_options(["-cube", "-t", "4x4,2x2x4", "profile.xml", "out.cube"])
opts.outform     # OutForm.CUBE
opts.topologies  # [TopoSpec(x=4, y=4, z=1), TopoSpec(x=2, y=2, z=4)]
parse_topospec("8x2")
```

Malformed arguments raise `OptionError`.

## Building CUBE data

`ipmcube.cube.Cube` holds the three dimensions of a CUBE profile:

- metrics (`ipmcube.metric.Metric`);
- program regions and call-tree nodes (`ipmcube.program.Region`,
  `ipmcube.program.Cnode`);
- the system: `ipmcube.system.Machine`, `Node`, `Process` and `Thread`,
  plus cartesian topologies (`ipmcube.cartesian.Cartesian`).

It also holds the severity values for each metric, cnode and thread.

```python
from ipmcube.cube import Cube

cube = Cube()
time = cube.def_met("Total Time", "", "", "sec", "", "", "", None)
app = cube.def_region("Application", 0, 0, "", "", "")
root = cube.def_cnode_cs(app, "", 0, None)
mach = cube.def_mach("cluster", "")
node = cube.def_node("n0", mach)
proc = cube.def_proc("Task 0", 0, node)
thrd = cube.def_thrd("Thread", 0, proc)

cube.set_sev(time, root, thrd, 1.5)
cube.set_sev(time, root, thrd, 0.5)   # adds to the stored value
cube.get_sev(time, root, thrd)        # 2.0
```

Behaviour to be aware of:

- `set_sev_reg` and `add_sev_reg` look up the first call-tree node whose
  callee matches the given region. If none matches, they raise `CubeError`.
- `def_cart` refuses more than three dimensions and returns `None`.
- `assign_ids` numbers metrics and cnodes depth-first, and numbers regions
  in the order they were defined.

Each element class has a `write_xml(fp)` method that writes its own XML
element and its subtree in CUBE 3 layout. Region names are escaped with
`ipmcube.program.escape_region_name`.

## What this package does not do

- It has no command-line program.
- It does not print the IPM summary banner.
- It does not compute cross-task statistics.
- It does not write a complete CUBE document (header, definitions and
  severity matrix) to a file.
- It does not convert a `Job` into a `Cube`.
- `OutForm.HTML` and `OutForm.FULL` can be parsed, but nothing in the
  package produces those outputs.