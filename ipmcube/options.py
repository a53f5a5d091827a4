"""Command-line options of the converter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from .job import OutForm, TopoSpec

_NUMBER = re.compile(r"[ \t\n\r\f\v]*([+-]?\d+)")


class OptionError(ValueError):
    """Raised when the command line cannot be understood."""


@dataclass
class Options:
    """What the command line asks for."""

    inname: str = ""
    outname: str = ""
    outform: OutForm = OutForm.TERSE
    quiet: bool = False
    topologies: list[TopoSpec] = field(default_factory=list)


def _take_number(text: str, pos: int) -> tuple[int, int]:
    """Read an integer at ``pos``; return it and the position after it (0 if none)."""
    match = _NUMBER.match(text, pos)
    if match is None:
        return 0, pos
    value = int(match.group(1))
    if value < 0:
        raise OptionError(f"Negative extent in topology specification: '{text}'")
    return value, match.end()


def parse_topospec(text: str) -> list[TopoSpec]:
    """Parse ``n1xn2[xn3][,l1xl2[xl3]...]`` into topologies."""
    error = OptionError(f"Error parsing topology specification: '{text}'")
    specs: list[TopoSpec] = []
    pos = 0
    while pos < len(text):
        x, pos = _take_number(text, pos)
        if not x or text[pos:pos + 1] != "x":
            raise error
        y, pos = _take_number(text, pos + 1)
        if not y:
            raise error
        z = 1
        if text[pos:pos + 1] == "x":
            z, pos = _take_number(text, pos + 1)
            if not z:
                raise error
        specs.append(TopoSpec(x=x, y=y, z=z))
        if text[pos:pos + 1] == ",":
            pos += 1
    return specs


_EXACT_FORMS = {"f": ("-full", OutForm.FULL), "h": ("-html", OutForm.HTML),
                "c": ("-cube", OutForm.CUBE)}


def parse_options(argv: Sequence[str]) -> Options:
    """Parse the arguments that follow the program name."""
    opts = Options()
    args = iter(argv)
    for arg in args:
        if arg.startswith("-"):
            flag = arg[1:2]
            if flag == "t":
                spec = next(args, None)
                if spec is None:
                    raise OptionError("Error parsing topology specification: ''")
                try:
                    opts.topologies.extend(parse_topospec(spec))
                except OptionError:
                    raise OptionError(
                        f"Error parsing topology specification: '{spec}'"
                    ) from None
            elif flag in _EXACT_FORMS:
                expected, form = _EXACT_FORMS[flag]
                if arg != expected:
                    raise OptionError(f"Unrecognized option: '{arg}'")
                opts.outform = form
            elif flag == "o":
                opts.outname = opts.inname + ".cube"
            elif flag == "q":
                opts.quiet = True
            else:
                raise OptionError(f"Unrecognized option: '{arg}'")
        elif not opts.inname:
            opts.inname = arg
        elif not opts.outname:
            opts.outname = arg
        else:
            raise OptionError(f"Too many file arguments: '{arg}'")
    return opts