"""
Console
=======

Line interpreter for interactive and batch use. A line is either a command or
a conversion:

    1 in mm                     one value, one output unit
    1 2 3 in mm cm              every value to every output unit
    : : _m:                     recall value, input and output
    format d                    switch to descriptive output
    input_unit newton           set what ':' means as input unit

Errors are reported on the error stream and the console carries on.

Usage:
    from ucon.console import Console
    from ucon.session import Session

    console = Console(Session(registry))
    failures = console.run(sys.stdin, prompt="> ")
"""

import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO

from ucon import __version__
from ucon.errors import UnitError
from ucon.formatting import OutputStyle, format_number
from ucon.parse.number import parse_number_expr
from ucon.parse.scanner import ScanError, split_words
from ucon.parse.unit_expr import Literal, parse_unit_expr
from ucon.state import Slot
from ucon.session import Session
from ucon.units import UnitRegistry, UnitType

logger = logging.getLogger(__name__)

NOT_SET = "[not set]"
OKAY = "Okay."
NONLITERAL_RECALL = "recall variables must be literals"

# Most arguments each command takes; `units` takes a type name of any length
ARGUMENT_LIMITS = {
    'format': 1,
    'value': 1,
    'input_unit': 1,
    'output_unit': 1,
    'units': None,
    'help': 0,
    'version': 0,
}

HELP = """\
usage: VALUE... INPUT_UNIT OUTPUT_UNIT...

  1 in mm               convert 1 inch to millimetres
  1 2 3 in mm cm        convert several values to several units
  1 _kN lbf             '_' and a metric prefix before a unit name
  : : :                 ':' recalls the last value or unit in its position
  5 : _k:               prefixes work on recalled units too
  \\_x                   backslash escapes a character in a unit name

metric prefixes:
  Y Z E P T G M k h D   1e24 .. 1e1
  d c m u n p f a z y   1e-1 .. 1e-24

commands:
  format [s|d|v]        show or set the output format
  value [NUMBER]        show or set the recalled value
  input_unit [UNIT]     show or set the recalled input unit
  output_unit [UNIT]    show or set the recalled output unit
  units [TYPE]          list known units
  help                  show this text
  version               show the program version
  exit, quit            leave the console
"""


class CommandError(Exception):
    """A console command was used incorrectly."""
    pass


def _check_arguments(args: List[str], limit: Optional[int]) -> None:
    if limit is not None and len(args) > limit:
        raise CommandError(f"unrecognized argument: {args[limit]}")


def describe_units(registry: UnitRegistry, unit_type: Optional[str] = None) -> List[str]:
    """
    Unit listing, one line per unit under a line per type.

    Args:
        registry: Loaded units
        unit_type: Config name of a single type to list

    Raises:
        ValueError: Unknown unit type
    """
    types = registry.types()
    if unit_type is not None:
        wanted = UnitType.from_name(unit_type)
        types = [t for t in types if t is wanted]

    lines = []
    for t in types:
        lines.append(f"{t}:")
        for unit in registry.by_type(t):
            if unit.aliases:
                lines.append(f"  {unit.name} ({', '.join(unit.aliases)})")
            else:
                lines.append(f"  {unit.name}")
    return lines


class Console:
    """
    Interprets console lines against one session.

    Args:
        session: Conversion session, which holds the recall state
        out: Stream for results and command output
        err: Stream for error messages
        record: Optional extra stream that receives conversion results only
        quiet: Do not write conversion results to out
    """

    def __init__(
        self,
        session: Session,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        record: Optional[TextIO] = None,
        quiet: bool = False,
    ):
        self.session = session
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.record = record
        self.quiet = quiet
        self.failures = 0

        self._commands: Dict[str, Callable[[List[str]], Optional[str]]] = {
            'format': self._format,
            'value': self._value,
            'input_unit': self._input_unit,
            'output_unit': self._output_unit,
            'units': self._units,
            'help': self._help,
            'version': self._version,
        }

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def _say(self, text: str) -> None:
        print(text, file=self.out)

    def _result(self, text: str) -> None:
        if not self.quiet:
            print(text, file=self.out)
        if self.record is not None:
            print(text, file=self.record)

    def _error(self, message: str) -> None:
        self.failures += 1
        print(f"error: {message}", file=self.err)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def _format(self, args: List[str]) -> str:
        if not args:
            return str(self.session.style)
        try:
            self.session.style = OutputStyle.from_name(args[0])
        except ValueError as e:
            raise CommandError(str(e)) from None
        return OKAY

    def _value(self, args: List[str]) -> str:
        cache = self.session.cache
        if not args:
            if cache.last_value is None:
                return NOT_SET
            return format_number(cache.last_value, self.session.precision)

        expr = parse_number_expr(args[0])
        if expr.recall:
            raise CommandError(NONLITERAL_RECALL)
        cache.remember_value(expr.value)
        return OKAY

    def _set_unit(self, slot: Slot, args: List[str]) -> str:
        cache = self.session.cache
        if not args:
            recalled = cache.get(slot)
            return NOT_SET if recalled is None else recalled.display_name

        expr = parse_unit_expr(args[0])
        if not isinstance(expr, Literal):
            raise CommandError(NONLITERAL_RECALL)
        unit = self.session.registry.lookup(expr.name)
        if unit is None:
            raise CommandError(f"unknown unit: {expr.name}")
        cache.remember(slot, unit, expr.name)
        return OKAY

    def _input_unit(self, args: List[str]) -> str:
        return self._set_unit(Slot.INPUT, args)

    def _output_unit(self, args: List[str]) -> str:
        return self._set_unit(Slot.OUTPUT, args)

    def _units(self, args: List[str]) -> str:
        try:
            lines = describe_units(self.session.registry, " ".join(args) if args else None)
        except ValueError as e:
            raise CommandError(str(e)) from None
        return "\n".join(lines)

    def _help(self, args: List[str]) -> str:
        return HELP.rstrip("\n")

    def _version(self, args: List[str]) -> str:
        return f"ucon {__version__}"

    # -------------------------------------------------------------------------
    # Interpreter
    # -------------------------------------------------------------------------

    def execute(self, line: str) -> bool:
        """
        Run one line.

        Returns:
            False when the line asks to leave the console, True otherwise
        """
        try:
            words = split_words(line)
        except ScanError as e:
            self._error(f"syntax error, {e}")
            return True
        return self.execute_words(words)

    def execute_words(self, words: List[str]) -> bool:
        """Run a line that is already split into words, as from argv."""
        if not words:
            return True

        command, args = words[0], words[1:]
        try:
            if command in ('exit', 'quit'):
                _check_arguments(args, 0)
                return False
            if command in self._commands:
                _check_arguments(args, ARGUMENT_LIMITS.get(command))
                reply = self._commands[command](args)
                if reply:
                    self._say(reply)
            else:
                for conversion in self.session.convert_line(words):
                    self._result(self.session.format(conversion))
        except (UnitError, CommandError) as e:
            logger.debug(f"failed: {' '.join(words)}")
            self._error(str(e))

        return True

    def run(self, stream: TextIO, prompt: Optional[str] = None) -> int:
        """
        Execute lines until end of input or an exit command.

        Args:
            stream: Input lines
            prompt: Written before each line is read (interactive use)

        Returns:
            Number of lines that failed
        """
        before = self.failures
        while True:
            if prompt:
                self.out.write(prompt)
                self.out.flush()
            line = stream.readline()
            if not line:
                if prompt:
                    self.out.write("\n")
                break
            if not self.execute(line):
                break
        return self.failures - before
