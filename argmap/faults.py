"""
Argmap faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped by the
  stage that detects it (declaration, mapping, reading, warnings).
- MappingException / MappingWarning: base types carrying a message plus read-only
  options (code, title, hint and context). They render themselves through the rich
  protocol and know how to surface themselves (see trigger()).
- trigger(): single entry point to raise, warn about, or print a fault.
- getdoc(): optional per-code documentation provided by the host application.

Integration
- Parameter construction raises its faults directly; the Parser routes its faults
  through Parser.trigger(), which injects the parser's runtime options
  (tool/shell/fancy/colorful) before calling trigger().
- shell=False (default): exceptions are raised, warnings go through warnings.warn.
- shell=True: faults are printed to stderr with rich; exceptions then exit(1).

Host customization (attributes looked up on __main__)
- __prog__: program name shown in fault headers.
- __styles__: palette overrides (keys listed in the _styles mapping below).
- __codes__: FaultCode -> label remapping, see FaultCode.normalize().
- __docs__: FaultCode -> short documentation string, see getdoc().
"""
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - declarations (2110x): INVALID_ARGUMENT, DUPLICATE_ALIAS
    - mapping (2111x): MISSING_REQUIRED_ARGUMENT
    - reading (2112x): UNKNOWN_ALIAS, TYPE_MISMATCH
    - warnings (2211x): MISSING_NAMED_VALUE
    """
    # --- declaration errors ---
    INVALID_ARGUMENT            = 21101
    DUPLICATE_ALIAS             = 21102

    # --- mapping errors ---
    MISSING_REQUIRED_ARGUMENT   = 21111

    # --- reading errors ---
    UNKNOWN_ALIAS               = 21121
    TYPE_MISMATCH               = 21122

    # --- warnings ---
    MISSING_NAMED_VALUE         = 22111

    def normalize(self):
        """
        return a host-normalized label for this code.

        the host can provide a __codes__ mapping in __main__ to replace numeric ids
        with friendlier labels; otherwise the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_styles = {
    "exception": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
        "docs": "underline #00E5FF dim",
    },
    "warning": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
        "docs": "underline #FFB400 dim",
    },
}


def _render(fault, palette):
    """
    shared rich rendering for exceptions and warnings.

    layout: "[ prog — code | title ]" header, message, "→ hint" and optional docs;
    wrapped in a Panel when the fault carries fancy=True.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    styles = defaultdict(str, _styles[palette] | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    tool = options.get("tool")
    prog = getattr(main, "__prog__", getattr(tool, "name", None) or os.path.basename(sys.argv[0]))
    code = options.get("code", fault.code)

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if code else "", "code"),
        " | ",
        text(options.get("title", fault.title).title(), "title"),
        " ]",
    )
    lines = [text(fault.message, "message")]
    if hint := options.get("hint"):
        lines.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
    if code and (docs := getdoc(code)):
        lines.append(text(docs, "docs"))

    if options.get("fancy", False):
        return Panel(Group(*lines), title=header, title_align="left")
    return Group(header, *lines)


class MappingException(Exception):
    """
    base type for every argmap error.

    - message: one-sentence description (also what str() returns).
    - options: read-only mapping of rendering and context options.
    - code/title: class-level defaults, overridable through options.
    """
    code = Unset
    title = "mapping error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        return _render(self, "exception")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidArgumentError(MappingException, TypeError):
    code = FaultCode.INVALID_ARGUMENT
    title = "invalid argument"


class DuplicateAliasError(MappingException, ValueError):
    code = FaultCode.DUPLICATE_ALIAS
    title = "duplicate alias"


class MissingRequiredArgumentError(MappingException, LookupError):
    code = FaultCode.MISSING_REQUIRED_ARGUMENT
    title = "missing required argument"


class UnknownAliasError(MappingException, KeyError):
    code = FaultCode.UNKNOWN_ALIAS
    title = "unknown alias"


class TypeMismatchError(MappingException, TypeError):
    code = FaultCode.TYPE_MISMATCH
    title = "type mismatch"


class MappingWarning(Warning):
    """
    base type for every argmap warning (non-fatal feedback).
    """
    code = Unset
    title = "mapping warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        return _render(self, "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingNamedValueWarning(MappingWarning):
    code = FaultCode.MISSING_NAMED_VALUE
    title = "missing named value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see the base classes).
    - options are merged into a copy of the fault via __replace__(**options), then
      the copy is triggered: raised/warned (shell=False) or printed (shell=True).
    """
    if (
        not callable(getattr(fault, "__trigger__", None)) or
        not callable(getattr(fault, "__replace__", None))
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation for a fault code, looked up in __main__.__docs__.

    returns None when the host provides nothing for this code.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "MappingException",
    "InvalidArgumentError",
    "DuplicateAliasError",
    "MissingRequiredArgumentError",
    "UnknownAliasError",
    "TypeMismatchError",
    "MappingWarning",
    "MissingNamedValueWarning",
    "trigger",
    "getdoc",
)
