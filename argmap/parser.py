"""
Argmap parser: map a flat argument list onto declared parameters.

What this module provides
- Parser: owns an alias-validated, category-ordered collection of Parameters and maps
  argument lists onto them in a single left-to-right pass.

Mapping rules (Parser.map)
- Every pass starts by clearing the pending token of each parameter.
- Named phase: while tokens keep matching an alias of an unfilled Named/Flag
  parameter, they are consumed as such. A Flag is satisfied by its alias alone; a
  Named parameter takes the next token as its value, whatever it looks like.
- The first token that matches neither an unfilled Named/Flag alias nor the alias of a
  flag already set ends the named phase for good. That token and every later one go to the next unfilled Required parameter,
  then to the next unfilled Optional one, and otherwise into the returned
  `unmapped` list (even when they happen to spell an alias).
- A filled parameter is never matched again. A repeated flag alias inside the named
  phase is absorbed silently and the phase goes on; a repeated Named alias ends it,
  so that alias and its value land in `unmapped`.
- A Required parameter left without a token fails the pass with
  MissingRequiredArgumentError.

Values are parsed lazily: Parser.value(alias, type) runs the parameter's parse
function at read time, against the most recent pass.

Concurrency
- A Parser keeps per-pass state on its parameters; it is not safe to call map() from
  several threads at once. Use one Parser per thread or serialize access.

Quick start
    from argmap import Parser, named, flag, required, optional

    parser = Parser(
        flag("verbose", "-v", "--verbose"),
        named("level", "-l", "--level", default=1, parse=int),
        required("source"),
        optional("target", default="out"),
    )
    ok, help = parser.map_strict(["-v", "-l", "3", "in.txt"])
    if not ok:
        print(help)
    parser.value("level", int)    # 3
    parser.value("target")        # "out"
"""
import os.path
import sys
from collections import Counter, defaultdict
from collections.abc import Iterable

from rich.console import Group
from rich.text import Text

from .faults import *
from .parameters import Category, Parameter
from .utils import *


class Parser:
    """
    Maps argument lists onto a fixed set of parameter declarations.

    Construction validates that no alias is declared twice across all parameters and
    stores them stably sorted by category (named, flag, required, optional).

    Runtime options
    - name: program name used in rendered faults (defaults to basename of argv[0]).
    - shell: print faults with rich (and exit on errors) instead of raising/warning.
    - fancy: render faults inside a panel.
    - colorful: style rendered faults and help.
    """

    parameters = mirror("parameters")
    name = mirror("name")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(self, *parameters, name=Unset, shell=False, fancy=False, colorful=True):
        if not isinstance(name, str | Unset):
            raise TypeError("parser 'name' must be a string")

        self._name = coalesce(name, os.path.basename(sys.argv[0]))
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

        for parameter in parameters:
            if not isinstance(parameter, Parameter):
                self.trigger(InvalidArgumentError(
                    f"parser accepts parameters only, got {type(parameter).__name__!r}",
                    argument="parameters",
                    hint="build parameters with named(), flag(), required() or optional()",
                ))

        counts = Counter(alias for parameter in parameters for alias in parameter.aliases)
        if duplicates := {alias: count for alias, count in counts.items() if count > 1}:
            self.trigger(DuplicateAliasError(
                "aliases defined more than once (%s)" % ", ".join(
                    f"{count}x {alias}" for alias, count in duplicates.items()
                ),
                duplicates=duplicates,
                hint="give every parameter its own names",
            ))

        # sorted() is stable: declaration order is kept within a category.
        self._parameters = tuple(sorted(parameters, key=lambda parameter: parameter.category))

    def trigger(self, fault, /, **options):
        """
        Surface a fault carrying this parser's runtime options.
        """
        trigger(
            fault,
            tool=self,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
            **options,
        )

    def _claim(self, alias):
        # First unfilled parameter (any category) declaring `alias`.
        for parameter in self._parameters:
            if parameter._pending is Unset and parameter.matches(alias):
                return parameter
        return None

    def _flagged(self, alias):
        # True when `alias` belongs to a Flag already set in this pass.
        for parameter in self._parameters:
            if parameter.category is Category.FLAG and parameter._pending is not Unset and parameter.matches(alias):
                return True
        return False

    def _next(self, category):
        for parameter in self._parameters:
            if parameter.category is category and parameter._pending is Unset:
                return parameter
        return None

    def map(self, args=Unset, /):
        """
        Map `args` (default: sys.argv[1:]) onto the parameters.

        Returns the list of tokens no parameter accepted, in input order. Raises
        MissingRequiredArgumentError when a required parameter got no token.
        """
        if args is Unset:
            args = sys.argv[1:]
        elif isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError("map() argument must be an iterable of strings")
        args = list(args)
        for argument in args:
            if not isinstance(argument, str):
                raise TypeError("map() argument must be an iterable of strings")

        for parameter in self._parameters:
            parameter._pending = Unset

        unmapped = []
        awaiting = None
        named = True

        for argument in args:
            if awaiting is not None:
                awaiting._pending = argument
                awaiting = None
                continue

            if named:
                parameter = self._claim(argument)
                if parameter is not None and parameter.category is Category.FLAG:
                    # The alias itself marks the flag as present.
                    parameter._pending = argument
                    continue
                if parameter is not None and parameter.category is Category.NAMED:
                    awaiting = parameter
                    continue
                if parameter is None and self._flagged(argument):
                    # Repeated flag alias; the flag is already present.
                    continue
                named = False

            parameter = self._next(Category.REQUIRED) or self._next(Category.OPTIONAL)
            if parameter is not None:
                parameter._pending = argument
            else:
                unmapped.append(argument)

        if awaiting is not None:
            self.trigger(MissingNamedValueWarning(
                f"no value followed {args[-1]!r}, {awaiting.name!r} keeps its default",
                parameter=awaiting,
                hint=f"pass a value after {args[-1]!r}",
                stacklevel=5,
            ))

        if (missing := self._next(Category.REQUIRED)) is not None:
            self.trigger(MissingRequiredArgumentError(
                f"No argument provided for required {missing.describe()}.",
                parameter=missing,
                hint=f"pass a value for {missing.name!r} after the named arguments",
            ))

        return unmapped

    def help(self, unmapped=(), /):
        """
        Plain help text: the unexpected arguments (when any) and the expected listing.
        """
        lines = []
        if unmapped := list(unmapped):
            label = "Argument" if len(unmapped) == 1 else pluralize("Argument")
            lines.append("Unexpected %s: [%s]." % (label, ", ".join(unmapped)))
        lines.append("Expected:")
        lines.extend(parameter.describe() for parameter in self._parameters)
        return "\n".join(lines)

    def map_strict(self, args=Unset, /):
        """
        Map `args` and report leftovers instead of returning them.

        Returns (True, None) when every token was mapped, (False, help text) otherwise.
        """
        if unmapped := self.map(args):
            return False, self.help(unmapped)
        return True, None

    def __getitem__(self, alias):
        for parameter in self._parameters:
            if parameter.matches(alias):
                return parameter
        self.trigger(UnknownAliasError(
            f"no parameter is declared with alias {alias!r}",
            alias=alias,
            hint="read values by a parameter's name or one of its aliases",
        ))

    def value(self, alias, type=Unset, /):
        """
        Value of the parameter declaring `alias`, optionally converted to `type`.
        """
        return self[alias].value(type)

    def __contains__(self, alias):
        return any(parameter.matches(alias) for parameter in self._parameters)

    def __iter__(self):
        return iter(self._parameters)

    def __len__(self):
        return len(self._parameters)

    def __rich__(self):
        """
        Styled "Expected:" listing; its plain text matches the describe() lines.
        """
        styles = defaultdict(str, {
            "expected-label": "bold #FFFFFF",
            "named-name": "bold #00E6FF",
            "flag-name": "bold #22C55E",
            "required-name": "bold #FF4D94",
            "optional-name": "bold #36C5F0",
            "metavar": "bold #FFD600",
            "summary": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        lines = [Text("Expected:", styler("expected-label"))]
        for parameter in self._parameters:
            label = ", ".join(parameter.aliases)
            summary = parameter.describe()[len(label):]
            line = Text(label, styler(parameter.category.name.lower() + "-name"))
            if parameter.category is Category.NAMED:
                line.append(" ").append("<value>", styler("metavar"))
                summary = summary[len(" <value>"):]
            lines.append(line.append(summary, styler("summary")))
        return Group(*lines)

    def __rich_repr__(self):
        yield "name", self._name
        yield "parameters", self._parameters

    def __repr__(self):
        return "parser(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "Parser",
)
