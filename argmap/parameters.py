"""
Argmap parameter declarations.

Overview
- Category: the four kinds of parameter, in the order the parser evaluates them
  (NAMED < FLAG < REQUIRED < OPTIONAL). The order is load-bearing: the parser stores
  parameters sorted by it and resolves named/flag tokens before positional ones.

- Parameter: an immutable declaration of one slot
  • category, name and aliases (name first; positionals have no alternate aliases).
  • parse: str -> value converter (identity when absent; fixed for flags).
  • default: value used when nothing was mapped (fixed False for flags).
  • pending: the raw token assigned during the current mapping pass (internal
    state owned by the parser; reported as None when nothing was assigned).

- Factories: named(), flag(), required(), optional() (also available as
  Parameter classmethods).

Parsing is lazy: Parameter.value() runs the converter on every read and is not
memoized.

Quick example:
    >>> from argmap import Parser, named, flag, required, optional
    >>> parser = Parser(
    ...     flag("verbose", "-v", "--verbose"),
    ...     named("output", "-o", default="out.txt"),
    ...     required("count", parse=int),
    ...     optional("ratio", default=0.5, parse=float),
    ... )
    >>> parser.map(["-v", "3"])
    []
    >>> parser.value("count", int)
    3
"""
import builtins
import functools
import operator
from collections.abc import Collection
from enum import IntEnum

from .faults import InvalidArgumentError, TypeMismatchError
from .utils import *


class Category(IntEnum):
    """
    parameter kinds, ordered by evaluation priority.
    """
    NAMED = 0
    FLAG = 1
    REQUIRED = 2
    OPTIONAL = 3


def _identity(string, /):
    return string


def _present(string, /):
    # Flags only care that a token was seen, not which one.
    return True


def _coerce(object, type, /):
    """
    Convert a resolved value to the type requested by the caller.

    - Unset type: no conversion.
    - the target must be a class; generic aliases such as list[int] are refused.
    - instances of `type` pass through; None only converts to object/NoneType.
    - bool: bools, numbers and the strings "true"/"false" (case-insensitive).
    - strings are never split into collections (read "abc" as list fails).
    - anything else: `type(object)`; TypeError/ValueError/OverflowError become
      TypeMismatchError.
    """
    if type is Unset:
        return object

    kind = object.__class__.__name__
    if not isinstance(type, builtins.type):
        raise TypeMismatchError(
            f"cannot convert {object!r} ({kind}) to {type!r}, which is not a class",
            value=object,
            type=type,
            hint="read the value as a plain class such as int, float or str",
        )

    if isinstance(object, type):
        return object

    if object is None:
        pass
    elif type is bool:
        if isinstance(object, int | float):
            return bool(object)
        if isinstance(object, str) and object.strip().lower() in ("true", "false"):
            return object.strip().lower() == "true"
    elif isinstance(object, str | bytes) and issubclass(type, Collection):
        pass
    else:
        try:
            return type(object)
        except (TypeError, ValueError, OverflowError):
            pass

    raise TypeMismatchError(
        f"cannot convert {object!r} ({kind}) to {type.__name__!r}",
        value=object,
        type=type,
        hint=f"read the value as {kind!r} or as a type constructible from it",
    )


class Parameter:
    """
    Declaration of one named, flag or positional slot.

    Instances are normally built through the factories (named/flag/required/optional)
    and handed to a Parser, which validates aliases across all parameters and owns
    the per-pass `pending` state from then on. A parameter must not be shared
    between parsers.

    Read-only properties: category, name, aliases, default, pending.
    """

    category = mirror("category")
    name = mirror("name")
    aliases = mirror("aliases")
    default = mirror("default")
    pending = mirror("pending")

    def __init__(self, category, name, /, *aliases, parse=None, default=None):
        if not isinstance(category, Category):
            raise InvalidArgumentError("parameter category must be a Category", argument="category")
        if name is None:
            raise InvalidArgumentError("parameter name may not be None", argument="name")
        if not isinstance(name, str):
            raise InvalidArgumentError("parameter name must be a string", argument="name")
        for alias in aliases:
            if alias is None:
                raise InvalidArgumentError(f"alternative names of {name!r} may not be None", argument="aliases")
            if not isinstance(alias, str):
                raise InvalidArgumentError(f"alternative names of {name!r} must be strings", argument="aliases")
        if parse is not None and not callable(parse):
            raise InvalidArgumentError(f"parse function of {name!r} must be callable", argument="parse")

        self._category = category
        self._name = name
        # Duplicates within one declaration are left to the parser's alias check.
        self._aliases = (name, *aliases)
        self._parse = _identity if parse is None else parse
        self._default = default
        self._pending = Unset

    @classmethod
    def named(cls, name, /, *aliases, default=None, parse=None):
        """
        Named parameter (such as: `app --output out.txt`); its value is the token
        following any of its aliases.
        """
        return cls(Category.NAMED, name, *aliases, parse=parse, default=default)

    @classmethod
    def flag(cls, name, /, *aliases):
        """
        Flag parameter (such as: `app --verbose`); True when present, False otherwise.
        """
        return cls(Category.FLAG, name, *aliases, parse=_present, default=False)

    @classmethod
    def required(cls, name, /, parse=None):
        """
        Required positional parameter; mapping fails when no token reaches it.
        """
        return cls(Category.REQUIRED, name, parse=parse)

    @classmethod
    def optional(cls, name, /, default=None, parse=None):
        """
        Optional positional parameter; keeps `default` when no token reaches it.
        """
        return cls(Category.OPTIONAL, name, parse=parse, default=default)

    def matches(self, alias, /):
        return alias in self._aliases

    def value(self, type=Unset, /):
        """
        Resolve the current value, optionally converted to `type`.

        Returns the default when nothing was mapped in the last pass, otherwise the
        parse function applied to the pending token. Exceptions raised by the parse
        function propagate unchanged; failed conversions raise TypeMismatchError.
        """
        object = self._default if self._pending is Unset else self._parse(self._pending)
        return _coerce(object, type)

    def describe(self):
        """
        Fixed-format, human-readable summary used in help listings.
        """
        aliases = ", ".join(self._aliases)
        match self._category:
            case Category.FLAG:
                return f"{aliases} (Flag, optional)"
            case Category.NAMED:
                return f"{aliases} <value> (Named, optional)"
            case Category.REQUIRED:
                return f"{aliases} (Positional, required)"
            case Category.OPTIONAL:
                return f"{aliases} (Positional, optional)"

    __str__ = describe

    def __rich_repr__(self):
        yield "category", self.category
        yield "aliases", tuple(self._aliases)
        yield "default", self.default
        yield "pending", self.pending

    def __repr__(self):
        return "parameter(%s)" % ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))


named = Parameter.named
flag = Parameter.flag
required = Parameter.required
optional = Parameter.optional


__all__ = (
    # Types
    "Category",
    "Parameter",

    # Factories
    "named",
    "flag",
    "required",
    "optional",
)
