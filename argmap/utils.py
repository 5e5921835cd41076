"""
Argmap utilities (small internal helpers shared by parameters, parser and faults).

Overview
- UnsetType / Unset
  • Singleton sentinel meaning "nothing assigned"; distinct from None, falsey, sealed.

- coalesce(value, default=None)
  • Materialize Unset into a default while keeping None/0/""/[] untouched.

- mirror("attr")
  • Read-only property over a private "_attr" field; containers are handed out as copies.

- pluralize(word)
  • Tiny English pluralizer used for user-facing counts ("Argument" → "Arguments").

Names outside __all__ are internal and may change without notice.
"""
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for "no value assigned".

    A mapping pass stores raw tokens on parameters; a token may legitimately be any
    string (including the empty one), so absence needs its own marker that cannot be
    confused with user input.

    Characteristics
    - Falsey, but not equal to None, 0 or "".
    - repr(Unset) -> "Unset".
    - Singleton: UnsetType() always returns the same object.
    - Sealed: subclassing raises TypeError.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        """
        Support `str | Unset` style unions in isinstance checks and annotations.
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `object` unless it is Unset, in which case return `default`.

    Falsey values other than Unset are preserved:
    - coalesce(Unset, "x") -> "x"
    - coalesce(None, "x")  -> None
    - coalesce("", "x")    -> ""
    """
    return object if object is not Unset else default


def _detach(object):
    # Copies containers so callers cannot reach into private state.
    if isinstance(object, Sequence) and not isinstance(object, str | bytes):
        return list(map(_detach, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, Set):
        return set(map(_detach, object))
    return coalesce(object)


def mirror(name, /):
    """
    Build a read-only property exposing the private field "_{name}".

    Containers are returned as fresh copies and Unset is reported as None, so the
    public view never leaks the sentinel or a mutable reference.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _detach(getattr(self, "_" + name))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


@functools.cache
def pluralize(word, /):
    """
    Best-effort plural of a single English word, keeping its casing.

    Examples
    - pluralize("argument") -> "arguments"
    - pluralize("Alias")    -> "Aliases"
    - pluralize("entry")    -> "entries"
    - pluralize("KEY")      -> "KEYS"
    """
    if not isinstance(word, str):
        raise TypeError("pluralize() argument must be a string")
    if not word.strip():
        return word

    lower = word.lower()
    if re.search(r"(s|sh|ch|x|z)$", lower):
        plural = lower + "es"
    elif re.search(r"[^aeiou]y$", lower):
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if word.isupper():
        return plural.upper()
    if word[:1].isupper():
        return plural[:1].upper() + plural[1:]
    return plural


Unset = UnsetType()
"""
The single "nothing assigned" marker. Compare by identity: `value is Unset`.
"""


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
