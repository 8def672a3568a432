r"""
cmdline argument declarations, result bindings and the declaration registry.

Overview
- Kinds
  • ArgKind.OPTION: named argument consuming the following token ("--name VALUE").
  • ArgKind.FLAG: named boolean presence ("-name").

- Bindings
  • StringSlot / BoolSlot: caller-owned holders receiving parsed results. An option
    binds a StringSlot, a flag binds a BoolSlot; the pairing is checked when the
    declaration is registered, never when the slot is written.

- Declarations
  • Declaration: one registered argument (name, description, kind, requiredness,
    invalidation edges, binding). Fields are exposed as read-only properties; the
    'required' flag can only be lowered, by the requirement resolver.

- Registry
  • Registry: insertion-ordered declarations with unique names. Order drives the
    help listing and the missing-argument report. declare_option/declare_flag
    return the registry itself so declarations chain fluently.

Validation highlights
- Names must match r"[^\W\d]\w*(-\w+)*" (no leading dash, no whitespace) and be
  unique within a registry; 'h' is reserved for the built-in help flag.
- Descriptions are strings or rich Text; strings are trimmed.
- Wrong slot kinds raise BindingMismatchError, reused names DuplicateDeclarationError.

Quick example:
    >>> from cmdline import Registry, StringSlot, BoolSlot
    >>> file, pt, verbose = StringSlot(), StringSlot("12"), BoolSlot()
    >>> registry = (
    ...     Registry()
    ...     .declare_option("file", "Font file to load", file, required=True)
    ...     .declare_option("pt", "Requested point size of font", pt)
    ...     .declare_flag("verbose", "Enable verbose log messages", verbose)
    ... )
    >>> registry.parse(["prog", "--file", "a.ttf", "-verbose"])
    True
"""
import functools
import operator
import re
from collections.abc import Iterable
from enum import Enum

from rich.text import Text

from .faults import BindingMismatchError, DuplicateDeclarationError
from .utils import *

# Name of the flag appended by the parser to every non-empty registry.
HELP = "h"


class ArgKind(Enum):
    """
    kind of a declaration; the value is the prefix of its call form.
    """
    OPTION = "--"
    FLAG = "-"

    @property
    def prefix(self):
        return self.value


class _Slot:
    """
    Caller-owned result holder. Subclasses pin the accepted value type.
    """
    __slots__ = ("value",)
    __accepts__ = object

    def __init__(self, value=Unset, /):
        value = coalesce(value, self.__accepts__())
        if not isinstance(value, self.__accepts__):
            raise TypeError(f"{type(self).__name__} value must be a {self.__accepts__.__name__}")
        self.value = value

    def set(self, value, /):
        if not isinstance(value, self.__accepts__):
            raise TypeError(f"{type(self).__name__} value must be a {self.__accepts__.__name__}")
        self.value = value

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"


class StringSlot(_Slot):
    """
    Binding for an option: receives the raw value token. Keeps its initial
    value (the caller's default) until the option is matched.
    """
    __slots__ = ()
    __accepts__ = str


class BoolSlot(_Slot):
    """
    Binding for a flag: set to True when the flag is matched, never reset.
    """
    __slots__ = ()
    __accepts__ = bool


# Which binding each kind accepts.
_BINDINGS = {
    ArgKind.OPTION: StringSlot,
    ArgKind.FLAG: BoolSlot,
}


class DeclarationType(type):
    """
    Metaclass exposing declared fields as read-only properties.

    Responsibilities
    - Expose every name listed in __introspectable__ via mirror().
    - Derive __typename__ from the class name for messages.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - declaration(name='file', kind=<ArgKind.OPTION: '--'>, ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\d]\w*(-\w+)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a bare argument name (no dashes prefix, no spaces)")
    return name


def _sanitize_description(cls, description, /):
    if not isinstance(description, str | Text):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    if isinstance(description, str):
        return description.strip()
    return description


class Declaration(metaclass=DeclarationType):
    """
    One registered argument definition.

    Fields
    - name: unique token building the '--name' / '-name' call forms.
    - description: human text shown in help (str or rich Text).
    - kind: ArgKind.
    - required: whether the parse fails when the argument is absent. Lowered
      (never raised) when a matched flag lists this name in its invalidations.
    - invalidates: names whose requirement a matched flag waives.
    - binding: the StringSlot/BoolSlot receiving the result.
    """
    __introspectable__ = (
        "name",
        "description",
        "kind",
        "required",
        "invalidates",
        "binding",
    )

    def __init__(self, name, description, kind, binding, /, required=False, invalidates=()):
        cls = type(self)
        if not isinstance(kind, ArgKind):
            raise TypeError(f"{cls.__typename__} 'kind' must be an ArgKind")
        if not isinstance(binding, _BINDINGS[kind]):
            raise BindingMismatchError(
                f"{cls.__typename__} of kind {kind.name.lower()} must bind a {_BINDINGS[kind].__name__}"
            )
        if not isinstance(required, bool):
            raise TypeError(f"{cls.__typename__} 'required' must be a boolean")
        if isinstance(invalidates, str) or not isinstance(invalidates, Iterable):
            raise TypeError(f"{cls.__typename__} 'invalidates' must be an iterable of names")
        if invalidates and kind is not ArgKind.FLAG:
            raise TypeError(f"{cls.__typename__} only flags can invalidate requirements")

        self._name = _sanitize_name(cls, name)
        self._description = _sanitize_description(cls, description)
        self._kind = kind
        self._binding = binding
        self._required = required
        self._invalidates = frozenset(_sanitize_name(cls, other) for other in invalidates)

    @property
    def form(self):
        """
        The exact token that calls this declaration ('--name' or '-name').
        """
        return self._kind.prefix + self._name

    def waive(self):
        """
        Lower the requirement of this declaration (idempotent, one-way).
        """
        self._required = False


class Registry:
    """
    Insertion-ordered collection of declarations.

    The registry owns no external state: it is mutated through declare_option
    and declare_flag during the registration phase, then read by the parser
    and the renderer. Bound slots belong to the caller and must outlive the
    registry's use.
    """

    def __init__(self):
        self._declarations = []
        self._names = {}

    def _append(self, declaration, /, *, helper=False):
        if declaration.name == HELP and not helper:
            raise DuplicateDeclarationError(f"argument {HELP!r} is reserved for the help flag")
        if declaration.name in self._names:
            raise DuplicateDeclarationError(f"argument {declaration.name!r} is already declared")
        self._declarations.append(declaration)
        self._names[declaration.name] = declaration
        return self

    def declare_option(self, name, description, slot, /, required=False):
        """
        Append an option ('--name VALUE') bound to a StringSlot.
        """
        return self._append(Declaration(name, description, ArgKind.OPTION, slot, required=required))

    def declare_flag(self, name, description, slot, /, required=False, invalidates=()):
        """
        Append a flag ('-name') bound to a BoolSlot; when matched, each name in
        'invalidates' stops being required.
        """
        return self._append(Declaration(name, description, ArgKind.FLAG, slot, required=required, invalidates=invalidates))

    def _helper(self):
        """
        Return the built-in help declaration, appending it on first use and
        rebinding it to a fresh slot for the current parse.
        """
        slot = BoolSlot()
        if HELP in self._names:
            helper = self._names[HELP]
            helper._binding = slot
            return helper
        helper = Declaration(HELP, "Display help information.", ArgKind.FLAG, slot)
        self._append(helper, helper=True)
        return helper

    def parse(self, argv=None, options=None, /, *, probe=None):
        """
        Parse an argument vector against this registry (see cmdline.parser.parse).
        """
        from .parser import parse
        return parse(self, argv, options, probe=probe)

    def help(self, options=None, diagnostics=None, /, *, probe=None):
        """
        Render help (and diagnostics, if any) for this registry.
        """
        from .render import render_help
        return render_help(self, options, diagnostics, probe=probe)

    def __len__(self):
        return len(self._declarations)

    def __iter__(self):
        return iter(tuple(self._declarations))

    def __contains__(self, name):
        return name in self._names

    def __getitem__(self, name):
        return self._names[name]

    def __repr__(self):
        return f"registry({', '.join(repr(declaration.form) for declaration in self._declarations)})"


__all__ = (
    "ArgKind",
    "StringSlot",
    "BoolSlot",
    "Declaration",
    "Registry",
)
