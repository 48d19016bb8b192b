"""Command line option parsing in the style of GNU getopt_long."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .constants import (
    DEFAULT_ALPHA,
    DEFAULT_IMPORTANCE_MODE,
    DEFAULT_MAXDEPTH,
    DEFAULT_MINPROP,
    DEFAULT_NUM_RANDOM_SPLITS,
    DEFAULT_NUM_THREADS,
    DEFAULT_NUM_TREE,
    DEFAULT_PREDICTIONTYPE,
    DEFAULT_SPLITRULE,
    MAX_IMP_MODE,
    MAX_MEM_MODE,
    ImportanceMode,
    MemoryMode,
    PredictionType,
    SplitRule,
    TreeType,
)
from .helpers import split_string


class ArgumentError(ValueError):
    """An option was given a value it does not accept."""


@dataclass
class Arguments:
    """All command line settings, with their defaults."""

    alwayssplitvars: list[str] = field(default_factory=list)
    caseweights: str = ""
    depvarname: str = ""
    fraction: float = 0.0
    holdout: bool = False
    memmode: MemoryMode = MemoryMode.DOUBLE
    savemem: bool = False
    skipoob: bool = False
    predict: str = ""
    predictiontype: PredictionType = DEFAULT_PREDICTIONTYPE
    randomsplits: int = DEFAULT_NUM_RANDOM_SPLITS
    splitweights: str = ""
    nthreads: int = DEFAULT_NUM_THREADS
    predall: bool = False

    alpha: float = DEFAULT_ALPHA
    minprop: float = DEFAULT_MINPROP
    catvars: list[str] = field(default_factory=list)
    maxdepth: int = DEFAULT_MAXDEPTH
    file: str = ""
    impmeasure: ImportanceMode = DEFAULT_IMPORTANCE_MODE
    targetpartitionsize: int = 0
    mtry: int = 0
    outprefix: str = "ranger_out"
    probability: bool = False
    splitrule: SplitRule = DEFAULT_SPLITRULE
    statusvarname: str = ""
    ntree: int = DEFAULT_NUM_TREE
    replace: bool = True
    verbose: bool = False
    write: bool = False
    treetype: TreeType = TreeType.CLASSIFICATION
    seed: int = 0
    regcoef: list[float] = field(default_factory=list)
    usedepth: bool = False

    # Parsing stopped early to show help or version information.
    show_help: bool = False
    show_version: bool = False
    # Arguments that are not options, and options that were not recognised.
    extra_arguments: list[str] = field(default_factory=list)
    unrecognized: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class _Option:
    short: str
    long: str
    takes_argument: bool


_OPTIONS = (
    _Option("A", "alwayssplitvars", True),
    _Option("C", "caseweights", True),
    _Option("D", "depvarname", True),
    _Option("F", "fraction", True),
    _Option("H", "holdout", False),
    _Option("M", "memmode", True),
    _Option("N", "savemem", False),
    _Option("O", "skipoob", False),
    _Option("P", "predict", True),
    _Option("Q", "predictiontype", True),
    _Option("R", "randomsplits", True),
    _Option("S", "splitweights", True),
    _Option("U", "nthreads", True),
    _Option("X", "predall", False),
    _Option("Z", "version", False),
    _Option("a", "alpha", True),
    _Option("b", "minprop", True),
    _Option("c", "catvars", True),
    _Option("d", "maxdepth", True),
    _Option("f", "file", True),
    _Option("h", "help", False),
    _Option("i", "impmeasure", True),
    _Option("j", "regcoef", True),
    _Option("k", "usedepth", False),
    _Option("l", "targetpartitionsize", True),
    _Option("m", "mtry", True),
    _Option("o", "outprefix", True),
    _Option("p", "probability", False),
    _Option("r", "splitrule", True),
    _Option("s", "statusvarname", True),
    _Option("t", "ntree", True),
    _Option("u", "noreplace", False),
    _Option("v", "verbose", False),
    _Option("w", "write", False),
    _Option("y", "treetype", True),
    _Option("z", "seed", True),
)

_BY_SHORT = {option.short: option for option in _OPTIONS}
_BY_LONG = {option.long: option for option in _OPTIONS}

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_MIN = -(1 << 31)
_INT_MAX = (1 << 31) - 1


def _to_int(text: str) -> int:
    """Leading integer of text; trailing characters are ignored."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"No integer in {text!r}.")
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        raise ValueError(f"Integer out of range: {text!r}.")
    return number


def _to_float(text: str) -> float:
    """Leading floating point number of text; trailing characters are ignored."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"No number in {text!r}.")
    return float(match.group(1))


_Handler = Callable[[Arguments, str], None]


def _text(attr: str) -> _Handler:
    def handler(args: Arguments, value: str) -> None:
        setattr(args, attr, value)
    return handler


def _flag(attr: str, state: bool = True) -> _Handler:
    def handler(args: Arguments, value: str) -> None:
        setattr(args, attr, state)
    return handler


def _names(attr: str) -> _Handler:
    def handler(args: Arguments, value: str) -> None:
        getattr(args, attr).extend(split_string(value, ","))
    return handler


def _integer(attr: str, name: str, minimum: int) -> _Handler:
    message = (f"Illegal argument for option '{name}'. Please give a positive integer. "
               "See '--help' for details.")

    def handler(args: Arguments, value: str) -> None:
        try:
            number = _to_int(value)
        except ValueError:
            raise ArgumentError(message) from None
        if number < minimum:
            raise ArgumentError(message)
        setattr(args, attr, number)
    return handler


def _bounded(attr: str, accept: Callable[[float], bool], message: str) -> _Handler:
    def handler(args: Arguments, value: str) -> None:
        try:
            number = _to_float(value)
        except ValueError:
            raise ArgumentError(message) from None
        if not accept(number):
            raise ArgumentError(message)
        setattr(args, attr, number)
    return handler


def _enumerated(attr: str, kind: Callable[[int], object], maximum: int, message: str) -> _Handler:
    def handler(args: Arguments, value: str) -> None:
        try:
            number = _to_int(value)
            if number > maximum:
                raise ValueError(number)
            setattr(args, attr, kind(number))
        except ValueError:
            raise ArgumentError(message) from None
    return handler


def _choice(attr: str, choices: dict, message: str) -> _Handler:
    def handler(args: Arguments, value: str) -> None:
        try:
            number = _to_int(value)
        except ValueError:
            raise ArgumentError(message) from None
        if number not in choices:
            raise ArgumentError(message)
        setattr(args, attr, choices[number])
    return handler


def _regcoef(args: Arguments, value: str) -> None:
    try:
        args.regcoef.extend(_to_float(part) for part in split_string(value, ","))
    except ValueError:
        raise ArgumentError("Illegal argument for option 'regcoef'. See '--help' for details.") from None


_HANDLERS: dict[str, _Handler] = {
    "A": _names("alwayssplitvars"),
    "C": _text("caseweights"),
    "D": _text("depvarname"),
    "F": _bounded(
        "fraction", lambda x: not (x > 1 or x <= 0),
        "Illegal argument for option 'fraction'. Please give a value in (0,1]. "
        "See '--help' for details."),
    "H": _flag("holdout"),
    "M": _enumerated(
        "memmode", MemoryMode, int(MAX_MEM_MODE),
        "Illegal argument for option 'memmode'. Please give a positive integer. "
        "See '--help' for details."),
    "N": _flag("savemem"),
    "O": _flag("skipoob"),
    "P": _text("predict"),
    "Q": _choice(
        "predictiontype",
        {1: PredictionType.RESPONSE, 2: PredictionType.TERMINALNODES},
        "Illegal prediction type selected. See '--help' for details."),
    "R": _integer("randomsplits", "randomsplits", 1),
    "S": _text("splitweights"),
    "U": _integer("nthreads", "nthreads", 1),
    "X": _flag("predall"),
    "Z": _flag("show_version"),
    "a": _bounded(
        "alpha", lambda x: not (x < 0 or x > 1),
        "Illegal argument for option 'alpha'. Please give a value between 0 and 1. "
        "See '--help' for details."),
    "b": _bounded(
        "minprop", lambda x: not (x < 0 or x > 0.5),
        "Illegal argument for option 'minprop'. Please give a value between 0 and 0.5. "
        "See '--help' for details."),
    "c": _names("catvars"),
    "d": _integer("maxdepth", "maxdepth", 0),
    "f": _text("file"),
    "h": _flag("show_help"),
    "i": _enumerated(
        "impmeasure", ImportanceMode, int(MAX_IMP_MODE),
        "Illegal argument for option 'impmeasure'. Please give a positive integer. "
        "See '--help' for details."),
    "j": _regcoef,
    "k": _flag("usedepth"),
    "l": _integer("targetpartitionsize", "targetpartitionsize", 1),
    "m": _integer("mtry", "mtry", 1),
    "o": _text("outprefix"),
    "p": _flag("probability"),
    "r": _choice(
        "splitrule", {rule.value: rule for rule in SplitRule},
        "Illegal splitrule selected. See '--help' for details."),
    "s": _text("statusvarname"),
    "t": _integer("ntree", "ntree", 1),
    "u": _flag("replace", False),
    "v": _flag("verbose"),
    "w": _flag("write"),
    "y": _choice(
        "treetype",
        {1: TreeType.CLASSIFICATION, 3: TreeType.REGRESSION, 5: TreeType.SURVIVAL},
        "Illegal argument for option 'treetype'. Please give a positive integer. "
        "See '--help' for details."),
    "z": _integer("seed", "seed", 0),
}


def _match_long(name: str) -> _Option | None:
    """Exact long option, or the only one that name abbreviates."""
    if name in _BY_LONG:
        return _BY_LONG[name]
    candidates = [option for option in _OPTIONS if option.long.startswith(name)] if name else []
    return candidates[0] if len(candidates) == 1 else None


def _apply(args: Arguments, short: str, value: str) -> bool:
    """Apply one option; True when parsing should stop."""
    _HANDLERS[short](args, value)
    return args.show_help or args.show_version


def parse_arguments(argv: Sequence[str] | None = None) -> Arguments:
    """Parse command line arguments, not including the program name.

    Options may appear anywhere; other arguments are collected in
    extra_arguments, unknown or malformed options in unrecognized. Parsing
    stops at --help or --version. Raises ArgumentError for invalid values.
    """
    tokens = list(sys.argv[1:] if argv is None else argv)
    args = Arguments()
    position = 0
    while position < len(tokens):
        token = tokens[position]
        position += 1

        if token == "--":
            args.extra_arguments.extend(tokens[position:])
            break

        if token.startswith("--"):
            name, has_value, value = token[2:].partition("=")
            option = _match_long(name)
            if option is None:
                args.unrecognized.append(token)
                continue
            if option.takes_argument:
                if not has_value:
                    if position >= len(tokens):
                        args.unrecognized.append(token)
                        continue
                    value = tokens[position]
                    position += 1
            elif has_value:
                args.unrecognized.append(token)
                continue
            if _apply(args, option.short, value):
                return args
            continue

        if token.startswith("-") and token != "-":
            index = 1
            while index < len(token):
                char = token[index]
                index += 1
                option = _BY_SHORT.get(char)
                if option is None:
                    args.unrecognized.append("-" + char)
                    continue
                if not option.takes_argument:
                    if _apply(args, char, ""):
                        return args
                    continue
                if index < len(token):
                    value = token[index:]
                elif position < len(tokens):
                    value = tokens[position]
                    position += 1
                else:
                    args.unrecognized.append("-" + char)
                    break
                if _apply(args, char, value):
                    return args
                break
            continue

        args.extra_arguments.append(token)

    return args