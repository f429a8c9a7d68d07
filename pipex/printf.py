"""A small printf-style formatter supporting ``%cspdiuxX`` and ``%%``.

Flags ``#``, space, ``0``, ``+`` and ``-`` are accepted together with a
field width and a precision. Integer arguments wrap the way 32-bit C
integers do, and pointers wrap to 64 bits.
"""

from __future__ import annotations

import operator
import sys
from dataclasses import dataclass
from typing import Callable, Union

INT_MAX = 2**31 - 1
CONVERSIONS = "%cspdiuxX"
FLAGS = "# 0+-"
NULL_STRING = "(null)"
NULL_POINTER = "(nil)"

_DIGITS = "0123456789"


class FormatError(ValueError):
    """Raised for an invalid format string or missing arguments."""


@dataclass(frozen=True)
class FormatSpec:
    """One conversion specification of a format string."""

    conversion: str
    flags: frozenset[str] = frozenset()
    width: int = 0
    precision: int | None = None

    @property
    def left_align(self) -> bool:
        return "-" in self.flags

    @property
    def zero_pad(self) -> bool:
        return "0" in self.flags

    @property
    def plus(self) -> bool:
        return "+" in self.flags

    @property
    def space(self) -> bool:
        return " " in self.flags

    @property
    def alternate(self) -> bool:
        return "#" in self.flags


Piece = Union[str, FormatSpec]


def _read_number(fmt: str, pos: int) -> tuple[int, int]:
    """Read a width or precision at ``pos``; a leading minus yields 0."""
    negative = pos < len(fmt) and fmt[pos] == "-"
    if negative:
        pos += 1
    end = pos
    while end < len(fmt) and fmt[end] in _DIGITS:
        end += 1
    if negative:
        return 0, end
    digits = fmt[pos:end]
    value = min(int(digits), INT_MAX) if digits else 0
    return value, end


def _parse_spec(fmt: str, start: int) -> tuple[FormatSpec, int]:
    pos = start
    flags: set[str] = set()
    while pos < len(fmt) and fmt[pos] in FLAGS:
        flags.add(fmt[pos])
        pos += 1
    width = 0
    precision = None
    if pos >= len(fmt) or fmt[pos] != ".":
        width, pos = _read_number(fmt, pos)
    if pos < len(fmt) and fmt[pos] == ".":
        precision, pos = _read_number(fmt, pos + 1)
    if pos >= len(fmt) or fmt[pos] not in CONVERSIONS:
        raise FormatError(f"invalid conversion specification at offset {start - 1}")
    spec = FormatSpec(fmt[pos], frozenset(flags), width, precision)
    return spec, pos + 1


def parse_format(fmt: str) -> list[Piece]:
    """Split ``fmt`` into literal text and :class:`FormatSpec` items."""
    pieces: list[Piece] = []
    pos = 0
    while pos < len(fmt):
        percent = fmt.find("%", pos)
        if percent == -1:
            pieces.append(fmt[pos:])
            break
        if percent > pos:
            pieces.append(fmt[pos:percent])
        spec, pos = _parse_spec(fmt, percent + 1)
        pieces.append(spec)
    return pieces


def _to_int32(value: object) -> int:
    number = operator.index(value) & 0xFFFFFFFF
    return number - 2**32 if number > INT_MAX else number


def _to_uint32(value: object) -> int:
    return operator.index(value) & 0xFFFFFFFF


def _to_uint64(value: object) -> int:
    if value is None:
        return 0
    return operator.index(value) & 0xFFFFFFFFFFFFFFFF


def _pad(text: str, spec: FormatSpec) -> str:
    """Pad ``text`` with spaces to the field width."""
    if spec.left_align:
        return text.ljust(spec.width)
    return text.rjust(spec.width)


def _layout_number(
    spec: FormatSpec, digits: str, sign: str = "", prefix: str = ""
) -> str:
    """Lay out digits with sign, prefix, precision zeros and field padding."""
    zero_fill = spec.zero_pad and not spec.left_align and spec.precision is None
    zeros = 0
    if spec.precision is not None and len(digits) < spec.precision:
        zeros = spec.precision - len(digits)
    head = tail = 0
    extra = spec.width - (len(digits) + zeros + len(sign) + len(prefix))
    if extra > 0:
        if spec.left_align:
            tail = extra
        elif zero_fill:
            zeros += extra
        else:
            head = extra
    return " " * head + sign + prefix + "0" * zeros + digits + " " * tail


def _digits(spec: FormatSpec, value: int, text: str) -> str:
    """Return ``text``, or nothing for a zero value under a zero precision."""
    if spec.precision == 0 and value == 0:
        return ""
    return text


def _render_char(spec: FormatSpec, arg: object) -> str:
    if isinstance(arg, str):
        if len(arg) != 1:
            raise TypeError("%c needs a single character")
        char = arg
    else:
        char = chr(operator.index(arg) & 0xFF)
    return _pad(char, spec)


def _render_string(spec: FormatSpec, arg: object) -> str:
    if arg is None:
        if spec.precision is None or spec.precision >= len(NULL_STRING):
            text = NULL_STRING
        else:
            text = ""
    elif isinstance(arg, str):
        text = arg
    else:
        raise TypeError("%s needs a string or None")
    if spec.precision is not None:
        text = text[: spec.precision]
    return _pad(text, spec)


def _render_pointer(spec: FormatSpec, arg: object) -> str:
    address = _to_uint64(arg)
    if address == 0:
        return _pad(NULL_POINTER, spec)
    sign = "+" if spec.plus else " " if spec.space else ""
    return _layout_number(spec, format(address, "x"), sign=sign, prefix="0x")


def _render_int(spec: FormatSpec, arg: object) -> str:
    value = _to_int32(arg)
    if value < 0:
        sign = "-"
    elif spec.plus:
        sign = "+"
    elif spec.space:
        sign = " "
    else:
        sign = ""
    return _layout_number(spec, _digits(spec, value, str(abs(value))), sign=sign)


def _render_unsigned(spec: FormatSpec, arg: object) -> str:
    value = _to_uint32(arg)
    return _layout_number(spec, _digits(spec, value, str(value)))


def _render_hex(spec: FormatSpec, arg: object) -> str:
    value = _to_uint32(arg)
    upper = spec.conversion == "X"
    text = format(value, "X" if upper else "x")
    prefix = ""
    if spec.alternate and value != 0:
        prefix = "0X" if upper else "0x"
    return _layout_number(spec, _digits(spec, value, text), prefix=prefix)


_RENDERERS: dict[str, Callable[[FormatSpec, object], str]] = {
    "c": _render_char,
    "s": _render_string,
    "p": _render_pointer,
    "d": _render_int,
    "i": _render_int,
    "u": _render_unsigned,
    "x": _render_hex,
    "X": _render_hex,
}


def sprintf(fmt: str, *args: object) -> str:
    """Format ``args`` according to ``fmt`` and return the text.

    Extra arguments are ignored; too few raise :class:`FormatError`.
    """
    remaining = iter(args)
    out: list[str] = []
    for piece in parse_format(fmt):
        if isinstance(piece, str):
            out.append(piece)
            continue
        if piece.conversion == "%":
            out.append("%")
            continue
        try:
            arg = next(remaining)
        except StopIteration:
            raise FormatError("not enough arguments for format string") from None
        out.append(_RENDERERS[piece.conversion](piece, arg))
    return "".join(out)


def printf(fmt: str, *args: object) -> int:
    """Write the formatted text to standard output and return its length."""
    text = sprintf(fmt, *args)
    sys.stdout.write(text)
    return len(text)