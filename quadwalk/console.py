"""Minimal console formatting, line input and number parsing."""

from __future__ import annotations

import re
import sys
from typing import Callable, Iterator, Optional, Sequence, Union

__all__ = ["DW_CHAR", "DW_SHORT", "DW_LONG", "xformat", "dump_line", "parse_int", "Console"]

DW_CHAR = 1
DW_SHORT = 2
DW_LONG = 4

_SPEC = re.compile(r"%([0-]?)(\d*)([lL]?)(.?)", re.S)
_RADIX = {"B": 2, "O": 8, "D": 10, "U": 10, "X": 16}
_MAX_DIGITS = 24
_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value >= 0x80000000 else value


def _next(values: Iterator[object]) -> object:
    try:
        return next(values)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def _as_int(value: object) -> int:
    if not isinstance(value, int):
        raise TypeError(f"integer argument expected, got {type(value).__name__}")
    return value


def _char(value: object) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise TypeError("%c expects a single character")
        return value
    return chr(_as_int(value) & 0xFF)


def _numeral(value: int, radix: int, lower: bool) -> str:
    digits = []
    while True:
        value, digit = divmod(value, radix)
        digits.append(_DIGITS[digit])
        if value == 0 or len(digits) >= _MAX_DIGITS:
            break
    text = "".join(reversed(digits))
    return text.lower() if lower else text


def xformat(fmt: str, *args: object) -> str:
    """Format ``args`` with the console's compact printf dialect.

    Supports %s %c %b %o %d %u %x %X, a '0' or '-' flag, a width and an 'l'
    prefix. Integers are treated as 32-bit. Unknown conversions pass through.
    """
    values = iter(args)
    out: list[str] = []
    pos = 0
    while True:
        start = fmt.find("%", pos)
        if start < 0:
            out.append(fmt[pos:])
            break
        out.append(fmt[pos:start])
        match = _SPEC.match(fmt, start)
        flag, width_text, _, conv = match.groups()
        pos = match.end()
        if not conv:
            break
        width = int(width_text) if width_text else 0
        left = flag == "-"
        kind = conv.upper()
        if kind == "S":
            text = str(_next(values))
            out.append(text.ljust(width) if left else text.rjust(width))
            continue
        if kind == "C":
            out.append(_char(_next(values)))
            continue
        radix = _RADIX.get(kind)
        if radix is None:
            out.append(conv)
            continue
        raw = _as_int(_next(values))
        negative = False
        if kind == "D":
            value = _to_int32(raw)
            if value < 0:
                value, negative = -value, True
        else:
            value = raw & _MASK32
        text = _numeral(value, radix, conv == "x")
        if negative:
            text = "-" + text
        if left:
            out.append(text.ljust(width))
        else:
            out.append(text.rjust(width, "0" if flag == "0" else " "))
    return "".join(out)


def dump_line(data: Sequence[int], addr: int, width: int = DW_CHAR) -> str:
    """One line of a hex dump of ``data`` starting at address ``addr``."""
    parts = [xformat("%08lX ", addr)]
    items = list(data)
    if width == DW_CHAR:
        bytes_ = [b & 0xFF for b in items]
        parts.extend(xformat(" %02X", b) for b in bytes_)
        parts.append(" ")
        parts.extend(chr(b) if 0x20 <= b <= 0x7E else "." for b in bytes_)
    elif width in (DW_SHORT, DW_LONG):
        if not items:
            raise ValueError("nothing to dump")
        if width == DW_SHORT:
            parts.extend(xformat(" %04X", v & 0xFFFF) for v in items)
        else:
            parts.extend(xformat(" %08LX", v & _MASK32) for v in items)
    parts.append("\n")
    return "".join(parts)


def parse_int(text: str) -> tuple[int, str]:
    """Parse one integer from the start of ``text``.

    Accepts leading spaces, an optional '-', and decimal, 0x hex, 0b binary
    or leading-zero octal. Returns the value and the unparsed rest; raises
    ValueError on an invalid number. Values wrap to 32 bits.
    """
    size = len(text)
    pos = 0

    def at(k: int) -> str:
        return text[k] if k < size else ""

    def invalid() -> ValueError:
        return ValueError(f"invalid number in {text!r} at position {pos}")

    while at(pos) == " ":
        pos += 1
    negative = at(pos) == "-"
    if negative:
        pos += 1
    c = at(pos)
    if c == "0":
        pos += 1
        c = at(pos)
        if c == "x":
            radix = 16
            pos += 1
        elif c == "b":
            radix = 2
            pos += 1
        else:
            if c <= " ":
                return 0, text[pos:]
            if not "0" <= c <= "9":
                raise invalid()
            radix = 8
    else:
        if not c or not "0" <= c <= "9":
            raise invalid()
        radix = 10

    value = 0
    while at(pos) > " ":
        code = ord(at(pos))
        if code >= ord("a"):
            code -= 0x20
        code -= ord("0")
        if code < 0:
            raise invalid()
        if code >= 17:
            code -= 7
            if code <= 9:
                raise invalid()
        if code >= radix:
            raise invalid()
        value = (value * radix + code) & _MASK32
        pos += 1
    if negative:
        value = -value
    return _to_int32(value), text[pos:]


CharSource = Callable[[], Union[str, int]]


class Console:
    """Character console writing through ``write``.

    Newlines go out as CR LF when ``crlf`` is set; ``gets`` echoes typed
    characters when ``echo`` is set.
    """

    def __init__(
        self,
        write: Optional[Callable[[str], object]] = None,
        crlf: bool = True,
        echo: bool = True,
    ) -> None:
        self.write = write if write is not None else sys.stdout.write
        self.crlf = crlf
        self.echo = echo

    def putc(self, c: Union[str, int]) -> None:
        ch = _char(c)
        if self.crlf and ch == "\n":
            self.write("\r")
        self.write(ch)

    def puts(self, text: str) -> None:
        for ch in text:
            self.putc(ch)

    def printf(self, fmt: str, *args: object) -> None:
        self.puts(xformat(fmt, *args))

    def dump(self, data: Sequence[int], addr: int, width: int = DW_CHAR) -> None:
        self.puts(dump_line(data, addr, width))

    def gets(self, read_char: CharSource, size: int) -> Optional[str]:
        """Read a line terminated by CR; return None if the stream ends first.

        At most ``size - 1`` characters are kept; backspace deletes one.
        """
        line: list[str] = []
        while True:
            raw = read_char()
            if not raw:
                return None
            c = chr(raw) if isinstance(raw, int) else raw
            if c == "\0":
                return None
            if c == "\r":
                break
            if c == "\b" and line:
                line.pop()
                if self.echo:
                    self.putc(c)
                continue
            if c >= " " and len(line) < size - 1:
                line.append(c)
                if self.echo:
                    self.putc(c)
        if self.echo:
            self.putc("\n")
        return "".join(line)