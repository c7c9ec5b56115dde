"""Symbol escaping and literal reading/formatting shared by both directions.

Host identifiers follow ``[A-Za-z_][A-Za-z0-9_]*`` (Unicode letters allowed);
surface symbols may also contain ``-``, ``?``, ``!``, ``*`` and friends.
``escape_symbol`` maps a surface spelling onto a host one and
``unescape_symbol`` goes back.  Only the host side round-trips exactly::

    escape_symbol(unescape_symbol(h)) == h

A host name whose decoded spelling would read back as something else
(``_1`` as ``-1``, ``_PRIME_x`` as ``'x``) is written unchanged.

Operator names such as ``+`` or ``<=`` are legal on both sides and pass
through untouched.
"""

from __future__ import annotations

import math
import re
from fractions import Fraction

from lispsyntax.values import UInt

# surface character -> host code
_ESCAPES: dict[str, str] = {
    "?": "_QMARK_",
    "!": "_BANG_",
    "*": "_STAR_",
    "+": "_PLUS_",
    "<": "_LT_",
    ">": "_GT_",
    "=": "_EQ_",
    "'": "_PRIME_",
    "&": "_AMP_",
    "%": "_PCT_",
    "$": "_DOLLAR_",
    "#": "_HASH_",
    "|": "_BAR_",
    "^": "_CARET_",
    "~": "_TILDE_",
    "@": "_AT_",
}
_UNESCAPES: dict[str, str] = {code: ch for ch, code in _ESCAPES.items()}
_CODE_RE = re.compile(r"_[A-Z]+_")
# a single symbol segment: no reader macro or digit in front, no separators
_PLAIN_SYMBOL_RE = re.compile(r"[^\s\d:./\\#'()\[\]{}\";`~,][^\s:./\\()\[\]{}\";`~,]*")
_SIGNED_DIGIT_RE = re.compile(r"[+-]\d")

OPERATOR_CHARS = frozenset("+-*/\\<>=!&|%^~÷.:$≤≥≠")


def is_operator(name: str) -> bool:
    """Return True if name is made only of operator characters."""
    return bool(name) and all(ch in OPERATOR_CHARS for ch in name)


def escape_symbol(name: str) -> str:
    """Surface symbol spelling -> host identifier spelling."""
    if is_operator(name):
        return name
    prefix = ""
    if name.startswith("@"):
        prefix, name = "@", name[1:]
    out: list[str] = []
    for ch in name:
        if ch == "-":
            out.append("_")
        else:
            out.append(_ESCAPES.get(ch, ch))
    return prefix + "".join(out)


def unescape_symbol(name: str) -> str:
    """Host identifier spelling -> surface symbol spelling."""
    if is_operator(name):
        return name
    prefix = ""
    if name.startswith("@"):
        prefix, name = "@", name[1:]
    out: list[str] = []
    i = 0
    while i < len(name):
        ch = name[i]
        if ch != "_":
            out.append(ch)
            i += 1
            continue
        m = _CODE_RE.match(name, i)
        if m is not None and m.group() in _UNESCAPES:
            out.append(_UNESCAPES[m.group()])
            i = m.end()
        else:
            out.append("-")
            i += 1
    decoded = prefix + "".join(out)
    if _reads_back(decoded, prefix + name):
        return decoded
    return prefix + name


def _reads_back(text: str, host: str) -> bool:
    """Return True if text reads as one plain symbol that escapes to host."""
    return (
        _PLAIN_SYMBOL_RE.fullmatch(text) is not None
        and _SIGNED_DIGIT_RE.match(text) is None
        and escape_symbol(text) == host
    )


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

_INT_RE = re.compile(r"([+-]?\d+)N?")
_HEX_RE = re.compile(r"0[xX]([0-9a-fA-F]+)")
_RADIX_RE = re.compile(r"([+-]?)(\d{1,2})r([0-9a-zA-Z]+)")
_RATIO_RE = re.compile(r"([+-]?\d+)/(\d+)")
_FLOAT_RE = re.compile(r"[+-]?\d+(?:\.\d*(?:[eE][+-]?\d+)?|[eE][+-]?\d+)")

Number = int | float | Fraction | UInt

# ##Inf style symbolic values, written after the "##" prefix
NUMERIC_CONSTANTS: dict[str, float] = {
    "Inf": math.inf,
    "-Inf": -math.inf,
    "NaN": math.nan,
}


def read_number(text: str) -> Number:
    """Convert numeric token text to a value; raise ValueError if malformed."""
    if text.startswith("##"):
        if text[2:] not in NUMERIC_CONSTANTS:
            raise ValueError(f"unrecognized numeric constant {text}")
        return NUMERIC_CONSTANTS[text[2:]]
    if (m := _INT_RE.fullmatch(text)) is not None:
        return int(m.group(1))
    if (m := _HEX_RE.fullmatch(text)) is not None:
        return UInt(int(m.group(1), 16))
    if (m := _FLOAT_RE.fullmatch(text)) is not None:
        return float(m.group())
    if (m := _RATIO_RE.fullmatch(text)) is not None:
        denominator = int(m.group(2))
        if denominator == 0:
            raise ValueError(f"zero denominator in ratio {text}")
        return Fraction(int(m.group(1)), denominator)
    if (m := _RADIX_RE.fullmatch(text)) is not None:
        base = int(m.group(2))
        if not 2 <= base <= 36:
            raise ValueError(f"radix {base} out of range 2-36")
        value = int(m.group(3), base)
        return -value if m.group(1) == "-" else value
    raise ValueError(f"malformed number {text}")


def format_number(value: Number) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, UInt):
        return f"0x{value.value:x}"
    if isinstance(value, Fraction):
        return f"{format_number(value.numerator)}/{format_number(value.denominator)}"
    if isinstance(value, float):
        if math.isnan(value):
            return "##NaN"
        if math.isinf(value):
            return "##Inf" if value > 0 else "##-Inf"
        return repr(value)
    return str(value)


# ---------------------------------------------------------------------------
# Strings and characters
# ---------------------------------------------------------------------------

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "\\": "\\",
    '"': '"',
    "'": "'",
}
_STRING_ENCODE: dict[str, str] = {
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
    "\f": "\\f",
    "\\": "\\\\",
    '"': '\\"',
}

CHAR_NAMES: dict[str, str] = {
    "newline": "\n",
    "space": " ",
    "tab": "\t",
    "formfeed": "\f",
    "backspace": "\b",
    "return": "\r",
}
_CHAR_ENCODE: dict[str, str] = {ch: name for name, ch in CHAR_NAMES.items()}


def format_string(value: str) -> str:
    """Double-quote a string, encoding escapes and control characters."""
    out: list[str] = ['"']
    for ch in value:
        if ch in _STRING_ENCODE:
            out.append(_STRING_ENCODE[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def format_char(ch: str) -> str:
    """Character literal text: a named escape or a backslash and the character."""
    name = _CHAR_ENCODE.get(ch)
    if name is not None:
        return "\\" + name
    return "\\" + ch


def read_char_name(name: str) -> str:
    """Decode the text after a backslash; raise ValueError if unknown."""
    if len(name) == 1:
        return name
    if name in CHAR_NAMES:
        return CHAR_NAMES[name]
    if name.startswith("u") and len(name) == 5:
        try:
            return chr(int(name[1:], 16))
        except ValueError:
            pass
    raise ValueError(f"unsupported character \\{name}")
