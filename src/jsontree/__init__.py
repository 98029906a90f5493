"""
JSON text codec producing a generic, hook-shaped value tree.

Parses JSON documents into tuples, ordered key/value pair lists and literal
tags (or whatever the caller's construction hooks build instead), and writes
such trees back out as compact JSON text.
"""

import io
import math
import os
import time
from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from numbers import Integral
from numbers import Number
from numbers import Rational
from numbers import Real
from typing import Any
from typing import Final
from typing import TextIO

from jsontree._cursor import SourceCursor

__version__ = "0.1.0"

type Position = int


class Special(Enum):
    """Symbolic tags for the three JSON literals."""

    NULL = "null"
    TRUE = "true"
    FALSE = "false"


class Pairs(list[tuple[str, Any]]):
    """
    Ordered (key, value) members of a JSON object.

    Source order and duplicate keys are preserved. The writer treats any
    Pairs instance as an object, which is how a pair list is told apart
    from an array of two-element arrays.
    """

    def __repr__(self) -> str:
        return f"Pairs({list.__repr__(self)})"


# Hook type definitions - hooks can return custom types
ArrayHandler = Callable[[list[Any]], Any]
ObjectHandler = Callable[[Pairs], Any]
SpecialHandler = Callable[[Special], Any]

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JSONTREE_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during parsing and writing."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a function call with timing and character processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, chars_to_process: int = 0):
            self.func_name = func_name
            self.chars = chars_to_process
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class JSONParseError(ValueError):
    """
    Reports input text that does not match the JSON grammar.

    Carries the character offset of the failure, the offending text found
    there (empty at end of input), and the line/column derived from the
    text read so far.
    """

    def __init__(
        self, msg: str, doc: str = "", pos: Position = 0, token: str = ""
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos
        self.token = token

        # Compute line and column numbers from position
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")


class JSONConstructError(ValueError):
    """Reports a value that has no JSON representation."""

    def __init__(self, msg: str, obj: Any) -> None:
        self.msg = msg
        self.obj = obj
        super().__init__(msg)


class _Mismatch(Exception):
    """
    Failure of a single grammar production.

    ``pos`` is where the failure is reported, ``reached`` is how far the
    production consumed input before failing. Alternations keep the
    failure that reached furthest.
    """

    def __init__(
        self, msg: str, pos: Position, token: str, reached: Position
    ) -> None:
        super().__init__(msg)
        self.msg = msg
        self.pos = pos
        self.token = token
        self.reached = reached


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing with immutable, call-scoped settings.

    The three handlers decide how arrays, objects and literal tags are
    represented. Defaults: arrays become tuples, objects stay as their
    Pairs list, literal tags pass through as Special members.
    """

    array_handler: ArrayHandler = tuple
    object_handler: ObjectHandler = _identity
    special_handler: SpecialHandler = _identity
    read_size: int = 65536

    def __post_init__(self) -> None:
        for name in ("array_handler", "object_handler", "special_handler"):
            if not callable(getattr(self, name)):
                raise TypeError(f"{name} must be callable")
        if (
            not isinstance(self.read_size, int)
            or isinstance(self.read_size, bool)
            or self.read_size <= 0
        ):
            raise ValueError("read_size must be a positive integer")


_NATIVE_SPECIALS: Final = {
    Special.NULL: None,
    Special.TRUE: True,
    Special.FALSE: False,
}


def native_special(tag: Special) -> bool | None:
    """Maps a literal tag onto None, True or False."""
    return _NATIVE_SPECIALS[tag]


DEFAULT_CONFIG: Final = ParseConfig()
# Output shaped like the standard library json module's
NATIVE_CONFIG: Final = ParseConfig(
    array_handler=list, object_handler=dict, special_handler=native_special
)

DIGITS: Final = frozenset("0123456789")
HEX_DIGITS: Final = frozenset("0123456789abcdefABCDEF")
SIGNS: Final = frozenset("+-")
EXPONENT_MARKERS: Final = frozenset("eE")

_UNESCAPES: Final = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class JsonParser:
    """
    Recursive descent parser over a rewindable character cursor.

    Every structural token consumes its trailing whitespace. The value
    alternation saves the cursor before each branch and restores it when
    the branch fails.
    """

    def __init__(self, cursor: SourceCursor, config: ParseConfig):
        self.cursor = cursor
        self.config = config

    def _fail(
        self, msg: str, pos: Position | None = None, token: str | None = None
    ) -> _Mismatch:
        """Builds a production failure at ``pos`` (default: cursor)."""
        cursor = self.cursor
        cursor.peek()
        if pos is None:
            pos = cursor.pos
        if token is None:
            token = cursor.text[pos : pos + 1]
        return _Mismatch(msg, pos, token, reached=cursor.pos)

    def _token(self, char: str) -> None:
        """Consumes a structural character and the whitespace after it."""
        if self.cursor.peek() != char:
            raise self._fail(f"Expecting '{char}' delimiter")
        self.cursor.advance()
        self.cursor.skip_whitespace()

    def _alternatives(
        self, productions: Sequence[Callable[[], Any]], expected: str
    ) -> Any:
        """Tries productions in order, rewinding between attempts."""
        cursor = self.cursor
        start = cursor.mark()
        furthest: _Mismatch | None = None

        for production in productions:
            try:
                return production()
            except _Mismatch as exc:
                cursor.reset(start)
                if furthest is None or exc.reached > furthest.reached:
                    furthest = exc

        if furthest is None or furthest.reached == start:
            raise self._fail(expected)
        raise furthest

    def parse_document(self) -> Any:
        """Parses a whole document: an object, an array, or nothing."""
        cursor = self.cursor
        if cursor.peek() == "\ufeff":
            raise self._fail(
                "JSON input should not contain BOM (Byte Order Mark)"
            )

        cursor.skip_whitespace()
        if cursor.at_end():
            return None

        value = self._alternatives(
            (self.parse_object, self.parse_array), "Expecting object or array"
        )

        if not cursor.at_end():
            raise self._fail("Extra data")
        return value

    def parse_value(self) -> Any:
        """
        Parses any JSON value and the whitespace following it.

        Objects, arrays and strings are the only productions that can match
        '{', '[' and '"', so those branches are entered directly. Literals
        and numbers go through the ordered alternation.
        """
        char = self.cursor.peek()
        if char == "[":
            value = self.parse_array()
        elif char == "{":
            value = self.parse_object()
        elif char == '"':
            value = self.parse_string()
        else:
            value = self._alternatives(
                (self.parse_special, self.parse_number), "Expecting value"
            )
        self.cursor.skip_whitespace()
        return value

    def parse_special(self) -> Any:
        """Parses true, false or null into a tag passed to the hook."""
        with ProfileContext("parse_special"):
            for tag in Special:
                if self.cursor.startswith(tag.value):
                    self.cursor.advance(len(tag.value))
                    return self.config.special_handler(tag)
            raise self._fail("Expecting value")

    def _scan_digits(self) -> None:
        """Consumes a non-empty run of ASCII digits."""
        cursor = self.cursor
        if cursor.peek() not in DIGITS:
            raise self._fail("Invalid number")
        while cursor.peek() in DIGITS:
            cursor.advance()

    def parse_number(self) -> int | float:
        """
        Parses a number, keeping it exact when it has no fraction or exponent.

        "42" yields int 42; "42.0", "42e0" and "4.2e1" all yield float 42.0.
        """
        with ProfileContext("parse_number"):
            cursor = self.cursor
            start = cursor.pos
            exact = True

            if cursor.peek() in SIGNS:
                cursor.advance()
            self._scan_digits()

            if cursor.peek() == ".":
                cursor.advance()
                self._scan_digits()
                exact = False

            if cursor.peek() in EXPONENT_MARKERS:
                cursor.advance()
                if cursor.peek() in SIGNS:
                    cursor.advance()
                self._scan_digits()
                exact = False

            lexeme = cursor.text[start : cursor.pos]
            if exact:
                try:
                    return int(lexeme)
                except ValueError as e:
                    # Interpreter limit on int/str conversion digits
                    raise self._fail("Number too large", start, lexeme) from e

            value = float(lexeme)
            if math.isinf(value):
                raise self._fail("Number out of range", start, lexeme)
            return value

    def _parse_escape(self, string_start: Position) -> str:
        """Parses the escape following a backslash inside a string."""
        cursor = self.cursor
        backslash_pos = cursor.pos - 1
        char = cursor.advance()

        if not char:
            raise self._fail("Unterminated string starting at", string_start)
        if char in _UNESCAPES:
            return _UNESCAPES[char]
        if char == "u":
            hex_digits = cursor.advance(4)
            if len(hex_digits) == 4 and set(hex_digits) <= HEX_DIGITS:
                # No surrogate pair composition: one escape, one character
                return chr(int(hex_digits, 16))
            raise self._fail("Invalid \\uXXXX escape", backslash_pos)
        raise self._fail("Invalid \\escape", backslash_pos)

    def parse_string(self) -> str:
        """Parses a quoted string, resolving escape sequences."""
        with ProfileContext("parse_string"):
            cursor = self.cursor
            start = cursor.pos
            if cursor.peek() != '"':
                raise self._fail("Expecting string")
            cursor.advance()

            builder: list[str] = []
            while True:
                char = cursor.advance()
                if not char:
                    raise self._fail("Unterminated string starting at", start)
                if char == '"':
                    return "".join(builder)
                if char == "\\":
                    builder.append(self._parse_escape(start))
                else:
                    builder.append(char)

    def parse_array(self) -> Any:
        """Parses a bracketed array and hands the elements to the hook."""
        with ProfileContext("parse_array"):
            cursor = self.cursor
            self._token("[")

            values: list[Any] = []
            if cursor.peek() != "]":
                while True:
                    values.append(self.parse_value())
                    if cursor.peek() != ",":
                        break
                    self._token(",")
                    if cursor.peek() == "]":
                        raise self._fail(
                            "Illegal trailing comma before end of array"
                        )

            if cursor.peek() != "]":
                raise self._fail("Expecting ',' delimiter")
            self._token("]")
            return self.config.array_handler(values)

    def _parse_key(self) -> str:
        """Parses a member key up to and including its ':' delimiter."""
        if self.cursor.peek() != '"':
            raise self._fail(
                "Expecting property name enclosed in double quotes"
            )
        key = self.parse_string()
        self.cursor.skip_whitespace()
        self._token(":")
        return key

    def parse_object(self) -> Any:
        """Parses a braced object and hands its pairs to the hook."""
        with ProfileContext("parse_object"):
            cursor = self.cursor
            self._token("{")

            pairs = Pairs()
            if cursor.peek() != "}":
                while True:
                    key = self._parse_key()
                    pairs.append((key, self.parse_value()))
                    if cursor.peek() != ",":
                        break
                    self._token(",")
                    if cursor.peek() == "}":
                        raise self._fail(
                            "Illegal trailing comma before end of object"
                        )

            if cursor.peek() != "}":
                raise self._fail("Expecting ',' delimiter")
            self._token("}")
            return self.config.object_handler(pairs)


def _resolve_config(
    config: ParseConfig | None, hooks: dict[str, Any]
) -> ParseConfig:
    """Applies per-call keyword overrides on top of a base config."""
    if config is None:
        config = DEFAULT_CONFIG
    elif not isinstance(config, ParseConfig):
        raise TypeError("config must be a ParseConfig")
    return replace(config, **hooks) if hooks else config


def parse(
    source: TextIO, config: ParseConfig | None = None, **hooks: Any
) -> Any:
    """
    Parses one JSON document from a text stream.

    The document must be an object or an array; empty input yields None.
    Keyword arguments override fields of ``config`` for this call only.
    """
    if not hasattr(source, "read"):
        raise TypeError("source must have a read() method")

    resolved = _resolve_config(config, hooks)
    cursor = SourceCursor(source, resolved.read_size)
    parser = JsonParser(cursor, resolved)

    try:
        return parser.parse_document()
    except _Mismatch as e:
        raise JSONParseError(e.msg, cursor.text, e.pos, e.token) from e
    except RecursionError as e:
        pos = cursor.pos
        raise JSONParseError(
            "Maximum nesting depth exceeded",
            cursor.text,
            pos,
            cursor.text[pos : pos + 1],
        ) from e


def parse_string(
    text: str, config: ParseConfig | None = None, **hooks: Any
) -> Any:
    """Parses one JSON document held in a string."""
    if not isinstance(text, str):
        raise TypeError(
            f"the JSON text must be str, not {type(text).__name__}"
        )

    return parse(io.StringIO(text), config, **hooks)


class ValueKind(Enum):
    """Shapes the writer knows how to serialize."""

    NULL = "null"
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"
    UNSUPPORTED = "unsupported"


def classify(obj: Any) -> ValueKind:  # noqa: PLR0911
    """Determines which JSON shape, if any, a host value has."""
    if obj is None or obj is Special.NULL:
        return ValueKind.NULL
    elif isinstance(obj, bool) or obj is Special.TRUE or obj is Special.FALSE:
        return ValueKind.BOOLEAN
    elif isinstance(obj, str):
        return ValueKind.STRING
    elif isinstance(obj, Pairs | Mapping):
        return ValueKind.OBJECT
    elif isinstance(obj, Number):
        return ValueKind.NUMBER
    elif isinstance(obj, Sequence) and not isinstance(obj, bytes | bytearray):
        return ValueKind.ARRAY
    return ValueKind.UNSUPPORTED


_ESCAPES: Final = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_BMP_LIMIT: Final = 0xFFFF


def _encode_string(s: str) -> str:
    """Encode string, escaping everything outside printable ASCII."""
    result = ['"']
    for char in s:
        escaped = _ESCAPES.get(char)
        if escaped is not None:
            result.append(escaped)
        elif " " <= char <= "~":
            result.append(char)
        else:
            code = ord(char)
            if code > _BMP_LIMIT:
                # Four hex digits per escape, so split into a surrogate pair
                code -= 0x10000
                result.append(f"\\u{0xD800 | (code >> 10):04x}")
                result.append(f"\\u{0xDC00 | (code & 0x3FF):04x}")
            else:
                result.append(f"\\u{code:04x}")
    result.append('"')
    return "".join(result)


def _finite_float(n: Any) -> float:
    try:
        value = float(n)
    except OverflowError as e:
        raise JSONConstructError(f"cannot represent {n!r}", n) from e
    if not math.isfinite(value):
        raise JSONConstructError(f"cannot represent {n!r}", n)
    return value


def _encode_number(n: Any) -> str:
    """Encode numeric values with JSON compliance."""
    if isinstance(n, Integral):
        try:
            return str(int(n))
        except ValueError as e:
            # Interpreter limit on int/str conversion digits
            raise JSONConstructError("Number too large", n) from e
    elif isinstance(n, Decimal):
        if not n.is_finite():
            raise JSONConstructError(f"cannot represent {n!r}", n)
        return str(n)
    elif isinstance(n, Rational):
        if n.denominator == 1:
            return str(n.numerator)
        return repr(_finite_float(n))
    elif isinstance(n, Real):
        return repr(_finite_float(n))
    raise JSONConstructError(f"cannot represent {n!r}", n)


def _member(member: Any) -> tuple[str, Any]:
    """Splits an object member into its key and value."""
    if (
        not isinstance(member, Sequence)
        or isinstance(member, str | bytes | bytearray)
        or len(member) != 2
    ):
        raise JSONConstructError(
            f"object member is not a key/value pair: {member!r}", member
        )
    key, value = member
    if not isinstance(key, str):
        raise JSONConstructError(
            f"keys must be strings, not {type(key).__name__}", key
        )
    return key, value


def _enter(obj: Any, markers: set[int]) -> None:
    if id(obj) in markers:
        raise JSONConstructError("Circular reference detected", obj)
    markers.add(id(obj))


def _write_object(obj: Any, out: list[str], markers: set[int]) -> None:
    """Write object members in their iteration order."""
    _enter(obj, markers)
    members = obj.items() if isinstance(obj, Mapping) else obj

    out.append("{")
    for index, member in enumerate(members):
        key, value = _member(member)
        if index:
            out.append(",")
        out.append(_encode_string(key))
        out.append(":")
        try:
            _write_value(value, out, markers)
        except JSONConstructError as e:
            e.add_note(f"when serializing {type(obj).__name__} item {key!r}")
            raise
    out.append("}")
    markers.discard(id(obj))


def _write_array(arr: Sequence[Any], out: list[str], markers: set[int]) -> None:
    _enter(arr, markers)
    out.append("[")
    for index, item in enumerate(arr):
        if index:
            out.append(",")
        try:
            _write_value(item, out, markers)
        except JSONConstructError as e:
            e.add_note(f"when serializing {type(arr).__name__} item {index}")
            raise
    out.append("]")
    markers.discard(id(arr))


def _write_value(obj: Any, out: list[str], markers: set[int]) -> None:
    """Write any JSON-representable value."""
    kind = classify(obj)
    if kind is ValueKind.NULL:
        out.append("null")
    elif kind is ValueKind.BOOLEAN:
        out.append("true" if obj is True or obj is Special.TRUE else "false")
    elif kind is ValueKind.STRING:
        out.append(_encode_string(obj))
    elif kind is ValueKind.NUMBER:
        out.append(_encode_number(obj))
    elif kind is ValueKind.OBJECT:
        _write_object(obj, out, markers)
    elif kind is ValueKind.ARRAY:
        _write_array(obj, out, markers)
    else:
        msg = f"Object of type {type(obj).__name__} is not JSON serializable"
        raise JSONConstructError(msg, obj)


def construct_string(value: Any) -> str:
    """
    Serializes an object or array to compact JSON text.

    Objects are Pairs lists or mappings; arrays are any other non-string
    sequence. Top-level scalars are rejected, mirroring the parser.
    """
    with ProfileContext("construct"):
        if classify(value) not in (ValueKind.OBJECT, ValueKind.ARRAY):
            raise JSONConstructError(
                "top-level value must be an object or an array, "
                f"not {type(value).__name__}",
                value,
            )

        out: list[str] = []
        try:
            _write_value(value, out, set())
        except RecursionError as e:
            raise JSONConstructError(
                "Maximum nesting depth exceeded", value
            ) from e
        return "".join(out)


def construct(value: Any, sink: TextIO) -> None:
    """
    Serializes an object or array into a text sink.

    The document is rendered completely before anything is written, so a
    failed call leaves the sink untouched.
    """
    if not hasattr(sink, "write"):
        raise TypeError("sink must have a write() method")

    sink.write(construct_string(value))


__all__ = [
    "DEFAULT_CONFIG",
    "NATIVE_CONFIG",
    "HotPathStats",
    "JSONConstructError",
    "JSONParseError",
    "JsonParser",
    "Pairs",
    "ParseConfig",
    "Special",
    "ValueKind",
    "classify",
    "clear_hot_path_stats",
    "construct",
    "construct_string",
    "get_hot_path_stats",
    "native_special",
    "parse",
    "parse_string",
]
