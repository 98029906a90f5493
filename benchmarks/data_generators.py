"""
Test data generators for JSON benchmarks.

Builds documents with jsontree's own writer so every generated text is
valid under jsontree's grammar (object or array at top level):
- Different sizes (small object / large numeric array)
- Different complexity levels (flat / nested / mixed)
- String-heavy content with escape sequences and non-ASCII text
"""

import random
import string
from typing import Any

import jsontree

DATA_TYPES = (
    "small_object",
    "numeric_array",
    "mixed_array",
    "nested_structure",
    "string_heavy",
)

# Constants for random data generation
_INT_TYPE = 1
_FLOAT_TYPE = 2
_STRING_TYPE = 3
_BOOL_TYPE = 4
_NULL_TYPE = 5
_ESCAPE_PROBABILITY = 0.3
_NON_ASCII = "\u00e9\u00fc\u00df\u00f8\u00f1\u4e2d\u6587\u2603"


def generate_test_data(data_type: str, seed: int = 1234) -> str:
    """Generates JSON text for the named benchmark data type."""
    generators = {
        "small_object": _generate_small_object,
        "numeric_array": _generate_numeric_array,
        "mixed_array": _generate_mixed_array,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return jsontree.construct_string(generators[data_type](random.Random(seed)))


def _generate_small_object(rng: random.Random) -> dict[str, Any]:
    """Generates a small object (< 1KB) with basic members."""
    return {
        "id": rng.randint(10_000, 99_999),
        "name": _random_string(rng, 12),
        "active": True,
        "balance": round(rng.uniform(0, 10_000), 2),
        "tags": [_random_string(rng, 5) for _ in range(3)],
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": None},
    }


def _generate_numeric_array(rng: random.Random) -> list[int | float]:
    """Generates a large array of integers and floats."""
    return [
        rng.randint(-(10**6), 10**6) if i % 2 else rng.uniform(-1e3, 1e3)
        for i in range(10_000)
    ]


def _generate_mixed_array(rng: random.Random) -> list[Any]:
    """Generates an array mixing every JSON value shape."""
    array: list[Any] = []

    for i in range(200):
        choice = rng.randint(1, 6)
        if choice == _INT_TYPE:
            array.append(rng.randint(-1000, 1000))
        elif choice == _FLOAT_TYPE:
            array.append(round(rng.uniform(-100.0, 100.0), 3))
        elif choice == _STRING_TYPE:
            array.append(_random_string(rng, rng.randint(5, 30)))
        elif choice == _BOOL_TYPE:
            array.append(rng.choice([True, False]))
        elif choice == _NULL_TYPE:
            array.append(None)
        else:
            array.append(
                jsontree.Pairs(
                    [
                        ("index", i),
                        ("value", _random_string(rng, 10)),
                        ("score", round(rng.uniform(0, 100), 2)),
                    ]
                )
            )

    return array


def _generate_nested_structure(rng: random.Random) -> dict[str, Any]:
    """Generates a deeply nested object tree."""

    def create_nested(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(rng, 10)}

        return {
            "level": depth,
            "data": _random_string(rng, 15),
            "items": [create_nested(depth - 2) for _ in range(3)],
            "nested": create_nested(depth - 1),
        }

    return create_nested(8)


def _generate_string_heavy(rng: random.Random) -> dict[str, Any]:
    """Generates strings that need escaping when written."""

    def create_escaped_string() -> str:
        chars = []
        for _ in range(50):
            if rng.random() < _ESCAPE_PROBABILITY:
                chars.append(rng.choice('"\\/\b\f\n\r\t' + _NON_ASCII))
            else:
                chars.append(
                    rng.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    return {
        "strings": [create_escaped_string() for _ in range(100)],
        "mixed_content": {
            f"key_{i}": {
                "description": create_escaped_string(),
                "path": f"C:\\Users\\{_random_string(rng, 8)}\\file_{i}.txt",
            }
            for i in range(20)
        },
    }


def _random_string(rng: random.Random, length: int) -> str:
    """Generates a random ASCII letter string of the given length."""
    return "".join(rng.choices(string.ascii_letters, k=length))
