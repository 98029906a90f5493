"""
Pytest configuration and shared fixtures for jsontree tests.

Provides immutable test data fixtures built from the json.org JSON_checker
corpus, adjusted to the grammar jsontree accepts.
"""

from dataclasses import dataclass
from typing import Any

import pytest

from jsontree import Pairs
from jsontree import Special


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_output: Any = None


def _nested(leaf: Any, depth: int) -> Any:
    """Wraps ``leaf`` in ``depth`` one-element tuples."""
    value = leaf
    for _ in range(depth):
        value = (value,)
    return value


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides JSON documents that must fail parsing.

    Taken from json.org JSON_checker. Checker cases that this grammar
    deliberately accepts (leading zeros, raw control characters in strings,
    deep nesting) live in ``grammar_accepted_cases`` instead.
    """
    fail_docs = {
        1: '"A JSON payload should be an object or array, not a string."',
        2: '["Unclosed array"',
        3: '{unquoted_key: "keys must be quoted"}',
        4: '["extra comma",]',
        5: '["double extra comma",,]',
        6: '[   , "<-- missing value"]',
        7: '["Comma after the close"],',
        8: '["Extra close"]]',
        9: '{"Extra comma": true,}',
        10: '{"Extra value after close": true} "misplaced quoted value"',
        11: '{"Illegal expression": 1 + 2}',
        12: '{"Illegal invocation": alert()}',
        14: '{"Numbers cannot be hex": 0x14}',
        15: '["Illegal backslash escape: \\x15"]',
        16: "[\\naked]",
        17: '["Illegal backslash escape: \\017"]',
        19: '{"Missing colon" null}',
        20: '{"Double colon":: null}',
        21: '{"Comma instead of colon", null}',
        22: '["Colon instead of comma": false]',
        23: '["Bad value", truth]',
        24: "['single quote']",
        26: '["tab\\   character\\   in\\  string\\  "]',
        28: '["line\\\nbreak"]',
        29: "[0e]",
        30: "[0e+]",
        31: "[0e+-1]",
        32: '{"Comma instead if closing brace": true,',
        33: '["mismatch"}',
    }

    return [
        JsonTestCase(
            description=f"fail{number}.json",
            input_data=doc,
            should_fail=True,
        )
        for number, doc in fail_docs.items()
    ]


@pytest.fixture
def grammar_accepted_cases() -> list[JsonTestCase]:
    """
    Provides JSON_checker failure documents that this grammar accepts.

    Integer digits are ``digit+`` and string bodies take any character but
    a quote or backslash literally.
    """
    return [
        JsonTestCase(
            "fail13.json - leading zero",
            '{"Numbers cannot have leading zeroes": 013}',
            False,
            Pairs([("Numbers cannot have leading zeroes", 13)]),
        ),
        JsonTestCase(
            "fail18.json - deep nesting",
            '[[[[[[[[[[[[[[[[[[["Too deep"]]]]]]]]]]]]]]]]]]]',
            False,
            _nested("Too deep", 19),
        ),
        JsonTestCase(
            "fail25.json - raw tabs",
            '["\ttab\tcharacter\tin\tstring\t"]',
            False,
            ("\ttab\tcharacter\tin\tstring\t",),
        ),
        JsonTestCase(
            "fail27.json - raw line break",
            '["line\nbreak"]',
            False,
            ("line\nbreak",),
        ),
        JsonTestCase(
            "raw control character",
            '["A\u001fZ control characters in string"]',
            False,
            ("A\u001fZ control characters in string",),
        ),
        JsonTestCase("explicit plus sign", "[+1]", False, (1,)),
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides JSON documents that must parse successfully.

    These test cases validate standards compliance for valid JSON structures.
    """
    return [
        JsonTestCase(
            description="pass1.json - complex nested structure",
            input_data="""[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    }
]""",
            should_fail=False,
        ),
        JsonTestCase(
            description="pass2.json - deep nesting",
            input_data='[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
            should_fail=False,
        ),
        JsonTestCase(
            description="pass3.json - simple object",
            input_data='{"JSON Test Pattern pass3": {"The outermost value": "must be an object or array.", "In this test": "It is an object."}}',
            should_fail=False,
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Provides basic JSON value test cases for fundamental parsing.

    Scalars are wrapped in an array since only objects and arrays are
    valid documents.
    """
    return [
        JsonTestCase("null value", "[null]", False, (Special.NULL,)),
        JsonTestCase("true boolean", "[true]", False, (Special.TRUE,)),
        JsonTestCase("false boolean", "[false]", False, (Special.FALSE,)),
        JsonTestCase("integer", "[42]", False, (42,)),
        JsonTestCase("negative integer", "[-17]", False, (-17,)),
        JsonTestCase("float", "[3.14]", False, (3.14,)),
        JsonTestCase("empty string", '[""]', False, ("",)),
        JsonTestCase("simple string", '["hello"]', False, ("hello",)),
        JsonTestCase("empty array", "[]", False, ()),
        JsonTestCase("empty object", "{}", False, Pairs()),
        JsonTestCase("simple array", "[1, 2, 3]", False, (1, 2, 3)),
        JsonTestCase(
            "simple object",
            '{"key": "value"}',
            False,
            Pairs([("key", "value")]),
        ),
        JsonTestCase("bare scalar", "42", True),
        JsonTestCase("bare literal", "null", True),
    ]
