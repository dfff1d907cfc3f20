"""
Tests for the Config/Section/Option model and section selectors.
"""

import io

import pytest

from ucitree.errors import SelectorError, UnknownOptionTypeError
from ucitree.models.document import Config, Option, OptionType, Section
from ucitree.models.selector import parse_selector
from ucitree.syntax.parser import parse_config

from .conftest import TESTDATA


@pytest.mark.parametrize(
    ("selector", "message"),
    [
        ("", "implausible section selector: must be at least 5 characters long"),
        ("aa[0]", "invalid syntax: section selector must start with @ sign"),
        ("@@[0]", "invalid syntax: multiple @ signs found"),
        ("@@@@@@@@@@@", "invalid syntax: multiple @ signs found"),
        ("@[[0]", "invalid syntax: multiple open brackets found"),
        ("@][0]", "invalid syntax: multiple closed brackets found"),
        ("@aa0]", "invalid syntax: section selector must have format '@type[index]'"),
        ("@a[b]", "invalid section index: 'b'"),
        ("@abcdEFGHijkl[0xff]", "invalid section index: '0xff'"),
    ],
)
def test_parse_selector_errors(selector: str, message: str) -> None:
    with pytest.raises(SelectorError) as excinfo:
        parse_selector(selector)
    assert str(excinfo.value) == message


@pytest.mark.parametrize(
    ("selector", "expected"),
    [
        ("@a[0]", ("a", 0)),
        ("@a[4223]", ("a", 4223)),
        ("@a[-1]", ("a", -1)),
        ("@abcdEFGHijkl[-255]", ("abcdEFGHijkl", -255)),
        ("@wifi-iface[2]", ("wifi-iface", 2)),
    ],
)
def test_parse_selector(selector: str, expected: tuple[str, int]) -> None:
    assert parse_selector(selector) == expected


@pytest.fixture
def unnamed() -> Config:
    return parse_config((TESTDATA / "unnamed").read_text(), "unnamed")


@pytest.mark.parametrize(
    ("selector", "pos"),
    [
        ("named", "3"),
        ("@foo[0]", "3"),
        ("@foo[1]", "1"),
        ("@foo[2]", "2"),
        ("@foo[-3]", "3"),
        ("@foo[-2]", "1"),
        ("@foo[-1]", "2"),
    ],
)
def test_config_get(unnamed: Config, selector: str, pos: str) -> None:
    section = unnamed.get(selector)

    assert section is not None
    assert section.get_values("pos") == [pos]


@pytest.mark.parametrize("selector", ["@foo[3]", "@foo[-4]", "@bar[0]", "@foo[x]", "missing"])
def test_config_get_missing(unnamed: Config, selector: str) -> None:
    assert unnamed.get(selector) is None


def test_negative_index_matches_last(unnamed: Config) -> None:
    count = unnamed.count("foo")
    assert unnamed.get("@foo[-1]") is unnamed.get(f"@foo[{count - 1}]")


def test_section_name(unnamed: Config) -> None:
    assert [unnamed.section_name(section) for section in unnamed] == [
        "named",
        "@foo[1]",
        "@foo[2]",
    ]

    with pytest.raises(ValueError):
        unnamed.section_name(Section("foo"))


def test_remove_shifts_ordinals(unnamed: Config) -> None:
    removed = unnamed.remove("@foo[1]")

    assert removed is not None
    assert removed.get_values("pos") == ["1"]
    assert unnamed.section_names("foo") == ["named", "@foo[1]"]
    assert unnamed.get("@foo[1]").get_values("pos") == ["2"]
    assert unnamed.get("named") is not None


def test_remove_missing(unnamed: Config) -> None:
    assert unnamed.remove("nothing") is None
    assert len(unnamed) == 3


def test_add_merges_named_sections() -> None:
    config = Config("test")
    first = config.add(Section("foo", "x", [Option("a", ["1"])]))
    second = config.add(Section("foo", "x", [Option("a", ["2"]), Option("b", ["3"])]))

    assert first is second
    assert len(config) == 1
    assert first.get_values("a") == ["2"]
    assert first.get_values("b") == ["3"]


def test_option_merge() -> None:
    option = Option("dns", ["a"], OptionType.LIST)
    option.merge(Option("dns", ["a", "b"], OptionType.LIST))
    assert option.values == ["a", "b"]

    option.merge(Option("dns", ["c"]))
    assert option.type == OptionType.OPTION
    assert option.values == ["c"]

    option.merge(Option("dns", ["d"], OptionType.LIST))
    assert option.type == OptionType.LIST
    assert option.values == ["c", "d"]


def test_section_set_infers_type() -> None:
    section = Section("foo")

    assert section.set("a", ["1"]).type == OptionType.OPTION
    assert section.set("a", ["1", "2"]).type == OptionType.LIST
    assert section.set("b", ["x"], OptionType.LIST).type == OptionType.LIST
    assert [option.name for option in section.options] == ["a", "b"]


def test_section_set_requires_values() -> None:
    section = Section("foo", options=[Option("a", ["1"])])

    with pytest.raises(ValueError, match="no values given"):
        section.set("a", [])

    assert section.get_values("a") == ["1"]


def test_section_remove() -> None:
    section = Section("foo", options=[Option("a", ["1"]), Option("b", ["2"]), Option("c", ["3"])])

    assert section.remove("b")
    assert not section.remove("b")
    assert section.get_values("c") == ["3"]
    assert section.get("b") is None


def test_write_to() -> None:
    config = Config("cfgname")
    section = config.add(Section("sectype", "secname"))
    section.set("optname", ["optvalue"])
    section.set("servers", ["a", "b"])
    config.add(Section("anon"))

    buffer = io.StringIO()
    written = config.write_to(buffer)

    assert buffer.getvalue() == (
        "\n"
        "config sectype 'secname'\n"
        "\toption optname 'optvalue'\n"
        "\tlist servers 'a'\n"
        "\tlist servers 'b'\n"
        "\n"
        "config anon\n"
        "\n"
    )
    assert written == len(buffer.getvalue())


def test_empty_config_dumps() -> None:
    assert Config("empty").dumps() == "\n"


def test_dict_round_trip(unnamed: Config) -> None:
    restored = Config.from_dict(unnamed.to_dict())

    assert restored == unnamed
    assert restored.section_names("foo") == ["named", "@foo[1]", "@foo[2]"]


def test_option_type_parse() -> None:
    assert OptionType.parse("option") is OptionType.OPTION
    assert OptionType.parse("list") is OptionType.LIST

    with pytest.raises(UnknownOptionTypeError, match="unknown option type foo"):
        OptionType.parse("foo")
