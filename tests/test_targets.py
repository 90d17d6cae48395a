"""Tests for host[:port] target parsing and validation."""

import pytest

from seedlink_stations import Target, parse_target, parse_targets
from seedlink_stations.errors import InvalidTargetError


@pytest.mark.parametrize(
    ("raw", "host", "port", "identifier"),
    [
        ("rtserve.iris.washington.edu", "rtserve.iris.washington.edu", 18000, "rtserve.iris.washington.edu"),
        ("geofon.gfz-potsdam.de:18000", "geofon.gfz-potsdam.de", 18000, "geofon.gfz-potsdam.de:18000"),
        ("127.0.0.1:18001", "127.0.0.1", 18001, "127.0.0.1:18001"),
        ("  localhost:0  ", "localhost", 0, "localhost:0"),
        ("localhost:", "localhost", 18000, "localhost:"),
    ],
)
def test_parse_target(raw: str, host: str, port: int, identifier: str) -> None:
    t = parse_target(raw)
    assert t == Target(host=host, port=port, identifier=identifier)


def test_parse_target_custom_default_port() -> None:
    assert parse_target("example.org", default_port=18500).port == 18500


@pytest.mark.parametrize(
    "malformed",
    [
        "",
        "   ",
        ":18000",
        "host:port",
        "host:-1",
        "host:65536",
        "host:1:2",
        "two words",
    ],
)
def test_parse_target_invalid_raises(malformed: str) -> None:
    with pytest.raises(InvalidTargetError) as exc_info:
        parse_target(malformed)
    assert exc_info.value.target == malformed


def test_parse_targets_preserves_order() -> None:
    targets = parse_targets("b.example:18001,a.example")
    assert [t.identifier for t in targets] == ["b.example:18001", "a.example"]
    assert [t.port for t in targets] == [18001, 18000]


def test_parse_targets_rejects_empty_item() -> None:
    with pytest.raises(InvalidTargetError):
        parse_targets("a.example,,b.example")


def test_target_default_identifier() -> None:
    assert Target(host="example.org").identifier == "example.org:18000"
