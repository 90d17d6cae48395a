"""Parse the fixed-column CAT listing into StationRecords."""

import re

from .types import StationRecord

# A line that is exactly END, at buffer start or after a newline, followed by a line break or the end
_TERMINATOR_PATTERN = re.compile(rb"(?:\A|\n)END(?=[\r\n]|\Z)")

# Fixed wire columns: network [0,2), station [3,8), site [9,end)
_NETWORK = slice(0, 2)
_STATION = slice(3, 8)
_SITE = slice(9, None)

ENCODING = "utf-8"


def find_terminator(buffer: bytes) -> int | None:
    """
    Return the offset where the listing body ends, or None if END has not arrived yet.

    The offset points at the newline before END, so slicing up to it removes the
    terminator and its line break exactly once. The END line is found anywhere in
    the buffer rather than only at its very end, so bytes arriving after it in the
    same read do not hide it.
    """
    m = _TERMINATOR_PATTERN.search(buffer)
    if m is None:
        return None
    return m.start()


def parse_line(line: str) -> StationRecord:
    return StationRecord(
        network=line[_NETWORK].strip(),
        station=line[_STATION].strip(),
        site=line[_SITE].strip(),
    )


def parse_listing(text: str) -> list[StationRecord]:
    """
    Split a listing body (terminator already removed) into records, one per non-blank line.

    Column content is not validated; an empty network code stays an empty string.
    """
    records: list[StationRecord] = []
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        records.append(parse_line(line))
    return records
