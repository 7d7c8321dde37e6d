"""Pytest tests for instance parsing.

Each test creates a temporary instance file and asserts either successful
parsing (structure + id assignment) or the correct exception.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager

import pytest

from tardysched.parser import (
    MalformedInputError,
    format_instance,
    parse_instance,
    parse_instance_text,
    write_instance,
)


@contextmanager
def temp_instance(content: str):
    fd, path = tempfile.mkstemp(text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:  # pragma: no cover
            pass


def test_parse_simple():
    with temp_instance("""2 7\n3 5 4 1\n2 0 9 0\n""") as path:
        job_set = parse_instance(path)
    assert job_set.size == 2
    assert job_set.weight_limit == 7
    first, second = job_set.jobs
    assert (first.id, first.length, first.weight, first.deadline, first.is_priority) == (
        0,
        3,
        5,
        4,
        True,
    )
    assert second.id == 1
    assert second.is_priority is False


def test_parse_ignores_comments_and_blank_lines():
    text = "# header\n3 0\n\n3 5 3 1   # first\n2 5 5 1\n1 5 6 1\n"
    job_set = parse_instance_text(text)
    assert [job.length for job in job_set] == [3, 2, 1]
    assert job_set.priority_count == 3


def test_parse_fixture(fixtures_dir):
    job_set = parse_instance(fixtures_dir / "example.txt")
    assert job_set.size == 6
    assert job_set.weight_limit == 6
    assert [job.id for job in job_set] == list(range(6))


def test_parse_empty_job_set():
    job_set = parse_instance_text("0 3\n")
    assert job_set.size == 0
    assert job_set.weight_limit == 3


@pytest.mark.parametrize(
    "content",
    [
        "",  # no header at all
        "2\n1 1 1 1\n1 1 1 1\n",  # header holds one value
        "2 1\n1 1 1 1\n",  # declares 2 jobs, provides 1
        "1 1\n1 1 1 1\n2 2 2 0\n",  # more job lines than declared
        "1 0\n3 5 4\n",  # 3 values instead of 4
        "1 0\n0 5 4 1\n",  # non-positive length
        "1 0\n3 -1 4 1\n",  # negative weight
        "1 0\n3 5 4 2\n",  # priority flag not 0/1
        "1 0\n3 five 4 1\n",  # not an integer
        "x 0\n",  # job count not an integer
        "-1 0\n",  # negative job count
    ],
)
def test_parse_errors(content: str):
    with temp_instance(content) as path:
        with pytest.raises(MalformedInputError):
            parse_instance(path)


def test_malformed_is_value_error():
    with pytest.raises(ValueError):
        parse_instance_text("1 0\n")


def test_missing_file_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        parse_instance(tmp_path / "does_not_exist.txt")


def test_write_then_parse_keeps_instance(tmp_path, example_set):
    path = tmp_path / "copy.txt"
    write_instance(example_set, path)
    assert parse_instance(path) == example_set
    assert format_instance(example_set).splitlines()[0] == "6 6"


def test_binary_file_is_malformed(tmp_path):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe\x00binary")
    with pytest.raises(MalformedInputError):
        parse_instance(path)
