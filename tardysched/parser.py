"""Reading and writing instance files.

Format::

    <n> <K>
    <length> <weight> <deadline> <is_priority>   # n lines, flag is 0 or 1

Blank lines and ``#`` comments are ignored. Job ids are assigned in line
order starting at 0.
"""

from __future__ import annotations

from pathlib import Path

from tardysched.models import JobSet


class MalformedInputError(ValueError):
    """Instance text is missing counts or per-job fields."""


def _clean_lines(text: str) -> list[tuple[int, list[str]]]:
    lines = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        content = raw.split("#", 1)[0].strip()
        if content:
            lines.append((lineno, content.split()))
    return lines


def _to_int(token: str, lineno: int, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise MalformedInputError(f"line {lineno}: {what} is not an integer: {token!r}") from None


def parse_instance_text(text: str) -> JobSet:
    """Parse instance text into a :class:`JobSet`.

    Raises:
        MalformedInputError: If the header is not ``n K``, a job line does
            not hold exactly four integers, a value is out of range or the
            number of job lines differs from ``n``.
    """
    lines = _clean_lines(text)
    if not lines:
        raise MalformedInputError("empty instance: missing '<n> <K>' header")

    lineno, header = lines[0]
    if len(header) != 2:
        raise MalformedInputError(f"line {lineno}: header must be '<n> <K>', got {len(header)} values")
    n = _to_int(header[0], lineno, "job count")
    weight_limit = _to_int(header[1], lineno, "weight limit")
    if n < 0:
        raise MalformedInputError(f"line {lineno}: job count cannot be negative ({n})")

    job_lines = lines[1:]
    if len(job_lines) != n:
        raise MalformedInputError(f"declared {n} jobs but found {len(job_lines)} job lines")

    rows = []
    for lineno, tokens in job_lines:
        if len(tokens) != 4:
            raise MalformedInputError(
                f"line {lineno}: expected 'length weight deadline is_priority', "
                f"got {len(tokens)} values"
            )
        length = _to_int(tokens[0], lineno, "length")
        weight = _to_int(tokens[1], lineno, "weight")
        deadline = _to_int(tokens[2], lineno, "deadline")
        flag = _to_int(tokens[3], lineno, "priority flag")
        if length <= 0:
            raise MalformedInputError(f"line {lineno}: length must be positive ({length})")
        if weight < 0:
            raise MalformedInputError(f"line {lineno}: weight cannot be negative ({weight})")
        if flag not in (0, 1):
            raise MalformedInputError(f"line {lineno}: priority flag must be 0 or 1 ({flag})")
        rows.append((length, weight, deadline, flag))

    return JobSet.from_rows(rows, weight_limit)


def parse_instance(file_path: str | Path) -> JobSet:
    """Load an instance file. ``OSError`` propagates for unreadable paths.

    Raises:
        MalformedInputError: If the file is not UTF-8 text or its content
            is malformed.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            text = f.read()
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"instance file is not UTF-8 text: {e}") from e
    return parse_instance_text(text)


def format_instance(job_set: JobSet) -> str:
    lines = [f"{job_set.size} {job_set.weight_limit}"]
    for job in job_set:
        lines.append(f"{job.length} {job.weight} {job.deadline} {int(job.is_priority)}")
    return "\n".join(lines) + "\n"


def write_instance(job_set: JobSet, file_path: str | Path) -> None:
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(format_instance(job_set))
