"""Transcript line classification.

A transcript is the ordered log of ``cd``/``ls`` commands and the listing
output they produced. Each trimmed, non-empty line is classified into one of
a closed set of line variants, which the directory tree builder then replays.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

PROMPT = "$"
PARENT_DIRECTORY = ".."


class MalformedSizeError(ValueError):
    """Raised when a file listing's size field cannot be parsed.

    A corrupt size would silently poison every ancestor's rollup, so this
    aborts the whole parse instead of skipping the line.

    Args:
        line: The offending transcript line.
        line_number: 1-based position of the line, if known.
    """

    def __init__(self, line: str, line_number: int | None = None):
        self.line = line
        self.line_number = line_number
        location = f" at line {line_number}" if line_number is not None else ""
        super().__init__(f"Malformed size in listing{location}: {line!r}")


class _Line(BaseModel):
    model_config = ConfigDict(frozen=True)


class EnterDirectory(_Line):
    """``cd <name>`` where name is not ``..``."""

    kind: Literal["enter_directory"] = "enter_directory"
    name: str = Field(min_length=1, description="Directory being entered")


class LeaveDirectory(_Line):
    """``cd ..``."""

    kind: Literal["leave_directory"] = "leave_directory"


class ListedDirectory(_Line):
    """``dir <name>`` line from an ``ls`` listing."""

    kind: Literal["listed_directory"] = "listed_directory"
    name: str = Field(min_length=1, description="Listed directory name")


class ListedFile(_Line):
    """``<size> <name>`` line from an ``ls`` listing."""

    kind: Literal["listed_file"] = "listed_file"
    name: str = Field(min_length=1, description="Listed file name")
    size: int = Field(ge=0, description="File size in bytes")


class Unknown(_Line):
    """Any line carrying no structural information (e.g. a bare ``ls``)."""

    kind: Literal["unknown"] = "unknown"
    text: str = Field(default="", description="The raw line")


TranscriptLine = Annotated[
    Union[EnterDirectory, LeaveDirectory, ListedDirectory, ListedFile, Unknown],
    Field(discriminator="kind"),
]


def classify_line(line: str, line_number: int | None = None) -> TranscriptLine:
    """Classify a single trimmed, non-empty transcript line.

    Args:
        line: The line to classify.
        line_number: Optional 1-based position, used in error messages.

    Returns:
        The line variant the text matches.

    Raises:
        MalformedSizeError: If the line looks like a file listing but its
            size does not parse as an integer.
    """
    fields = line.split()
    # Only cd changes the tree; other prompted commands stay whole and fall
    # through to Unknown
    if fields[:1] == [PROMPT] and fields[1:2] == ["cd"]:
        fields = fields[1:]

    if len(fields) != 2:
        return Unknown(text=line)

    head, name = fields
    if head == "cd":
        if name == PARENT_DIRECTORY:
            return LeaveDirectory()
        return EnterDirectory(name=name)
    if head == "dir":
        return ListedDirectory(name=name)
    if head.isdigit():
        # isdigit() accepts characters such as superscripts that int() rejects
        try:
            size = int(head)
        except ValueError as e:
            raise MalformedSizeError(line, line_number) from e
        return ListedFile(name=name, size=size)

    return Unknown(text=line)


def prepare_lines(text: str, skip_header: bool = True) -> list[str]:
    """Turn raw transcript text into the lines the lexer expects.

    Lines are trimmed and empty lines dropped. The first remaining line is
    the ``cd /`` that opens every transcript; the root is created implicitly,
    so it is skipped unless ``skip_header`` is False.

    Args:
        text: Newline-separated transcript.
        skip_header: Whether to drop the first non-empty line.

    Returns:
        Trimmed, non-empty lines in transcript order.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if skip_header and lines:
        header = lines[0]
        if header.split()[-2:] != ["cd", "/"]:
            logger.debug(f"Skipping transcript header that is not 'cd /': {header!r}")
        lines = lines[1:]
    return lines


def lex_transcript(lines: Iterable[str]) -> Iterator[TranscriptLine]:
    """Classify every line of a prepared transcript in order.

    Args:
        lines: Trimmed, non-empty lines.

    Yields:
        One classified line per input line.
    """
    for number, line in enumerate(lines, start=1):
        yield classify_line(line, line_number=number)
