"""
Console rendering of tag sections and FrameRecords with hard line wrapping.
"""

import logging
from typing import List, Optional, TextIO

from .core import DUMPABLE_KINDS, TagFile, TagKind
from .frames import FrameRecord, normalize_tag
from .utils import Config, get_terminal_width

logger = logging.getLogger(__name__)

SECTION_RULE = "-----------------"


def get_wrap_width(indent: int, width: Optional[int] = None) -> int:
    """
    Characters available per line after the indent.

    The terminal width is sampled on every call unless width is given.
    A width that leaves no room after the indent falls back to
    Config.DEFAULT_WIDTH, and the result is never below 1.
    """
    if width is None:
        width = get_terminal_width()
    if width <= indent:
        logger.warning(f"Width {width} too small for indent {indent}, using {Config.DEFAULT_WIDTH}")
        width = Config.DEFAULT_WIDTH
    return max(1, width - indent)


def wrap_chunks(text: str, wrap_width: int) -> List[str]:
    """Split text into consecutive chunks of at most wrap_width characters."""
    if wrap_width < 1:
        raise ValueError(f"wrap_width must be positive, got {wrap_width}")
    if not text:
        return [""]
    return [text[i:i + wrap_width] for i in range(0, len(text), wrap_width)]


def write_line_with_indent(indent: int, text: str, width: Optional[int] = None,
                           stream: Optional[TextIO] = None) -> None:
    """Write text hard-wrapped to the width, every line prefixed with indent spaces."""
    padding = " " * indent
    for chunk in wrap_chunks(text, get_wrap_width(indent, width)):
        print(f"{padding}{chunk}", file=stream)


def render_record(record: FrameRecord, stream: Optional[TextIO] = None,
                  width: Optional[int] = None) -> None:
    """Print a record header followed by one wrapped block per value."""
    count = len(record.values)
    if count == 0:
        print(f"{record.id} (No Value)", file=stream)
        return

    if count > 1:
        print(f"{record.id} ({count}):", file=stream)
    else:
        print(f"{record.id}:", file=stream)
    for value in record.values:
        write_line_with_indent(Config.VALUE_INDENT, value, width=width, stream=stream)


def render_records(records: List[FrameRecord], stream: Optional[TextIO] = None,
                   width: Optional[int] = None) -> None:
    for record in records:
        render_record(record, stream=stream, width=width)


def render_tag_file(tag_file: TagFile, stream: Optional[TextIO] = None,
                    width: Optional[int] = None) -> None:
    """
    Render every tag section found in a file.

    The corruption warning comes first. Each present kind then gets its
    own header; only Xiph and ID3v2 sections have a body.
    """
    if tag_file.possibly_corrupt:
        logger.warning(f"File may be corrupt: {'; '.join(tag_file.corruption_reasons)}")
        print("*** Warning: file is possibly corrupt", file=stream)
        for reason in tag_file.corruption_reasons:
            write_line_with_indent(Config.VALUE_INDENT, reason, width=width, stream=stream)

    present = tag_file.present_tag_kinds
    if not present:
        print("No tags found", file=stream)
        return

    for kind in TagKind:
        if kind not in present:
            continue
        print(SECTION_RULE, file=stream)
        print(f"Found {kind.label}", file=stream)
        if kind in DUMPABLE_KINDS:
            render_records(normalize_tag(kind, tag_file.get_tag(kind)), stream=stream, width=width)
        else:
            logger.info(f"{kind.label} tags detected; contents are not dumped")
