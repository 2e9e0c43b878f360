"""tagdump – print the metadata tags embedded in a media file."""

__version__ = "0.1.0"

from .core import (TagFile, TagKind, TagDumpError, FormatError, UsageError,
                   UnsupportedTagError, open_and_parse)
from .frames import FrameRecord, normalize_frame, normalize_id3_frames, normalize_xiph_fields
from .render import render_record, render_tag_file, write_line_with_indent
from .utils import Config

__all__ = [
    "TagFile",
    "TagKind",
    "TagDumpError",
    "FormatError",
    "UsageError",
    "UnsupportedTagError",
    "open_and_parse",
    "FrameRecord",
    "normalize_frame",
    "normalize_id3_frames",
    "normalize_xiph_fields",
    "render_record",
    "render_tag_file",
    "write_line_with_indent",
    "Config"
]
