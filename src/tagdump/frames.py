"""
Frame normalization: maps Xiph fields and ID3v2 frames to FrameRecords.
"""

from collections.abc import Mapping
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List, NamedTuple

import mutagen.id3 as id3

from .core import TagKind, UnsupportedTagError

UNKNOWN_FRAME_VALUE = "-UNKNOWN FRAME TYPE-"
PICTURE_FRAME_VALUE = "[Attached Picture Frame]"
COMMENT_SEPARATOR = "; "


class FrameRecord(NamedTuple):
    """One displayable tag field: an id and zero or more values."""
    id: str
    values: List[str]


def _frame_id(frame: Any) -> str:
    frame_id = getattr(frame, 'FrameID', None) or type(frame).__name__
    if isinstance(frame_id, bytes):
        frame_id = frame_id.decode('ascii', errors='replace')
    return frame_id

def _text_values(frame: Any) -> List[str]:
    return [str(t) for t in frame.text]

def _normalize_text(frame: Any) -> FrameRecord:
    return FrameRecord(_frame_id(frame), _text_values(frame))

def _normalize_comment(frame: id3.COMM) -> FrameRecord:
    # mutagen keeps comment text as a list; show it as a single value
    return FrameRecord(_frame_id(frame), [COMMENT_SEPARATOR.join(_text_values(frame))])

def _normalize_private(frame: id3.PRIV) -> FrameRecord:
    return FrameRecord(_frame_id(frame), [bytes(frame.data).decode('ascii', errors='replace')])

def _normalize_picture(frame: id3.APIC) -> FrameRecord:
    return FrameRecord(_frame_id(frame), [PICTURE_FRAME_VALUE])

def _normalize_user_text(frame: id3.TXXX) -> FrameRecord:
    return FrameRecord(f"{_frame_id(frame)} ({frame.desc})", _text_values(frame))

def _normalize_paired_text(frame: id3.PairedTextFrame) -> FrameRecord:
    return FrameRecord(_frame_id(frame), [f"{role}: {name}" for role, name in frame.people])


# Keyed by exact frame class; subclasses do not inherit a handler
FRAME_HANDLERS: Dict[type, Callable[[Any], FrameRecord]] = {
    id3.COMM: _normalize_comment,
    id3.PRIV: _normalize_private,
    id3.APIC: _normalize_picture,
    id3.TXXX: _normalize_user_text,
}


def normalize_frame(frame: Any) -> FrameRecord:
    """
    Convert one ID3v2 frame to a FrameRecord.

    Total over all inputs: frames without a handler get the
    UNKNOWN_FRAME_VALUE placeholder instead of raising.
    """
    handler = FRAME_HANDLERS.get(type(frame))
    if handler is None and isinstance(frame, id3.TextFrame):
        # every text-information frame (TIT2, TPE1, ...) is its own TextFrame subclass
        handler = _normalize_text
    elif handler is None and isinstance(frame, id3.PairedTextFrame):
        # TIPL, TMCL and IPLS hold (role, name) pairs instead of plain text
        handler = _normalize_paired_text
    if handler is None:
        return FrameRecord(_frame_id(frame), [UNKNOWN_FRAME_VALUE])
    return handler(frame)


def normalize_id3_frames(frames: Iterable[Any]) -> List[FrameRecord]:
    """Normalize ID3v2 frames and sort by id; frames sharing an id keep their input order."""
    return sorted((normalize_frame(f) for f in frames), key=attrgetter('id'))


def normalize_xiph_fields(fields: Any) -> List[FrameRecord]:
    """
    Normalize a Xiph comment into one record per distinct field name, sorted by name.

    Args:
        fields: a mapping of field name to value list, or a sequence of
            (name, value) pairs such as mutagen's VCommentDict

    Returns:
        Records whose values keep the source order; a mapping entry with an
        empty list gives a record with no values.
    """
    grouped: Dict[str, List[str]] = {}
    if isinstance(fields, Mapping):
        for key, values in fields.items():
            if isinstance(values, (str, bytes)):
                values = [values]
            grouped[str(key)] = [str(v) for v in values]
    else:
        for key, value in fields:
            grouped.setdefault(str(key), []).append(str(value))

    return sorted((FrameRecord(k, v) for k, v in grouped.items()), key=attrgetter('id'))


def normalize_tag(kind: TagKind, container: Any) -> List[FrameRecord]:
    """
    Dispatch a tag container to the normalizer for its kind.

    Raises:
        UnsupportedTagError: the kind is only reported by presence
    """
    if kind is TagKind.XIPH:
        return normalize_xiph_fields(container)
    if kind is TagKind.ID3V2:
        return normalize_id3_frames(container)
    raise UnsupportedTagError(f"Dumping {kind.label} tags is not supported")
