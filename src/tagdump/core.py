"""
TagFile - read-only view of the tag containers embedded in a media file.
Wraps mutagen: Xiph comments (FLAC/Ogg), ID3v2/ID3v1, ASF, MP4 and APEv2.
"""

import enum
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Generator, List, Optional, Set, Union

import mutagen
import mutagen.apev2 as apev2
import mutagen.asf as asf
import mutagen.flac as flac
import mutagen.id3 as id3
import mutagen.mp4 as mp4
import mutagen.oggflac as oggflac
import mutagen.oggopus as oggopus
import mutagen.oggspeex as oggspeex
import mutagen.oggtheora as oggtheora
import mutagen.oggvorbis as oggvorbis

logger = logging.getLogger(__name__)

# File types whose tags are a Vorbis comment block
XIPH_FILE_TYPES = (
    flac.FLAC,
    oggvorbis.OggVorbis,
    oggopus.OggOpus,
    oggflac.OggFLAC,
    oggspeex.OggSpeex,
    oggtheora.OggTheora,
)

ID3V1_SIZE = 128
ID3V1_MARKER = b'TAG'


class TagKind(enum.Enum):
    """Tag systems that can be detected in a file, in display order."""
    XIPH = "Xiph"
    ID3V2 = "ID3v2"
    ID3V1 = "ID3v1"
    ASF = "ASF"
    MP4 = "MP4"
    APEV2 = "APEv2"

    @property
    def label(self) -> str:
        return self.value


# Only these kinds have their contents dumped; the rest are reported by presence
DUMPABLE_KINDS = (TagKind.XIPH, TagKind.ID3V2)


class TagDumpError(Exception):
    """Base exception for tagdump errors."""
    pass

class FormatError(TagDumpError):
    """Raised when file format is unsupported or cannot be parsed."""
    pass

class UsageError(TagDumpError):
    """Raised when the command line is not usable."""
    pass

class UnsupportedTagError(TagDumpError):
    """Raised when a detected tag kind has no dump support."""
    pass


def has_id3v1_trailer(fileobj: BinaryIO) -> bool:
    """Check for the fixed 128 byte ID3v1 block at the end of the file."""
    fileobj.seek(0, os.SEEK_END)
    if fileobj.tell() < ID3V1_SIZE:
        return False
    fileobj.seek(-ID3V1_SIZE, os.SEEK_END)
    return fileobj.read(len(ID3V1_MARKER)) == ID3V1_MARKER


class TagFile:
    """
    Tags found in one parsed file.

    Holds the loaded mutagen object (or salvaged ID3 tags) plus the
    possibly-corrupt advisory collected while loading.
    """

    def __init__(self, mfile: Any, tags: Any = None, has_id3v1: bool = False,
                 corruption_reasons: Optional[List[str]] = None):
        self.mfile = mfile
        self.tags = tags if tags is not None else getattr(mfile, 'tags', None)
        self.has_id3v1 = has_id3v1
        self.corruption_reasons = list(corruption_reasons or [])

        unknown = getattr(self.tags, 'unknown_frames', None) if isinstance(self.tags, id3.ID3) else None
        if unknown:
            self.corruption_reasons.append(f"{len(unknown)} ID3v2 frame(s) could not be decoded")

    @property
    def possibly_corrupt(self) -> bool:
        return bool(self.corruption_reasons)

    @property
    def present_tag_kinds(self) -> Set[TagKind]:
        """Detect each tag system independently."""
        kinds = set()
        if self.has_id3v1:
            kinds.add(TagKind.ID3V1)
        if self.tags is None:
            return kinds

        if isinstance(self.mfile, XIPH_FILE_TYPES):
            kinds.add(TagKind.XIPH)
        # mutagen reports a v1-only tag as version (1, 1)
        if isinstance(self.tags, id3.ID3) and self.tags.version >= (2, 2, 0):
            kinds.add(TagKind.ID3V2)
        if isinstance(self.mfile, asf.ASF):
            kinds.add(TagKind.ASF)
        if isinstance(self.mfile, mp4.MP4):
            kinds.add(TagKind.MP4)
        if isinstance(self.tags, apev2.APEv2):
            kinds.add(TagKind.APEV2)
        return kinds

    def get_tag(self, kind: TagKind) -> Any:
        """
        Return the contents of one tag system.

        Xiph yields the Vorbis comment (a sequence of (key, value) pairs),
        ID3v2 yields the list of frames.

        Raises:
            KeyError: the kind is not present in this file
            UnsupportedTagError: the kind is detected but not dumped
        """
        if kind not in self.present_tag_kinds:
            raise KeyError(kind)
        if kind is TagKind.XIPH:
            return self.tags
        if kind is TagKind.ID3V2:
            return list(self.tags.values())
        raise UnsupportedTagError(f"Dumping {kind.label} tags is not supported")

    @staticmethod
    @contextmanager
    def managed(path: Union[str, Path]) -> Generator['TagFile', None, None]:
        """Open and parse a file; the handle is released on every exit path."""
        path = Path(path)
        with open(path, 'rb') as fileobj:
            logger.debug(f"Opened {path}")
            yield open_and_parse(fileobj)
        logger.debug(f"Closed {path}")


def open_and_parse(fileobj: BinaryIO, mime_hint: Optional[str] = None) -> TagFile:
    """
    Parse the tag containers of an open binary file.

    mutagen detects the format from content and name, so mime_hint is only
    recorded in the debug log. ID3 tags are read again without the ID3v1
    merge so the ID3v2 frame list only holds frames stored in the ID3v2 tag.

    Raises:
        FormatError: mutagen does not recognize the file and no tags could be salvaged
    """
    name = getattr(fileobj, 'name', '<stream>')
    if mime_hint:
        logger.debug(f"MIME hint for {name}: {mime_hint}")

    try:
        mfile = mutagen.File(fileobj)
    except mutagen.MutagenError as e:
        logger.debug(f"Full parse of {name} failed: {e}")
        tags = _salvage_id3(fileobj)
        has_id3v1 = has_id3v1_trailer(fileobj)
        if tags is None and not has_id3v1:
            raise FormatError(f"Unsupported file format or corrupted file: {e}")
        logger.warning(f"Recovered tags from damaged file {name}")
        return TagFile(None, tags=tags, has_id3v1=has_id3v1, corruption_reasons=[str(e)])

    if mfile is None:
        raise FormatError("Unsupported file format")

    logger.debug(f"Detected {type(mfile).__name__} for {name}")
    tags = mfile.tags
    if isinstance(tags, id3.ID3) and tags.version >= (2, 2, 0):
        v2_tags = _read_id3v2_only(fileobj, type(tags))
        if v2_tags is not None:
            tags = v2_tags
    return TagFile(mfile, tags=tags, has_id3v1=has_id3v1_trailer(fileobj))


def _read_id3v2_only(fileobj: BinaryIO, id3_class: type) -> Optional[id3.ID3]:
    """Re-read an ID3 tag with the ID3v1 fields left out."""
    fileobj.seek(0)
    try:
        return id3_class(fileobj, load_v1=False)
    except mutagen.MutagenError as e:
        logger.debug(f"ID3v2 re-read failed, keeping merged tags: {e}")
        return None


def _salvage_id3(fileobj: BinaryIO) -> Optional[id3.ID3]:
    """Read a standalone ID3v2 tag from a file whose stream could not be parsed."""
    fileobj.seek(0)
    try:
        return id3.ID3(fileobj, load_v1=False)
    except mutagen.MutagenError as e:
        logger.debug(f"No ID3 tag to salvage: {e}")
        return None
