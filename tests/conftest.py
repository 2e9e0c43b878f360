"""
Pytest configuration and shared fixtures.
"""

import pytest
from pathlib import Path
from mutagen.flac import FLAC
from mutagen.id3 import ID3, TIT2, TPE1, TALB, COMM, TXXX, PRIV, APIC

from tagdump.utils import Config

# ---------- Constants ----------

# fLaC marker + last-block STREAMINFO: 4096 sample blocks, 44100 Hz, 2 channels, 16 bit
FLAC_HEADER = (
    b'fLaC'
    b'\x80\x00\x00\x22'
    b'\x10\x00\x10\x00'
    b'\x00\x00\x00\x00\x00\x00'
    b'\x0a\xc4\x42\xf0\x00\x00\x00\x00'
    + b'\x00' * 16
)

# MPEG-1 Layer III, 128 kbps, 44100 Hz, no padding: 417 bytes per frame
MPEG_FRAME = b'\xff\xfb\x90\x00' + b'\x00' * 413

# ---------- Helper Functions ----------

def make_flac(path: Path, fields: dict) -> Path:
    """Write a minimal FLAC file; a comment block is added only when fields are given."""
    path.write_bytes(FLAC_HEADER)
    if not fields:
        return path
    audio = FLAC(str(path))
    if audio.tags is None:
        audio.add_tags()
    for key, values in fields.items():
        audio.tags[key] = values
    audio.save()
    return path

def make_mp3(path: Path, frames: list, v1: bool = False) -> Path:
    """Write MPEG frames preceded by an ID3v2.4 tag (and optionally an ID3v1 trailer)."""
    path.write_bytes(MPEG_FRAME * 20)
    tags = ID3()
    for frame in frames:
        tags.add(frame)
    tags.save(str(path), v1=2 if v1 else 0)
    return path

def id3v1_block(title: str = "", artist: str = "", album: str = "", year: str = "",
                comment: str = "", genre: int = 255) -> bytes:
    """Build a raw 128 byte ID3v1 trailer."""
    def field(text, size):
        return text.encode("latin-1").ljust(size, b"\x00")[:size]
    return (b"TAG" + field(title, 30) + field(artist, 30) + field(album, 30)
            + field(year, 4) + field(comment, 30) + bytes([genre]))

# ---------- Fixtures ----------

@pytest.fixture(autouse=True)
def restore_config():
    """Config is class state; undo anything a test or load_from_env changed."""
    saved = {name: getattr(Config, name) for name in
             ('DEFAULT_WIDTH', 'VALUE_INDENT', 'DEFAULT_VERBOSE', 'LOG_DIR')}
    yield
    for name, value in saved.items():
        setattr(Config, name, value)

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ('TAGDUMP_WIDTH', 'TAGDUMP_INDENT', 'TAGDUMP_VERBOSE', 'TAGDUMP_LOG_DIR', 'COLUMNS'):
        monkeypatch.delenv(var, raising=False)

@pytest.fixture
def flac_file(tmp_path):
    """FLAC file with a multi-value ARTIST and a single TITLE."""
    return make_flac(tmp_path / "song.flac", {"ARTIST": ["A", "B"], "TITLE": ["Song"]})

@pytest.fixture
def mp3_file(tmp_path):
    """MP3 file with one frame of every kind the normalizer distinguishes."""
    frames = [
        TIT2(encoding=3, text=["Song"]),
        TPE1(encoding=3, text=["A", "B"]),
        TALB(encoding=3, text=["Album"]),
        COMM(encoding=3, lang='eng', desc='', text=["Nice track"]),
        TXXX(encoding=3, desc='Replay Gain', text=["-6.5 dB"]),
        PRIV(owner='tagdump', data=b'private'),
        APIC(encoding=3, mime='image/png', type=3, desc='Cover', data=b'\x89PNG\r\n\x1a\n'),
    ]
    return make_mp3(tmp_path / "song.mp3", frames)

@pytest.fixture
def mixed_id3_file(tmp_path):
    """MP3 whose ID3v1 trailer carries an artist and year the ID3v2 tag lacks."""
    path = make_mp3(tmp_path / "mixed.mp3", [TIT2(encoding=3, text=["Song"])])
    with open(path, "ab") as f:
        f.write(id3v1_block(title="Song", artist="V1 Only Artist", year="2001"))
    return path

@pytest.fixture
def v1_only_mp3_file(tmp_path):
    """MPEG frames followed by an ID3v1 trailer and no ID3v2 tag."""
    path = tmp_path / "v1.mp3"
    path.write_bytes(MPEG_FRAME * 20 + id3v1_block(artist="Old Artist"))
    return path

@pytest.fixture
def not_audio_file(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("just some text, not a media file\n" * 10)
    return path

@pytest.fixture
def flac_factory(tmp_path):
    """Build FLAC files: flac_factory(name, fields)."""
    return lambda name, fields: make_flac(tmp_path / name, fields)

@pytest.fixture
def mp3_factory(tmp_path):
    """Build MP3 files: mp3_factory(name, frames, v1=False)."""
    return lambda name, frames, v1=False: make_mp3(tmp_path / name, frames, v1=v1)
