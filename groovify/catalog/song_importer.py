"""
Bulk import of MP3 files into the song catalog.

Expected layout is one folder per genre::

    <music_dir>/Rock/SomeSong.mp3
    <music_dir>/Jazz/OtherSong.mp3

Folder names must match a stored genre. Tags are read with mutagen; missing
tags fall back to the file name or "Unknown".
"""

import logging
import re
import time
from pathlib import Path

from mutagen import File as MutagenFile
from mutagen import MutagenError

from groovify.config import settings
from groovify.core.models import Song

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3"}
UNKNOWN = "Unknown"

_CAMEL_SPLIT_RE = re.compile(r"(?<!^)(?=[A-Z])")


def format_title(filename):
    """'SomeSongTitle.mp3' -> 'Some Song Title'."""
    stem = Path(filename).stem
    return re.sub(r"\s+", " ", _CAMEL_SPLIT_RE.sub(" ", stem)).strip()


def parse_year(raw):
    digits = re.sub(r"\D+", "", str(raw or ""))[:4]
    return int(digits) if digits else 0


def _first(tags, key):
    value = tags.get(key) if tags is not None else None
    if not value:
        return None
    if isinstance(value, list):
        value = value[0] if value else None
    text = str(value or "").strip()
    return text or None


def read_tags(path):
    """Return (title, artist, album, year) for ``path``; raises MutagenError on unreadable files."""
    audio = MutagenFile(str(path), easy=True)
    if audio is None:
        raise MutagenError(f"Cannot parse file: {path}")
    tags = audio.tags or {}
    title = _first(tags, "title") or format_title(Path(path).name)
    artist = _first(tags, "artist") or UNKNOWN
    album = _first(tags, "album") or UNKNOWN
    year = parse_year(_first(tags, "date"))
    return title, artist, album, year


class SongImporter:
    def __init__(self, store):
        self.store = store

    def import_songs(self, music_dir=None):
        start_time = time.time()
        root = Path(music_dir or settings.MUSIC_DIR)
        if not root.is_dir():
            logger.error("Music directory not found: '%s'", root.resolve())
            return 0

        genre_folders = sorted(p for p in root.iterdir() if p.is_dir())
        if not genre_folders:
            logger.warning("No genre folders found in '%s'", root.resolve())
            return 0

        imported = 0
        for folder in genre_folders:
            genre = self.store.find_genre_by_name(folder.name)
            if genre is None:
                logger.warning("Genre '%s' not found in database, skipping folder", folder.name)
                continue

            files = sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in AUDIO_EXTS)
            if not files:
                logger.warning("No MP3 files found in '%s'", folder)
                continue

            for path in files:
                if self._import_file(path, genre):
                    imported += 1

        logger.info(
            "Imported %d songs from '%s' in %dms",
            imported,
            root,
            int((time.time() - start_time) * 1000),
        )
        return imported

    def _import_file(self, path, genre):
        if self.store.song_exists_by_filename(path.name):
            logger.warning("File '%s' already exists", path.name)
            return False
        try:
            title, artist, album, year = read_tags(path)
        except (MutagenError, OSError) as exc:
            logger.error("Error reading '%s': %s", path.name, exc)
            return False

        self.store.save_song(
            Song(
                id=None,
                filename=path.name,
                title=title,
                artist=artist,
                album=album,
                year=year,
                genre_id=genre.id,
            )
        )
        logger.info(
            "Imported '%s': '%s', Artist='%s', Genre='%s'", path.name, title, artist, genre.name
        )
        return True
