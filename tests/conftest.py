# tests/conftest.py
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from groovify.core.models import Genre, Playlist, Song  # noqa: E402
from groovify.store.catalog_store import CatalogStore  # noqa: E402


@pytest.fixture
def store(tmp_path):
    return CatalogStore(tmp_path / "groovify-test.sqlite3")


@pytest.fixture
def genres(store):
    rock = store.save_genre(Genre(id=None, name="Rock"))
    jazz = store.save_genre(Genre(id=None, name="Jazz"))
    return {"Rock": rock, "Jazz": jazz}


@pytest.fixture
def add_song(store):
    counter = {"n": 0}

    def _add(genre=None, title=None):
        counter["n"] += 1
        n = counter["n"]
        return store.save_song(
            Song(
                id=None,
                filename=f"track{n}.mp3",
                title=title or f"Track {n}",
                artist="Liam Smith",
                album="Demo",
                year=2020,
                genre_id=genre.id if genre else None,
            )
        )

    return _add


@pytest.fixture
def catalog(genres, add_song):
    """Two Rock songs and three Jazz songs."""
    return {
        "Rock": [add_song(genres["Rock"]) for _ in range(2)],
        "Jazz": [add_song(genres["Jazz"]) for _ in range(3)],
    }


@pytest.fixture
def playlist(store):
    return store.save_playlist(Playlist(id=None, name="Mix", description="", client_id=1, songs=[]))


@pytest.fixture
def rng():
    return random.Random(1234)
