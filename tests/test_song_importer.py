from types import SimpleNamespace

import pytest

from groovify.catalog import song_importer
from groovify.catalog.song_importer import SongImporter, format_title, parse_year

TAGS = {
    "Tagged.mp3": {"title": ["Blue in Green"], "artist": ["Miles Davis"], "album": ["Kind of Blue"], "date": ["1959-08-17"]},
    "NoTagsAtAll.mp3": {},
}


@pytest.fixture(autouse=True)
def fake_mutagen(monkeypatch):
    def fake_file(path, easy=False):
        name = path.rsplit("/", 1)[-1]
        if name.startswith("broken"):
            return None
        return SimpleNamespace(tags=TAGS.get(name, {}))

    monkeypatch.setattr(song_importer, "MutagenFile", fake_file)


@pytest.fixture
def music_dir(tmp_path, genres):
    root = tmp_path / "music"
    (root / "Jazz").mkdir(parents=True)
    (root / "Polka").mkdir()
    for name in ("Tagged.mp3", "NoTagsAtAll.mp3", "broken.mp3", "cover.jpg"):
        (root / "Jazz" / name).write_bytes(b"")
    (root / "Polka" / "Accordion.mp3").write_bytes(b"")
    return root


def test_format_title_and_year():
    assert format_title("SomeSongTitle.mp3") == "Some Song Title"
    assert format_title("already spaced.mp3") == "already spaced"
    assert parse_year("1959-08-17") == 1959
    assert parse_year(None) == 0
    assert parse_year("n/a") == 0


def test_import_songs(store, music_dir, genres):
    imported = SongImporter(store).import_songs(music_dir)

    assert imported == 2
    songs = {s.filename: s for s in store.find_all_songs()}
    assert set(songs) == {"Tagged.mp3", "NoTagsAtAll.mp3"}

    tagged = songs["Tagged.mp3"]
    assert (tagged.title, tagged.artist, tagged.album, tagged.year) == (
        "Blue in Green",
        "Miles Davis",
        "Kind of Blue",
        1959,
    )
    assert tagged.genre_id == genres["Jazz"].id

    untagged = songs["NoTagsAtAll.mp3"]
    assert untagged.title == "No Tags At All"
    assert untagged.artist == "Unknown"
    assert untagged.album == "Unknown"
    assert untagged.year == 0


def test_import_skips_existing_filenames(store, music_dir):
    importer = SongImporter(store)
    assert importer.import_songs(music_dir) == 2
    assert importer.import_songs(music_dir) == 0
    assert len(store.find_all_songs()) == 2


def test_missing_or_empty_music_dir(store, tmp_path):
    importer = SongImporter(store)
    assert importer.import_songs(tmp_path / "nowhere") == 0
    assert importer.import_songs(tmp_path) == 0
