import logging
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path

from groovify.config import settings
from groovify.core.errors import StoreError, UsernameConflictError
from groovify.core.models import Client, Genre, Playlist, Song
from groovify.core.validation import normalize_username
from groovify.store.schema import CURRENT_DB_VERSION, SCHEMA_V1_SQL

logger = logging.getLogger(__name__)

_CLIENT_COLUMNS = (
    "id, username, password_hash, password_salt, description, image_file_name"
)
_SONG_SELECT = """
SELECT songs.id, songs.filename, songs.title, songs.artist, songs.album,
       songs.year, songs.genre_id, genres.name AS genre_name
FROM songs
LEFT JOIN genres ON genres.id = songs.genre_id
"""


def _as_id(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _escape_like(text):
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CatalogStore:
    """
    SQLite persistence for clients, genres, songs and playlists.

    Every call opens its own connection and commits or rolls back as one unit,
    so an instance can be shared between request threads. Any sqlite failure
    surfaces as StoreError.
    """

    def __init__(self, db_path=None, timeout=None):
        self.db_path = str(db_path or settings.DB_PATH)
        self.timeout = float(timeout or settings.DB_TIMEOUT_SEC)
        self._init_db()

    def _init_db(self):
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._session() as conn:
            existing_version = int(conn.execute("PRAGMA user_version").fetchone()[0])
            if existing_version < CURRENT_DB_VERSION:
                logger.info(
                    "Migrating database %s from version %s to %s",
                    self.db_path,
                    existing_version,
                    CURRENT_DB_VERSION,
                )
                conn.executescript(SCHEMA_V1_SQL)
                conn.execute(f"PRAGMA user_version={CURRENT_DB_VERSION}")

    @contextmanager
    def _session(self):
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open database {self.db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("Store operation failed: %s", exc)
            raise StoreError(str(exc)) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # -------------------------------
    # CLIENTS
    # -------------------------------
    def _client_genres(self, conn, client_id):
        rows = conn.execute(
            """
            SELECT genres.id, genres.name
            FROM client_genres
            JOIN genres ON genres.id = client_genres.genre_id
            WHERE client_genres.client_id = ?
            ORDER BY genres.name
            """,
            (client_id,),
        ).fetchall()
        return [Genre.from_row(r) for r in rows]

    def find_clients_by_username_ci(self, username):
        norm = normalize_username(username)
        if not norm:
            return []
        with self._session() as conn:
            rows = conn.execute(
                f"SELECT {_CLIENT_COLUMNS} FROM clients WHERE username_norm = ? ORDER BY id",
                (norm,),
            ).fetchall()
            return [Client.from_row(r, self._client_genres(conn, r["id"])) for r in rows]

    def find_client_by_id(self, client_id):
        client_id = _as_id(client_id)
        if client_id is None:
            return None
        with self._session() as conn:
            row = conn.execute(
                f"SELECT {_CLIENT_COLUMNS} FROM clients WHERE id = ?",
                (client_id,),
            ).fetchone()
            if not row:
                return None
            return Client.from_row(row, self._client_genres(conn, row["id"]))

    def save_client(self, client):
        """
        Insert the client when it has no id, otherwise update it.

        Genre links are replaced when ``client.genres`` is not None. A clash on
        the normalized username raises UsernameConflictError.
        """
        norm = normalize_username(client.username)
        now = time.time()
        with self._session() as conn:
            try:
                if client.id is None:
                    cursor = conn.execute(
                        """
                        INSERT INTO clients (
                            username, username_norm, password_hash, password_salt,
                            description, image_file_name, created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            client.username,
                            norm,
                            client.password_hash,
                            client.password_salt,
                            client.description,
                            client.image_file_name,
                            now,
                            now,
                        ),
                    )
                    client.id = cursor.lastrowid
                else:
                    conn.execute(
                        """
                        UPDATE clients
                        SET username = ?, username_norm = ?, password_hash = ?,
                            password_salt = ?, description = ?, image_file_name = ?,
                            updated_at = ?
                        WHERE id = ?
                        """,
                        (
                            client.username,
                            norm,
                            client.password_hash,
                            client.password_salt,
                            client.description,
                            client.image_file_name,
                            now,
                            client.id,
                        ),
                    )
            except sqlite3.IntegrityError as exc:
                if "username_norm" in str(exc):
                    raise UsernameConflictError(client.username) from exc
                raise
            if client.genres is not None:
                conn.execute("DELETE FROM client_genres WHERE client_id = ?", (client.id,))
                conn.executemany(
                    "INSERT OR IGNORE INTO client_genres (client_id, genre_id) VALUES (?, ?)",
                    [(client.id, g.id) for g in client.genres if g.id is not None],
                )
        return client

    # -------------------------------
    # GENRES
    # -------------------------------
    def find_genre_by_name(self, name):
        text = str(name or "").strip()
        if not text:
            return None
        with self._session() as conn:
            row = conn.execute("SELECT id, name FROM genres WHERE name = ?", (text,)).fetchone()
            return Genre.from_row(row) if row else None

    def find_all_genres(self):
        with self._session() as conn:
            rows = conn.execute("SELECT id, name FROM genres ORDER BY name").fetchall()
            return [Genre.from_row(r) for r in rows]

    def find_genres_by_ids(self, genre_ids):
        ids = [i for i in (_as_id(g) for g in (genre_ids or [])) if i is not None]
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        with self._session() as conn:
            rows = conn.execute(
                f"SELECT id, name FROM genres WHERE id IN ({placeholders}) ORDER BY name",
                ids,
            ).fetchall()
            return [Genre.from_row(r) for r in rows]

    def save_genre(self, genre):
        with self._session() as conn:
            cursor = conn.execute("INSERT INTO genres (name) VALUES (?)", (genre.name,))
            genre.id = cursor.lastrowid
        return genre

    # -------------------------------
    # SONGS
    # -------------------------------
    def find_song_by_id(self, song_id):
        song_id = _as_id(song_id)
        if song_id is None:
            return None
        with self._session() as conn:
            row = conn.execute(
                f"{_SONG_SELECT} WHERE songs.id = ?",
                (song_id,),
            ).fetchone()
            return Song.from_row(row) if row else None

    def find_songs_by_genre_id(self, genre_id):
        with self._session() as conn:
            rows = conn.execute(
                f"{_SONG_SELECT} WHERE songs.genre_id = ? ORDER BY songs.id",
                (genre_id,),
            ).fetchall()
            return [Song.from_row(r) for r in rows]

    def find_all_songs(self):
        with self._session() as conn:
            rows = conn.execute(f"{_SONG_SELECT} ORDER BY songs.id").fetchall()
            return [Song.from_row(r) for r in rows]

    def find_songs_by_title_ci(self, query):
        """Songs whose title contains ``query``, ignoring case."""
        return self._find_songs_containing("songs.title", query)

    def find_songs_by_genre_name_ci(self, query):
        """Songs whose genre name contains ``query``, ignoring case."""
        return self._find_songs_containing("genres.name", query)

    def _find_songs_containing(self, column, query):
        if query is None:
            return []
        pattern = "%" + _escape_like(str(query).strip()) + "%"
        with self._session() as conn:
            rows = conn.execute(
                f"{_SONG_SELECT} WHERE {column} LIKE ? ESCAPE '\\' ORDER BY songs.id",
                (pattern,),
            ).fetchall()
            return [Song.from_row(r) for r in rows]

    def song_exists_by_filename(self, filename):
        with self._session() as conn:
            row = conn.execute("SELECT 1 FROM songs WHERE filename = ?", (filename,)).fetchone()
            return bool(row)

    def save_song(self, song):
        with self._session() as conn:
            cursor = conn.execute(
                """
                INSERT INTO songs (filename, title, artist, album, year, genre_id)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (song.filename, song.title, song.artist, song.album, song.year, song.genre_id),
            )
            song.id = cursor.lastrowid
        return song

    # -------------------------------
    # PLAYLISTS
    # -------------------------------
    def _playlist_songs(self, conn, playlist_id):
        rows = conn.execute(
            f"""
            {_SONG_SELECT}
            JOIN playlist_songs ON playlist_songs.song_id = songs.id
            WHERE playlist_songs.playlist_id = ?
            ORDER BY playlist_songs.added_at ASC, songs.id ASC
            """,
            (playlist_id,),
        ).fetchall()
        return [Song.from_row(r) for r in rows]

    def find_playlist_by_id(self, playlist_id):
        playlist_id = _as_id(playlist_id)
        if playlist_id is None:
            return None
        with self._session() as conn:
            row = conn.execute(
                "SELECT id, name, description, client_id FROM playlists WHERE id = ?",
                (playlist_id,),
            ).fetchone()
            if not row:
                return None
            return Playlist.from_row(row, self._playlist_songs(conn, row["id"]))

    def find_playlists_by_client_id(self, client_id):
        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT id, name, description, client_id FROM playlists
                WHERE client_id = ?
                ORDER BY updated_at DESC, id DESC
                """,
                (client_id,),
            ).fetchall()
            return [Playlist.from_row(r, self._playlist_songs(conn, r["id"])) for r in rows]

    def save_playlist(self, playlist):
        """
        Insert or update the playlist row and, when ``songs`` is not None,
        make the stored membership equal to it in the same transaction.

        Returns None without writing anything when an update targets a
        playlist that no longer exists.
        """
        now = time.time()
        with self._session() as conn:
            if playlist.id is None:
                cursor = conn.execute(
                    """
                    INSERT INTO playlists (name, description, client_id, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (playlist.name, playlist.description, playlist.client_id, now, now),
                )
                playlist.id = cursor.lastrowid
            else:
                cursor = conn.execute(
                    """
                    UPDATE playlists SET name = ?, description = ?, client_id = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (playlist.name, playlist.description, playlist.client_id, now, playlist.id),
                )
                if cursor.rowcount == 0:
                    logger.warning("Playlist %s no longer exists, not saved", playlist.id)
                    return None
            if playlist.songs is not None:
                song_ids = [s.id for s in playlist.songs if s.id is not None]
                if song_ids:
                    placeholders = ", ".join("?" for _ in song_ids)
                    conn.execute(
                        f"DELETE FROM playlist_songs WHERE playlist_id = ? AND song_id NOT IN ({placeholders})",
                        [playlist.id, *song_ids],
                    )
                else:
                    conn.execute("DELETE FROM playlist_songs WHERE playlist_id = ?", (playlist.id,))
                conn.executemany(
                    "INSERT OR IGNORE INTO playlist_songs (playlist_id, song_id, added_at) VALUES (?, ?, ?)",
                    [(playlist.id, sid, now) for sid in song_ids],
                )
        return playlist

    def delete_playlist(self, playlist_id):
        playlist_id = _as_id(playlist_id)
        if playlist_id is None:
            return False
        with self._session() as conn:
            conn.execute("DELETE FROM playlist_songs WHERE playlist_id = ?", (playlist_id,))
            cursor = conn.execute("DELETE FROM playlists WHERE id = ?", (playlist_id,))
            return cursor.rowcount > 0
