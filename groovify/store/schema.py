CURRENT_DB_VERSION = 1

SCHEMA_V1_SQL = """
CREATE TABLE IF NOT EXISTS genres (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS songs (
    id INTEGER PRIMARY KEY,
    filename TEXT NOT NULL UNIQUE,
    title TEXT,
    artist TEXT,
    album TEXT,
    year INTEGER DEFAULT 0,
    genre_id INTEGER,
    FOREIGN KEY(genre_id) REFERENCES genres(id)
);

CREATE TABLE IF NOT EXISTS clients (
    id INTEGER PRIMARY KEY,
    username TEXT NOT NULL,
    username_norm TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    password_salt TEXT NOT NULL,
    description TEXT DEFAULT '',
    image_file_name TEXT,
    created_at REAL,
    updated_at REAL
);

CREATE TABLE IF NOT EXISTS client_genres (
    client_id INTEGER NOT NULL,
    genre_id INTEGER NOT NULL,
    PRIMARY KEY (client_id, genre_id),
    FOREIGN KEY(client_id) REFERENCES clients(id),
    FOREIGN KEY(genre_id) REFERENCES genres(id)
);

CREATE TABLE IF NOT EXISTS playlists (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    client_id INTEGER,
    created_at REAL,
    updated_at REAL
);

CREATE TABLE IF NOT EXISTS playlist_songs (
    playlist_id INTEGER NOT NULL,
    song_id INTEGER NOT NULL,
    added_at REAL,
    PRIMARY KEY (playlist_id, song_id),
    FOREIGN KEY(playlist_id) REFERENCES playlists(id),
    FOREIGN KEY(song_id) REFERENCES songs(id)
);

CREATE INDEX IF NOT EXISTS idx_songs_genre ON songs(genre_id);
CREATE INDEX IF NOT EXISTS idx_playlists_client ON playlists(client_id);
CREATE INDEX IF NOT EXISTS idx_playlist_songs_playlist ON playlist_songs(playlist_id);
CREATE INDEX IF NOT EXISTS idx_client_genres_client ON client_genres(client_id);
"""
