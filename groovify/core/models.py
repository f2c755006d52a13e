from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import sqlite3


@dataclass
class Genre:
    id: Optional[int]
    name: str

    @staticmethod
    def from_row(row: sqlite3.Row) -> "Genre":
        return Genre(id=row["id"], name=str(row["name"] or ""))

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass
class Song:
    id: Optional[int]
    filename: str
    title: str
    artist: str = "Unknown"
    album: str = "Unknown"
    year: int = 0
    genre_id: Optional[int] = None
    genre_name: Optional[str] = None

    @staticmethod
    def from_row(row: sqlite3.Row) -> "Song":
        return Song(
            id=row["id"],
            filename=str(row["filename"] or ""),
            title=str(row["title"] or ""),
            artist=str(row["artist"] or ""),
            album=str(row["album"] or ""),
            year=int(row["year"] or 0),
            genre_id=row["genre_id"],
            genre_name=row["genre_name"] if "genre_name" in row.keys() else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "filename": self.filename,
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "year": self.year,
            "genre_id": self.genre_id,
            "genre_name": self.genre_name or "Unknown",
        }


@dataclass
class Client:
    id: Optional[int]
    username: str
    password_hash: str = ""
    password_salt: str = ""
    description: str = ""
    image_file_name: str = ""
    genres: Optional[List[Genre]] = field(default_factory=list)

    @staticmethod
    def from_row(row: sqlite3.Row, genres: Optional[List[Genre]] = None) -> "Client":
        return Client(
            id=row["id"],
            username=str(row["username"] or ""),
            password_hash=str(row["password_hash"] or ""),
            password_salt=str(row["password_salt"] or ""),
            description=str(row["description"] or ""),
            image_file_name=str(row["image_file_name"] or ""),
            genres=list(genres or []),
        )

    def to_public_dict(self) -> dict:
        # Never expose the hash or the salt.
        return {
            "id": self.id,
            "username": self.username,
            "description": self.description,
            "image_file_name": self.image_file_name,
            "genres": [g.to_dict() for g in (self.genres or [])],
        }


@dataclass
class Playlist:
    id: Optional[int]
    name: str
    description: str = ""
    client_id: Optional[int] = None
    # None means membership has not been loaded or initialized yet.
    songs: Optional[List[Song]] = None

    @staticmethod
    def from_row(row: sqlite3.Row, songs: Optional[List[Song]] = None) -> "Playlist":
        return Playlist(
            id=row["id"],
            name=str(row["name"] or ""),
            description=str(row["description"] or ""),
            client_id=row["client_id"],
            songs=songs,
        )

    def has_song(self, song_id) -> bool:
        return any(s.id == song_id for s in (self.songs or []))

    def to_dict(self, include_songs=True) -> dict:
        payload = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "client_id": self.client_id,
        }
        if include_songs:
            payload["songs"] = [s.to_dict() for s in (self.songs or [])]
        return payload
