import logging

logger = logging.getLogger(__name__)


class SongService:
    """Catalog reads and case-insensitive substring search over songs."""

    def __init__(self, store):
        self.store = store

    def get_all_songs(self):
        return self.store.find_all_songs()

    def get_song(self, song_id):
        return self.store.find_song_by_id(song_id)

    def search_songs_by_title(self, query):
        return self.store.find_songs_by_title_ci(query)

    def search_songs_by_genre(self, genre):
        return self.store.find_songs_by_genre_name_ci(genre)

    def search(self, query, search_type="title"):
        """
        Search by ``"genre"`` or ``"title"`` (case-insensitive). Any other type
        falls back to a title search. A missing query matches nothing.
        """
        if query is None:
            return []
        kind = str(search_type or "").strip().lower()
        if kind == "genre":
            songs = self.search_songs_by_genre(query)
        else:
            kind = "title"
            songs = self.search_songs_by_title(query)
        logger.debug("Found %d songs for %s query '%s'", len(songs), kind, query)
        return songs
