import logging

from groovify.core.models import Genre

logger = logging.getLogger(__name__)


class GenreSeeder:
    """Creates genres by name, skipping blanks and names already stored."""

    def __init__(self, store):
        self.store = store

    def import_genres(self, names):
        created = 0
        for name in names or []:
            if name is None or not str(name).strip():
                logger.debug("Skipping null or empty genre name")
                continue
            if self.save_genre(name):
                created += 1
        return created

    def genre_exists(self, name):
        if name is None or not str(name).strip():
            return False
        return self.store.find_genre_by_name(str(name).strip()) is not None

    def save_genre(self, name):
        if name is None or not str(name).strip():
            logger.warning("Cannot save genre: name is null or empty")
            return False
        if self.genre_exists(name):
            logger.debug("Genre '%s' already exists, skipping", name)
            return False
        self.store.save_genre(Genre(id=None, name=str(name).strip()))
        logger.info("Saved new genre '%s'", name)
        return True
