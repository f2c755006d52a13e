import logging
import random

from groovify.config import settings

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """
    Picks a handful of random songs for a client.

    One preferred genre is drawn uniformly at random and its songs are
    shuffled. The whole catalog is used only when the client has no preferred
    genres or the drawn genre has no songs. A short genre is never topped up
    from other genres. The size never exceeds MAX_RECOMMENDATIONS, whatever
    is configured or passed in.
    """

    def __init__(self, store, rng=None, size=None):
        self.store = store
        self.rng = rng or random.Random()
        requested = settings.RECOMMENDATION_SIZE if size is None else int(size)
        self.size = max(0, min(requested, settings.MAX_RECOMMENDATIONS))

    def recommend(self, client):
        genres = list(getattr(client, "genres", None) or [])

        if genres:
            chosen = self.rng.choice(genres)
            songs = self.store.find_songs_by_genre_id(chosen.id)
            if songs:
                logger.debug(
                    "Recommending from genre '%s' (%d candidates)", chosen.name, len(songs)
                )
                return self._sample(songs)
            logger.info("Genre '%s' has no songs, falling back to full catalog", chosen.name)

        songs = self.store.find_all_songs()
        if not songs:
            logger.info("Catalog is empty, no recommendations")
            return []
        return self._sample(songs)

    def _sample(self, songs):
        unique = list({s.id: s for s in songs}.values())
        self.rng.shuffle(unique)
        return unique[: self.size]
