import logging

from groovify.catalog.genre_seeder import GenreSeeder
from groovify.catalog.song_importer import SongImporter
from groovify.config import settings
from groovify.store.catalog_store import CatalogStore
from groovify.web_api.web_app import create_app


def run_imports(store) -> None:
    """Seed genres and pull MP3s from MUSIC_DIR before serving."""
    logging.info("[startup] Seeding genres...")
    created = GenreSeeder(store).import_genres(settings.SEED_GENRES)
    logging.info("[startup] Genre import complete (%d new).", created)

    logging.info("[startup] Importing songs from %s...", settings.MUSIC_DIR)
    imported = SongImporter(store).import_songs(settings.MUSIC_DIR)
    logging.info("[startup] MP3 import complete (%d new).", imported)


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="[%(levelname)s] %(asctime)s %(message)s",
    )
    logging.getLogger("werkzeug").setLevel(logging.ERROR)

    store = CatalogStore(settings.DB_PATH)
    if settings.IMPORT_ON_STARTUP:
        run_imports(store)

    app = create_app(store)
    logging.info("[startup] Groovify ready at http://127.0.0.1:%s", settings.API_PORT)
    app.run(debug=False, use_reloader=False, port=settings.API_PORT, host=settings.API_HOST)
