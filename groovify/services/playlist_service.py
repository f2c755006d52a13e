import logging

from groovify.core.errors import StoreError
from groovify.core.models import Playlist

logger = logging.getLogger(__name__)


class PlaylistService:
    """Playlist create/read/delete. Song membership lives in PlaylistMembership."""

    def __init__(self, store):
        self.store = store

    def get_playlists_by_client_id(self, client_id):
        logger.info("Getting playlists for user %s", client_id)
        return self.store.find_playlists_by_client_id(client_id)

    def get_playlist(self, playlist_id):
        if playlist_id is None:
            logger.error("Playlist id is null")
            return None
        return self.store.find_playlist_by_id(playlist_id)

    def create_playlist(self, client_id, name, description=""):
        playlist_name = str(name or "").strip()
        if client_id is None:
            logger.error("Playlist titled %s has null client id", playlist_name)
            return None
        if not playlist_name:
            logger.error("Playlist for client %s has no name", client_id)
            return None

        playlist = Playlist(
            id=None,
            name=playlist_name,
            description=str(description or "").strip(),
            client_id=client_id,
            songs=[],
        )
        try:
            saved = self.store.save_playlist(playlist)
        except StoreError:
            logger.exception("Error while saving playlist %s", playlist_name)
            return None
        logger.info("Playlist %s saved", saved.id)
        return saved

    def delete_playlist(self, playlist_id):
        logger.info("Deleting playlist %s", playlist_id)
        deleted = self.store.delete_playlist(playlist_id)
        if not deleted:
            logger.warning("Playlist %s not found", playlist_id)
        return deleted
