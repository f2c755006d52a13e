import logging

from groovify.core.results import MembershipError, MembershipResult

logger = logging.getLogger(__name__)


class PlaylistMembership:
    """
    Adds and removes songs on playlists.

    Adding is strict: a missing playlist or song is reported. Removing is
    always safe to retry and never reports a missing playlist.
    """

    def __init__(self, store):
        self.store = store

    def add_song(self, playlist_id, song_id):
        logger.info("Adding song %s to playlist %s", song_id, playlist_id)
        playlist = self.store.find_playlist_by_id(playlist_id)
        if playlist is None:
            logger.warning("Playlist %s not found", playlist_id)
            return MembershipResult.failure(MembershipError.PLAYLIST_NOT_FOUND)

        song = self.store.find_song_by_id(song_id)
        if song is None:
            logger.warning("Song %s not found", song_id)
            return MembershipResult.failure(MembershipError.SONG_NOT_FOUND)

        if playlist.songs is None:
            playlist.songs = []

        if playlist.has_song(song.id):
            logger.info("Song %s is already in playlist %s", song_id, playlist_id)
            return MembershipResult.success(changed=False)

        playlist.songs.append(song)
        if self.store.save_playlist(playlist) is None:
            logger.warning("Playlist %s was deleted while adding song %s", playlist_id, song_id)
            return MembershipResult.failure(MembershipError.PLAYLIST_NOT_FOUND)
        logger.info("Song %s added to playlist %s", song_id, playlist_id)
        return MembershipResult.success(changed=True)

    def remove_song(self, playlist_id, song_id):
        logger.info("Removing song %s from playlist %s", song_id, playlist_id)
        playlist = self.store.find_playlist_by_id(playlist_id)
        if playlist is None:
            logger.info("Playlist %s not found, nothing to remove", playlist_id)
            return MembershipResult.success(changed=False)

        target = _as_song_id(song_id)
        if not playlist.songs or target is None or not playlist.has_song(target):
            return MembershipResult.success(changed=False)

        playlist.songs = [s for s in playlist.songs if s.id != target]
        if self.store.save_playlist(playlist) is None:
            return MembershipResult.success(changed=False)
        logger.info("Song %s removed from playlist %s", song_id, playlist_id)
        return MembershipResult.success(changed=True)

    def get_songs(self, playlist_id):
        if playlist_id is None:
            logger.error("Playlist id is null")
            return []
        playlist = self.store.find_playlist_by_id(playlist_id)
        if playlist is None:
            logger.warning("Playlist %s not found", playlist_id)
            return []
        return list(playlist.songs or [])


def _as_song_id(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
