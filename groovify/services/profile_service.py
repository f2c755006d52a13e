import logging

from groovify.core.errors import StoreError, UsernameConflictError
from groovify.core.results import ProfileUpdateError, ProfileUpdateResult
from groovify.core.validation import clean_username, normalize_username

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, store):
        self.store = store

    def get_client(self, client_id):
        return self.store.find_client_by_id(client_id)

    def get_client_by_username(self, username):
        matches = self.store.find_clients_by_username_ci(username)
        return matches[0] if matches else None

    def get_all_genres(self):
        logger.debug("Fetching all genres")
        return self.store.find_all_genres()

    def is_username_taken(self, username, current_username):
        """True when another client already uses ``username`` (case-insensitive)."""
        current = normalize_username(current_username)
        taken = any(
            normalize_username(c.username) != current
            for c in self.store.find_clients_by_username_ci(username)
        )
        logger.debug("Username '%s' taken: %s", username, taken)
        return taken

    def update_profile(self, client_id, username, description=None, image_file_name=None, genre_ids=None):
        """
        Apply name, description, image and preferred genres to a client.

        The password is never touched. Preferred genres are left alone when
        ``genre_ids`` is None; an empty list clears them. Unknown genre ids are
        dropped silently.
        """
        logger.debug("Attempting to update profile for client %s", client_id)
        client = self.store.find_client_by_id(client_id)
        if client is None:
            logger.warning("Client %s not found, profile update aborted", client_id)
            return ProfileUpdateResult(error=ProfileUpdateError.CLIENT_NOT_FOUND)

        name = clean_username(username)
        if name is None:
            return ProfileUpdateResult(error=ProfileUpdateError.INVALID_USERNAME)
        if self.is_username_taken(name, client.username):
            logger.warning("Profile update rejected: username '%s' already exists", name)
            return ProfileUpdateResult(error=ProfileUpdateError.USERNAME_TAKEN)

        client.username = name
        if description is not None:
            client.description = str(description).strip()
        if image_file_name is not None and str(image_file_name).strip():
            client.image_file_name = str(image_file_name).strip()
        if genre_ids is not None:
            client.genres = self.store.find_genres_by_ids(genre_ids)

        try:
            saved = self.store.save_client(client)
        except UsernameConflictError:
            return ProfileUpdateResult(error=ProfileUpdateError.USERNAME_TAKEN)
        except StoreError as exc:
            logger.error("Error updating profile for client %s: %s", client_id, exc)
            return ProfileUpdateResult(error=ProfileUpdateError.PERSISTENCE_ERROR)

        logger.info("Profile updated successfully for '%s'", name)
        return ProfileUpdateResult(client=saved)
