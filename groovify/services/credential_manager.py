import logging

from groovify.config import settings
from groovify.core import passwords
from groovify.core.errors import StoreError, UsernameConflictError
from groovify.core.models import Client
from groovify.core.results import RegistrationError, RegistrationResult
from groovify.core.validation import blank_to_default, clean_username, is_password_present

logger = logging.getLogger(__name__)


class CredentialManager:
    """
    Registers clients and verifies their passwords.

    Registration runs a fixed pipeline and stops at the first failing step:
    username shape, username availability, password presence, salt and hash,
    defaults, persistence. Expected failures come back as a RegistrationResult,
    never as an exception.
    """

    def __init__(self, store):
        self.store = store

    def register(self, username, raw_password, description=None, image_file_name=None):
        logger.info("User '%s' attempting to register", username)

        name = clean_username(username)
        if name is None:
            logger.warning("Registration rejected: invalid username '%s'", username)
            return RegistrationResult.failure(RegistrationError.INVALID_USERNAME)

        try:
            available = self._is_username_available(name)
        except StoreError as exc:
            logger.error("Error checking username '%s': %s", name, exc)
            return RegistrationResult.failure(RegistrationError.PERSISTENCE_ERROR)
        if not available:
            logger.warning("Username '%s' already exists", name)
            return RegistrationResult.failure(RegistrationError.USERNAME_TAKEN)

        if not is_password_present(raw_password):
            logger.warning("Password is null or blank for user '%s'", name)
            return RegistrationResult.failure(RegistrationError.INVALID_PASSWORD)

        salt = passwords.generate_salt()
        client = Client(
            id=None,
            username=name,
            password_hash=passwords.hash_password(raw_password, salt),
            password_salt=salt,
            description=blank_to_default(description, ""),
            image_file_name=blank_to_default(image_file_name, settings.DEFAULT_IMAGE_FILE_NAME),
            genres=[],
        )
        logger.debug("Password hashed and defaults applied for '%s'", name)

        try:
            saved = self.store.save_client(client)
        except UsernameConflictError:
            # Lost the race against a concurrent registration with the same name.
            logger.warning("Username '%s' was taken while registering", name)
            return RegistrationResult.failure(RegistrationError.USERNAME_TAKEN)
        except StoreError as exc:
            logger.error("Error saving user '%s': %s", name, exc)
            return RegistrationResult.failure(RegistrationError.PERSISTENCE_ERROR)

        logger.info("User '%s' successfully registered", name)
        return RegistrationResult.success(saved)

    def _is_username_available(self, username):
        return not self.store.find_clients_by_username_ci(username)

    def authenticate(self, username, raw_password):
        if username is None or raw_password is None:
            logger.warning("Login failed: username or password is null")
            return False

        name = str(username).strip()
        if not name:
            logger.warning("Login failed: username is empty after trimming")
            return False

        matches = self.store.find_clients_by_username_ci(name)
        if not matches:
            logger.warning("Login failed: username '%s' not found", name)
            return False

        # Uniqueness is enforced on write, so the first match is the account.
        client = matches[0]
        valid = passwords.verify_password(raw_password, client.password_salt, client.password_hash)
        if valid:
            logger.info("User '%s' successfully validated", name)
        else:
            logger.warning("Login failed: invalid password for username '%s'", name)
        return valid
