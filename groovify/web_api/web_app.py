import logging
from datetime import timedelta

from flask import Blueprint, Flask, current_app, jsonify, request, session

from groovify.config import settings
from groovify.core.errors import StoreError
from groovify.core.results import ProfileUpdateError, RegistrationError
from groovify.services.credential_manager import CredentialManager
from groovify.services.playlist_membership import PlaylistMembership
from groovify.services.playlist_service import PlaylistService
from groovify.services.profile_service import ProfileService
from groovify.services.recommendation_engine import RecommendationEngine
from groovify.services.song_service import SongService
from groovify.store.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

_REGISTRATION_STATUS = {
    RegistrationError.INVALID_USERNAME: 400,
    RegistrationError.INVALID_PASSWORD: 400,
    RegistrationError.USERNAME_TAKEN: 409,
    RegistrationError.PERSISTENCE_ERROR: 500,
}

_PROFILE_STATUS = {
    ProfileUpdateError.CLIENT_NOT_FOUND: 404,
    ProfileUpdateError.INVALID_USERNAME: 400,
    ProfileUpdateError.USERNAME_TAKEN: 409,
    ProfileUpdateError.PERSISTENCE_ERROR: 500,
}


class Services:
    """Everything a request needs, built once per app around one store."""

    def __init__(self, store, rng=None):
        self.store = store
        self.credentials = CredentialManager(store)
        self.profiles = ProfileService(store)
        self.playlists = PlaylistService(store)
        self.membership = PlaylistMembership(store)
        self.songs = SongService(store)
        self.recommendations = RecommendationEngine(store, rng=rng)


def create_app(store=None, config=None, rng=None):
    app = Flask(__name__)
    app.secret_key = settings.FLASK_SECRET_KEY
    app.permanent_session_lifetime = timedelta(days=settings.SESSION_LIFETIME_DAYS)
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = settings.SESSION_COOKIE_SECURE
    if config:
        app.config.update(config)

    app.extensions["groovify"] = Services(store or CatalogStore(settings.DB_PATH), rng=rng)
    app.register_blueprint(api_bp)
    app.register_error_handler(StoreError, _handle_store_error)
    return app


def _services():
    return current_app.extensions["groovify"]


def _handle_store_error(exc):
    logger.exception("Store failure while handling %s %s", request.method, request.path)
    return (jsonify({"error": "internal error"}), 500)


def _current_client_id():
    value = session.get("auth_user_id")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _set_auth_session(client_id):
    session["auth_user_id"] = int(client_id)
    session.permanent = True


def _clear_auth_session():
    session.pop("auth_user_id", None)


def _current_client():
    client_id = _current_client_id()
    if client_id is None:
        return None
    client = _services().profiles.get_client(client_id)
    if client is None:
        _clear_auth_session()
    return client


def _unauthorized():
    return (jsonify({"error": "authentication required"}), 401)


def _json_body():
    return request.get_json(silent=True) or {}


def _parse_id(value, label):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{label} required") from None


def _foreign_playlist(playlist_id, client):
    """True when the playlist exists and belongs to someone else."""
    playlist = _services().playlists.get_playlist(playlist_id)
    return playlist is not None and playlist.client_id != client.id


def _auth_response_payload():
    client = _current_client()
    if client is None:
        return {"authenticated": False, "user": None}
    return {"authenticated": True, "user": client.to_public_dict()}


@api_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "healthy"})


@api_bp.route("/api/auth/session", methods=["GET"])
def auth_session_status():
    return jsonify(_auth_response_payload())


@api_bp.route("/api/auth/register", methods=["POST"])
def auth_register():
    data = _json_body()
    result = _services().credentials.register(
        data.get("username"),
        data.get("password"),
        description=data.get("description"),
        image_file_name=data.get("image_file_name"),
    )
    if not result.ok:
        return (
            jsonify({"error": result.error.message, "reason": result.error.value}),
            _REGISTRATION_STATUS[result.error],
        )
    _set_auth_session(result.client.id)
    payload = _auth_response_payload()
    payload["status"] = "registered"
    return jsonify(payload)


@api_bp.route("/api/auth/login", methods=["POST"])
def auth_login():
    data = _json_body()
    username = data.get("username")
    services = _services()
    if not services.credentials.authenticate(username, data.get("password")):
        return (jsonify({"error": "invalid username or password"}), 401)
    client = services.profiles.get_client_by_username(username)
    if client is None:
        return (jsonify({"error": "invalid username or password"}), 401)
    _set_auth_session(client.id)
    payload = _auth_response_payload()
    payload["status"] = "logged_in"
    return jsonify(payload)


@api_bp.route("/api/auth/logout", methods=["POST"])
def auth_logout():
    _clear_auth_session()
    return jsonify({"status": "logged_out"})


@api_bp.route("/api/profile", methods=["GET"])
def get_profile():
    client = _current_client()
    if client is None:
        return _unauthorized()
    genres = _services().profiles.get_all_genres()
    return jsonify({"user": client.to_public_dict(), "all_genres": [g.to_dict() for g in genres]})


@api_bp.route("/api/profile", methods=["POST"])
def update_profile():
    client = _current_client()
    if client is None:
        return _unauthorized()
    data = _json_body()
    result = _services().profiles.update_profile(
        client.id,
        data.get("username", client.username),
        description=data.get("description"),
        image_file_name=data.get("image_file_name"),
        genre_ids=data.get("genre_ids"),
    )
    if not result.ok:
        return (jsonify({"error": result.error.message}), _PROFILE_STATUS[result.error])
    return jsonify({"status": "updated", "user": result.client.to_public_dict()})


@api_bp.route("/api/genres", methods=["GET"])
def list_genres():
    genres = _services().profiles.get_all_genres()
    return jsonify({"genres": [g.to_dict() for g in genres]})


@api_bp.route("/api/songs", methods=["GET"])
def list_songs():
    songs = _services().songs.get_all_songs()
    return jsonify({"songs": [s.to_dict() for s in songs]})


@api_bp.route("/api/search", methods=["GET"])
def search_songs():
    client = _current_client()
    if client is None:
        return _unauthorized()
    query = request.args.get("query")
    if query is None:
        return (jsonify({"error": "query required"}), 400)
    search_type = "genre" if request.args.get("type", "title").strip().lower() == "genre" else "title"
    logger.info("User %s searched %s for '%s'", client.id, search_type, query)
    songs = _services().songs.search(query, search_type)
    return jsonify({"query": query, "type": search_type, "songs": [s.to_dict() for s in songs]})


@api_bp.route("/api/playlists", methods=["GET"])
def get_playlists():
    client = _current_client()
    if client is None:
        return _unauthorized()
    playlists = _services().playlists.get_playlists_by_client_id(client.id)
    return jsonify({"user_id": client.id, "playlists": [p.to_dict() for p in playlists]})


@api_bp.route("/api/playlists/create", methods=["POST"])
def create_playlist():
    client = _current_client()
    if client is None:
        return _unauthorized()
    data = _json_body()
    name = str(data.get("name") or "").strip()
    if not name:
        return (jsonify({"error": "name required"}), 400)
    playlist = _services().playlists.create_playlist(client.id, name, data.get("description") or "")
    if playlist is None:
        return (jsonify({"error": "could not create playlist"}), 500)
    return jsonify({"status": "created", "playlist": playlist.to_dict()})


@api_bp.route("/api/playlists/delete", methods=["POST"])
def delete_playlist():
    client = _current_client()
    if client is None:
        return _unauthorized()
    try:
        playlist_id = _parse_id(_json_body().get("playlist_id"), "playlist_id")
    except ValueError as exc:
        return (jsonify({"error": str(exc)}), 400)
    if _foreign_playlist(playlist_id, client):
        return (jsonify({"error": "playlist belongs to another user"}), 403)
    if not _services().playlists.delete_playlist(playlist_id):
        return (jsonify({"error": "playlist not found"}), 404)
    return jsonify({"status": "deleted"})


@api_bp.route("/api/playlists/<int:playlist_id>/songs", methods=["GET"])
def get_playlist_songs(playlist_id):
    client = _current_client()
    if client is None:
        return _unauthorized()
    if _foreign_playlist(playlist_id, client):
        return (jsonify({"error": "playlist belongs to another user"}), 403)
    songs = _services().membership.get_songs(playlist_id)
    return jsonify({"playlist_id": playlist_id, "songs": [s.to_dict() for s in songs]})


@api_bp.route("/api/playlists/add_track", methods=["POST"])
def add_playlist_track():
    client = _current_client()
    if client is None:
        return _unauthorized()
    data = _json_body()
    try:
        playlist_id = _parse_id(data.get("playlist_id"), "playlist_id")
        song_id = _parse_id(data.get("song_id"), "song_id")
    except ValueError as exc:
        return (jsonify({"error": str(exc)}), 400)
    if _foreign_playlist(playlist_id, client):
        return (jsonify({"error": "playlist belongs to another user"}), 403)
    result = _services().membership.add_song(playlist_id, song_id)
    if not result.ok:
        return (jsonify({"error": result.error.message, "reason": result.error.value}), 404)
    return jsonify({"status": "added" if result.changed else "duplicate", "added": result.changed})


@api_bp.route("/api/playlists/remove_track", methods=["POST"])
def remove_playlist_track():
    client = _current_client()
    if client is None:
        return _unauthorized()
    data = _json_body()
    try:
        playlist_id = _parse_id(data.get("playlist_id"), "playlist_id")
        song_id = _parse_id(data.get("song_id"), "song_id")
    except ValueError as exc:
        return (jsonify({"error": str(exc)}), 400)
    if _foreign_playlist(playlist_id, client):
        return (jsonify({"error": "playlist belongs to another user"}), 403)
    result = _services().membership.remove_song(playlist_id, song_id)
    return jsonify({"status": "removed", "removed": result.changed})


@api_bp.route("/api/recommend", methods=["GET"])
def get_recommendations():
    client = _current_client()
    if client is None:
        return _unauthorized()
    songs = _services().recommendations.recommend(client)
    return jsonify({"user_id": client.id, "recommendations": [s.to_dict() for s in songs]})
