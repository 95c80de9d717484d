import hmac
import logging
import os

import bcrypt

logger = logging.getLogger(__name__)

AUTH_COOKIE = "accent_auth"
AUTH_COOKIE_VALUE = "true"
# Routes accessibles sans cookie
PUBLIC_PATHS = {"/login", "/health", "/favicon.ico"}


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def check_login_password(password: str) -> bool:
    """Mot de passe partagé de l'équipe : CRM_PASSWORD_HASH (bcrypt) prioritaire, sinon CRM_PASSWORD."""
    password_hash = os.getenv("CRM_PASSWORD_HASH")
    if password_hash:
        return verify_password(password, password_hash)
    plain = os.getenv("CRM_PASSWORD")
    if plain:
        return hmac.compare_digest(password.encode("utf-8"), plain.encode("utf-8"))
    logger.warning("Connexion refusée : ni CRM_PASSWORD_HASH ni CRM_PASSWORD ne sont définis.")
    return False


def is_authenticated(cookies) -> bool:
    return cookies.get(AUTH_COOKIE) == AUTH_COOKIE_VALUE


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS


def cookie_max_age() -> int:
    return int(os.getenv("AUTH_COOKIE_MAX_AGE", str(60 * 60 * 8)))
