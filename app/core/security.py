import base64
import binascii
import secrets

from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        return False

def parse_basic_credentials(header_value: str | None) -> tuple[str, str] | None:
    raw = str(header_value or "").strip()
    scheme, _, encoded = raw.partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password

def verify_panel_credentials(username: str, password: str) -> bool:
    expected_user = str(settings.PANEL_BASIC_USER or "")
    user_ok = secrets.compare_digest(username.encode("utf-8"), expected_user.encode("utf-8"))
    password_hash = str(settings.PANEL_BASIC_PASSWORD_HASH or "").strip()
    if password_hash:
        password_ok = verify_password(password, password_hash)
    else:
        expected_password = str(settings.PANEL_BASIC_PASSWORD or "")
        password_ok = secrets.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))
    return bool(expected_user) and user_ok and password_ok
