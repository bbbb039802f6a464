"""Password hashing for user accounts."""
import logging
from werkzeug.security import generate_password_hash, check_password_hash

_logger = logging.getLogger(__name__)

# scrypt with werkzeug's default cost (N=2**15), at least as slow as bcrypt cost 12
HASH_METHOD = "scrypt"


def hash_password(password):
    """Return a salted one-way hash of ``password``."""
    if not password:
        raise ValueError("Password cannot be empty")
    return generate_password_hash(password, method=HASH_METHOD)


def verify_password(password, password_hash):
    """Check ``password`` against a stored hash. Never raises."""
    if not password or not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError as e:
        _logger.warning(f"Password verification error: {e}")
        return False
