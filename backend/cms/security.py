# Password hashing

from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes
from Crypto.Hash import SHA256
import hmac
import logging

ALGORITHM = 'pbkdf2_sha256'
DEFAULT_ITERATIONS = 200_000


def _derive_key(password: str, salt: bytes, iterations: int) -> bytes:
    logging.debug(f'Deriving key with PBKDF2: iterations={iterations}, salt_len={len(salt)}')
    return PBKDF2(password, salt, dkLen=32, count=iterations, hmac_hash_module=SHA256)


def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Return ``pbkdf2_sha256$<iterations>$<salt hex>$<key hex>`` for ``password``."""
    salt = get_random_bytes(16)
    key = _derive_key(password, salt, iterations)
    return f'{ALGORITHM}${iterations}${salt.hex()}${key.hex()}'


def verify_password(stored_hash: str, password: str) -> bool:
    """Check ``password`` against a hash produced by :func:`hash_password`.

    Malformed hashes never match. The derived keys are compared in constant time.
    """
    try:
        algorithm, iterations, salt_hex, key_hex = stored_hash.split('$')
        if algorithm != ALGORITHM:
            raise ValueError(f'unknown algorithm {algorithm}')
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(key_hex)
        iterations = int(iterations)
    except (AttributeError, ValueError):
        logging.warning('Stored password hash is malformed')
        return False
    candidate = _derive_key(password, salt, iterations)
    matched = hmac.compare_digest(candidate, expected)
    logging.debug(f'Password verification {"succeeded" if matched else "failed"}')
    return matched
