"""
secp256k1 Key Management for flowdemo.

Flow accounts accept ECDSA_secp256k1 keys paired with SHA3-256 hashing.
This module handles:
- key generation (the public key is registered on a Flow account)
- loading/storing the private key in ~/.flowdemo/.env as PRIVATE_KEY
- signing 32-byte digests into Flow's 64-byte r||s signature format

Dependencies: eth-keys (secp256k1), python-dotenv (key file)
"""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, set_key
from eth_keys import keys
from eth_keys.exceptions import ValidationError


# Default config directory
FLOWDEMO_DIR = Path.home() / ".flowdemo"
FLOWDEMO_ENV = FLOWDEMO_DIR / ".env"


def generate_keypair() -> tuple[str, str]:
    """
    Generate a new secp256k1 keypair.

    Returns:
        Tuple of (private_key_hex, public_key_hex)
        - private_key_hex: 0x-prefixed hex private key (66 chars)
        - public_key_hex: uncompressed public key without the 04 marker (128 chars)
    """
    private_key = "0x" + secrets.token_hex(32)
    return private_key, get_public_key(private_key)


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Save private key to .env file, keeping any other entries.

    Args:
        private_key: 0x-prefixed hex private key
        env_path: Path to .env file (default: ~/.flowdemo/.env)

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or FLOWDEMO_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)
    set_key(str(env_path), "PRIVATE_KEY", private_key, quote_mode="never")

    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Raises:
        ValueError: If PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or FLOWDEMO_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(
            f"PRIVATE_KEY not found. Run 'flowdemo keygen' or set "
            f"PRIVATE_KEY in {env_path}"
        )

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def _key_obj(private_key: Optional[str]) -> keys.PrivateKey:
    if private_key is None:
        private_key = load_private_key()
    try:
        return keys.PrivateKey(bytes.fromhex(private_key[2:] if private_key.startswith("0x") else private_key))
    except (ValueError, ValidationError) as exc:
        raise ValueError(f"Malformed PRIVATE_KEY: {exc}") from exc


def get_public_key(private_key: Optional[str] = None) -> str:
    """
    Return the 64-byte public key as lowercase hex, no prefix.

    Raises:
        ValueError: If the key is missing or is not 32 bytes of hex
    """
    return _key_obj(private_key).public_key.to_bytes().hex()


def sign_digest(digest: bytes, private_key: Optional[str] = None) -> bytes:
    """
    Sign a 32-byte digest.

    Returns:
        64-byte signature (r || s), the encoding Flow expects
    """
    if len(digest) != 32:
        raise ValueError(f"Digest must be 32 bytes, got {len(digest)}")
    signature = _key_obj(private_key).sign_msg_hash(digest)
    return signature.r.to_bytes(32, "big") + signature.s.to_bytes(32, "big")
