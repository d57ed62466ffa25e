import hashlib
import struct


def _write_field(digest, value: str) -> None:
    raw = value.encode("utf-8")
    digest.update(struct.pack(">I", len(raw)))
    digest.update(raw)


def build_key(path: str, rotation: int, version_token: str, size_token: str) -> str:
    """Fingerprint of everything that determines a rendered thumbnail.

    Fields are length-prefixed before hashing so that values can never
    bleed across field boundaries (rotation 9 + version "0..." must not
    equal rotation 90 + version "...").
    """
    digest = hashlib.sha256()
    _write_field(digest, path)
    _write_field(digest, str(int(rotation)))
    _write_field(digest, version_token)
    _write_field(digest, size_token)
    return digest.hexdigest()
