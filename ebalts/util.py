"""Small byte-level helpers."""

from typing import Optional


def ensure_u8(value, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    if value < 0 or value > 0xFF:
        raise ValueError(f"{name} must fit in u8")
    return value


def read_u32_le(buf: bytes, offset: int) -> int:
    return int.from_bytes(buf[offset : offset + 4], "little")


def write_u32_le(value: int) -> bytes:
    if value < 0 or value > 0xFFFF_FFFF:
        raise ValueError("value must fit in u32")
    return value.to_bytes(4, "little")


def slice_exact(buf: bytes, offset: int, length: int) -> Optional[bytes]:
    """Return ``buf[offset:offset+length]`` or None when ``buf`` is too short."""
    end = offset + length
    if end > len(buf):
        return None
    return bytes(buf[offset:end])
