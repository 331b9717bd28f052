import os
import re
import secrets
import string
import time

SHARE_ID_ALPHABET = string.ascii_letters + string.digits
MIN_SHARE_ID_LENGTH = 16
DEFAULT_SHARE_ID_LENGTH = 22

_BASE36 = string.digits + string.ascii_lowercase
_EXT_CHARS = re.compile(r'[^a-z0-9]')

# {毫秒时间戳}_{随机后缀}[.{扩展名}]
STORAGE_KEY_RE = re.compile(r'^\d+_[0-9a-z]+(\.[0-9a-z]+)?$')


def generate_share_id(length: int = DEFAULT_SHARE_ID_LENGTH) -> str:
    """Draw a share token from a CSPRNG over [A-Za-z0-9]."""
    if length < MIN_SHARE_ID_LENGTH:
        raise ValueError(f"share id length must be >= {MIN_SHARE_ID_LENGTH}")
    return ''.join(secrets.choice(SHARE_ID_ALPHABET) for _ in range(length))


def _random_suffix(length: int = 10) -> str:
    return ''.join(secrets.choice(_BASE36) for _ in range(length))


def file_extension(filename: str) -> str:
    """小写、仅保留字母数字的扩展名；没有扩展名时返回空串"""
    ext = os.path.splitext(filename or '')[1].lstrip('.').lower()
    return _EXT_CHARS.sub('', ext)


def generate_storage_key(filename: str, now_ms: int = None) -> str:
    """生成存储 key；不检查是否已存在，碰撞概率视为可忽略"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    key = f"{now_ms}_{_random_suffix()}"
    ext = file_extension(filename)
    return f"{key}.{ext}" if ext else key


def is_storage_key(key: str) -> bool:
    return bool(key) and STORAGE_KEY_RE.match(key) is not None
