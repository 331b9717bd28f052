# services/storage/local_storage.py
import os

from flask import has_request_context, request

from services.storage.base_storage import BaseStorage, StorageError
from utils.compress import compress_for_storage, decompress_from_storage
from utils.tokens import is_storage_key

# 压缩存储的 blob 在磁盘上带此后缀
GZ_SUFFIX = ".gz"


class LocalStorage(BaseStorage):
    """本地磁盘 blob 存储，所有 key 平铺在 root 目录下"""

    def __init__(self, root="./uploads", compression=True, public_base_url=""):
        self.root = root
        self.compression = compression
        self.public_base_url = public_base_url
        os.makedirs(self.root, exist_ok=True)

    def _path(self, key):
        # key 由服务端生成，这里只接受合法格式，防止路径穿越
        if not is_storage_key(key):
            raise StorageError(f"invalid storage key: {key!r}")
        return os.path.join(self.root, key)

    def put(self, key, data, content_type=None):
        path = self._path(key)
        if self.compression:
            path += GZ_SUFFIX
        try:
            with open(path, "wb") as f:
                f.write(compress_for_storage(data, enabled=self.compression))
        except OSError as e:
            raise StorageError(f"write {key} failed: {e}") from e
        return key

    def read(self, key):
        path = self._path(key)
        try:
            if os.path.exists(path + GZ_SUFFIX):
                with open(path + GZ_SUFFIX, "rb") as f:
                    return decompress_from_storage(f.read())
            if os.path.exists(path):
                with open(path, "rb") as f:
                    return f.read()
        except (OSError, ValueError) as e:
            raise StorageError(f"read {key} failed: {e}") from e
        return None

    def get_public_url(self, key):
        base = self.public_base_url
        if not base and has_request_context():
            base = request.host_url
        return f"{(base or '').rstrip('/')}/public/{key}"

    def remove(self, keys):
        for key in keys:
            path = self._path(key)
            for candidate in (path, path + GZ_SUFFIX):
                try:
                    os.remove(candidate)
                except FileNotFoundError:
                    pass
                except OSError as e:
                    raise StorageError(f"remove {key} failed: {e}") from e

    def list_keys(self):
        keys = set()
        for name in os.listdir(self.root):
            if not os.path.isfile(os.path.join(self.root, name)):
                continue
            key = name[:-len(GZ_SUFFIX)] if self.compression and name.endswith(GZ_SUFFIX) else name
            if is_storage_key(key):
                keys.add(key)
        return sorted(keys)
