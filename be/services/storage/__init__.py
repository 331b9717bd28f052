from flask import current_app

from services.storage.base_storage import BaseStorage, StorageError
from services.storage.local_storage import LocalStorage
from services.storage.s3_storage import S3Storage


def build_storage(config):
    """根据配置选择存储后端"""
    backend = config.get("STORAGE_BACKEND", "local")
    if backend == "s3":
        return S3Storage.from_config(config)
    if backend == "local":
        return LocalStorage(
            root=config.get("STORAGE_ROOT", "./uploads"),
            compression=config.get("ENABLE_COMPRESSION", True),
            public_base_url=config.get("PUBLIC_BASE_URL", ""),
        )
    raise ValueError(f"Unknown storage backend: {backend}")


def get_storage() -> BaseStorage:
    return current_app.extensions["storage"]
