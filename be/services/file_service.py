# services/file_service.py
from dataclasses import dataclass

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from common.db import db
from common.errors import BackendReadError, BackendWriteError, NotFoundError, ValidationError
from models.file import FileRecord
from services.archive_service import list_archive_entries
from services.storage import StorageError, get_storage
from utils.tokens import generate_share_id, generate_storage_key


@dataclass
class IncomingFile:
    """待上传文件：名称、客户端声明的 MIME 类型和内容"""
    name: str
    content_type: str
    data: bytes

    @property
    def size(self):
        return len(self.data)


def _owner(user_id):
    return None if user_id is None else str(user_id)


class FileService:
    @staticmethod
    def validate(incoming):
        """上传前校验，失败时不会产生任何存储或数据库调用"""
        cfg = current_app.config
        if not incoming.name:
            raise ValidationError("File name is required")
        max_size = cfg["MAX_FILE_SIZE"]
        if incoming.size > max_size:
            raise ValidationError(
                f"File size exceeds {max_size // (1024 * 1024)}MB limit. Current size: {incoming.size} bytes"
            )
        if incoming.content_type in cfg.get("BLOCKED_MIME_TYPES", ()):
            raise ValidationError(f"File type not allowed for security reasons: {incoming.content_type}")

    @staticmethod
    def upload(incoming, user_id=None):
        FileService.validate(incoming)
        storage = get_storage()
        log = current_app.logger

        key = generate_storage_key(incoming.name)
        try:
            storage.put(key, incoming.data, content_type=incoming.content_type)
        except StorageError as e:
            log.error("[上传] 写入存储失败 %s: %s", key, e)
            raise BackendWriteError(f"Upload failed: {e}") from e

        record = FileRecord(
            user_id=_owner(user_id),
            name=incoming.name,
            original_name=incoming.name,
            storage_ref=key,
            size=incoming.size,
            type=incoming.content_type or 'application/octet-stream',
            download_url=storage.get_public_url(key),
            share_id=generate_share_id(current_app.config["SHARE_ID_LENGTH"]),
        )
        try:
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            # blob 已写入但元数据插入失败，不做补偿删除
            log.warning("[上传] 元数据写入失败，存储中遗留孤立对象 %s: %s", key, e)
            raise BackendWriteError("Upload failed: could not record file metadata") from e

        log.info("[上传] %s -> %s (%d bytes)", incoming.name, key, incoming.size)
        return record

    @staticmethod
    def list_files(user_id=None):
        try:
            return (FileRecord.owned_by(_owner(user_id))
                    .order_by(FileRecord.upload_date.desc(), FileRecord.id.desc())
                    .all())
        except SQLAlchemyError as e:
            current_app.logger.error("[列表] 查询失败: %s", e)
            raise BackendReadError("Failed to load files") from e

    @staticmethod
    def get_file(file_id, user_id=None):
        try:
            record = FileRecord.owned_by(_owner(user_id)).filter(FileRecord.id == file_id).first()
        except SQLAlchemyError as e:
            current_app.logger.error("[查询] 文件 %s 查询失败: %s", file_id, e)
            raise BackendReadError("Failed to load file") from e
        if record is None:
            raise NotFoundError("File not found")
        return record

    @staticmethod
    def resolve_share(share_id):
        """分享 token -> 记录，不做所有者校验"""
        if not share_id:
            raise NotFoundError("Shared file not found")
        try:
            record = FileRecord.by_share_id(share_id)
        except SQLAlchemyError as e:
            current_app.logger.error("[分享] 解析 %s 失败: %s", share_id, e)
            raise BackendReadError("Error loading shared file") from e
        if record is None:
            raise NotFoundError("Shared file not found")
        return record

    @staticmethod
    def read_content(record):
        try:
            data = get_storage().read(record.storage_ref)
        except StorageError as e:
            current_app.logger.error("[下载] 读取 %s 失败: %s", record.storage_ref, e)
            raise BackendReadError(f"Download failed: {e}") from e
        if data is None:
            raise NotFoundError("Stored content not found")
        return data

    @staticmethod
    def archive_contents(record):
        data = FileService.read_content(record)
        return list_archive_entries(data, limit=current_app.config["MAX_ARCHIVE_ENTRIES"])

    @staticmethod
    def delete_file(file_id, user_id=None):
        """先删 blob 再删记录；两步之间失败会留下孤立记录"""
        record = FileService.get_file(file_id, user_id)
        key = record.storage_ref
        log = current_app.logger
        try:
            get_storage().remove([key])
        except StorageError as e:
            log.error("[删除] 删除存储对象 %s 失败: %s", key, e)
            raise BackendWriteError(f"Failed to delete file: {e}") from e

        try:
            db.session.delete(record)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            log.warning("[删除] 存储对象 %s 已删除但记录 %s 删除失败: %s", key, file_id, e)
            raise BackendWriteError("Failed to delete file record") from e
        log.info("[删除] 文件 %s (%s)", file_id, key)
        return file_id

    @staticmethod
    def delete_selected(file_ids, user_id=None):
        """逐条独立删除，部分失败不回滚已成功的部分"""
        deleted, failed = [], []
        for file_id in file_ids:
            try:
                FileService.delete_file(file_id, user_id)
                deleted.append(file_id)
            except (NotFoundError, BackendReadError, BackendWriteError) as e:
                failed.append({"id": file_id, "msg": e.msg})
        return {"deleted": deleted, "failed": failed}

    @staticmethod
    def clear_all(user_id=None):
        ids = [record.id for record in FileService.list_files(user_id)]
        return FileService.delete_selected(ids, user_id)

    @staticmethod
    def cleanup_orphaned_blobs():
        """清理存储中没有对应记录的对象，返回删除的 key 列表"""
        storage = get_storage()
        try:
            stored = set(storage.list_keys())
        except StorageError as e:
            raise BackendReadError(f"Failed to list storage: {e}") from e
        known = {ref for (ref,) in db.session.query(FileRecord.storage_ref).all()}
        orphans = sorted(stored - known)
        if orphans:
            try:
                storage.remove(orphans)
            except StorageError as e:
                raise BackendWriteError(f"Failed to remove orphans: {e}") from e
            current_app.logger.info("[清理] 删除孤立对象 %d 个", len(orphans))
        return orphans
