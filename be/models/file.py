from models.base import BaseModel, utcnow
from common.db import db


class FileRecord(BaseModel):
    """一条上传记录；创建后只读，直到被删除"""
    __tablename__ = 'files'

    user_id = db.Column(db.String(64), nullable=True, index=True)  # 为空表示公共文件池
    name = db.Column(db.String(256), nullable=False)
    original_name = db.Column(db.String(256), nullable=False)
    storage_ref = db.Column(db.String(256), unique=True, nullable=False)
    size = db.Column(db.BigInteger, nullable=False)
    type = db.Column(db.String(128), nullable=False, default='application/octet-stream')
    upload_date = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    download_url = db.Column(db.String(1024), nullable=False)
    share_id = db.Column(db.String(64), unique=True, nullable=False, index=True)

    @classmethod
    def owned_by(cls, user_id):
        """按所有者过滤；user_id 为 None 时返回公共文件池"""
        if user_id is None:
            return cls.query.filter(cls.user_id.is_(None))
        return cls.query.filter(cls.user_id == str(user_id))

    @classmethod
    def by_share_id(cls, share_id):
        return cls.query.filter_by(share_id=share_id).first()

    def to_dict(self, share_base_url=None):
        data = {
            "id": self.id,
            "name": self.name,
            "original_name": self.original_name,
            "storage_ref": self.storage_ref,
            "size": self.size,
            "type": self.type,
            "upload_date": self.upload_date.isoformat() if self.upload_date else None,
            "download_url": self.download_url,
            "share_id": self.share_id,
            "user_id": self.user_id,
        }
        if share_base_url:
            data["share_url"] = f"{share_base_url.rstrip('/')}/?share={self.share_id}"
        return data

    def __repr__(self):
        return f'<FileRecord {self.id} {self.original_name!r} share={self.share_id[:6]}...>'
