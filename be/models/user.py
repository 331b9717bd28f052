from models.base import BaseModel
from common.db import db

class User(BaseModel):
    __tablename__ = 'users'
    # 注销后的 id 不再分配给新用户，旧 token 不会指向别人
    __table_args__ = {"sqlite_autoincrement": True}

    username = db.Column(db.String(80), unique=True, nullable=False)
    password = db.Column(db.String(256), nullable=False)

    def to_dict(self):
        return {"id": self.id, "username": self.username}
