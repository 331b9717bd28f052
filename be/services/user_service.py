from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

from common.db import db
from common.errors import AuthError, NotFoundError, ValidationError
from models.user import User
from services.file_service import FileService

# JWT 黑名单（内存存储，重启失效）
jwt_blacklist = set()


class UserService:
    @staticmethod
    def register(username, password):
        if not username or not password:
            raise ValidationError("username and password are required")
        if User.query.filter_by(username=username).first():
            raise AuthError("Username already exists")
        user = User(username=username, password=generate_password_hash(password))
        db.session.add(user)
        db.session.commit()
        current_app.logger.info("[注册] %s", username)
        return user

    @staticmethod
    def login(username, password):
        user = User.query.filter_by(username=username).first()
        if not user or not check_password_hash(user.password, password or ''):
            raise AuthError("Invalid username or password")
        return user

    @staticmethod
    def logout(jti):
        """将JWT ID加入黑名单"""
        jwt_blacklist.add(jti)
        return True

    @staticmethod
    def is_token_revoked(jwt_payload):
        """已登出的 token，或所属账号已注销的 token，都视为失效"""
        if jwt_payload["jti"] in jwt_blacklist:
            return True
        return db.session.get(User, int(jwt_payload["sub"])) is None

    @staticmethod
    def get_user(user_id):
        user = db.session.get(User, int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def change_password(user_id, old_password, new_password):
        user = UserService.get_user(user_id)
        if not check_password_hash(user.password, old_password or ''):
            raise AuthError("Old password is incorrect")
        if not new_password:
            raise ValidationError("new_password is required")
        user.password = generate_password_hash(new_password)
        db.session.commit()
        return True

    @staticmethod
    def delete_account(user_id):
        """删除账号，同时清空该用户的文件"""
        user = UserService.get_user(user_id)
        result = FileService.clear_all(user_id)
        db.session.delete(user)
        db.session.commit()
        current_app.logger.info("[注销] 用户 %s，删除文件 %d 个", user_id, len(result["deleted"]))
        return result
