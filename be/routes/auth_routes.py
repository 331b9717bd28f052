from flask import Blueprint, request
from flask_jwt_extended import (
    create_access_token,
    jwt_required,
    get_jwt_identity,
    get_jwt
)
from services.user_service import UserService
from common.response import success

auth_bp = Blueprint('auth', __name__)

@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    user = UserService.register(data.get('username'), data.get('password'))
    return success({"user_id": user.id, "username": user.username})

@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = UserService.login(data.get('username'), data.get('password'))
    # identity 必须是字符串
    token = create_access_token(identity=str(user.id))
    return success({"token": token, "user_id": user.id})


@auth_bp.route('/profile', methods=['GET'])
@jwt_required()
def profile():
    user = UserService.get_user(get_jwt_identity())
    return success(user.to_dict())

@auth_bp.route('/change_password', methods=['POST'])
@jwt_required()
def change_password():
    data = request.get_json(silent=True) or {}
    UserService.change_password(get_jwt_identity(), data.get('old_password'), data.get('new_password'))
    return success({"msg": "Password changed"})

@auth_bp.route('/delete_account', methods=['POST'])
@jwt_required()
def delete_account():
    result = UserService.delete_account(get_jwt_identity())
    UserService.logout(get_jwt()["jti"])
    return success({"msg": "Account deleted", "files": result})

@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    UserService.logout(get_jwt()["jti"])
    return success({"msg": "Signed out"})
