import logging

from flask import Flask, request
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from common.db import db
from common.errors import ShareError, ValidationError
from common.response import success, fail
from routes.auth_routes import auth_bp
from routes.file_routes import file_bp
from routes.share_routes import share_bp, public_bp, resolved
from services.file_service import FileService
from services.storage import build_storage
from services.user_service import UserService


def register_error_handlers(app):
    @app.errorhandler(ShareError)
    def handle_share_error(e):
        app.logger.info("[%s] %s %s: %s", e.__class__.__name__, request.method, request.path, e.msg)
        return fail(e.msg, code=e.code, status=e.status)

    @app.errorhandler(413)
    def handle_too_large(e):
        return fail("File size exceeds upload limit", code=ValidationError.code, status=413)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code is None or e.code < 400:
            return e
        return fail(e.description, code=e.code, status=e.code)


def register_cli(app):
    @app.cli.command("cleanup-orphans")
    def cleanup_orphans():
        """Remove stored blobs that have no file record."""
        removed = FileService.cleanup_orphaned_blobs()
        for key in removed:
            print(f"removed {key}")
        print(f"{len(removed)} orphaned blob(s) removed")


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object('config.Config')
    if overrides:
        app.config.update(overrides)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    db.init_app(app)
    jwt = JWTManager(app)
    app.extensions['storage'] = build_storage(app.config)

    # 检查 token 是否在黑名单
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return UserService.is_token_revoked(jwt_payload)

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(file_bp, url_prefix='/file')
    app.register_blueprint(share_bp, url_prefix='/share')
    app.register_blueprint(public_bp)

    # 分享链接形如 /?share=<share_id>
    @app.route('/')
    def index():
        share_id = request.args.get('share')
        if share_id:
            return success(resolved(share_id))
        return success({"service": "dropshare"})

    register_error_handlers(app)
    register_cli(app)

    with app.app_context():
        db.create_all()

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(host='0.0.0.0', port=5000, debug=True)
