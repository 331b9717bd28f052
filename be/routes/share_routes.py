import io

from flask import Blueprint, current_app, send_file

from common.errors import NotFoundError
from common.response import success
from models.file import FileRecord
from routes.file_routes import send_record
from services.file_service import FileService

# 分享链接不需要登录，持有 share_id 即可访问
share_bp = Blueprint('share', __name__)
public_bp = Blueprint('public', __name__)

INLINE_SAFE_TYPES = frozenset({
    "text/plain", "application/pdf",
    "image/png", "image/jpeg", "image/gif", "image/webp", "image/bmp",
})


def resolved(share_id):
    record = FileService.resolve_share(share_id)
    return record.to_dict(share_base_url=current_app.config.get("SHARE_BASE_URL"))


@share_bp.route('/<share_id>', methods=['GET'])
def resolve_share(share_id):
    return success(resolved(share_id))

@share_bp.route('/<share_id>/download', methods=['GET'])
def download_shared(share_id):
    return send_record(FileService.resolve_share(share_id))

@share_bp.route('/<share_id>/contents', methods=['GET'])
def shared_archive_contents(share_id):
    record = FileService.resolve_share(share_id)
    return success(FileService.archive_contents(record))


@public_bp.route('/public/<key>', methods=['GET'])
def serve_blob(key):
    """本地存储后端的 download_url"""
    record = FileRecord.query.filter_by(storage_ref=key).first()
    if record is None:
        raise NotFoundError("File not found")
    content = FileService.read_content(record)
    # 上传者声明的类型不可信，只有不会执行脚本的类型才内联展示
    inline = record.type in INLINE_SAFE_TYPES or record.type.startswith(("audio/", "video/"))
    resp = send_file(io.BytesIO(content),
                     mimetype=record.type if inline else "application/octet-stream",
                     as_attachment=not inline, download_name=record.name)
    resp.headers["X-Content-Type-Options"] = "nosniff"
    return resp
