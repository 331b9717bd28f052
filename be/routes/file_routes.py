import io
import mimetypes

from flask import Blueprint, current_app, request, send_file
from flask_jwt_extended import jwt_required, get_jwt_identity

from common.errors import ValidationError
from common.response import success
from services.file_service import FileService, IncomingFile

file_bp = Blueprint('file', __name__)


def _file_id(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid file id: {value!r}")


def _record(record):
    return record.to_dict(share_base_url=current_app.config.get("SHARE_BASE_URL"))


def send_record(record):
    """把记录对应的文件内容作为附件返回"""
    content = FileService.read_content(record)
    return send_file(io.BytesIO(content), mimetype=record.type,
                     as_attachment=True, download_name=record.name)


@file_bp.route('/upload', methods=['POST'])
@jwt_required(optional=True)
def upload_file():
    file_obj = request.files.get("file")
    if not file_obj or not file_obj.filename:
        raise ValidationError("No file uploaded")
    content_type = (file_obj.mimetype
                    or mimetypes.guess_type(file_obj.filename)[0]
                    or 'application/octet-stream')
    incoming = IncomingFile(name=file_obj.filename, content_type=content_type, data=file_obj.read())
    record = FileService.upload(incoming, get_jwt_identity())
    return success(_record(record), msg="File uploaded successfully!")

@file_bp.route('/list', methods=['GET'])
@jwt_required(optional=True)
def list_files():
    records = FileService.list_files(get_jwt_identity())
    return success([_record(r) for r in records])

@file_bp.route('/info', methods=['GET'])
@jwt_required(optional=True)
def file_info():
    record = FileService.get_file(_file_id(request.args.get("id")), get_jwt_identity())
    return success(_record(record))

@file_bp.route('/download', methods=['GET'])
@jwt_required(optional=True)
def download_file():
    record = FileService.get_file(_file_id(request.args.get("id")), get_jwt_identity())
    return send_record(record)

@file_bp.route('/contents', methods=['GET'])
@jwt_required(optional=True)
def archive_contents():
    record = FileService.get_file(_file_id(request.args.get("id")), get_jwt_identity())
    return success(FileService.archive_contents(record))

@file_bp.route('/delete', methods=['POST'])
@jwt_required(optional=True)
def delete_file():
    data = request.get_json(silent=True) or {}
    file_id = FileService.delete_file(_file_id(data.get("id")), get_jwt_identity())
    return success({"id": file_id}, msg="File deleted successfully!")

@file_bp.route('/delete_selected', methods=['POST'])
@jwt_required(optional=True)
def delete_selected():
    data = request.get_json(silent=True) or {}
    ids = data.get("ids")
    if not isinstance(ids, list):
        raise ValidationError("ids must be a list")
    result = FileService.delete_selected([_file_id(i) for i in ids], get_jwt_identity())
    return success(result)

@file_bp.route('/clear', methods=['POST'])
@jwt_required(optional=True)
def clear_all():
    result = FileService.clear_all(get_jwt_identity())
    return success(result)
