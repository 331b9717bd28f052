import os


def _csv(value):
    return tuple(item.strip() for item in value.split(',') if item.strip())


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'super-secret')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET', 'jwt-secret')

    # 数据库，默认 SQLite
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///dropshare.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # 存储后端选择：local 或 s3
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'local')
    STORAGE_ROOT = os.getenv('STORAGE_ROOT', './uploads')
    # 本地后端是否启用入库压缩/出库解压
    ENABLE_COMPRESSION = os.getenv('ENABLE_COMPRESSION', 'true').lower() in ('1', 'true', 'yes')
    # 本地后端 download_url 的前缀，留空则使用当前请求的 host
    PUBLIC_BASE_URL = os.getenv('PUBLIC_BASE_URL', '')

    # 分享链接：{SHARE_BASE_URL}/?share=<share_id>
    SHARE_BASE_URL = os.getenv('SHARE_BASE_URL', 'https://shroomuploads.online')
    SHARE_ID_LENGTH = int(os.getenv('SHARE_ID_LENGTH', 22))

    # 上传限制
    MAX_FILE_SIZE = int(os.getenv('MAX_FILE_SIZE', 100 * 1024 * 1024))
    BLOCKED_MIME_TYPES = _csv(os.getenv(
        'BLOCKED_MIME_TYPES',
        'application/x-executable,application/x-msdownload,application/x-msi,application/x-msdos-program',
    ))
    # multipart 请求体上限，留出表单字段的余量
    MAX_CONTENT_LENGTH = MAX_FILE_SIZE + 1024 * 1024

    MAX_ARCHIVE_ENTRIES = int(os.getenv('MAX_ARCHIVE_ENTRIES', 1000))

    # S3 / MinIO
    AWS_ACCESS_KEY = os.getenv('AWS_ACCESS_KEY', 'test-key')
    AWS_SECRET_KEY = os.getenv('AWS_SECRET_KEY', 'test-secret')
    S3_BUCKET = os.getenv('S3_BUCKET', 'dropshare-uploads')
    S3_REGION = os.getenv('S3_REGION', 'us-east-1')
    S3_ENDPOINT_URL = os.getenv('S3_ENDPOINT_URL') or None
    # 公开访问前缀（例如 MinIO 的公开 bucket 地址），留空则使用 AWS 虚拟主机风格地址
    S3_PUBLIC_URL = os.getenv('S3_PUBLIC_URL', '')
