import io
import tarfile
import zipfile

from common.errors import ValidationError


def _zip_entries(data, limit):
    entries = []
    truncated = False
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        for info in zf.infolist():
            if len(entries) >= limit:
                truncated = True
                break
            entries.append({
                "name": info.filename,
                "size": info.file_size,
                "is_dir": info.is_dir(),
            })
    return entries, truncated


def _tar_entries(data, limit):
    entries = []
    truncated = False
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:*") as tf:
        for member in tf:
            if len(entries) >= limit:
                truncated = True
                break
            entries.append({
                "name": member.name,
                "size": member.size,
                "is_dir": member.isdir(),
            })
    return entries, truncated


def list_archive_entries(data: bytes, limit: int = 1000) -> dict:
    """
    读取压缩包目录（不解压内容）

    Supports zip and tar, including gzip/bzip2/xz compressed tar.

    Returns:
        Dict: {'format': 'zip'|'tar', 'entries': [{'name', 'size', 'is_dir'}, ...], 'truncated': bool}
    """
    if zipfile.is_zipfile(io.BytesIO(data)):
        try:
            entries, truncated = _zip_entries(data, limit)
        except zipfile.BadZipFile as e:
            raise ValidationError(f"Corrupt zip archive: {e}") from e
        return {"format": "zip", "entries": entries, "truncated": truncated}

    try:
        entries, truncated = _tar_entries(data, limit)
    except (tarfile.TarError, EOFError, OSError) as e:
        raise ValidationError("File is not a supported archive") from e
    return {"format": "tar", "entries": entries, "truncated": truncated}
