"""
文件API - 上传、列表、下载、分享解析、删除
"""
import mimetypes
import os
from typing import Dict, List, Optional

from client.api.base import BaseAPI, APIError
from client.config import Config
from client.utils.format import format_file_size
from client.utils.share_link import parse_share_token


class FileAPI(BaseAPI):
    """文件接口；所有操作都是一次请求，不做重试"""

    def validate(self, filepath: str) -> int:
        """本地预检，超过上限的文件不会发出任何请求"""
        if not os.path.isfile(filepath):
            raise APIError(f"Not a file: {filepath}")
        size = os.path.getsize(filepath)
        if size > Config.MAX_FILE_SIZE:
            raise APIError(
                f"File size exceeds {format_file_size(Config.MAX_FILE_SIZE)} limit. "
                f"Current size: {format_file_size(size)}",
                code=1001,
            )
        return size

    def upload(self, filepath: str, content_type: Optional[str] = None) -> Dict:
        self.validate(filepath)
        filename = os.path.basename(filepath)
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        with open(filepath, "rb") as f:
            files = {"file": (filename, f, content_type)}
            return self.request("POST", "/file/upload", files=files)

    def upload_many(self, filepaths: List[str]) -> Dict:
        """
        逐个顺序上传，单个失败不影响其余文件

        Returns:
            Dict: {'uploaded': [record, ...], 'failed': [{'path': str, 'msg': str}, ...]}
        """
        uploaded, failed = [], []
        for path in filepaths:
            try:
                uploaded.append(self.upload(path))
            except APIError as e:
                failed.append({"path": path, "msg": e.msg})
        return {"uploaded": uploaded, "failed": failed}

    def list(self) -> List[Dict]:
        return self.request("GET", "/file/list")

    def info(self, file_id: int) -> Dict:
        return self.request("GET", "/file/info", params={"id": file_id})

    def contents(self, file_id: int) -> Dict:
        return self.request("GET", "/file/contents", params={"id": file_id})

    def delete(self, file_id: int) -> Dict:
        return self.request("POST", "/file/delete", json={"id": file_id})

    def delete_selected(self, file_ids: List[int]) -> Dict:
        return self.request("POST", "/file/delete_selected", json={"ids": list(file_ids)})

    def clear_all(self) -> Dict:
        return self.request("POST", "/file/clear")

    # ---------- 分享 ----------
    def resolve_share(self, token_or_url: str) -> Dict:
        """接受 share token 或完整分享链接；无需登录"""
        token = parse_share_token(token_or_url)
        if not token:
            raise APIError("Shared file not found", code=4004)
        return self.request("GET", f"/share/{token}")

    def share_contents(self, token_or_url: str) -> Dict:
        token = parse_share_token(token_or_url)
        if not token:
            raise APIError("Shared file not found", code=4004)
        return self.request("GET", f"/share/{token}/contents")

    # ---------- 下载 ----------
    def download(self, record: Dict, save_path: str) -> str:
        """通过 download_url 下载；save_path 为目录时使用记录中的文件名"""
        if os.path.isdir(save_path):
            save_path = os.path.join(save_path, os.path.basename(record["name"]))
        content = self.fetch(record["download_url"])
        with open(save_path, "wb") as f:
            f.write(content)
        return save_path
