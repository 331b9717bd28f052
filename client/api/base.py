# client/api/base.py
import requests
from client.config import Config


class APIError(RuntimeError):
    """服务端返回非 0 code，或请求本身失败"""

    def __init__(self, msg, code=None, status=None):
        super().__init__(msg)
        self.msg = msg
        self.code = code
        self.status = status

    @property
    def not_found(self):
        return self.code == 4004


class BaseAPI:
    def __init__(self, base_url=None, token=None, session=None):
        self.base_url = (base_url or Config.BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.token = None

        if token:
            self.set_token(token)

    def set_token(self, token):
        """更新 token"""
        self.token = token
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})
        else:
            self.session.headers.pop("Authorization", None)

    def request(self, method, path, **kwargs):
        """封装统一请求逻辑，返回 data 字段"""
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=Config.TIMEOUT, **kwargs)
        except requests.RequestException as e:
            raise APIError(f"HTTP error: {e}") from e
        try:
            data = resp.json()
        except ValueError as e:
            raise APIError(f"Invalid response ({resp.status_code})", status=resp.status_code) from e

        if data.get("code") != 0:
            raise APIError(data.get("msg") or str(data), code=data.get("code"), status=resp.status_code)

        return data.get("data")

    def fetch(self, url, **kwargs):
        """下载原始字节（download_url 或附件接口）"""
        if url.startswith("/"):
            url = f"{self.base_url}{url}"
        # 只有访问自己的后端时才带 token，对象存储等外部地址用不带认证头的请求
        same_origin = url == self.base_url or url.startswith(self.base_url + "/")
        get = self.session.get if same_origin else requests.get
        try:
            resp = get(url, timeout=Config.TIMEOUT, **kwargs)
        except requests.RequestException as e:
            raise APIError(f"HTTP error: {e}") from e
        if resp.status_code != 200:
            raise APIError(f"Download failed: HTTP {resp.status_code}", status=resp.status_code)
        return resp.content
