# client/config.py
import os

class Config:
    BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:5000")  # 本地后端
    TIMEOUT = int(os.getenv("API_TIMEOUT", 10))  # 请求超时
    TOKEN_PATH = os.getenv("TOKEN_PATH", "./.token_cache.json")
    # 上传前在本地先做一次大小检查，与服务端 MAX_FILE_SIZE 保持一致
    MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", 100 * 1024 * 1024))
