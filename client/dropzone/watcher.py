from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
import time
import os

from client.api.base import APIError


class DropzoneUploader:
    """把拖入目录的文件上传到服务端，顺序执行"""

    def __init__(self, file_api, ignore_suffixes=('.swp', '.tmp', '.temp', '.part', '.crdownload'),
                 ignore_prefixes=('~$', '.')):
        self.file_api = file_api
        self.ignore_suffixes = ignore_suffixes
        self.ignore_prefixes = ignore_prefixes
        self.uploaded = []
        self.failed = []

    def should_ignore(self, path) -> bool:
        name = os.path.basename(path)
        return name.startswith(self.ignore_prefixes) or name.endswith(self.ignore_suffixes)

    def upload_file(self, path):
        if self.should_ignore(path) or not os.path.isfile(path):
            return None
        try:
            record = self.file_api.upload(path)
        except APIError as e:
            print(f"[拖放上传] 上传失败: {path}, 错误: {e.msg}")
            self.failed.append({"path": path, "msg": e.msg})
            return None
        print(f"[拖放上传] 上传完成: {record['original_name']} -> {record.get('share_url', record['download_url'])}")
        self.uploaded.append(record)
        return record


def wait_until_stable(path, interval=0.2, attempts=10):
    """等待文件大小不再变化，避免上传写了一半的文件"""
    last = -1
    for _ in range(attempts):
        try:
            size = os.path.getsize(path)
        except OSError:
            return False
        if size == last:
            return True
        last = size
        time.sleep(interval)
    # 一直在写入，放弃本次上传
    return False


class DropzoneEventHandler(FileSystemEventHandler):
    def __init__(self, uploader, debounce_ms=400, settle=wait_until_stable):
        self.uploader = uploader
        self.debounce_ms = debounce_ms
        self.settle = settle
        self._last_event_ts = {}

    def _should_process(self, path):
        if self.uploader.should_ignore(path):
            return False
        now = time.time() * 1000
        # 去抖窗口外的记录已无用
        self._last_event_ts = {p: ts for p, ts in self._last_event_ts.items()
                               if now - ts < self.debounce_ms}
        if path in self._last_event_ts:
            return False
        self._last_event_ts[path] = now
        return True

    def _handle(self, path):
        if self._should_process(path) and self.settle(path):
            self.uploader.upload_file(path)

    def on_created(self, event):
        if not event.is_directory:
            self._handle(event.src_path)

    def on_moved(self, event):
        # 浏览器下载、编辑器保存通常先写临时文件再改名
        if not event.is_directory:
            self._handle(event.dest_path)


class DropzoneWatcher:
    def __init__(self, folder_path, uploader):
        self.folder_path = folder_path
        self.uploader = uploader
        self.observer = Observer()

    def start(self):
        event_handler = DropzoneEventHandler(self.uploader)
        # 只监听顶层目录
        self.observer.schedule(event_handler, self.folder_path, recursive=False)
        self.observer.start()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.observer.stop()
        self.observer.join()
