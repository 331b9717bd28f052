from types import SimpleNamespace

from client.api.base import APIError
from client.dropzone import watcher
from client.dropzone.watcher import DropzoneEventHandler, DropzoneUploader, wait_until_stable


class StubFileAPI:
    def __init__(self, fail=()):
        self.fail = set(fail)
        self.uploaded = []

    def upload(self, path):
        if path in self.fail:
            raise APIError("Upload failed", code=2001)
        self.uploaded.append(path)
        return {"original_name": path, "download_url": "http://srv/public/x"}


def test_uploader_skips_temp_files(tmp_path):
    api = StubFileAPI()
    uploader = DropzoneUploader(api)
    for name in ("photo.jpg", "~$doc.docx", "movie.mp4.part", ".DS_Store"):
        (tmp_path / name).write_bytes(b"x")
        uploader.upload_file(str(tmp_path / name))
    assert api.uploaded == [str(tmp_path / "photo.jpg")]


def test_uploader_records_failures(tmp_path):
    path = str(tmp_path / "a.txt")
    (tmp_path / "a.txt").write_bytes(b"x")
    uploader = DropzoneUploader(StubFileAPI(fail={path}))
    assert uploader.upload_file(path) is None
    assert uploader.failed == [{"path": path, "msg": "Upload failed"}]


def test_handler_uploads_created_and_moved_files(tmp_path):
    api = StubFileAPI()
    handler = DropzoneEventHandler(DropzoneUploader(api), settle=lambda path: True)
    created = tmp_path / "new.txt"
    moved = tmp_path / "renamed.txt"
    created.write_bytes(b"1")
    moved.write_bytes(b"2")

    handler.on_created(SimpleNamespace(is_directory=False, src_path=str(created)))
    # 去抖：同一路径的重复事件被忽略
    handler.on_created(SimpleNamespace(is_directory=False, src_path=str(created)))
    handler.on_moved(SimpleNamespace(is_directory=False, src_path=str(tmp_path / "x.part"),
                                     dest_path=str(moved)))
    handler.on_created(SimpleNamespace(is_directory=True, src_path=str(tmp_path / "dir")))

    assert api.uploaded == [str(created), str(moved)]


def test_wait_until_stable(tmp_path, monkeypatch):
    path = tmp_path / "done.bin"
    path.write_bytes(b"x" * 10)
    monkeypatch.setattr(watcher.time, "sleep", lambda s: None)
    assert wait_until_stable(str(path)) is True
    assert wait_until_stable(str(tmp_path / "missing.bin")) is False


def test_wait_until_stable_gives_up_on_growing_file(monkeypatch):
    sizes = iter(range(100))
    monkeypatch.setattr(watcher.os.path, "getsize", lambda p: next(sizes))
    monkeypatch.setattr(watcher.time, "sleep", lambda s: None)
    assert wait_until_stable("growing.bin", attempts=5) is False


def test_debounce_forgets_old_paths(tmp_path, monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr(watcher.time, "time", lambda: clock[0])
    api = StubFileAPI()
    handler = DropzoneEventHandler(DropzoneUploader(api), debounce_ms=400, settle=lambda path: True)
    paths = []
    for i in range(3):
        p = tmp_path / f"{i}.txt"
        p.write_bytes(b"x")
        paths.append(str(p))
        handler.on_created(SimpleNamespace(is_directory=False, src_path=str(p)))
        clock[0] += 0.25

    assert len(api.uploaded) == 3
    assert set(handler._last_event_ts) == set(paths[1:])

    # 窗口过后同一路径可再次上传
    handler.on_created(SimpleNamespace(is_directory=False, src_path=paths[0]))
    assert api.uploaded[-1] == paths[0]
