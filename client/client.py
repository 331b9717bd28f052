"""
命令行客户端 - 上传、列表、分享、下载、删除
"""
from client.api.auth_api import AuthAPI
from client.api.base import APIError
from client.api.file_api import FileAPI
from client.config import Config
from client.dropzone.watcher import DropzoneUploader, DropzoneWatcher
from client.utils.format import format_file_size
import argparse
import os
import sys


class ShareClient:
    """认证与文件接口共用同一个 token"""

    def __init__(self, base_url=None):
        self.base_url = base_url or Config.BASE_URL
        self.auth = AuthAPI(self.base_url)
        self.file = FileAPI(self.base_url)

    def login(self, username, password):
        token = self.auth.login(username, password)
        self._sync_token(token)
        return token

    def restore_session(self):
        """读取本地缓存的 token；没有缓存时以匿名身份访问公共文件池"""
        token = self.auth.load_token()
        if token:
            self._sync_token(token)
        return token

    def logout(self):
        self.auth.logout()
        self._sync_token(None)

    def _sync_token(self, token):
        """同步 token 到所有模块"""
        self.file.set_token(token)


def _print_record(record):
    print(f"  #{record['id']}  {record['original_name']}  "
          f"{format_file_size(record['size'])}  {record['type']}  {record['upload_date']}")
    print(f"      share: {record.get('share_url', record['share_id'])}")


def cmd_register(cli, args):
    cli.auth.register(args.username, args.password)
    print(f"已注册: {args.username}")

def cmd_login(cli, args):
    cli.login(args.username, args.password)
    print(f"已登录: {args.username}")

def cmd_logout(cli, args):
    cli.logout()
    print("已登出")

def cmd_upload(cli, args):
    # 多个文件顺序上传
    result = cli.file.upload_many(args.paths)
    for record in result["uploaded"]:
        print(f"[上传] {record['original_name']} 上传成功")
        _print_record(record)
    for item in result["failed"]:
        print(f"[上传] {item['path']} 上传失败: {item['msg']}")
    return 1 if result["failed"] else 0

def cmd_list(cli, args):
    files = cli.file.list()
    if not files:
        print("没有文件")
    for record in files:
        _print_record(record)

def cmd_share(cli, args):
    print(cli.file.info(args.id)["share_url"])

def cmd_resolve(cli, args):
    record = cli.file.resolve_share(args.link)
    _print_record(record)
    print(f"      download: {record['download_url']}")

def cmd_download(cli, args):
    if args.share:
        record = cli.file.resolve_share(args.share)
    else:
        record = cli.file.info(args.id)
    path = cli.file.download(record, args.output)
    print(f"[下载] 文件已保存: {path}")

def cmd_delete(cli, args):
    if len(args.ids) == 1:
        cli.file.delete(args.ids[0])
        print(f"[删除] #{args.ids[0]} 已删除")
        return 0
    result = cli.file.delete_selected(args.ids)
    print(f"[删除] 成功 {len(result['deleted'])} 个")
    for item in result["failed"]:
        print(f"[删除] #{item['id']} 失败: {item['msg']}")
    return 1 if result["failed"] else 0

def cmd_clear(cli, args):
    if not args.yes:
        answer = input("确认删除全部文件？此操作不可恢复 [y/N] ")
        if answer.strip().lower() != "y":
            print("已取消")
            return 0
    result = cli.file.clear_all()
    print(f"[删除] 成功 {len(result['deleted'])} 个，失败 {len(result['failed'])} 个")
    return 1 if result["failed"] else 0

def cmd_contents(cli, args):
    if args.share:
        listing = cli.file.share_contents(args.share)
    else:
        listing = cli.file.contents(args.id)
    for entry in listing["entries"]:
        marker = "/" if entry["is_dir"] and not entry["name"].endswith("/") else ""
        print(f"  {entry['name']}{marker}  {format_file_size(entry['size'])}")
    if listing["truncated"]:
        print("  ... (truncated)")

def cmd_watch(cli, args):
    path = os.path.abspath(args.path)
    if not os.path.isdir(path):
        raise SystemExit(f"路径不存在或不是目录: {path}")
    uploader = DropzoneUploader(cli.file)
    print(f"[拖放上传] 开始监听目录: {path}，按 Ctrl+C 退出")
    DropzoneWatcher(path, uploader).start()


def build_parser():
    parser = argparse.ArgumentParser(description="Dropshare client")
    parser.add_argument("--base-url", default=Config.BASE_URL, help="Backend API base url")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="Create an account")
    p.add_argument("username")
    p.add_argument("password")
    p.set_defaults(func=cmd_register)

    p = sub.add_parser("login", help="Sign in and cache the token")
    p.add_argument("username")
    p.add_argument("password")
    p.set_defaults(func=cmd_login)

    p = sub.add_parser("logout", help="Sign out")
    p.set_defaults(func=cmd_logout)

    p = sub.add_parser("upload", help="Upload one or more files")
    p.add_argument("paths", nargs="+")
    p.set_defaults(func=cmd_upload)

    p = sub.add_parser("list", help="List your files, newest first")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("share", help="Print the share link of a file")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_share)

    p = sub.add_parser("resolve", help="Show the file behind a share link or token")
    p.add_argument("link")
    p.set_defaults(func=cmd_resolve)

    p = sub.add_parser("download", help="Download a file by id or share link")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--id", type=int)
    group.add_argument("--share")
    p.add_argument("-o", "--output", default=".")
    p.set_defaults(func=cmd_download)

    p = sub.add_parser("delete", help="Delete files by id")
    p.add_argument("ids", nargs="+", type=int)
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("clear", help="Delete all of your files")
    p.add_argument("-y", "--yes", action="store_true")
    p.set_defaults(func=cmd_clear)

    p = sub.add_parser("contents", help="List the entries of an archive")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--id", type=int)
    group.add_argument("--share")
    p.set_defaults(func=cmd_contents)

    p = sub.add_parser("watch", help="Upload every file dropped into a folder")
    p.add_argument("path")
    p.set_defaults(func=cmd_watch)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    cli = ShareClient(base_url=args.base_url)
    if args.command not in ("login", "register"):
        cli.restore_session()
    try:
        return args.func(cli, args) or 0
    except APIError as e:
        print(f"[错误] {e.msg}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
