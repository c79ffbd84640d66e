#!/usr/bin/env python3
"""
drive-tool - Command line access to the configured Google Drive account.

Reads GOOGLE_DRIVE_ENABLED / GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET /
GOOGLE_REDIRECT_URI / GOOGLE_REFRESH_TOKEN from the environment.

Exit codes: 0 success, 1 operation failed, 2 Drive disabled or not configured.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from drive_storage import (
    ConfigError,
    DriveStorage,
    DriveStorageError,
    NotConfigured,
    NotFound,
    TransferError,
    TransferRequest,
    __version__,
)
from drive_storage.core import format_size, format_timestamp, sanitize_filename, unique_filename
from drive_storage.drive import authorize_user, parse_drive_file_url

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOT_CONFIGURED = 2


def resolve_file_id(value: str) -> str:
    """Accept a raw file ID or a share link."""
    file_id, error = parse_drive_file_url(value)
    if error:
        raise ValueError(error)
    return file_id


# ============================================================================
# Commands
# ============================================================================


def cmd_status(storage: DriveStorage, args) -> int:
    settings = storage.settings
    if not settings.enabled:
        print("Google Drive: disabled")
        return EXIT_NOT_CONFIGURED

    missing = settings.missing_fields()
    if missing:
        print(f"Google Drive: enabled, missing {', '.join(missing)}")
        return EXIT_NOT_CONFIGURED

    print("Google Drive: enabled")
    print(f"  client id:    {settings.client_id}")
    print(f"  redirect uri: {settings.redirect_uri}")
    return EXIT_OK


def cmd_authorize(storage: DriveStorage, args) -> int:
    token = authorize_user(storage.settings, port=args.port)
    print("Authorized. Set this in your environment:")
    print()
    print(f"  GOOGLE_REFRESH_TOKEN={token}")
    print()
    return EXIT_OK


async def cmd_upload(storage: DriveStorage, args) -> int:
    path = Path(args.path)
    request = TransferRequest(name=args.name or path.name, mime_type=args.mime_type, source_path=path)
    remote = await storage.transfers.upload(request)
    print(f"Uploaded {path.name} -> {remote.id}")
    if remote.view_url:
        print(f"  {remote.view_url}")
    return EXIT_OK


async def cmd_download(storage: DriveStorage, args) -> int:
    file_id = resolve_file_id(args.file)
    destination = Path(args.destination)

    # A directory target takes its file name from Drive
    if destination.is_dir() or args.destination.endswith(("/", "\\")):
        remote = await storage.get_file_info(file_id)
        name = unique_filename(remote.name) if args.unique else sanitize_filename(remote.name)
        destination = destination / name

    try:
        path = await storage.download(file_id, destination)
    except TransferError as e:
        if e.partial_path is not None:
            Path(e.partial_path).unlink(missing_ok=True)
        raise

    print(f"Downloaded {file_id} -> {path} ({format_size(path.stat().st_size)})")
    return EXIT_OK


async def cmd_list(storage: DriveStorage, args) -> int:
    files = await storage.catalog.list(args.page_size, query=args.query)
    if not files:
        print("No files.")
        return EXIT_OK

    for remote in files:
        print(f"{remote.id}  {format_size(remote.size_bytes):>10}  {format_timestamp(remote.created_at)}  {remote.name}")
    return EXIT_OK


async def cmd_info(storage: DriveStorage, args) -> int:
    remote = await storage.get_file_info(resolve_file_id(args.file))
    print(f"id:        {remote.id}")
    print(f"name:      {remote.name}")
    print(f"mime type: {remote.mime_type}")
    print(f"size:      {format_size(remote.size_bytes)}")
    print(f"created:   {format_timestamp(remote.created_at)}")
    if remote.view_url:
        print(f"view:      {remote.view_url}")
    return EXIT_OK


async def cmd_rm(storage: DriveStorage, args) -> int:
    file_id = resolve_file_id(args.file)
    try:
        await storage.remove(file_id)
    except NotFound:
        if not args.missing_ok:
            raise
        print(f"Already gone: {file_id}")
        return EXIT_OK
    print(f"Deleted {file_id}")
    return EXIT_OK


# Commands that talk to Drive and need an initialized client
REMOTE_COMMANDS = {
    "upload": cmd_upload,
    "download": cmd_download,
    "list": cmd_list,
    "info": cmd_info,
    "rm": cmd_rm,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drive-tool",
        description="Upload, download, list and delete files on Google Drive",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log request details")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show whether Drive is enabled and configured")

    p = sub.add_parser("authorize", help="Sign in and print a refresh token")
    p.add_argument("--port", type=int, default=0, help="Local redirect port (default: any free port)")

    p = sub.add_parser("upload", help="Upload a local file as a new Drive file")
    p.add_argument("path")
    p.add_argument("--name", help="Name on Drive (default: local file name)")
    p.add_argument("--mime-type", help="MIME type (default: guessed from name)")

    p = sub.add_parser("download", help="Download a file by ID or share link")
    p.add_argument("file")
    p.add_argument("destination", help="File path, or directory to keep the Drive name")
    p.add_argument("--unique", action="store_true", help="Append a timestamp to the Drive name")

    p = sub.add_parser("list", help="List files (first page only)")
    p.add_argument("-n", "--page-size", type=int, default=10)
    p.add_argument("-q", "--query", help="Drive search expression")

    p = sub.add_parser("info", help="Show metadata for a file")
    p.add_argument("file")

    p = sub.add_parser("rm", help="Delete a file")
    p.add_argument("file")
    p.add_argument("--missing-ok", action="store_true", help="Succeed if the file is already gone")

    return parser


def main(argv: Optional[list[str]] = None, storage: Optional[DriveStorage] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    storage = storage or DriveStorage.from_env()

    try:
        if args.command == "status":
            return cmd_status(storage, args)
        if args.command == "authorize":
            return cmd_authorize(storage, args)

        if not storage.initialize():
            print("Google Drive integration is disabled (set GOOGLE_DRIVE_ENABLED=true)")
            return EXIT_NOT_CONFIGURED
        return asyncio.run(REMOTE_COMMANDS[args.command](storage, args))

    except (ConfigError, NotConfigured) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_NOT_CONFIGURED
    except DriveStorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
