"""
Command-line interface for the CuratAI client.

Runs the same API and controller layers as the Streamlit app, without a
browser. The session is shared with the app through the storage file.

Usage:
    curatai login --email me@example.com
    curatai projects list --sort images
    curatai images upload <project_id> photos.zip
    curatai search <project_id> "kids at the beach"
    curatai albums create <project_id> --name Alice --image-id <id> --crop 0.4 0.3 --zoom 2
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import List, Optional

from curatai import __version__
from curatai.api import AlbumsApi, ApiClient, AuthService, ImagesApi, ProjectsApi, set_client
from curatai.config import get_config, load_config, set_config
from curatai.core.albums import AlbumsController
from curatai.core.cropping import image_size
from curatai.core.exceptions import AppError
from curatai.core.gallery import GalleryController
from curatai.core.notifications import Notifier
from curatai.core.projects import ProjectsController, SortKey
from curatai.core.validation import validate_person_name, validate_signup
from curatai.core.voice import VoiceInput
from curatai.core.workspace import Workspace
from curatai.logging_config import setup_logging
from curatai.models import AuthResult, Image
from curatai.storage import PersistentStorage, set_storage

logger = logging.getLogger(__name__)


class CliContext:
    """Controllers wired to one client, plus a notifier drained to stderr."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.notifier = Notifier()
        self.auth = AuthService(client)
        self.workspace = Workspace(self.auth.current_user())
        self.images_api = ImagesApi(client)
        self.albums_api = AlbumsApi(client)
        self.projects = ProjectsController(self.workspace, ProjectsApi(client), self.notifier, auth=self.auth)
        self.gallery = GalleryController(self.workspace, self.images_api, self.albums_api, self.notifier)
        self.albums = AlbumsController(self.workspace, self.albums_api, self.images_api, self.notifier, client)

    def flush(self) -> bool:
        """Print pending notifications. Returns False if any was an error."""
        ok = True
        for notification in self.notifier.pop():
            print(f"[{notification.level}] {notification.message}", file=sys.stderr)
            ok = ok and notification.level != "error"
        return ok

    def require_login(self) -> None:
        if not self.auth.is_authenticated() or self.workspace.user_id is None:
            raise SystemExit("Not logged in. Run: curatai login")

    def open_project(self, project_id: str) -> None:
        self.require_login()
        self.projects.select(project_id)


# Auth
def cmd_signup(ctx: CliContext, args) -> int:
    if args.google_token:
        return _report_auth(ctx.auth.google_signup(args.google_token))

    password = args.password or getpass.getpass("Password: ")
    errors = validate_signup(args.username, args.email, password)
    if errors:
        for field, message in errors.items():
            print(f"{field}: {message}", file=sys.stderr)
        return 1
    return _report_auth(ctx.auth.signup(args.username.strip(), args.email.strip(), password=password))


def cmd_login(ctx: CliContext, args) -> int:
    if args.google_token:
        result = ctx.auth.google_login(args.google_token)
    else:
        email = args.email or input("Email: ")
        password = args.password or getpass.getpass("Password: ")
        result = ctx.auth.login(email.strip(), password)
    if result.success:
        user = ctx.auth.current_user()
        print(f"Logged in as {user.username or user.email}")
        return 0
    return _report_auth(result)


def _report_auth(result: AuthResult) -> int:
    if result.success:
        print(result.message or "OK")
        return 0
    if result.notice:
        print(result.notice, file=sys.stderr)
    for field, message in result.errors.items():
        print(f"{field}: {message}", file=sys.stderr)
    if not result.errors and not result.notice:
        print(result.message or "Failed", file=sys.stderr)
    return 1


def cmd_logout(ctx: CliContext, args) -> int:
    ctx.projects.logout()
    print("Logged out")
    return 0


def cmd_whoami(ctx: CliContext, args) -> int:
    user = ctx.auth.current_user()
    if not ctx.auth.is_authenticated() or user is None:
        print("Not logged in")
        return 1
    print(f"{user.username} <{user.email}> (id {user.id})")
    return 0


# Projects
def cmd_projects_list(ctx: CliContext, args) -> int:
    ctx.require_login()
    ctx.projects.load()
    for project in ctx.projects.filtered(args.filter or "", SortKey(args.sort)):
        created = project.created_datetime
        print(f"{project.id}\t{project.project_name}\t{project.image_count} images"
              + (f"\t{created:%Y-%m-%d}" if created else ""))
    print(f"{len(ctx.projects.projects)} projects, {ctx.projects.total_images} images", file=sys.stderr)
    return 0 if ctx.flush() else 1


def cmd_projects_create(ctx: CliContext, args) -> int:
    ctx.require_login()
    project_id = ctx.projects.create(args.name)
    if project_id:
        print(project_id)
    return 0 if ctx.flush() and project_id else 1


def cmd_projects_delete(ctx: CliContext, args) -> int:
    ctx.require_login()
    ok = ctx.projects.delete(args.project_id)
    return 0 if ctx.flush() and ok else 1


def cmd_projects_show(ctx: CliContext, args) -> int:
    ctx.require_login()
    project = ctx.projects.api.validate(args.project_id)
    print(f"id:       {project.id}")
    print(f"name:     {project.project_name}")
    print(f"images:   {project.image_count}")
    print(f"created:  {project.created_at or '-'}")
    print(f"updated:  {project.updated_at or '-'}")
    return 0


# Images
def cmd_images_list(ctx: CliContext, args) -> int:
    ctx.open_project(args.project_id)
    for image in ctx.gallery.load():
        person = f"\t{image.person_name}" if image.person_name else ""
        print(f"{image.id}\t{image.image_url}{person}")
    return 0 if ctx.flush() else 1


def cmd_images_upload(ctx: CliContext, args) -> int:
    ctx.open_project(args.project_id)
    path = Path(args.zip_file)

    def on_progress(percent: int) -> None:
        print(f"\rUploading {path.name}: {percent:3d}%", end="", file=sys.stderr, flush=True)

    with open(path, "rb") as f:
        result = ctx.gallery.upload(path.name, f, on_progress=on_progress)
    print(file=sys.stderr)

    if result is not None:
        for image in result.images:
            print(f"{image.id}\t{image.image_url}")
    return 0 if ctx.flush() and result is not None else 1


def cmd_images_delete(ctx: CliContext, args) -> int:
    ctx.open_project(args.project_id)
    ok = ctx.gallery.delete_image(args.image_id)
    return 0 if ctx.flush() and ok else 1


def cmd_images_download(ctx: CliContext, args) -> int:
    ctx.open_project(args.project_id)
    images = ctx.gallery.load()
    if args.image_id:
        images = [image for image in images if image.id in args.image_id]

    saved = 0
    for image in images:
        path = ctx.gallery.download_image(image, Path(args.dest))
        if path is not None:
            print(path)
            saved += 1
    print(f"Downloaded {saved}/{len(images)} images", file=sys.stderr)
    return 0 if ctx.flush() else 1


# Search
def cmd_search(ctx: CliContext, args) -> int:
    ctx.open_project(args.project_id)
    query = " ".join(args.query)

    if args.audio:
        voice = VoiceInput(ctx.notifier)
        voice.require()
        query = voice.transcribe(Path(args.audio).read_bytes()) or ""
        if query:
            print(f"Heard: {query}", file=sys.stderr)

    message = ctx.gallery.search(query)
    if message is None:
        if not query.strip():
            print("Empty query", file=sys.stderr)
        ctx.flush()
        return 1

    print(message.content, file=sys.stderr)
    for link in message.image_links:
        print(link)
    return 0 if ctx.flush() else 1


# Albums
def cmd_albums_list(ctx: CliContext, args) -> int:
    ctx.open_project(args.project_id)
    for album in ctx.albums.load_albums():
        print(f"{album.id}\t{album.person_name}\t{len(album.image_group)} images")
    return 0 if ctx.flush() else 1


def cmd_albums_show(ctx: CliContext, args) -> int:
    ctx.require_login()
    detail = ctx.albums_api.get_album_images(args.album_id)
    if detail.album:
        print(f"# {detail.album.person_name} ({len(detail.image_links)} images)", file=sys.stderr)
    for link in detail.image_links:
        print(link)
    return 0


def cmd_albums_delete(ctx: CliContext, args) -> int:
    ctx.require_login()
    ok = ctx.albums.delete_album(args.album_id)
    return 0 if ctx.flush() and ok else 1


def cmd_albums_create(ctx: CliContext, args) -> int:
    ctx.open_project(args.project_id)
    albums = ctx.albums
    dialog = albums.dialog
    dialog.person_name = validate_person_name(args.name)

    if args.file:
        content = Path(args.file).read_bytes()
        source = Image(id="local", image_url=str(args.file), project_id=args.project_id)
        dialog.select_image(source, content, image_size(content))
    else:
        image = next((i for i in albums.load_project_images() if i.id == args.image_id), None)
        if image is None:
            print(f"Image {args.image_id} not found in project {args.project_id}", file=sys.stderr)
            ctx.flush()
            return 1
        if not albums.select_dialog_image(image):
            ctx.flush()
            return 1

    cx, cy = args.crop
    dialog.set_crop(center=(cx, cy), zoom=args.zoom)
    area = dialog.crop_area
    print(f"Crop: {area.width}x{area.height} at ({area.x}, {area.y})", file=sys.stderr)

    album_ids = albums.create_album()
    for album_id in album_ids or []:
        print(album_id)
    return 0 if ctx.flush() and album_ids is not None else 1


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="curatai",
        description="CuratAI photo organization client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Usage:", 1)[1],
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--config', '-c', type=str, help="Path to a YAML config file")
    parser.add_argument('--backend-url', type=str, help="Backend URL (overrides VITE_BACKEND_URL)")
    parser.add_argument('--storage', type=str, help="Session storage file (default: ~/.curatai/storage.json)")
    parser.add_argument('--log-level', type=str, default=None, help="Logging level (default: from config)")

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('signup', help="Create an account")
    p.add_argument('--username', '-u', default="")
    p.add_argument('--email', '-e', default="")
    p.add_argument('--password', '-p', help="Prompted when omitted")
    p.add_argument('--google-token', help="Sign up with a Google ID token instead")
    p.set_defaults(func=cmd_signup)

    p = sub.add_parser('login', help="Log in and store the session")
    p.add_argument('--email', '-e')
    p.add_argument('--password', '-p', help="Prompted when omitted")
    p.add_argument('--google-token', help="Log in with a Google ID token instead")
    p.set_defaults(func=cmd_login)

    sub.add_parser('logout', help="Clear the stored session").set_defaults(func=cmd_logout)
    sub.add_parser('whoami', help="Show the signed-in user").set_defaults(func=cmd_whoami)

    projects = sub.add_parser('projects', help="Manage projects").add_subparsers(dest='action', required=True)
    p = projects.add_parser('list')
    p.add_argument('--filter', '-f', help="Case-insensitive name filter")
    p.add_argument('--sort', '-s', choices=[k.value for k in SortKey], default=SortKey.RECENT.value)
    p.set_defaults(func=cmd_projects_list)
    p = projects.add_parser('create')
    p.add_argument('name')
    p.set_defaults(func=cmd_projects_create)
    p = projects.add_parser('delete')
    p.add_argument('project_id')
    p.set_defaults(func=cmd_projects_delete)
    p = projects.add_parser('show')
    p.add_argument('project_id')
    p.set_defaults(func=cmd_projects_show)

    images = sub.add_parser('images', help="Manage images").add_subparsers(dest='action', required=True)
    p = images.add_parser('list')
    p.add_argument('project_id')
    p.set_defaults(func=cmd_images_list)
    p = images.add_parser('upload')
    p.add_argument('project_id')
    p.add_argument('zip_file')
    p.set_defaults(func=cmd_images_upload)
    p = images.add_parser('delete')
    p.add_argument('project_id')
    p.add_argument('image_id')
    p.set_defaults(func=cmd_images_delete)
    p = images.add_parser('download')
    p.add_argument('project_id')
    p.add_argument('--dest', '-d', default=".", help="Destination directory (default: .)")
    p.add_argument('--image-id', '-i', action='append', help="Only these images (repeatable)")
    p.set_defaults(func=cmd_images_download)

    p = sub.add_parser('search', help='Search images, or list an album with "in album: <name>"')
    p.add_argument('project_id')
    p.add_argument('query', nargs='*')
    p.add_argument('--audio', help="WAV file to transcribe as the query (needs the voice extra)")
    p.set_defaults(func=cmd_search)

    albums = sub.add_parser('albums', help="Manage albums").add_subparsers(dest='action', required=True)
    p = albums.add_parser('list')
    p.add_argument('project_id')
    p.set_defaults(func=cmd_albums_list)
    p = albums.add_parser('show')
    p.add_argument('album_id')
    p.set_defaults(func=cmd_albums_show)
    p = albums.add_parser('delete')
    p.add_argument('album_id')
    p.set_defaults(func=cmd_albums_delete)
    p = albums.add_parser('create')
    p.add_argument('project_id')
    p.add_argument('--name', '-n', required=True, help="Person name")
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument('--image-id', help="Project image to crop the face from")
    source.add_argument('--file', help="Local image file to crop the face from")
    p.add_argument('--crop', nargs=2, type=float, metavar=('CX', 'CY'), default=(0.5, 0.5),
                   help="Crop center as fractions of width and height (default: 0.5 0.5)")
    p.add_argument('--zoom', type=float, default=1.0, help="Zoom from 1 (largest square) to 3")
    p.set_defaults(func=cmd_albums_create)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else get_config()
    if args.backend_url:
        config.backend_url = args.backend_url
    if args.storage:
        config.storage_path = Path(args.storage)
    set_config(config)
    setup_logging(args.log_level or config.log_level, config.log_file)

    storage = PersistentStorage(Path(config.storage_path))
    set_storage(storage)
    client = ApiClient(config=config, storage=storage)
    set_client(client)

    try:
        return args.func(CliContext(client), args)
    except AppError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
