"""Command-line admin console for the catalogue backend."""

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from catalog_admin.analytics import fetch_dashboard
from catalog_admin.auth import SignInController, logout
from catalog_admin.config import (
    API_BASE_URL,
    DEFAULT_PAGE_SIZE,
    LOG_DIR,
    PAGE_SIZE_OPTIONS,
    PRODUCT_STATUSES,
    SESSION_FILE,
)
from catalog_admin.controllers import RecordFormController, ResourceListController
from catalog_admin.errors import AdminClientError, user_message
from catalog_admin.forms import ProductDraft
from catalog_admin.http_client import ApiClient
from catalog_admin.logging_config import get_logger, setup_logging
from catalog_admin.previews import LocalFile
from catalog_admin.resources import (
    ResourceEndpoint,
    category_endpoint,
    product_endpoint,
    subcategory_endpoint,
)
from catalog_admin.session import SessionStore
from catalog_admin.views import render_dashboard, render_form, render_messages, render_page

__all__ = ["main", "build_parser", "confirm_prompt"]

logger = get_logger("cli")

ENDPOINT_FACTORIES = {
    "category": category_endpoint,
    "subcategory": subcategory_endpoint,
    "product": product_endpoint,
}


def confirm_prompt(message: str) -> bool:
    """Ask a yes/no question on the terminal (default: no)."""
    try:
        answer = input(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def key_value(text: str) -> Tuple[str, str]:
    """argparse type for ``KEY=VALUE`` options."""
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    key, value = text.split("=", 1)
    return key.strip(), value.strip()


# ---------- Parser ----------


def _add_list_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", help="Free-text search")
    parser.add_argument("--page", type=int, default=1, help="Page to show (default: 1)")
    parser.add_argument(
        "--page-size",
        type=int,
        choices=PAGE_SIZE_OPTIONS,
        default=DEFAULT_PAGE_SIZE,
        help=f"Rows per page (default: {DEFAULT_PAGE_SIZE})",
    )


def _add_delete_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", type=int, help="Record ID")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")


def _add_product_fields(parser: argparse.ArgumentParser, creating: bool) -> None:
    parser.add_argument("--name", required=creating)
    parser.add_argument("--category-id", required=creating)
    parser.add_argument("--subcategory-id")
    parser.add_argument("--description")
    parser.add_argument("--price")
    parser.add_argument("--status", choices=PRODUCT_STATUSES)
    featured = parser.add_mutually_exclusive_group()
    featured.add_argument("--featured", dest="featured", action="store_const", const=True)
    featured.add_argument("--not-featured", dest="featured", action="store_const", const=False)
    parser.add_argument("--meta-title")
    parser.add_argument("--meta-description")
    parser.add_argument("--meta-keywords")
    parser.add_argument(
        "--spec", type=key_value, action="append", metavar="KEY=VALUE", help="Set a specification (repeatable)"
    )
    parser.add_argument(
        "--requirement", type=key_value, action="append", metavar="KEY=VALUE", help="Set a requirement (repeatable)"
    )
    parser.add_argument("--embed", action="append", metavar="URL", help="Add a video URL (repeatable)")
    parser.add_argument("--thumbnail", type=Path, help="Thumbnail image file")
    parser.add_argument("--media", type=Path, action="append", help="Media file to upload (repeatable)")
    if not creating:
        parser.add_argument("--clear-specs", action="store_true", help="Drop existing specifications")
        parser.add_argument("--clear-requirements", action="store_true", help="Drop existing requirements")
        parser.add_argument("--clear-embeds", action="store_true", help="Drop existing embeds")
    parser.add_argument("--dry-run", action="store_true", help="Show the form without submitting")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-admin",
        description="Admin console for the catalogue API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sign in (password is prompted)
  catalog-admin login --email admin@example.com

  # Published, featured products matching "lamp", 25 per page
  catalog-admin product list --search lamp --status published --featured --page-size 25

  # Create a product with specs, a video and images
  catalog-admin product create --name "Desk Lamp" --category-id 3 --price 49.90 \\
      --spec Color=Black --spec Power=12W --embed https://youtu.be/abc123 \\
      --thumbnail lamp.jpg --media side.jpg --media top.jpg

  # Delete a category without the prompt
  catalog-admin category delete 7 --yes
        """,
    )
    parser.add_argument("--api-url", help=f"Backend base URL (default: {API_BASE_URL})")
    parser.add_argument("--session-file", type=Path, default=SESSION_FILE, help="Where the session is stored")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    parser.add_argument("--no-log-file", action="store_true", help="Don't write the JSONL log")
    parser.add_argument("--log-dir", type=Path, help=f"Where JSONL logs go (default: {LOG_DIR})")

    commands = parser.add_subparsers(dest="command", required=True)

    login_parser = commands.add_parser("login", help="Sign in")
    login_parser.add_argument("--email", required=True)
    login_parser.add_argument("--password", help="Prompted when omitted")
    login_parser.add_argument("--redirect-to", help="Where to go after sign-in (default: /)")

    commands.add_parser("logout", help="Sign out")
    commands.add_parser("whoami", help="Show the signed-in user")
    commands.add_parser("dashboard", help="Show analytics")

    # category
    category = commands.add_parser("category", help="Manage categories").add_subparsers(
        dest="action", required=True
    )
    _add_list_options(category.add_parser("list"))
    create = category.add_parser("create")
    create.add_argument("--name", required=True)
    create.add_argument("--description", default="")
    update = category.add_parser("update")
    update.add_argument("id", type=int)
    update.add_argument("--name")
    update.add_argument("--description")
    _add_delete_options(category.add_parser("delete"))

    # subcategory
    subcategory = commands.add_parser("subcategory", help="Manage sub-categories").add_subparsers(
        dest="action", required=True
    )
    _add_list_options(subcategory.add_parser("list"))
    create = subcategory.add_parser("create")
    create.add_argument("--name", required=True)
    create.add_argument("--category-id", required=True)
    create.add_argument("--description", default="")
    update = subcategory.add_parser("update")
    update.add_argument("id", type=int)
    update.add_argument("--name")
    update.add_argument("--category-id")
    update.add_argument("--description")
    _add_delete_options(subcategory.add_parser("delete"))

    # product
    product = commands.add_parser("product", help="Manage products").add_subparsers(
        dest="action", required=True
    )
    product_list = product.add_parser("list")
    _add_list_options(product_list)
    product_list.add_argument("--category-id")
    product_list.add_argument("--status", choices=PRODUCT_STATUSES)
    featured = product_list.add_mutually_exclusive_group()
    featured.add_argument("--featured", dest="featured", action="store_const", const=True)
    featured.add_argument("--not-featured", dest="featured", action="store_const", const=False)
    _add_product_fields(product.add_parser("create"), creating=True)
    update = product.add_parser("update")
    update.add_argument("id", type=int)
    _add_product_fields(update, creating=False)
    _add_delete_options(product.add_parser("delete"))

    return parser


# ---------- Draft editing ----------


def _set_row(rows, key: str, value: str) -> None:
    for index, row in enumerate(rows.rows):
        if row["key"] == key:
            rows.update(index, value=value)
            return
    rows.add(key, value)


def apply_product_args(draft: ProductDraft, args: argparse.Namespace) -> None:
    """Copy product options from the command line onto a draft."""
    for attr in (
        "name",
        "category_id",
        "subcategory_id",
        "description",
        "price",
        "status",
        "meta_title",
        "meta_description",
        "meta_keywords",
    ):
        value = getattr(args, attr, None)
        if value is not None:
            setattr(draft, attr, value)
    if args.featured is not None:
        draft.is_featured = args.featured

    if getattr(args, "clear_specs", False):
        draft.specifications.rows.clear()
    if getattr(args, "clear_requirements", False):
        draft.requirements.rows.clear()
    if getattr(args, "clear_embeds", False):
        draft.embeds.clear()

    for key, value in args.spec or []:
        _set_row(draft.specifications, key, value)
    for key, value in args.requirement or []:
        _set_row(draft.requirements, key, value)
    for url in args.embed or []:
        draft.add_embed(url)

    if args.thumbnail:
        draft.thumbnail.select(LocalFile.from_path(args.thumbnail))
    if args.media:
        draft.media.stage(LocalFile.from_path(p) for p in args.media)
        draft.media.wait()


def apply_simple_args(draft, args: argparse.Namespace) -> None:
    for attr in ("name", "description", "category_id"):
        value = getattr(args, attr, None)
        if value is not None and hasattr(draft, attr):
            setattr(draft, attr, value)


# ---------- Commands ----------


def _print_messages(controller) -> None:
    messages = render_messages(controller)
    if messages:
        print(messages)


def cmd_login(client: ApiClient, store: SessionStore, args: argparse.Namespace) -> int:
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    sign_in = SignInController(client, store, redirect_to=args.redirect_to)
    user = sign_in.submit(args.email, password)
    _print_messages(sign_in)
    if user is None:
        return 1
    print(f"Signed in as {user.username} ({user.role}); continue at {sign_in.redirect_to}")
    return 0


def cmd_logout(store: SessionStore) -> int:
    logout(store)
    print("Signed out.")
    return 0


def cmd_whoami(store: SessionStore) -> int:
    if not store.is_authenticated or store.user is None:
        print("Not signed in.")
        return 1
    user = store.user
    print(f"{user.username} <{user.email}> role={user.role} id={user.id}")
    return 0


def cmd_dashboard(client: ApiClient) -> int:
    try:
        stats = fetch_dashboard(client)
    except AdminClientError as e:
        print(f"Error: {user_message(e, 'Failed to load analytics')}")
        return 1
    print(render_dashboard(stats))
    return 0


def cmd_resource(
    client: ApiClient,
    args: argparse.Namespace,
    confirm: Callable[[str], bool],
) -> int:
    endpoint: ResourceEndpoint = ENDPOINT_FACTORIES[args.command](client)
    lister = ResourceListController(endpoint)

    if args.action == "list":
        lister.page_size = args.page_size
        filters = {"search": args.search}
        if args.command == "product":
            filters.update(category_id=args.category_id, status=args.status, is_featured=args.featured)
        lister.filters = {k: v for k, v in filters.items() if v is not None}
        lister.refresh()
        lister.go_to_page(args.page)
        print(render_page(lister))
        return 1 if lister.error else 0

    form = RecordFormController(endpoint, lister, confirm)

    if args.action == "delete":
        ok = form.delete(args.id)
        _print_messages(form)
        return 0 if ok else 1

    if args.action == "create":
        draft = form.open_create()
    else:
        lister.refresh()
        if lister.error:
            _print_messages(lister)
            return 1
        record = lister.find(args.id)
        if record is None:
            print(f"Error: no {endpoint.label} with id {args.id}")
            return 1
        draft = form.open_edit(record)

    try:
        if isinstance(draft, ProductDraft):
            apply_product_args(draft, args)
        else:
            apply_simple_args(draft, args)
    except (OSError, AdminClientError) as e:
        print(f"Error: {user_message(e, str(e))}")
        form.close()
        return 1

    if getattr(args, "dry_run", False):
        problems = draft.validate()
        if problems:
            print(f"Error: missing or invalid fields: {', '.join(problems)}")
        else:
            print(render_form(form))
        form.close()
        return 1 if problems else 0

    ok = form.submit()
    _print_messages(form)
    if not ok:
        form.close()
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        log_to_file=not args.no_log_file,
        log_dir=args.log_dir,
    )

    logger.debug(f"Command: {args.command} {getattr(args, 'action', '')}".rstrip())

    store = SessionStore(args.session_file)
    client = ApiClient(store, base_url=args.api_url)
    confirm = (lambda _message: True) if getattr(args, "yes", False) else confirm_prompt

    try:
        if args.command == "login":
            return cmd_login(client, store, args)
        if args.command == "logout":
            return cmd_logout(store)
        if args.command == "whoami":
            return cmd_whoami(store)
        if args.command == "dashboard":
            return cmd_dashboard(client)
        return cmd_resource(client, args, confirm)
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
