import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence

from folio.adapters.memory import InMemoryAuthBackend, InMemoryBackend, seed_demo
from folio.app_shell.config import AppConfig, ConfigError, load_config
from folio.app_shell.context import AppContext
from folio.components.settings import UpsertSettingInput
from folio.core.ports.auth import AuthError

logger = logging.getLogger("folio.cli")

PASSWORD_ENV = "FOLIO_ADMIN_PASSWORD"


async def build_context(config: AppConfig, demo: bool, email: str | None = None) -> AppContext:
    if not demo:
        return AppContext.create(config)

    backend = InMemoryBackend()
    await seed_demo(backend)
    auth_backend = InMemoryAuthBackend()
    if email:
        # demo mode accepts whatever admin credentials the caller brings
        auth_backend.add_user(email, os.environ.get(PASSWORD_ENV, ""))
    return AppContext.in_memory(config.rules, backend, auth_backend)


async def handle_settings(ctx: AppContext, args: argparse.Namespace) -> int:
    snapshot = ctx.settings.snapshot
    keys = sorted(set(snapshot.values) | set(ctx.rules.content_defaults))
    for key in keys:
        marker = "" if key in snapshot.values else "  (default)"
        print(f"{key} = {snapshot.get(key)}{marker}")
    return 0


async def handle_stats(ctx: AppContext, args: argparse.Namespace) -> int:
    result = await ctx.stats()
    if not result.success:
        print(f"Failed to load stats: {result.error}", file=sys.stderr)
        return 1
    stats = result.stats
    print(f"Projects:     {stats.projects}")
    print(f"Testimonials: {stats.testimonials}")
    print(f"Skills:       {stats.skills}")
    print(f"Contacts:     {stats.contacts} ({stats.unread_contacts} new)")
    return 0


async def handle_contacts(ctx: AppContext, args: argparse.Namespace) -> int:
    console = await ctx.open_admin()
    if not console.contacts.loaded:
        return 1
    for contact in console.contacts.by_status(args.status):
        received = contact.created_at.strftime("%Y-%m-%d %H:%M") if contact.created_at else "-"
        sender = f"{contact.name} <{contact.email}>"
        print(f"[{contact.status:<8}] {received}  {sender}: {contact.subject}")
    return 0


async def handle_set_setting(ctx: AppContext, args: argparse.Namespace) -> int:
    password = os.environ.get(PASSWORD_ENV)
    if not password:
        print(f"Set {PASSWORD_ENV} to sign in.", file=sys.stderr)
        return 1
    try:
        await ctx.auth.sign_in(args.email, password)
    except AuthError as exc:
        print(f"Sign-in failed: {exc}", file=sys.stderr)
        return 1

    result = await ctx.settings_editor.upsert(UpsertSettingInput(key=args.key, value=args.value))
    if not result.success:
        print(f"Failed to save {args.key}: {result.error}", file=sys.stderr)
        return 1
    print(f"{args.key} = {ctx.settings.snapshot.get(args.key)}")
    return 0


HANDLERS = {
    "settings": handle_settings,
    "stats": handle_stats,
    "contacts": handle_contacts,
    "set-setting": handle_set_setting,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="folio", description="Portfolio content console")
    parser.add_argument(
        "--demo", action="store_true", help="Run against a seeded in-memory backend"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("settings", help="Print resolved site settings")
    subparsers.add_parser("stats", help="Print dashboard counts")

    contacts_parser = subparsers.add_parser("contacts", help="List contact messages")
    contacts_parser.add_argument(
        "--status", choices=["new", "read", "replied", "archived"], help="Only this status"
    )

    set_parser = subparsers.add_parser("set-setting", help="Create or update a site setting")
    set_parser.add_argument("key")
    set_parser.add_argument("value")
    set_parser.add_argument("--email", required=True, help=f"Admin email ({PASSWORD_ENV})")

    return parser


async def run(args: argparse.Namespace, config: AppConfig) -> int:
    ctx = await build_context(config, args.demo, getattr(args, "email", None))
    try:
        await ctx.startup()
        return await HANDLERS[args.command](ctx, args)
    finally:
        await ctx.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except (FileNotFoundError, ValueError, ConfigError) as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("%s", e)
        return 1

    logging.basicConfig(
        level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        return asyncio.run(run(args, config))
    except ConfigError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
