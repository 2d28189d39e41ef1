"""CLI entry point for chat-settings."""

import argparse
import logging
import os
import sys

import chat_settings.app.languages
import chat_settings.app.session
import chat_settings.io.logging_setup
from chat_settings.app.account_store import AccountStore
from chat_settings.services.user_service import UserService
from chat_settings.tui.app import SettingsApp

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Edit chat account and profile settings")
    parser.add_argument(
        "--server",
        type=str,
        default=os.environ.get("CHAT_SETTINGS_SERVER", "http://127.0.0.1:8080"),
        help="Chat server base URL (default: $CHAT_SETTINGS_SERVER or http://127.0.0.1:8080)",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Session token (default: the stored token)",
    )
    parser.add_argument(
        "--language",
        type=str,
        default=None,
        help="UI language, e.g. en-gb (persisted for next time)",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    runtime = chat_settings.io.logging_setup.configure()
    logger.info("chat-settings starting, log file %s", runtime.file_path)

    if args.language is not None:
        try:
            chat_settings.app.languages.set_current_language(args.language)
        except KeyError:
            known = ", ".join(sorted(chat_settings.app.languages.LANGUAGES))
            sys.stderr.write(f"unknown language {args.language!r} (known: {known})\n")
            return 2

    language = (
        chat_settings.app.languages.get_current_language()
        or chat_settings.app.languages.DEFAULT_LANGUAGE
    )
    pack = chat_settings.app.languages.load_language(language)

    session = chat_settings.app.session.load_session(args.token)
    if not session.token:
        sys.stderr.write("no session token: pass --token or sign in first\n")
        return 2

    service = UserService(args.server, lambda: session.token)
    app = SettingsApp(account=AccountStore(), service=service, session=session, pack=pack)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
