"""
gqg - GQG1 envelope CLI

Usage:
    gqg id                       - Show the active identity string
    gqg identity list|add|use    - Manage own key pairs
    gqg friend list|add|del      - Manage friends
    gqg encrypt FRIEND           - Encrypt stdin or a file for a friend
    gqg decrypt                  - Decrypt an envelope
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from .codec import decode, encode
from .config import Config
from .identity import identity_from_bytes
from .store import Database
from .types import (
    DecodedFile,
    EncodeFlags,
    File,
    GqgError,
    InvalidFileName,
    InvalidIdentityError,
    InvalidOuterEncoding,
    Message,
    StoreError,
)

logger = logging.getLogger(__name__)


class GqgCli:
    """gqg CLI application."""

    def __init__(
        self,
        config: Config,
        db: Database,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        """Initialize CLI with configuration and an open store."""
        self.config = config
        self.db = db
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def show_id(self) -> int:
        """Show the active identity string."""
        self._print(self.db.get_active_identity().get_public_id())
        return 0

    def identity_list(self) -> int:
        """List own identities."""
        active = self.db.active_identity_name
        for identity in self.db.identities:
            marker = "*" if identity.name == active else " "
            self._print(f"{marker} {identity.name:<20} {identity.get_public_id()}")
        return 0

    def identity_add(self, name: str) -> int:
        """Generate a new identity."""
        identity = self.db.add_identity(name)
        self._print(identity.get_public_id())
        return 0

    def identity_use(self, name: str) -> int:
        """Switch the active identity."""
        self.db.set_active_identity(name)
        return 0

    def friend_list(self) -> int:
        """List friends."""
        friends = self.db.friends
        if not friends:
            self._print("No friends added")
            return 0
        for friend in friends:
            self._print(f"{friend.name:<20} {friend.get_public_id()}")
        return 0

    def friend_add(self, name: str, identity: str) -> int:
        """Add a friend."""
        self.db.add_friend(name, identity)
        return 0

    def friend_del(self, name: str) -> int:
        """Remove a friend."""
        self.db.del_friend(name)
        return 0

    def encrypt(self, friend: str, file_path: Optional[Path], compress: bool) -> int:
        """Encrypt a message from stdin, or a file, for a friend."""
        recipient = self.db.resolve_friend_public_key(friend)
        sender = self.db.get_active_secret_key()
        flags = EncodeFlags.COMPRESSED if compress else EncodeFlags.NONE

        if file_path is not None:
            envelope_type = File(file_name=file_path.name)
            data = file_path.read_bytes()
        else:
            envelope_type = Message()
            data = self.stdin.read().encode("utf-8")

        self._print(encode(sender, recipient, envelope_type, flags, data))
        return 0

    def decrypt(self, input_path: Optional[Path], save: bool) -> int:
        """Decrypt an envelope from stdin or a file."""
        try:
            if input_path is not None:
                text = input_path.read_bytes().decode("utf-8")
            else:
                text = self.stdin.read()
        except UnicodeDecodeError as e:
            raise InvalidOuterEncoding("Envelope is not valid text") from e

        decoded = decode(self.db.get_active_secret_key(), text)

        sender = self.db.resolve_public_key_to_friend_name(decoded.sender)
        if sender is None:
            sender = identity_from_bytes(decoded.sender)
            logger.warning("Envelope is from an unknown sender")
        print(f"From: {sender}", file=sys.stderr)

        if isinstance(decoded.data, DecodedFile):
            path = self._unique_path(self.config.files_dir(), decoded.data.file_name)
            path.write_bytes(decoded.data.contents)
            self._print(f"Saved file to {path}")
            return 0

        if save:
            path = self._unique_path(self.config.messages_dir(), "message.txt")
            path.write_bytes(decoded.data.contents)
            self._print(f"Saved message to {path}")
        else:
            self._print(decoded.data.contents.decode("utf-8", errors="replace"))
        return 0

    @staticmethod
    def _unique_path(directory: Path, name: str) -> Path:
        """Path in directory that does not exist yet."""
        path = directory / name
        # Drive-relative names such as "C:x" escape the directory on Windows
        if path.parent != directory:
            raise InvalidFileName(f"File name escapes {directory}: {name!r}")
        counter = 1
        while path.exists():
            path = directory / f"{name}.{counter}"
            counter += 1
        return path


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gqg",
        description="Authenticated offline envelopes for messages and files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gqg id
  gqg friend add alice "[GQG1-ID:...]"
  echo "Hello" | gqg encrypt alice --compress
  gqg encrypt alice --file report.pdf
  gqg decrypt < envelope.txt
""",
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to the store file (default: ~/.gqg.toml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # id command
    subparsers.add_parser("id", help="Show the active identity string")

    # identity commands
    identity_parser = subparsers.add_parser("identity", help="Manage own identities")
    identity_sub = identity_parser.add_subparsers(dest="action")
    identity_sub.add_parser("list", help="List identities")
    identity_add = identity_sub.add_parser("add", help="Generate a new identity")
    identity_add.add_argument("name", help="Identity name")
    identity_use = identity_sub.add_parser("use", help="Switch the active identity")
    identity_use.add_argument("name", help="Identity name")

    # friend commands
    friend_parser = subparsers.add_parser("friend", help="Manage friends")
    friend_sub = friend_parser.add_subparsers(dest="action")
    friend_sub.add_parser("list", help="List friends")
    friend_add = friend_sub.add_parser("add", help="Add a friend")
    friend_add.add_argument("name", help="Friend name")
    friend_add.add_argument("identity", help="Friend identity string")
    friend_del = friend_sub.add_parser("del", help="Remove a friend")
    friend_del.add_argument("name", help="Friend name")

    # encrypt command
    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt for a friend")
    encrypt_parser.add_argument("friend", help="Recipient friend name")
    encrypt_parser.add_argument(
        "-f", "--file",
        type=Path,
        default=None,
        help="Encrypt this file instead of a message from stdin",
    )
    encrypt_parser.add_argument(
        "-z", "--compress",
        action="store_true",
        help="Compress the body before encryption",
    )

    # decrypt command
    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt an envelope")
    decrypt_parser.add_argument(
        "-i", "--input",
        type=Path,
        default=None,
        help="Read the envelope from this file instead of stdin",
    )
    decrypt_parser.add_argument(
        "-s", "--save",
        action="store_true",
        help="Save messages to the messages directory instead of printing",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = Config.load(args.config)
    except (StoreError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level_value,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        cli = GqgCli(config, Database.load(config.config_path))
        return _dispatch(parser, cli, args)
    except GqgError as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except (StoreError, InvalidIdentityError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _dispatch(parser: argparse.ArgumentParser, cli: GqgCli, args: argparse.Namespace) -> int:
    if args.command == "id":
        return cli.show_id()
    elif args.command == "identity":
        if args.action == "list":
            return cli.identity_list()
        elif args.action == "add":
            return cli.identity_add(args.name)
        elif args.action == "use":
            return cli.identity_use(args.name)
    elif args.command == "friend":
        if args.action == "list":
            return cli.friend_list()
        elif args.action == "add":
            return cli.friend_add(args.name, args.identity)
        elif args.action == "del":
            return cli.friend_del(args.name)
    elif args.command == "encrypt":
        return cli.encrypt(args.friend, args.file, args.compress)
    elif args.command == "decrypt":
        return cli.decrypt(args.input, args.save)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
