"""
Identity and friend store backed by a TOML file.

## Storage Format

    [misc]
    active_identity = "default"

    [[identity]]
    name = "default"
    key = "<base64 X25519 secret key>"

    [[friend]]
    name = "alice"
    key = "[GQG1-ID:<base64 X25519 public key>]"

    [settings]          # optional, read by gqg.config
    log_level = "INFO"

## Persistence

- Every mutation is saved immediately
- Saves write a temporary file in the same directory and rename it over
  the store, so readers never see a partial file
- The store is written with 600 permissions (owner read/write only)
"""

import base64
import binascii
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import toml
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey

from .identity import from_id, to_id
from .keys import (
    generate_keypair,
    private_key_from_bytes,
    private_key_to_bytes,
    public_key_to_bytes,
)
from .types import InvalidIdentityError, SECRET_KEY_SIZE, StoreError

logger = logging.getLogger(__name__)


DEFAULT_IDENTITY = "default"
MAX_NAME_LENGTH = 64


@dataclass
class Identity:
    """One of our own key pairs."""
    name: str
    key: str  # base64 secret key

    def get_private_key(self) -> X25519PrivateKey:
        """Returns the X25519 private key."""
        return private_key_from_bytes(base64.b64decode(self.key))

    def get_public_key(self) -> X25519PublicKey:
        """Returns the X25519 public key."""
        return self.get_private_key().public_key()

    def get_public_id(self) -> str:
        """Returns the identity string to share with friends."""
        return to_id(self.get_public_key())


@dataclass
class Friend:
    """A named public key."""
    name: str
    key: str  # identity string

    def get_public_key(self) -> X25519PublicKey:
        """Returns the X25519 public key."""
        return from_id(self.key)

    def get_public_id(self) -> str:
        """Returns the identity string."""
        return self.key


def validate_name(name: str) -> None:
    """
    Check an identity or friend name.

    Raises:
        StoreError: If the name is empty, too long, or has whitespace or
            control characters
    """
    if not name:
        raise StoreError("Name must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise StoreError(f"Name too long: {len(name)} characters (max {MAX_NAME_LENGTH})")
    if any(c.isspace() or not c.isprintable() for c in name):
        raise StoreError(f"Name contains whitespace or control characters: {name!r}")


def _validate_secret_key(key: str) -> None:
    try:
        raw = base64.b64decode(key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise StoreError("Identity key is not valid base64") from e
    if len(raw) != SECRET_KEY_SIZE:
        raise StoreError(f"Identity key is {len(raw)} bytes, expected {SECRET_KEY_SIZE}")


class Database:
    """
    Identity and friend store.

    A single handle owns the file; pass it explicitly to whatever needs it.

    Example usage:
        ```python
        db = Database.load(Path("~/.gqg.toml").expanduser())
        db.add_friend("alice", "[GQG1-ID:...]")

        sk = db.get_active_secret_key()
        pk = db.resolve_friend_public_key("alice")
        ```
    """

    def __init__(
        self,
        path: Path,
        active_identity: str = DEFAULT_IDENTITY,
        identities: Optional[List[Identity]] = None,
        friends: Optional[List[Friend]] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Creates a store handle without touching the file system."""
        self.path = Path(path)
        self._active_identity = active_identity
        self._identities: List[Identity] = list(identities or [])
        self._friends: List[Friend] = list(friends or [])
        self._settings: Dict[str, Any] = dict(settings or {})

    @classmethod
    def load(cls, path: Path) -> "Database":
        """
        Load the store, creating it on first use.

        If the store holds no identity, a "default" identity is generated
        and saved.

        Raises:
            StoreError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("First run, creating clean configuration file at %s", path)
            db = cls(path)
        except OSError as e:
            raise StoreError(f"Cannot access configuration file {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StoreError(f"Configuration file {path} is not valid UTF-8: {e}") from e
        else:
            db = cls._from_dict(path, cls._parse(text, path))

        if not db._identities:
            logger.info("Adding a default identity")
            db.add_identity(DEFAULT_IDENTITY)

        return db

    @staticmethod
    def _parse(text: str, path: Path) -> Dict[str, Any]:
        try:
            return toml.loads(text)
        except toml.TomlDecodeError as e:
            raise StoreError(f"Parsing error in the configuration file {path}: {e}") from e

    @classmethod
    def _from_dict(cls, path: Path, data: Dict[str, Any]) -> "Database":
        try:
            active = str(data.get("misc", {}).get("active_identity", DEFAULT_IDENTITY))
            identities = [
                Identity(name=str(entry["name"]), key=str(entry["key"]))
                for entry in data.get("identity", [])
            ]
            friends = [
                Friend(name=str(entry["name"]), key=str(entry["key"]))
                for entry in data.get("friend", [])
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise StoreError(f"Malformed configuration file {path}: {e}") from e

        for identity in identities:
            _validate_secret_key(identity.key)
        for friend in friends:
            try:
                from_id(friend.key)
            except InvalidIdentityError as e:
                raise StoreError(f"Friend {friend.name!r} has an invalid identity: {e}") from e

        return cls(
            path,
            active_identity=active,
            identities=identities,
            friends=friends,
            settings=data.get("settings"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form of the store."""
        data: Dict[str, Any] = {"misc": {"active_identity": self._active_identity}}
        if self._identities:
            data["identity"] = [{"name": i.name, "key": i.key} for i in self._identities]
        if self._friends:
            data["friend"] = [{"name": f.name, "key": f.key} for f in self._friends]
        if self._settings:
            data["settings"] = dict(self._settings)
        return data

    # Identities

    @property
    def identities(self) -> List[Identity]:
        """Returns all identities."""
        return list(self._identities)

    @property
    def active_identity_name(self) -> str:
        """Returns the name of the active identity."""
        return self._active_identity

    def find_identity(self, name: str) -> Optional[Identity]:
        """Find an identity by name."""
        for identity in self._identities:
            if identity.name == name:
                return identity
        return None

    def get_active_identity(self) -> Identity:
        """
        Returns the active identity.

        Raises:
            StoreError: If the active identity no longer exists
        """
        identity = self.find_identity(self._active_identity)
        if identity is None:
            raise StoreError(f"Active identity {self._active_identity!r} does not exist")
        return identity

    def set_active_identity(self, name: str) -> None:
        """Make an existing identity the active one."""
        if self.find_identity(name) is None:
            raise StoreError(f"No such identity: {name}")
        self._active_identity = name
        self.save()

    def add_identity(self, name: str) -> Identity:
        """Generate a new key pair under the given name."""
        validate_name(name)
        if self.find_identity(name) is not None:
            raise StoreError(f"Identity with that name already exists: {name}")

        private_key, _ = generate_keypair()
        identity = Identity(
            name=name,
            key=base64.b64encode(private_key_to_bytes(private_key)).decode("ascii"),
        )
        self._identities.append(identity)
        self.save()
        return identity

    # Friends

    @property
    def friends(self) -> List[Friend]:
        """Returns all friends."""
        return list(self._friends)

    def find_friend(self, name: str) -> Optional[Friend]:
        """Find a friend by name."""
        for friend in self._friends:
            if friend.name == name:
                return friend
        return None

    def find_friend_by_key(self, public_key: Union[bytes, X25519PublicKey]) -> Optional[Friend]:
        """Find a friend by public key."""
        if isinstance(public_key, X25519PublicKey):
            public_key = public_key_to_bytes(public_key)
        for friend in self._friends:
            if public_key_to_bytes(friend.get_public_key()) == public_key:
                return friend
        return None

    def add_friend(self, name: str, identity: str) -> Friend:
        """Add a friend from their identity string."""
        validate_name(name)
        if self.find_friend(name) is not None:
            raise StoreError(f"Friend with that name already exists: {name}")
        try:
            public_key = from_id(identity)
        except InvalidIdentityError as e:
            raise StoreError(str(e)) from e

        friend = Friend(name=name, key=to_id(public_key))
        self._friends.append(friend)
        self.save()
        return friend

    def del_friend(self, name: str) -> None:
        """Remove a friend by name."""
        friend = self.find_friend(name)
        if friend is None:
            raise StoreError(f"Friend with that name doesn't exist: {name}")
        self._friends.remove(friend)
        self.save()

    # Lookups used when encoding and decoding

    def get_active_secret_key(self) -> X25519PrivateKey:
        """Secret key of the active identity."""
        return self.get_active_identity().get_private_key()

    def resolve_friend_public_key(self, name: str) -> X25519PublicKey:
        """Public key of a named friend."""
        friend = self.find_friend(name)
        if friend is None:
            raise StoreError(f"Unknown friend: {name}")
        return friend.get_public_key()

    def resolve_public_key_to_friend_name(
        self, public_key: Union[bytes, X25519PublicKey]
    ) -> Optional[str]:
        """Name of the friend owning a public key, if any."""
        friend = self.find_friend_by_key(public_key)
        return friend.name if friend is not None else None

    # Persistence

    def save(self) -> None:
        """
        Atomically overwrite the store file.

        Raises:
            StoreError: If the file cannot be written
        """
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        contents = toml.dumps(self.to_dict())

        fd, tmp_name = tempfile.mkstemp(prefix=".gqg-", suffix=".tmp", dir=str(directory))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(contents)
                f.flush()
                os.fsync(f.fileno())
            self._set_restrictive_permissions(Path(tmp_name))
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StoreError(f"Could not write config file {self.path}: {e}") from e

        logger.debug("Saved store to %s", self.path)

    def _set_restrictive_permissions(self, file_path: Path) -> None:
        """Set restrictive file permissions (600 on Unix)."""
        try:
            file_path.chmod(0o600)
        except OSError:
            pass  # Ignore permission errors on some platforms
