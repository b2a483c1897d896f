"""
Access policy of a satis repository server.

Describes which files a remote server accepts over PUT: an allow-list of
file extensions and an allow-list of top-level sub-directories under the
repository base path, plus whether the server requires authentication and
whether it unpacks zip bundles.
"""

import json
import posixpath
import re
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from satis_publisher.exceptions import ConfigurationError
from satis_publisher.logging import get_logger, log_policy_decision
from satis_publisher.types.files import LocalFile

logger = get_logger("policy")


class AccessPolicy:
    """
    Allow-list rules for uploads to a satis repository server.

    Example:
        ```python
        from satis_publisher import AccessPolicy

        policy = AccessPolicy().set_allowed_files(["json", "zip", "tar"])
        policy.is_allowed("dist/vendor-name-1.0.zip")  # True
        policy.is_allowed("dist/nested/vendor-name-1.0.zip")  # False
        ```
    """

    DEFAULT_ALLOWED_FILES = ("json", "zip")
    DEFAULT_ALLOWED_DIRECTORIES = ("dist", "include")
    DEFAULT_NEED_AUTHENTICATION = True
    DEFAULT_ACCEPT_BUNDLE = True

    # Values applied by parse() to keys a policy document leaves out.
    # needAuthentication deliberately differs from the in-memory default.
    DOCUMENT_DEFAULTS: dict[str, Any] = {
        "acceptBundle": True,
        "needAuthentication": False,
        "allowedFiles": ["json", "zip"],
        "allowedDirectories": ["dist", "include"],
    }

    def __init__(
        self,
        allowed_files: Iterable[str] | None = None,
        allowed_directories: Iterable[str] | None = None,
        need_authentication: bool = DEFAULT_NEED_AUTHENTICATION,
        accept_bundle: bool = DEFAULT_ACCEPT_BUNDLE,
    ) -> None:
        """
        Initialize the policy.

        Args:
            allowed_files: Extensions (without dot) accepted over PUT
            allowed_directories: Top-level directories accepted under the base path
            need_authentication: True if the server requires credentials
            accept_bundle: True if the server unpacks zip bundles
        """
        self._allowed_files: list[str] = []
        self._allowed_directories: list[str] = []
        self.set_allowed_files(
            self.DEFAULT_ALLOWED_FILES if allowed_files is None else allowed_files
        )
        self.set_allowed_directories(
            self.DEFAULT_ALLOWED_DIRECTORIES
            if allowed_directories is None
            else allowed_directories
        )
        self.set_need_authentication(need_authentication)
        self.set_accept_bundle(accept_bundle)

    def __repr__(self) -> str:
        return (
            f"AccessPolicy(allowed_files={self._allowed_files!r}, "
            f"allowed_directories={self._allowed_directories!r}, "
            f"need_authentication={self._need_authentication!r}, "
            f"accept_bundle={self._accept_bundle!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccessPolicy):
            return NotImplemented
        return (
            set(self._allowed_files) == set(other._allowed_files)
            and self._allowed_directories == other._allowed_directories
            and self._need_authentication == other._need_authentication
            and self._accept_bundle == other._accept_bundle
        )

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    @property
    def allowed_files(self) -> list[str]:
        """Extensions accepted over PUT."""
        return list(self._allowed_files)

    @property
    def allowed_directories(self) -> list[str]:
        """Top-level directories accepted under the base path."""
        return list(self._allowed_directories)

    @property
    def requires_authentication(self) -> bool:
        return self._need_authentication

    @property
    def accepts_bundle_upload(self) -> bool:
        return self._accept_bundle

    def is_private(self) -> bool:
        """Say if authentication is needed to GET and PUT."""
        return self._need_authentication

    def is_bundled(self) -> bool:
        """Say if a repository may be PUT as a single zip bundle."""
        return self._accept_bundle

    def set_allowed_files(self, allowed: Iterable[str]) -> "AccessPolicy":
        """Replace the list of extensions allowed to PUT."""
        allowed_files: list[str] = []
        for extension in allowed:
            if extension not in allowed_files:
                allowed_files.append(extension)
        self._allowed_files = allowed_files
        return self

    def set_allowed_directories(self, allowed: Iterable[str]) -> "AccessPolicy":
        """Replace the list of directories where it is allowed to PUT."""
        self._allowed_directories = list(allowed)
        return self

    def set_need_authentication(self, authenticate: bool) -> "AccessPolicy":
        self._need_authentication = bool(authenticate)
        return self

    def set_accept_bundle(self, accept: bool) -> "AccessPolicy":
        self._accept_bundle = bool(accept)
        return self

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def is_allowed_extension(self, path: str) -> bool:
        """
        Check if a file is allowed to PUT based on its extension.

        The comparison is case-sensitive: "test.JSON" is refused when only
        "json" is allowed. An empty allow-list refuses everything.

        Args:
            path: File pathname to check

        Returns:
            True if the extension is allowed
        """
        if not self._allowed_files:
            return False

        alternatives = "|".join(re.escape(ext) for ext in self._allowed_files)
        return re.search(rf"\.({alternatives})\Z", path) is not None

    def is_allowed_directory(self, path: str, base_path: str = "/") -> bool:
        """
        Check if a file is allowed to PUT based on its sub-directory.

        The file must sit directly at ``base_path`` or directly inside one of
        the allowed directories. Deeper nesting, unlisted directories and
        paths escaping ``base_path`` are refused. Backslash separators are
        treated as forward slashes.

        Args:
            path: File pathname to check, relative to base_path
            base_path: Path part of the repository url

        Returns:
            True if the location is allowed
        """
        normalized = path.replace("\\", "/")
        filename = posixpath.basename(normalized.rstrip("/"))
        directories = "|".join(
            re.escape(directory + "/") for directory in self._allowed_directories
        )
        pattern = f"{re.escape(base_path)}({directories})?{re.escape(filename)}"

        return re.fullmatch(pattern, base_path + normalized) is not None

    def is_allowed(self, path: str, base_path: str = "/") -> bool:
        """
        Shortcut check combining extension and directory rules.

        Args:
            path: File pathname to check
            base_path: Path part of the repository url

        Returns:
            True if the file may be PUT
        """
        allowed = self.is_allowed_extension(path) and self.is_allowed_directory(
            path, base_path
        )
        log_policy_decision(path, base_path, allowed)
        return allowed

    def enumerate_local_files(self, directory: str | Path) -> Iterator[LocalFile]:
        """
        Find the files of a local repository that the server accepts.

        Walks ``directory`` recursively and lazily and yields each file whose
        relative path passes ``is_allowed`` together with its content read at
        enumeration time. Hidden entries (any path part starting with ".")
        are skipped even when ``is_allowed`` would accept them, so a root
        level ``.secret.json`` is never uploaded.

        Args:
            directory: A local repository directory

        Yields:
            LocalFile entries with "/"-separated relative paths
        """
        root = Path(directory)
        for candidate in root.rglob("*"):
            relative = candidate.relative_to(root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if not candidate.is_file():
                continue

            relative_path = relative.as_posix()
            if self.is_allowed(relative_path):
                yield LocalFile(relative_path=relative_path, content=candidate.read_bytes())
            else:
                logger.debug(f"Skipping {relative_path} (not accepted by server)")

    # ------------------------------------------------------------------
    # Policy document
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the policy to its document mapping.

        Returns:
            Dictionary with camelCase keys matching the policy document format
        """
        return {
            "acceptBundle": self._accept_bundle,
            "needAuthentication": self._need_authentication,
            "allowedFiles": list(self._allowed_files),
            "allowedDirectories": list(self._allowed_directories),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccessPolicy":
        """Build a policy from a document mapping, applying DOCUMENT_DEFAULTS."""
        policy = cls()
        policy._load(data)
        return policy

    def parse(self, source: str | Path) -> "AccessPolicy":
        """
        Load all rules from the policy document at ``source``.

        Current rules are fully replaced. Keys missing from the document take
        their value from DOCUMENT_DEFAULTS.

        Args:
            source: Path of a JSON policy document

        Returns:
            This policy

        Raises:
            ConfigurationError: If the document cannot be read or is invalid
        """
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read policy document {source}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Malformed policy document {source}: {e}") from e

        self._load(data)
        logger.info(f"Loaded access policy from {source}")
        return self

    def dump(self) -> str:
        """Serialize the current rules as a JSON policy document."""
        return json.dumps(self.to_dict(), indent=4) + "\n"

    def save(self, destination: str | Path) -> "AccessPolicy":
        """Write the current rules to a policy document."""
        Path(destination).write_text(self.dump(), encoding="utf-8")
        return self

    def _load(self, data: Any) -> None:
        if not isinstance(data, dict):
            raise ConfigurationError("Policy document must be a JSON object")

        document = {**self.DOCUMENT_DEFAULTS, **data}

        for key in ("acceptBundle", "needAuthentication"):
            if not isinstance(document[key], bool):
                raise ConfigurationError(f"Policy field {key} must be a boolean")

        for key in ("allowedFiles", "allowedDirectories"):
            value = document[key]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigurationError(f"Policy field {key} must be a list of strings")

        self.set_accept_bundle(document["acceptBundle"])
        self.set_need_authentication(document["needAuthentication"])
        self.set_allowed_files(document["allowedFiles"])
        self.set_allowed_directories(document["allowedDirectories"])
