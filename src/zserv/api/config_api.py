"""
Serving configuration for zserv.

ServeConfig is an immutable value built once at startup and passed to the
filesystem factory, the root resolution step and the HTTP server.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import NamedTuple

from zserv.core.errors import ConfigError
from zserv.core.utils import ROOT, clean_path, parse_limit

DEFAULT_PORT = 8088
DEFAULT_HOST = "127.0.0.1"
DEFAULT_MAX_BUFFER_SIZE = "256M"


class ServeConfig(NamedTuple):
    """
    Options for serving one archive.

    Attributes:
        port: TCP port to listen on (0 picks a free port)
        host: Address to bind to
        buffer_files: Load files completely into memory before serving them
        max_buffer_size: Entries of this many bytes or more are refused in buffering mode
        root: Root of the served site relative to the archive
        detect_root: Auto detect the root folder
        verbose: Verbose output
    """
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    buffer_files: bool = False
    max_buffer_size: int = parse_limit(DEFAULT_MAX_BUFFER_SIZE)
    root: str = ROOT
    detect_root: bool = False
    verbose: bool = False

    @property
    def mode(self) -> str:
        """Operating mode name understood by FilesystemManager."""
        return "buffering" if self.buffer_files else "streaming"

    def validate(self) -> "ServeConfig":
        """
        Check the options for consistency.

        Returns:
            The config itself, with root normalized

        Raises:
            ConfigError: On conflicting or out-of-range values
        """
        if not 0 <= self.port <= 65535:
            raise ConfigError(f"port out of range: {self.port}")
        if self.max_buffer_size < 0:
            raise ConfigError(f"max buffer size must be non-negative: {self.max_buffer_size}")
        try:
            root = clean_path(self.root)
        except FileNotFoundError as e:
            raise ConfigError(f"invalid root {self.root!r}: {e}") from e
        if self.detect_root and root != ROOT:
            raise ConfigError("Conflicting options: set root and detect root")
        return self._replace(root=root)

    @classmethod
    def from_args(cls, args) -> "ServeConfig":
        """
        Build a validated config from parsed command line arguments.

        Raises:
            FormatError: If the max buffer size literal is malformed
            ConfigError: On conflicting options
        """
        return cls(
            port=args.port,
            host=args.host,
            buffer_files=args.buffer,
            max_buffer_size=parse_limit(args.max_buffer_size),
            root=args.root,
            detect_root=args.detect_root,
            verbose=args.verbose,
        ).validate()
