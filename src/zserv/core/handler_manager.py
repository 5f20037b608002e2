"""
FilesystemManager for zserv.
Registry of archive filesystem variants keyed by operating mode ("streaming", "buffering").

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import Dict, List


class FilesystemManager:
    """
    Central registry of archive filesystem variants.
    Variants register themselves when their class is defined (see ArchiveFilesystem.__init_subclass__).

    Usage example:
        fs_cls = FilesystemManager.get_filesystem_class('streaming')
        fs = FilesystemManager.create_filesystem('buffering', index, config)
    """
    _registry: Dict[str, type] = {}

    @classmethod
    def register_filesystem(cls, mode: str, fs_cls: type):
        cls._registry[mode.lower()] = fs_cls

    @classmethod
    def get_filesystem_class(cls, mode: str) -> type:
        """
        Raises:
            KeyError: If no variant is registered for the mode
        """
        try:
            return cls._registry[mode.lower()]
        except KeyError:
            raise KeyError(f"no archive filesystem registered for mode '{mode}'") from None

    @classmethod
    def get_supported_modes(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def create_filesystem(cls, mode: str, index, config):
        """Instantiate the variant registered for mode over an ArchiveIndex."""
        return cls.get_filesystem_class(mode).from_config(index, config)
