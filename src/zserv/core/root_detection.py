"""
Website root detection for zserv.

Archives produced by zipping a folder carry their content one or more levels
down (e.g. "www.example.com/index.html"). detect_root() walks down while the
current directory holds exactly one child and that child is a directory.
Any ambiguity stops the walk.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import FrozenSet, Optional

from .base_handler import FilesystemView
from .logging import debug_print
from .utils import ROOT

# Incidental files that often end up next to a mirrored site
EXCLUDED_FILES: FrozenSet[str] = frozenset({
    "wget.log",
    "nohup.out",
})

TRAVERSE_LIMIT = 5


def get_single_child(view: FilesystemView, excluded=EXCLUDED_FILES) -> Optional[FilesystemView]:
    """
    Return a view of the only directory child of the view's root, or None if
    there is no such single child. Excluded names are not counted.
    """
    candidates = [entry for entry in view.scandir(ROOT) if entry.name not in excluded]
    if len(candidates) == 1 and candidates[0].is_dir:
        return view.sub(candidates[0].name)
    return None


def detect_root(view: FilesystemView, max_depth: int = TRAVERSE_LIMIT,
                excluded=EXCLUDED_FILES) -> FilesystemView:
    """
    Find the effective content root of a filesystem view.

    Args:
        view: Filesystem view to start from
        max_depth: Maximum number of levels to descend
        excluded: Names ignored when counting children

    Returns:
        The deepest singleton-directory view reached, or the view itself

    Raises:
        Whatever listing the view raises (ArchiveIOError, NotFound); no partial root is returned
    """
    depth = 0
    while depth < max_depth:
        sub = get_single_child(view, excluded)
        if sub is None:
            break
        debug_print(f"[detect_root] descending into {sub!r}", level=2)
        view = sub
        depth += 1
    return view
