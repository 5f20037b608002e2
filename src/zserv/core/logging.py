"""
Logging and debug output for zserv.
Handles debug/info/error output, querying GlobalConfig for the current debug level.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import traceback

from zserv.core.global_config import GlobalConfig


def debug_print(msg, level=1, exc=None):
    """
    Print debug output if the current debug level is >= level.
    Level 0 messages are always printed.
    If debug level is 4 or higher, also print the full stack traceback.

    Args:
        msg: Message to print
        level: Debug level threshold
        exc: Optional exception object (if provided, stack trace will be printed at debug_level >= 4)
    """
    debug_level = GlobalConfig.get_debug_level()
    if debug_level >= level:
        print(f"[ZSERV-DEBUG-{level}] {msg}", flush=True)
        if exc is not None and debug_level >= 4:
            print("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), flush=True)
