"""
Exit code descriptions for remote command results.

Codes above 128 are signal-derived (128 + signal number), matching the
conventions of POSIX shells.
"""
from typing import Dict, Tuple

INTERNAL_ERROR = -1

EXIT_CODES: Dict[int, str] = {
    -1: "Internal app error",
    0: "Success",
    1: "General error, unspecified error",
    2: "Misuse of shell builtins",
    126: "Command cannot execute",
    127: "Command not found",
    128: "Invalid argument to exit",
    255: "Exit status out of range",
    # Signal based exit codes (128+n)
    129: "Fatal error signal 1 (SIGHUP)",
    130: "Fatal error signal 2 (SIGINT)",
    131: "Fatal error signal 3 (SIGQUIT)",
    132: "Fatal error signal 4 (SIGILL)",
    133: "Fatal error signal 5 (SIGTRAP)",
    134: "Fatal error signal 6 (SIGABRT/SIGIOT)",
    135: "Fatal error signal 7 (SIGBUS)",
    136: "Fatal error signal 8 (SIGFPE)",
    137: "Fatal error signal 9 (SIGKILL)",
    138: "Fatal error signal 10 (SIGUSR1)",
    139: "Fatal error signal 11 (SIGSEGV)",
    140: "Fatal error signal 12 (SIGUSR2)",
    141: "Fatal error signal 13 (SIGPIPE)",
    142: "Fatal error signal 14 (SIGALRM)",
    143: "Fatal error signal 15 (SIGTERM)",
}


class CommandExitError(Exception):
    """Remote process terminated with a non-zero exit code."""

    def __init__(self, code: int):
        super().__init__(f"command terminated with exit code {code}")
        self.code = code


def describe(code: int) -> str:
    """Human readable meaning of an exit code, or "" when unknown."""
    return EXIT_CODES.get(code, "")


def classify_error(err: BaseException) -> Tuple[int, str]:
    """
    Translate an exec error into an exit code and its description.

    Args:
        err: Error raised or produced while running a remote command

    Returns:
        (code, description); (-1, "") when err is not a process exit error
    """
    if not isinstance(err, CommandExitError):
        return INTERNAL_ERROR, ""
    if err.code not in EXIT_CODES:
        return err.code, f"Exit code {err.code} description not found!"
    return err.code, EXIT_CODES[err.code]
