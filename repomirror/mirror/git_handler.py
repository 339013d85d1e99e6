"""
Git command execution for local mirrors.

All git invocations go through GitHandler so they share one error
contract and can be replaced by a double in tests.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from repomirror.core.config import MirrorConfig
from repomirror.core.exceptions import GitCommandError

logger = logging.getLogger(__name__)


class GitHandler:
    """
    Runs git subcommands and returns their standard output.

    No timeout is applied; a hanging git process blocks the caller.
    """

    def __init__(self, config: Optional[MirrorConfig] = None):
        self.config = config or MirrorConfig()
        self.executable = self.config.git_executable

    def run(self, args: List[str], cwd: Optional[Union[str, Path]] = None) -> str:
        """
        Run `git <args>`.

        Args:
            args: Subcommand and arguments, without the executable.
            cwd: Working directory, usually the mirror path.

        Returns:
            Raw standard output, including any trailing newline.

        Raises:
            GitCommandError: If git cannot be started or exits non-zero.
        """
        cmd = [self.executable] + [str(arg) for arg in args]
        details = {"command": cmd, "cwd": str(cwd) if cwd else None}

        logger.debug(f"Git command: {' '.join(cmd)} (cwd={cwd})")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=cwd,
            )
        except OSError as e:
            raise GitCommandError(
                f"Failed to execute {cmd[0]}: {e}",
                details=details,
            ) from e

        if result.returncode != 0:
            details.update(
                returncode=result.returncode,
                stderr=result.stderr,
                stdout=result.stdout,
            )
            raise GitCommandError(
                f"git {args[0]} failed: {result.stderr.strip() or result.stdout.strip()}",
                details=details,
            )

        return result.stdout
