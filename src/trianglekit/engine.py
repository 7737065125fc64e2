"""
Boundary to the external ``triangle`` mesh generator.

Triangle (https://www.cs.cmu.edu/~quake/triangle.html) is run as a separate
process: ``triangle <switches> <workspace>/<basename>``. It reads
``<basename>.node`` or ``<basename>.poly`` and writes ``<basename>.1.node``,
``<basename>.1.ele`` and, for constrained input, ``<basename>.1.poly``.

This module only handles locating the binary and running it. All meshing is
done by the external program. :class:`TriangleEngine` is the seam the
orchestrator depends on, so tests can substitute a double that writes
canned output files.
"""

import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from trianglekit.core.config import EXECUTABLE_ENV
from trianglekit.core.exceptions import EngineError, EngineTimeoutError
from trianglekit.core.logging import get_logger

logger = get_logger(__name__)

EXECUTABLE_NAME = "triangle"


def find_triangle_executable() -> Optional[str]:
    """
    Search for the triangle binary on the system.

    Checks the TRIANGLE_PATH environment variable first, then the PATH.

    Returns:
        Path to the binary, or None if not found.
    """
    env_path = os.environ.get(EXECUTABLE_ENV)
    if env_path and os.path.isfile(env_path):
        return env_path

    return shutil.which(EXECUTABLE_NAME)


class TriangleEngine(ABC):
    """
    Abstract mesh generator invoked by the orchestrator.

    Implementations read the input file from ``workspace`` and leave their
    output files next to it.
    """

    #: Diagnostic output of the most recent run, empty when there was none.
    last_stdout: str = ""
    last_stderr: str = ""

    @abstractmethod
    def run(self, workspace: Union[str, Path], basename: str, flags: str) -> int:
        """
        Run the generator once.

        Args:
            workspace: Directory holding the input file
            basename: Input file stem inside ``workspace``
            flags: Switch string passed through uninterpreted

        Returns:
            Process exit status (0 on success)

        Raises:
            EngineError: If the generator cannot be launched
            EngineTimeoutError: If the generator exceeds its timeout
        """


class SubprocessEngine(TriangleEngine):
    """
    Runs the triangle binary via subprocess.

    Usage::

        engine = SubprocessEngine(executable_path="/usr/local/bin/triangle")
        status = engine.run(workspace, "mesh", "-pqa0.2AYs")

    Or with auto-detection::

        engine = SubprocessEngine()  # TRIANGLE_PATH, then PATH

    Args:
        executable_path: Path to the binary. If None, searches
                         TRIANGLE_PATH and the PATH.
        timeout: Maximum time in seconds to wait (None waits forever)

    Raises:
        EngineError: If the binary is not found.
    """

    def __init__(
        self,
        executable_path: Optional[str] = None,
        timeout: Optional[float] = 300.0,
    ):
        if executable_path is None:
            executable_path = find_triangle_executable()

        if executable_path is None:
            raise EngineError(
                "triangle binary not found. "
                "Install it from https://www.cs.cmu.edu/~quake/triangle.html or "
                f"set the {EXECUTABLE_ENV} environment variable."
            )

        if not os.path.isfile(executable_path):
            raise EngineError(f"triangle binary not found at: {executable_path}")

        self.executable = executable_path
        self.timeout = timeout
        self.last_stdout = ""
        self.last_stderr = ""
        logger.debug("engine_initialized", executable=executable_path)

    def run(self, workspace: Union[str, Path], basename: str, flags: str) -> int:
        cmd = [self.executable, flags, os.path.join(str(workspace), basename)]
        logger.info("engine_started", cmd=" ".join(cmd), timeout=self.timeout)

        # subprocess.run kills the child when the timeout expires
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=str(workspace),
            )
        except subprocess.TimeoutExpired as e:
            raise EngineTimeoutError(
                f"triangle timed out after {self.timeout}s",
                details={"cmd": cmd},
            ) from e
        except OSError as e:
            raise EngineError(
                f"Failed to launch triangle: {e}",
                details={"cmd": cmd},
            ) from e

        self.last_stdout = result.stdout
        self.last_stderr = result.stderr

        if result.returncode != 0:
            logger.warning(
                "engine_failed",
                exit_code=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        else:
            logger.debug("engine_finished", stdout=result.stdout)
        return result.returncode

    @staticmethod
    def is_available() -> bool:
        """Check if the triangle binary is available on the system."""
        return find_triangle_executable() is not None
