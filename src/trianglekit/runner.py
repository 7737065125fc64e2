"""
End-to-end triangulation workflow.

Chains: scratch workspace -> encode input -> run triangle -> decode output ->
release workspace.

A run is linear: any failure aborts the remaining steps and propagates to the
caller. The model passed in is both the input and the destination of the
decoded output, so after a failed run its content is undefined.
"""

import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

from trianglekit.core.config import TriangleSettings
from trianglekit.core.exceptions import (
    EncodeError,
    EngineError,
    TriangleKitError,
    WorkspaceError,
)
from trianglekit.core.logging import get_logger, run_context
from trianglekit.core.model import Triangulation
from trianglekit.engine import SubprocessEngine, TriangleEngine
from trianglekit.io.decoders import read_ele_file, read_node_file, read_poly_file
from trianglekit.io.encoders import encode_node, encode_poly

logger = get_logger(__name__)

#: Process-wide switch: keep scratch workspaces for inspection.
DEBUG = False


class Dialect(Enum):
    """Input file written for the engine."""

    NODE = "node"  # Point cloud
    POLY = "poly"  # Constrained topology


@dataclass
class RunReport:
    """Summary of a successful run."""

    dialect: Dialect
    flags: str
    exit_status: int
    points: int
    triangles: int
    workspace: Optional[Path] = None  # Set only when the workspace was kept


@contextmanager
def scratch_workspace(
    prefix: str = "triangle",
    root: Optional[str] = None,
    keep: bool = False,
) -> Iterator[Path]:
    """
    Allocate a uniquely named temporary directory for one run.

    The directory is removed on every exit path unless ``keep`` is set.

    Raises:
        WorkspaceError: If the directory cannot be created
    """
    try:
        path = Path(tempfile.mkdtemp(prefix=prefix, dir=root))
    except OSError as e:
        raise WorkspaceError(
            f"Cannot create scratch workspace: {e}",
            details={"root": root or tempfile.gettempdir()},
        ) from e

    try:
        yield path
    finally:
        if keep:
            logger.info("workspace_retained", workspace=str(path))
        else:
            shutil.rmtree(path, ignore_errors=True)


def select_dialect(mesh: Triangulation) -> Dialect:
    """Pick the input dialect: .node for point clouds, .poly otherwise."""
    return Dialect.NODE if mesh.is_point_cloud else Dialect.POLY


class Triangulator:
    """
    Runs triangle on a :class:`Triangulation`.

    Usage::

        mesh = Triangulation(points=[...], segments=[...])
        report = Triangulator().run(mesh, flags="-pq30a0.1")
        print(len(mesh.triangles))

    Args:
        engine: Generator to invoke. If None, a :class:`SubprocessEngine` is
                created from ``settings`` on first use.
        settings: Engine settings. If None, defaults are used.
    """

    def __init__(
        self,
        engine: Optional[TriangleEngine] = None,
        settings: Optional[TriangleSettings] = None,
    ):
        self.settings = settings or TriangleSettings()
        self._engine = engine

    @property
    def engine(self) -> TriangleEngine:
        if self._engine is None:
            self._engine = SubprocessEngine(
                executable_path=self.settings.executable,
                timeout=self.settings.timeout,
            )
        return self._engine

    @property
    def debug(self) -> bool:
        return DEBUG or self.settings.debug

    def run(self, mesh: Triangulation, flags: str = "") -> RunReport:
        """
        Triangulate ``mesh`` in place.

        Args:
            mesh: Input model; receives the decoded points, segments, holes,
                  regions and triangles on success
            flags: Triangle switches. If empty, the default for the selected
                   dialect is used.

        Returns:
            RunReport describing the run

        Raises:
            WorkspaceError: If the scratch workspace cannot be created
            EncodeError: If the input file cannot be encoded or written
            EngineError: If triangle cannot be launched or exits non-zero
            DecodeError: If an output file is missing or malformed
        """
        dialect = select_dialect(mesh)
        flags = flags or self.settings.default_flags(dialect is Dialect.NODE)
        basename = self.settings.basename
        keep = self.debug

        with scratch_workspace(
            prefix=self.settings.workspace_prefix,
            root=self.settings.workspace_root,
            keep=keep,
        ) as workspace, run_context(workspace=str(workspace), dialect=dialect.value):
            try:
                status = self._run_in(mesh, workspace, basename, dialect, flags)
            except TriangleKitError as e:
                if keep:
                    e.details.setdefault("workspace", str(workspace))
                raise

            logger.info(
                "triangulation_complete",
                points=len(mesh.points),
                segments=len(mesh.segments),
                triangles=len(mesh.triangles),
            )
            return RunReport(
                dialect=dialect,
                flags=flags,
                exit_status=status,
                points=len(mesh.points),
                triangles=len(mesh.triangles),
                workspace=workspace if keep else None,
            )

    def _run_in(
        self,
        mesh: Triangulation,
        workspace: Path,
        basename: str,
        dialect: Dialect,
        flags: str,
    ) -> int:
        self._write_input(mesh, workspace, basename, dialect)

        status = self.engine.run(workspace, basename, flags)
        if status != 0:
            raise EngineError(
                f"triangle failed (exit code {status})",
                exit_code=status,
                details={
                    "flags": flags,
                    "stdout": self.engine.last_stdout.strip(),
                    "stderr": self.engine.last_stderr.strip(),
                },
            )

        self._read_output(mesh, workspace, basename, dialect)
        return status

    @staticmethod
    def _write_input(
        mesh: Triangulation, workspace: Path, basename: str, dialect: Dialect
    ) -> Path:
        if dialect is Dialect.NODE:
            content = encode_node(mesh)
        else:
            content = encode_poly(mesh)

        path = workspace / f"{basename}.{dialect.value}"
        try:
            path.write_text(content)
        except OSError as e:
            raise EncodeError(
                f"Cannot write input file: {e}",
                artifact=path.name,
            ) from e
        logger.debug("input_written", path=str(path), bytes=len(content))
        return path

    @staticmethod
    def _read_output(
        mesh: Triangulation, workspace: Path, basename: str, dialect: Dialect
    ) -> None:
        stem = workspace / f"{basename}.1"
        read_node_file(f"{stem}.node", mesh)

        poly = f"{stem}.poly"
        if dialect is Dialect.POLY or os.path.isfile(poly):
            read_poly_file(poly, mesh)

        read_ele_file(f"{stem}.ele", mesh)


def triangulate(
    mesh: Triangulation,
    flags: str = "",
    engine: Optional[TriangleEngine] = None,
    settings: Optional[TriangleSettings] = None,
) -> RunReport:
    """Triangulate ``mesh`` in place with a one-off :class:`Triangulator`."""
    return Triangulator(engine=engine, settings=settings).run(mesh, flags)
