from pathlib import Path
from types import TracebackType

from docint.logging.logger import Log


def discard_artifact(path: Path) -> bool:
    """Delete a temporary file, never raising.

    Returns:
        True if the file is gone afterwards, False if deletion failed.
    """
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        Log.warning(f"Could not delete temporary artifact {path}: {exc}")
        return False
    return True


class ArtifactScope:
    """Tracks the temporary files of one processing run and deletes them on exit.

    Release happens on every exit path, including errors and task
    cancellation. Deletion failures are logged and swallowed so they never
    replace the run's own result or error.
    """

    def __init__(self, *paths: Path) -> None:
        self._paths: list[Path] = []
        for path in paths:
            self.track(path)

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(self._paths)

    def track(self, path: Path) -> Path:
        """Register a file for deletion and return it."""
        if path not in self._paths:
            self._paths.append(path)
        return path

    def release(self) -> None:
        for path in self._paths:
            discard_artifact(path)
        self._paths.clear()

    def __enter__(self) -> "ArtifactScope":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
