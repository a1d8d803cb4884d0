import subprocess
from dataclasses import dataclass

from docint.config.settings import Settings
from docint.logging.logger import Log

_PROBE_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class Capabilities:
    """External tools found at startup. Read-only for the life of the process."""

    ghostscript_command: str | None = None

    @property
    def has_ghostscript(self) -> bool:
        return self.ghostscript_command is not None


def _probe(command: str) -> bool:
    try:
        subprocess.run(
            [command, "-v"],
            check=True,
            capture_output=True,
            timeout=_PROBE_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError):
        return False
    return True


def detect_capabilities(settings: Settings) -> Capabilities:
    """Probe the configured Ghostscript commands once, first working one wins."""
    for command in settings.ghostscript_commands:
        if _probe(command):
            Log.info("Ghostscript found", command=command)
            return Capabilities(ghostscript_command=command)
    Log.warning("Ghostscript not found at startup. PDF compression via Ghostscript is disabled.")
    return Capabilities()
