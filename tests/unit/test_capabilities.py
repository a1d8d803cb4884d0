import subprocess
from unittest.mock import patch

from docint.config.capabilities import Capabilities, detect_capabilities
from docint.config.settings import Settings


class TestDetectCapabilities:
    def test_first_working_command_wins(self) -> None:
        settings = Settings(ghostscript_commands=["gs", "gswin64c"])

        with patch("docint.config.capabilities.subprocess.run") as run:
            capabilities = detect_capabilities(settings)

        assert capabilities == Capabilities(ghostscript_command="gs")
        assert capabilities.has_ghostscript
        run.assert_called_once()
        assert run.call_args.args[0] == ["gs", "-v"]

    def test_falls_back_to_next_candidate(self) -> None:
        settings = Settings(ghostscript_commands=["gs", "gswin64c"])

        with patch(
            "docint.config.capabilities.subprocess.run",
            side_effect=[FileNotFoundError("gs"), None],
        ):
            capabilities = detect_capabilities(settings)

        assert capabilities.ghostscript_command == "gswin64c"

    def test_no_working_command_disables_ghostscript(self) -> None:
        settings = Settings(ghostscript_commands=["gs"])

        with patch(
            "docint.config.capabilities.subprocess.run",
            side_effect=subprocess.CalledProcessError(1, ["gs", "-v"]),
        ):
            capabilities = detect_capabilities(settings)

        assert capabilities == Capabilities()
        assert not capabilities.has_ghostscript
