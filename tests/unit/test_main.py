import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docint.config.capabilities import Capabilities
from docint.main import main
from docint.processor.models import AnalysisResponse, ErrorResponse, NormalizedPage
from docint.processor.processor import Processor


@pytest.fixture()
def remote_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    upload_dir = tmp_path / "uploads"
    monkeypatch.setenv("API_KEY", "k")
    monkeypatch.setenv("ANALYZE_URL", "https://docint.example.com/analyze")
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    return upload_dir


def _make_processor(outcome: AnalysisResponse | ErrorResponse) -> MagicMock:
    processor = MagicMock(spec=Processor)
    processor.handle = AsyncMock(return_value=outcome)
    processor.aclose = AsyncMock()
    return processor


class TestMain:
    def test_missing_configuration_exits_with_2(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("API_KEY", "ANALYZE_URL", "ENDPOINT"):
            monkeypatch.delenv(name, raising=False)

        assert main(["scan.pdf"]) == 2

    @patch("docint.main.detect_capabilities", return_value=Capabilities())
    def test_missing_file_prints_error_body(
        self,
        _detect: MagicMock,
        remote_env: Path,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main([str(tmp_path / "absent.pdf")])

        assert code == 1
        body = json.loads(capsys.readouterr().out)
        assert body == {"error": "file is required as multipart/form-data field 'file'"}

    @patch("docint.main.detect_capabilities", return_value=Capabilities())
    def test_prints_analysis_for_a_copied_upload(
        self,
        _detect: MagicMock,
        remote_env: Path,
        sample_pdf_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        response = AnalysisResponse(
            filename="sample.pdf",
            pages=[NormalizedPage(page_number=1, raw_text="Hi.", sentences=("Hi.",))],
        )
        processor = _make_processor(response)

        with patch("docint.main.build_processor", return_value=processor):
            code = main([str(sample_pdf_path)])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == response.to_dict()
        upload = processor.handle.await_args.args[0]
        assert upload.filename == "sample.pdf"
        assert upload.content_type == "application/pdf"
        assert upload.path.parent == remote_env
        assert sample_pdf_path.exists()
        processor.aclose.assert_awaited_once()

    @patch("docint.main.detect_capabilities", return_value=Capabilities())
    def test_processing_error_exits_with_1(
        self,
        _detect: MagicMock,
        remote_env: Path,
        sample_pdf_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        processor = _make_processor(ErrorResponse(status_code=500, error="Operation failed: {}"))

        with patch("docint.main.build_processor", return_value=processor):
            code = main([str(sample_pdf_path), "--content-type", "application/pdf"])

        assert code == 1
        assert json.loads(capsys.readouterr().out) == {"error": "Operation failed: {}"}
