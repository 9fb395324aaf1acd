# tests/unit/test_main.py — v1
"""Tests for main.py — CLI entry point."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from unittest.mock import patch

import pytest

from examingest.extraction.schemas import EXAM_SCHEMA_NAME
from examingest.main import _build_parser, main


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point the CLI at throwaway stores; no .env is read from the repo."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "db" / "examingest.db"))
    monkeypatch.setenv("OBJECT_STORE_ROOT", str(tmp_path / "objects"))
    monkeypatch.setenv("OBJECT_STORE", "local")
    monkeypatch.setenv("LOG_FORMAT", "text")
    monkeypatch.delenv("LOG_FILE", raising=False)
    yield tmp_path
    logging.getLogger("examingest").handlers.clear()


@pytest.fixture
def exam_file(tmp_path) -> Path:
    path = tmp_path / "midterm1.pdf"
    path.write_bytes(b"%PDF-1.4 fake")
    return path


def _job_id(output: str) -> str:
    return re.search(r"Job created: (\S+)", output).group(1)


class TestBuildParser:
    def test_version_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_ingest_defaults(self):
        args = _build_parser().parse_args(["ingest", "f.pdf", "--course", "c1"])
        assert args.command == "ingest"
        assert args.file == Path("f.pdf")
        assert args.kind == "exam"
        assert args.answer_key is None
        assert args.no_run is False

    def test_ingest_calendar(self):
        args = _build_parser().parse_args(["ingest", "cal.png", "--course", "c1", "--kind", "calendar"])
        assert args.kind == "calendar"

    def test_course_required(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["ingest", "f.pdf"])

    def test_status_json(self):
        args = _build_parser().parse_args(["status", "job-1", "--json"])
        assert args.job_id == "job-1"
        assert args.json is True


class TestMain:
    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_missing_file(self, cli_env):
        assert main(["ingest", str(cli_env / "nope.pdf"), "--course", "c1"]) == 1

    def test_answer_key_only_for_exams(self, cli_env, exam_file):
        assert main([
            "ingest", str(exam_file), "--course", "c1", "--kind", "calendar",
            "--answer-key", str(exam_file),
        ]) == 1

    def test_ingest_no_run_then_status(self, cli_env, exam_file, capsys):
        assert main(["ingest", str(exam_file), "--course", "c1", "--no-run"]) == 0
        job_id = _job_id(capsys.readouterr().out)

        assert main(["status", job_id, "--json"]) == 0
        status = json.loads(capsys.readouterr().out)
        assert status["status"] == "pending"
        assert status["kind"] == "exam"

    def test_ingest_and_run(self, cli_env, exam_file, fake_client, exam_payload, capsys):
        fake_client.responses[EXAM_SCHEMA_NAME] = exam_payload
        with patch("examingest.api.facade.client_from_settings", return_value=fake_client):
            assert main(["ingest", str(exam_file), "--course", "c1"]) == 0
        out = capsys.readouterr().out
        assert "Status:        completed" in out
        assert "Extracted:     3" in out

    def test_failed_job_exit_code(self, cli_env, exam_file, fake_client, capsys):
        fake_client.responses[EXAM_SCHEMA_NAME] = {"questions": []}
        with patch("examingest.api.facade.client_from_settings", return_value=fake_client):
            assert main(["ingest", str(exam_file), "--course", "c1"]) == 2
        assert "No questions extracted" in capsys.readouterr().out

    def test_run_pending_job(self, cli_env, exam_file, fake_client, exam_payload, capsys):
        main(["ingest", str(exam_file), "--course", "c1", "--no-run"])
        job_id = _job_id(capsys.readouterr().out)
        fake_client.responses[EXAM_SCHEMA_NAME] = exam_payload
        with patch("examingest.api.facade.client_from_settings", return_value=fake_client):
            assert main(["run", job_id]) == 0

    def test_status_unknown_job(self, cli_env):
        assert main(["status", "nope"]) == 1
