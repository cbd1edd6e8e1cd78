# prep_instructions/K_tests/K15_test_cli.py
"""Tests for the run_extraction command-line runner."""
import pytest

from J_export.J01_csv_export import read_instructions_csv
from G_config.prep_config import PACKAGE_ROOT
from run_extraction import collect_pdf_files, create_parser, main

SHIPPED_CONFIG = str(PACKAGE_ROOT / "G_config" / "config.yaml")

pytestmark = pytest.mark.usefixtures("restore_root_logger")


class TestParser:
    def test_defaults(self):
        args = create_parser().parse_args(["leaflet.pdf"])
        assert args.input == ["leaflet.pdf"]
        assert args.strategy is None and args.master is None

    def test_rejects_unknown_strategy(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["leaflet.pdf", "--strategy", "sentences"])


class TestCollectPdfFiles:
    def test_files_and_directories(self, make_pdf, tmp_path, capsys):
        first = make_pdf([[(72, 72, "one")]], name="a.pdf")
        nested = tmp_path / "more"
        nested.mkdir()
        (nested / "notes.txt").write_text("not a pdf", encoding="utf-8")
        second = make_pdf([[(72, 72, "two")]], name="more/b.pdf")

        found = collect_pdf_files([str(first), str(tmp_path), str(tmp_path / "missing.pdf")])
        assert found == sorted({first, second})
        assert "Skipping invalid path" in capsys.readouterr().err


class TestMain:
    def test_master_sequence(self, capsys):
        assert main(["--master", "Plenvu", "morning", "--config", SHIPPED_CONFIG, "--quiet"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 7
        assert lines[0].lstrip().startswith("1")

    def test_master_sequence_unknown_pair(self, capsys):
        assert main(["--master", "picolax", "evening", "--config", SHIPPED_CONFIG, "--quiet"]) == 1
        assert "Available: moviprep/afternoon" in capsys.readouterr().err

    def test_no_input(self, capsys):
        assert main(["--config", SHIPPED_CONFIG, "--quiet"]) == 1
        assert "No PDF files found" in capsys.readouterr().err

    def test_bad_config(self, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("pipeline:\n  baseline_tolerance: -1\n", encoding="utf-8")
        assert main(["leaflet.pdf", "--config", str(config)]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_processes_pdf(self, make_pdf, tmp_path, capsys):
        pdf = make_pdf([[
            (72, 72, "Plenvu bowel preparation - afternoon procedure"),
            (72, 88, "SEVEN DAYS BEFORE"),
            (72, 104, "Stop taking iron supplements"),
            (72, 120, "DAY OF"),
            (72, 136, "Arrive 2 hours before your appointment."),
        ]], name="leaflet.pdf")
        out_dir = tmp_path / "results"

        code = main([str(pdf), "--output-dir", str(out_dir), "--config", SHIPPED_CONFIG])

        assert code == 0
        rows = read_instructions_csv(out_dir / "leaflet.csv")
        assert rows
        assert {r.bowelprep for r in rows} == {"plenvu"}
        assert {r.procedure_time for r in rows} == {"afternoon"}
        assert "CSV file created successfully" in capsys.readouterr().out

    def test_failed_pdf_exit_status(self, tmp_path):
        broken = tmp_path / "broken.pdf"
        broken.write_bytes(b"not a pdf")
        out_dir = tmp_path / "results"
        assert main([str(broken), "--output-dir", str(out_dir), "--config", SHIPPED_CONFIG, "--quiet"]) == 1
        assert not (out_dir / "broken.csv").exists()
