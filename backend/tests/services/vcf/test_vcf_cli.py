"""
Tests for the `python -m pharmaguard.services.vcf` command line entry point.
"""

import json

import pytest

from pharmaguard.services.vcf import __main__ as cli
from pharmaguard.services.vcf.__main__ import main


class TestCli:

    @pytest.fixture(autouse=True)
    def isolated_history(self, monkeypatch, history_store):
        monkeypatch.setattr(cli, "get_history_store", lambda: history_store)
        return history_store

    def test_success_prints_reports(self, tmp_path, capsys, make_vcf, variant_line):
        path = tmp_path / "patient.vcf"
        path.write_text(make_vcf(variant_line("rs4244285", "CYP2C19", "1/1")), encoding="utf-8")

        exit_code = main(["pharmaguard.services.vcf", str(path), "--drugs", "CLOPIDOGREL", "--offline"])

        assert exit_code == 0
        reports = json.loads(capsys.readouterr().out)
        assert reports[0]["drug"] == "CLOPIDOGREL"
        assert reports[0]["risk_assessment"]["risk_label"] == "Ineffective"

    def test_default_drug_list_is_all_supported(self, tmp_path, capsys, make_vcf):
        path = tmp_path / "patient.vcf"
        path.write_text(make_vcf(), encoding="utf-8")

        assert main(["pharmaguard.services.vcf", str(path), "--offline"]) == 0
        assert len(json.loads(capsys.readouterr().out)) == 6

    def test_missing_file(self, tmp_path, capsys):
        assert main(["pharmaguard.services.vcf", str(tmp_path / "missing.vcf"), "--offline"]) == 2
        assert "File not found" in capsys.readouterr().err

    def test_bad_format(self, tmp_path, capsys):
        path = tmp_path / "bad.vcf"
        path.write_text("not a vcf\n", encoding="utf-8")

        assert main(["pharmaguard.services.vcf", str(path), "--offline"]) == 1
        assert "Standard header missing" in capsys.readouterr().err

    def test_unsupported_drug(self, tmp_path, capsys, make_vcf):
        path = tmp_path / "patient.vcf"
        path.write_text(make_vcf(), encoding="utf-8")

        assert main(["pharmaguard.services.vcf", str(path), "--drugs", "ASPIRIN", "--offline"]) == 1

    def test_usage_without_path(self, capsys):
        assert main(["pharmaguard.services.vcf"]) == 0
        assert "Usage" in capsys.readouterr().out

    def test_successful_run_is_recorded(self, tmp_path, capsys, make_vcf, isolated_history):
        path = tmp_path / "patient.vcf"
        path.write_text(make_vcf(), encoding="utf-8")

        assert main(["pharmaguard.services.vcf", str(path), "--drugs", "CODEINE, WARFARIN", "--offline"]) == 0
        assert [r["drug"] for r in isolated_history.load()] == ["CODEINE", "WARFARIN"]

    def test_no_history_flag(self, tmp_path, capsys, make_vcf, isolated_history):
        path = tmp_path / "patient.vcf"
        path.write_text(make_vcf(), encoding="utf-8")

        assert main(["pharmaguard.services.vcf", str(path), "--offline", "--no-history"]) == 0
        assert isolated_history.load() == []
