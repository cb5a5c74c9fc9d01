"""Tests for the aero-wx command line interface."""

import io
import json

import pytest

from aero_wx.cli import Command, build_parser, split_reports

NOW = "2024-05-05T23:00:00"


def run(argv, stdin_text=""):
    args = build_parser().parse_args(argv)
    stdout = io.StringIO()
    Command(args, stdin=io.StringIO(stdin_text), stdout=stdout).run()
    return stdout.getvalue()


class TestSplitReports:

    def test_blank_lines_separate_reports(self):
        text = "KATL 052253Z 10SM CLR\n\nTAF KJFK 051730Z 0518/0624 P6SM\n  FM052000 P6SM\n\n\n"
        assert split_reports(text) == [
            "KATL 052253Z 10SM CLR",
            "TAF KJFK 051730Z 0518/0624 P6SM\nFM052000 P6SM",
        ]

    def test_empty(self):
        assert split_reports("") == []


class TestCommand:

    def test_metar_from_arguments(self):
        output = run(["metar", "KATL", "052253Z", "12008KT", "10SM", "FEW250", "24/12", "A3008", "--now", NOW])
        data = json.loads(output)
        assert data['station'] == "KATL"
        assert data['category'] == "VFR"
        assert data['observed_at'] == "2024-05-05T22:53:00+00:00"

    def test_taf_from_stdin(self, sample_taf):
        data = json.loads(run(["taf", "--now", NOW], sample_taf))
        assert data['station'] == "KJFK"
        assert len(data['periods']) == 5

    def test_auto_multiple_reports(self, sample_taf):
        stdin_text = "KATL 052253Z 12008KT 10SM FEW250 24/12 A3008\n\n" + sample_taf
        data = json.loads(run(["auto", "--now", NOW], stdin_text))
        assert [d['report_kind'] for d in data] == ["METAR", "TAF"]

    def test_csv(self):
        stdin_text = "KATL 052253Z 12008KT 10SM FEW250 24/12 A3008\n\nKBOS 052254Z 1/2SM FG VV002"
        output = run(["metar", "--now", NOW, "--format", "csv"], stdin_text)
        lines = output.strip().splitlines()
        assert lines[0].startswith("station,report_kind,observed_at")
        assert len(lines) == 3
        assert lines[2].startswith("KBOS,METAR")

    def test_reference_time_with_offset(self):
        args = build_parser().parse_args(["metar", "--now", "2024-05-05T23:00:00+00:00"])
        command = Command(args, stdin=io.StringIO(""), stdout=io.StringIO())
        assert command.reference_now.isoformat() == "2024-05-05T23:00:00+00:00"

    def test_naive_reference_time_is_utc(self):
        args = build_parser().parse_args(["metar", "--now", NOW])
        assert args.now.isoformat() == "2024-05-05T23:00:00+00:00"

    def test_invalid_reference_time(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["metar", "--now", "yesterday"])
        assert excinfo.value.code == 2
        assert "invalid ISO time" in capsys.readouterr().err

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["synop"])
