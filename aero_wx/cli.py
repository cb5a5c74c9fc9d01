#!/usr/bin/env python3

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from typing import List, Optional

from aero_wx import config
from aero_wx.weather.collection import WeatherCollection
from aero_wx.weather.metar import decode_metar
from aero_wx.weather.models import MetarRecord
from aero_wx.weather.parser import decode_report
from aero_wx.weather.taf import decode_taf

logger = logging.getLogger(__name__)


def split_reports(text: str) -> List[str]:
    """Split stdin text into reports separated by blank lines."""
    reports = []
    current: List[str] = []
    for line in text.splitlines():
        if line.strip():
            current.append(line.strip())
        elif current:
            reports.append("\n".join(current))
            current = []
    if current:
        reports.append("\n".join(current))
    return reports


class Command:
    """Command-line interface for aero_wx."""

    def __init__(self, args, stdin=None, stdout=None):
        """
        Initialize the command interface.

        Args:
            args: Parsed command line arguments
            stdin: Input stream used when no report text is given
            stdout: Output stream
        """
        self.args = args
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.reference_now = self._reference_now(args.now)

    @staticmethod
    def _reference_now(value: Optional[datetime]) -> datetime:
        return value or datetime.now(timezone.utc)

    def reports(self) -> List[str]:
        if self.args.report:
            return [" ".join(self.args.report)]
        return split_reports(self.stdin.read())

    def run_metar(self):
        self.output([decode_metar(r, self.reference_now) for r in self.reports()])

    def run_taf(self):
        self.output([decode_taf(r, self.reference_now) for r in self.reports()])

    def run_auto(self):
        self.output([decode_report(r, self.reference_now) for r in self.reports()])

    def output(self, records):
        logger.info("Decoded %d report(s)", len(records))
        if self.args.format == 'csv':
            metars = [r for r in records if isinstance(r, MetarRecord)]
            if len(metars) != len(records):
                logger.warning("CSV output only includes METAR records, skipped %d", len(records) - len(metars))
            WeatherCollection(metars).to_dataframe().to_csv(self.stdout, index=False)
            return
        payload = [r.to_dict() for r in records]
        if len(payload) == 1:
            payload = payload[0]
        json.dump(payload, self.stdout, indent=2)
        self.stdout.write("\n")

    def run(self):
        """Run the specified command."""
        getattr(self, f'run_{self.args.command}')()


def utc_datetime(value: str) -> datetime:
    """Parse an ISO timestamp for --now; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO time: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Decode METAR and TAF reports')
    parser.add_argument('command', help='Report type to decode', choices=['metar', 'taf', 'auto'])
    parser.add_argument('report', help='Report text (read from stdin if omitted)', nargs='*')
    parser.add_argument('--now', help='Reference UTC time in ISO format (default: current time)', type=utc_datetime)
    parser.add_argument('--format', help='Output format (json,csv)', choices=['json', 'csv'], default='json')
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    cmd = Command(args)
    cmd.run()


if __name__ == '__main__':
    main()
