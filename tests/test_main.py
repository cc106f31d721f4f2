from __future__ import annotations

import datetime

import pytest

from slotwatch import main as cli
from slotwatch.services.errors import GeocodeNotFound


def test_parse_options_defaults(settings):
    parser = cli.build_parser(settings)

    options, args = cli.parse_options(parser, ["--postal-code", "h2x 1y4"])

    assert options.postal_code == "H2X1Y4"
    assert (options.tolerance, options.distance, options.poll) == (5, 10, 1)
    assert options.specific_date is None
    assert options.output == "box"
    assert args.once is False


def test_parse_options_accepts_camel_case_flags(settings):
    parser = cli.build_parser(settings)

    options, _ = cli.parse_options(
        parser, ["--postalCode", "J0J0J0", "--specificDate", "2024-06-01", "--tolerance", "2", "--output", "table"]
    )

    assert options.specific_date == datetime.date(2024, 6, 1)
    assert options.tolerance == 2
    assert options.output == "table"


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--postal-code", "J0J0J0", "--tolerance", "-1"],
        ["--postal-code", "J0J0J0", "--poll", "0"],
        ["--postal-code", "J0J0J0", "--specific-date", "june"],
    ],
)
def test_invalid_options_exit_with_usage_error(settings, argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_options(cli.build_parser(settings), argv)
    assert excinfo.value.code == 2


def test_main_once_runs_single_pass(monkeypatch):
    seen = {}

    async def fake_run(options, settings, once=False):
        seen["options"] = options
        seen["once"] = once

    monkeypatch.setattr(cli, "run", fake_run)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)

    assert cli.main(["--postal-code", "J0J0J0", "--once"]) == 0
    assert seen["once"] is True
    assert seen["options"].postal_code == "J0J0J0"


def test_main_reports_missing_geocode(monkeypatch):
    async def fake_run(options, settings, once=False):
        raise GeocodeNotFound(options.postal_code)

    monkeypatch.setattr(cli, "run", fake_run)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)

    assert cli.main(["--postal-code", "H0H0H0", "--once"]) == 1
