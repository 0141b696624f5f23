"""
tests/test_cli.py
Command-line parsing.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import settings
from main import _scope_args, build_parser


class TestParser:

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])
        assert settings.project_version in capsys.readouterr().out

    def test_title_is_the_description(self):
        assert build_parser().description == settings.project_title

    def test_department_reaches_scope(self):
        args = build_parser().parse_args(["demo", "--view", "cost", "--month", "Mar-24", "--department", "Production"])
        assert _scope_args(args) == {
            "month": "Mar-24", "year": None, "department": "Production",
            "location": None, "project_type": None,
        }

    def test_department_limited_to_configured_list(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["demo", "--department", "Payroll"])
