#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for optional dependency checks and code highlighting."""

import logging

import pytest

from md2view.exceptions import DependencyError, ValidationError
from md2view.utils.decorators import debug_timer, requires_dependencies
from md2view.utils.packages import check_requirement, get_package_version


@pytest.mark.unit
class TestRequiresDependencies:
    """Tests for the requires_dependencies decorator."""

    def test_missing_package_raises(self):
        @requires_dependencies("imaginary", [("not-a-real-dist", "not_a_real_module_md2view", "")])
        def feature():
            return "ran"

        with pytest.raises(DependencyError) as exc_info:
            feature()

        error = exc_info.value
        assert error.feature_name == "imaginary"
        assert error.missing_packages == [("not-a-real-dist", "")]
        assert isinstance(error.original_import_error, ImportError)
        assert "pip install" in str(error)

    def test_available_package_runs(self):
        @requires_dependencies("packaging", [("packaging", "packaging", "")])
        def feature():
            return "ran"

        assert feature() == "ran"

    def test_version_mismatch_reported(self):
        @requires_dependencies("packaging", [("packaging", "packaging", ">=9999")])
        def feature():
            return "ran"

        with pytest.raises(DependencyError) as exc_info:
            feature()
        assert exc_info.value.version_mismatches[0][:2] == ("packaging", ">=9999")

    def test_custom_install_command(self):
        error = DependencyError("highlight", [("Pygments", ">=2.15.0")], install_command="pip install md2view[highlight]")
        assert str(error).endswith("Install with: pip install md2view[highlight]")


@pytest.mark.unit
class TestPackages:
    """Tests for installed package lookups."""

    def test_unknown_distribution(self):
        assert get_package_version("not-a-real-dist-md2view") is None

    def test_missing_module(self):
        status = check_requirement("not-a-real-dist-md2view", "not_a_real_module_md2view", ">=1")
        assert not status.importable
        assert not status.satisfied
        assert isinstance(status.import_error, ImportError)

    def test_installed_distribution(self):
        status = check_requirement("packaging", "packaging", ">=0")
        assert status.satisfied
        assert status.installed_version

    def test_any_version_accepted(self):
        assert check_requirement("packaging", "packaging").satisfied


@pytest.mark.unit
class TestDebugTimer:
    """Tests for the debug_timer context manager."""

    def test_logs_at_debug(self, caplog):
        logger = logging.getLogger("md2view.tests.timer")
        with caplog.at_level(logging.DEBUG, logger="md2view.tests.timer"):
            with debug_timer(logger, "Doing work"):
                pass
        assert "Doing work completed in" in caplog.text

    def test_silent_above_debug(self, caplog):
        logger = logging.getLogger("md2view.tests.timer")
        with caplog.at_level(logging.INFO, logger="md2view.tests.timer"):
            with debug_timer(logger, "Doing work"):
                pass
        assert caplog.text == ""


@pytest.mark.unit
class TestHighlightCode:
    """Tests for Pygments highlighting."""

    def test_highlight_python(self):
        pytest.importorskip("pygments")
        from md2view.utils.highlight import highlight_code

        result = highlight_code("def f():\n    return 1\n", "python", "default")
        assert "<span" in result.html
        assert "<pre" not in result.html
        assert result.background_color

    def test_unknown_language_falls_back(self):
        pytest.importorskip("pygments")
        from md2view.utils.highlight import highlight_code

        result = highlight_code("a < b", "no-such-language-md2view", "default")
        assert "&lt;" in result.html

    def test_unknown_theme_rejected(self):
        pytest.importorskip("pygments")
        from md2view.utils.highlight import highlight_code

        with pytest.raises(ValidationError) as exc_info:
            highlight_code("x", "python", "no-such-style-md2view")
        assert exc_info.value.parameter_name == "theme"
