"""Unit tests for package manager detection and selection."""

from unittest.mock import MagicMock, patch

import pytest
from upvibe.core.detect import (
    check_all_managers,
    detect_package_manager,
    get_manager_version,
    get_node_version,
    is_node_supported,
    select_package_manager,
)
from upvibe.models.package import PackageManager
from upvibe.utils.shell import CommandResult


class TestDetectPackageManager:
    """Tests for detect_package_manager function."""

    def test_prefers_npm(self) -> None:
        """npm is chosen when everything is installed."""
        with patch("upvibe.core.detect.command_exists", return_value=True):
            assert detect_package_manager() == PackageManager.NPM

    def test_first_available(self) -> None:
        """The first available manager in detection order wins."""
        with patch("upvibe.core.detect.command_exists", side_effect=lambda n: n == "pnpm"):
            assert detect_package_manager() == PackageManager.PNPM

    def test_defaults_to_npm(self) -> None:
        """npm is the fallback when nothing is found."""
        with patch("upvibe.core.detect.command_exists", return_value=False):
            assert detect_package_manager() == PackageManager.NPM


class TestSelectPackageManager:
    """Tests for select_package_manager function."""

    def test_override_wins(self) -> None:
        """An explicit override beats config and detection."""
        detect = MagicMock(return_value=PackageManager.NPM)

        selected = select_package_manager(PackageManager.YARN, PackageManager.PNPM, detect)

        assert selected == PackageManager.YARN
        detect.assert_not_called()

    def test_config_preference(self) -> None:
        """The config preference is used without an override."""
        detect = MagicMock(return_value=PackageManager.NPM)

        assert select_package_manager(None, PackageManager.PNPM, detect) == PackageManager.PNPM
        detect.assert_not_called()

    def test_falls_back_to_detection(self) -> None:
        """Detection runs when nothing is configured."""
        detect = MagicMock(return_value=PackageManager.YARN)

        assert select_package_manager(None, None, detect) == PackageManager.YARN
        detect.assert_called_once()


class TestManagerInfo:
    """Tests for check_all_managers and get_manager_version."""

    def test_check_all_managers(self) -> None:
        """Every manager is reported."""
        with patch("upvibe.core.detect.command_exists", side_effect=lambda n: n != "yarn"):
            result = check_all_managers()

        assert result == {
            PackageManager.NPM: True,
            PackageManager.YARN: False,
            PackageManager.PNPM: True,
        }

    @patch("upvibe.core.detect.run_command")
    def test_get_manager_version(self, mock_run: MagicMock) -> None:
        """The --version output is returned stripped."""
        mock_run.return_value = CommandResult(stdout="10.5.0\n", stderr="", returncode=0)

        assert get_manager_version(PackageManager.NPM) == "10.5.0"
        assert mock_run.call_args[0][0] == ["npm", "--version"]

    @patch("upvibe.core.detect.run_command")
    def test_get_manager_version_missing(self, mock_run: MagicMock) -> None:
        """A missing executable yields None."""
        mock_run.side_effect = FileNotFoundError("pnpm")

        assert get_manager_version(PackageManager.PNPM) is None


class TestNodeVersion:
    """Tests for the Node.js version check."""

    @patch("upvibe.core.detect.run_command")
    def test_get_node_version(self, mock_run: MagicMock) -> None:
        mock_run.return_value = CommandResult(stdout="v20.11.0\n", stderr="", returncode=0)

        assert get_node_version() == "v20.11.0"
        assert mock_run.call_args[0][0] == ["node", "--version"]

    @patch("upvibe.core.detect.run_command", side_effect=FileNotFoundError("node"))
    def test_node_missing(self, mock_run: MagicMock) -> None:
        assert get_node_version() is None

    @pytest.mark.parametrize(
        ("version", "supported"),
        [
            ("v18.0.0", True),
            ("v22.3.1", True),
            ("20.11.0", True),
            ("v16.20.2", False),
            ("garbage", False),
        ],
    )
    def test_is_node_supported(self, version: str, supported: bool) -> None:
        assert is_node_supported(version) is supported
