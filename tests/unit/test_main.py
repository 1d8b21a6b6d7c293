"""Tests for the command-line interface."""

from pathlib import Path

import pytest

from spot2lidarr.main import EXIT_ERROR, build_arg_parser, main


class TestArgParser:
    """Test argument parsing."""

    def test_migrate_defaults(self) -> None:
        args = build_arg_parser().parse_args(["migrate", "--library", "lib.json"])

        assert args.cmd == "migrate"
        assert args.monitor == "savedAlbumsOnly"
        assert args.no_search is False
        assert args.artist_ids is None
        assert args.root_folder is None

    def test_migrate_options(self) -> None:
        args = build_arg_parser().parse_args(
            [
                "migrate",
                "--library",
                "lib.json",
                "--monitor",
                "latest",
                "--no-search",
                "--quality-profile-id",
                "4",
                "--artist-id",
                "a1",
                "--artist-id",
                "a2",
            ]
        )

        assert args.monitor == "latest"
        assert args.no_search is True
        assert args.quality_profile_id == 4
        assert args.artist_ids == ["a1", "a2"]

    def test_unknown_monitor_option_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args(
                ["migrate", "--library", "lib.json", "--monitor", "everything"]
            )

    def test_extract_default_output(self) -> None:
        args = build_arg_parser().parse_args(["extract"])
        assert args.output == "library.json"


class TestMain:
    """Test the entry point's error handling."""

    def test_missing_library_file(self, tmp_path: Path) -> None:
        """Test a missing library file is reported, not raised."""
        exit_code = main(["migrate", "--library", str(tmp_path / "missing.json")])
        assert exit_code == EXIT_ERROR
