"""Tests for output path resolution."""

import pytest

from ffweb.domain import OutputConfig, OutputPathType
from ffweb.synthesis import normalize_separators, output_filename, resolve_output_path


class TestOutputFilename:
    """Tests for output_filename()."""

    def test_strips_extension_and_appends_suffix(self):
        """Stem + suffix + container extension."""
        output = OutputConfig(container="mkv", suffix="_av1")
        assert output_filename("/videos/movie.mp4", output) == "movie_av1.mkv"

    def test_only_last_extension_is_stripped(self):
        """Dots inside the stem survive."""
        output = OutputConfig(container="mp4", suffix="_out")
        assert output_filename("/v/show.s01e01.mkv", output) == "show.s01e01_out.mp4"

    def test_file_without_extension(self):
        """A bare name keeps its full stem."""
        output = OutputConfig(container="mp4", suffix="_out")
        assert output_filename("/v/README", output) == "README_out.mp4"

    def test_empty_suffix_falls_back_to_default(self):
        """An empty suffix would overwrite same-container inputs; default it."""
        output = OutputConfig(container="mp4", suffix="")
        assert output_filename("/v/a.mp4", output) == "a_transcoded.mp4"


class TestResolveOutputPath:
    """Tests for resolve_output_path()."""

    def test_default_groups_by_source_folder(self):
        """DEFAULT writes to <default dir>/<source parent name>/."""
        output = OutputConfig(path_type=OutputPathType.DEFAULT)
        path = resolve_output_path("/videos/movies/x.mp4", output, "/output")
        assert path == "/output/movies/x_transcoded.mp4"

    def test_default_without_default_dir_uses_output(self):
        """Empty or missing default dir falls back to /output."""
        output = OutputConfig(path_type=OutputPathType.DEFAULT)
        expected = "/output/b/c_transcoded.mp4"
        assert resolve_output_path("/a/b/c.mkv", output, "") == expected
        assert resolve_output_path("/a/b/c.mkv", output) == expected

    def test_default_for_file_at_root(self):
        """A file with no parent folder name lands directly in the default dir."""
        output = OutputConfig(path_type=OutputPathType.DEFAULT)
        assert resolve_output_path("/c.mkv", output, "/out") == "/out/c_transcoded.mp4"

    def test_source_uses_input_directory(self):
        """SOURCE writes next to the input."""
        output = OutputConfig(
            container="mp4", suffix="_out", path_type=OutputPathType.SOURCE
        )
        assert resolve_output_path("/videos/a.mkv", output, "/output") == (
            "/videos/a_out.mp4"
        )

    def test_custom_uses_custom_path(self):
        """CUSTOM writes under custom_path."""
        output = OutputConfig(
            path_type=OutputPathType.CUSTOM, custom_path="/mnt/encodes/"
        )
        assert resolve_output_path("/videos/a.mkv", output, "/output") == (
            "/mnt/encodes/a_transcoded.mp4"
        )

    def test_custom_without_path_falls_back_to_default_dir(self):
        """CUSTOM with no custom_path uses the default directory itself."""
        output = OutputConfig(path_type=OutputPathType.CUSTOM)
        assert resolve_output_path("/videos/a.mkv", output, "/srv") == (
            "/srv/a_transcoded.mp4"
        )

    def test_overwrite_returns_input_unchanged(self):
        """OVERWRITE targets the source file itself."""
        output = OutputConfig(path_type=OutputPathType.OVERWRITE, container="mkv")
        assert resolve_output_path("/videos//a.mp4", output, "/output") == (
            "/videos//a.mp4"
        )

    @pytest.mark.parametrize(
        "default_dir",
        ["/output/", "/output//", "//output"],
    )
    def test_separator_runs_are_collapsed(self, default_dir: str):
        """Trailing or doubled slashes never produce '//' in the result."""
        output = OutputConfig(path_type=OutputPathType.DEFAULT)
        path = resolve_output_path("/videos/movies/x.mp4", output, default_dir)
        assert path == "/output/movies/x_transcoded.mp4"


class TestNormalizeSeparators:
    """Tests for normalize_separators()."""

    def test_collapses_runs(self):
        assert normalize_separators("//a///b/c") == "/a/b/c"

    def test_leaves_clean_path_alone(self):
        assert normalize_separators("/a/b") == "/a/b"
