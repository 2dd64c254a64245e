"""Tests for scripts.generate_hillshade module."""

from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from scripts.generate_hillshade import generate_hillshade, main


class TestGenerateHillshade:
    """Tests for generate_hillshade function."""

    def test_writes_grayscale_png(self, hgt_file, tmp_path):
        out = tmp_path / "out" / "N47E011.png"
        assert generate_hillshade(str(hgt_file), str(out), 50.0, padding=1)

        with Image.open(out) as img:
            assert img.mode == "L"
            assert img.size == (6, 6)
            pixels = np.asarray(img)
        assert np.all(pixels[0, :] == 0)
        assert np.all(pixels[1:5, 1] == 127)

    def test_malformed_tile(self, tmp_path):
        path = tmp_path / "N47E011.hgt"
        path.write_bytes(bytes(7))
        out = tmp_path / "out.png"
        assert not generate_hillshade(str(path), str(out), 50.0)
        assert not out.exists()


class TestMain:
    """Tests for command-line entry point."""

    def test_missing_input(self, tmp_path):
        argv = [
            "generate_hillshade",
            "--input",
            str(tmp_path / "N00E000.hgt"),
            "--output",
            str(tmp_path / "out.png"),
        ]
        with patch("sys.argv", argv), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1

    def test_angle_out_of_range(self, hgt_file, tmp_path):
        argv = [
            "generate_hillshade",
            "--input",
            str(hgt_file),
            "--output",
            str(tmp_path / "out.png"),
            "--angle",
            "120",
        ]
        with patch("sys.argv", argv), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1

    def test_success(self, hgt_file, tmp_path):
        out = tmp_path / "out.png"
        argv = [
            "generate_hillshade",
            "--input",
            str(hgt_file),
            "--output",
            str(out),
            "--padding",
            "0",
        ]
        with patch("sys.argv", argv):
            main()
        with Image.open(out) as img:
            assert img.size == (4, 4)

    def test_tile_name_resolved_in_hgt_dir(self, hgt_file, tmp_path):
        out = tmp_path / "named.png"
        argv = ["generate_hillshade", "--input", "N47E011.hgt", "--output", str(out)]
        with patch("sys.argv", argv), patch(
            "scripts.generate_hillshade.get_settings"
        ) as mock_settings:
            mock_settings.return_value.hgt_dir = str(hgt_file.parent)
            mock_settings.return_value.light_height_angle = 50.0
            mock_settings.return_value.padding = 1
            main()
        assert out.exists()
