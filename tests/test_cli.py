"""Tests for the thumby command line."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from thumby.cli import main
from thumby.config.loader import ThumbyConfig

CACHED = """https://youtu.be/hCc0OsyMbQk?t=62
Title: Never Gonna
Author: Rick
Thumbnail: https://i.ytimg.com/vi/hCc0OsyMbQk/mqdefault.jpg
AuthorUrl: https://www.youtube.com/@rick"""

NOTE = f"""# Videos

```vid
{CACHED}
```

```vid
https://example.com/not-a-video
```
"""


@pytest.fixture
def offline_config(tmp_path):
    with patch("thumby.cli.get_config", return_value=ThumbyConfig(root_dir=tmp_path)):
        yield


class TestValidateConfig:
    """Tests for the validate-config subcommand."""

    def test_no_config_file(self, capsys):
        """Test with no config file found."""
        with (
            patch("thumby.config.loader._find_project_config", return_value=None),
            patch(
                "thumby.config.loader._get_user_config_path",
                return_value=Path("/nonexistent/config.yaml"),
            ),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["validate-config"])

        assert exc_info.value.code == 0
        assert "No config file found" in capsys.readouterr().out

    def test_valid_config(self, tmp_path, capsys):
        """Test with a valid config file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("save_images: true\nimage_location: attachment\n")

        with (
            patch("thumby.config.loader._find_project_config", return_value=config_file),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["validate-config"])

        assert exc_info.value.code == 0
        assert "Config is valid." in capsys.readouterr().out

    def test_invalid_config(self, tmp_path, capsys):
        """Test with an invalid config file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("image_location: folder\n")

        with (
            patch("thumby.config.loader._find_project_config", return_value=config_file),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["validate-config"])

        assert exc_info.value.code == 1
        output = capsys.readouterr().out
        assert "Config is invalid" in output
        assert "image_folder" in output

    def test_interpolated_api_key(self, tmp_path, capsys, monkeypatch):
        """Test an API key taken from the environment passes cleanly."""
        monkeypatch.setenv("YOUTUBE_API_KEY", "secret")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("youtube_api_key: ${YOUTUBE_API_KEY}\n")

        with (
            patch("thumby.config.loader._find_project_config", return_value=config_file),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["validate-config"])

        assert exc_info.value.code == 0
        output = capsys.readouterr().out
        assert "Config is valid." in output
        assert "plain text" not in output

    def test_warnings_only(self, tmp_path, capsys):
        """Test warnings alone keep the exit code at 0."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("store_info: true\nunknown_key: 1\n")

        with (
            patch("thumby.config.loader._find_project_config", return_value=config_file),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["validate-config"])

        assert exc_info.value.code == 0
        assert "valid with 1 warning(s)" in capsys.readouterr().out


class TestInsert:
    """Tests for the insert subcommand."""

    def test_prints_block(self, capsys):
        main(["insert", "https://vimeo.com/76979871"])
        assert capsys.readouterr().out == "```vid\nhttps://vimeo.com/76979871\n```\n"

    def test_invalid_url_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["insert", "not a url"])
        assert exc_info.value.code == 1


class TestResolve:
    """Tests for the resolve subcommand."""

    def test_unknown_url_is_link(self, offline_config, tmp_path, capsys):
        """Test an unrecognized URL prints a bare link without network."""
        main(["resolve", "https://example.com/v", "--vault", str(tmp_path)])
        assert capsys.readouterr().out.strip() == (
            "[https://example.com/v](https://example.com/v)"
        )

    def test_json_output(self, offline_config, tmp_path, capsys):
        main(["resolve", "https://example.com/v", "--json", "--vault", str(tmp_path)])
        data = json.loads(capsys.readouterr().out)
        assert data["kind"] == "link"
        assert data["metadata"] is None


class TestProcess:
    """Tests for the process and strip subcommands."""

    def test_missing_file(self, tmp_path, capsys):
        """Test a missing file fails with an error message."""
        with pytest.raises(SystemExit) as exc_info:
            main(["process", str(tmp_path / "missing.md")])
        assert exc_info.value.code == 1
        assert "ERROR: File not found" in capsys.readouterr().err

    def test_file_outside_vault(self, tmp_path, capsys):
        """Test a file outside the vault is refused."""
        note = tmp_path / "note.md"
        note.write_text(NOTE)
        vault = tmp_path / "vault"
        vault.mkdir()

        with pytest.raises(SystemExit) as exc_info:
            main(["process", str(note), "--vault", str(vault)])

        assert exc_info.value.code == 1
        assert "is not inside vault" in capsys.readouterr().err

    def test_renders_cards_from_stored_info(self, offline_config, tmp_path, capsys):
        """Test stored blocks render without touching the network."""
        note = tmp_path / "note.md"
        note.write_text(NOTE)

        main(["process", str(note), "--dry-run"])

        output = capsys.readouterr().out
        assert "--- line 4" in output
        assert "**Never Gonna**" in output
        assert "[Rick](https://www.youtube.com/@rick)" in output
        assert "`01:02`" in output
        assert "[https://example.com/not-a-video](https://example.com/not-a-video)" in output
        assert "UPDATED DOCUMENT" not in output
        assert note.read_text() == NOTE

    def test_no_blocks(self, offline_config, tmp_path, capsys):
        note = tmp_path / "note.md"
        note.write_text("# Nothing here\n")
        main(["process", str(note)])
        assert "No video blocks" in capsys.readouterr().out

    def test_strip(self, tmp_path, capsys):
        """Test strip reduces stored blocks to their URL line."""
        note = tmp_path / "note.md"
        note.write_text(NOTE)

        main(["strip", str(note)])

        assert "from 1 block(s)" in capsys.readouterr().out
        text = note.read_text()
        assert "Title:" not in text
        assert "```vid\nhttps://youtu.be/hCc0OsyMbQk?t=62\n```" in text

    def test_strip_nothing(self, tmp_path, capsys):
        note = tmp_path / "note.md"
        note.write_text("```vid\nhttps://youtu.be/hCc0OsyMbQk\n```\n")
        main(["strip", str(note)])
        assert "No stored info" in capsys.readouterr().out
