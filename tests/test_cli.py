"""Tests for the gsheets-fetch CLI."""

import json
from unittest.mock import MagicMock, patch

import pytest

from gsheets_fetch import cli
from gsheets_fetch.exceptions import CredentialsNotFoundError, NotFoundError
from gsheets_fetch.feeds import SpreadsheetRef, WorksheetRef


@pytest.fixture
def fetcher():
    fetcher = MagicMock()
    fetcher.fetch_worksheet.return_value = [["Colour", "Count"], ["red", "123"]]
    return fetcher


@pytest.fixture
def connect(fetcher):
    session = MagicMock()
    session.email = "reader@test-project.iam.gserviceaccount.com"
    with patch.object(cli, "_connect", return_value=(session, fetcher)) as connect:
        yield connect


class TestFetch:
    """Test the fetch command."""

    def test_json(self, connect, fetcher, capsys):
        """Should print the grid as JSON."""
        assert cli.main(["fetch", "Colour Counts", "Sheet1"]) == 0

        assert json.loads(capsys.readouterr().out) == [["Colour", "Count"], ["red", "123"]]
        fetcher.fetch_worksheet.assert_called_once_with(
            connect.return_value[0], "Colour Counts", "Sheet1"
        )

    def test_csv(self, connect, capsys):
        """Should print the grid as CSV."""
        assert cli.main(["fetch", "Colour Counts", "Sheet1", "--format", "csv"]) == 0
        assert capsys.readouterr().out.splitlines() == ["Colour,Count", "red,123"]

    def test_key_option(self, connect):
        """Should pass --key through to the session setup."""
        cli.main(["--key", "/tmp/key.json", "fetch", "A", "B"])
        connect.assert_called_once_with("/tmp/key.json")

    def test_lookup_error(self, connect, fetcher, capsys):
        """Should print the error and exit with 1."""
        fetcher.fetch_worksheet.side_effect = NotFoundError(
            "worksheet", "Sheet1", 0, container="Colour Counts"
        )
        assert cli.main(["fetch", "Colour Counts", "Sheet1"]) == 1
        assert "Error: Found 0 worksheets in Colour Counts with name Sheet1" in capsys.readouterr().out

    def test_missing_key(self, capsys):
        """Should report a missing key file."""
        with patch.object(cli, "_connect", side_effect=CredentialsNotFoundError("/nope.json")):
            assert cli.main(["fetch", "A", "B"]) == 1
        assert "/nope.json" in capsys.readouterr().out


class TestListing:
    """Test the list and worksheets commands."""

    def test_list(self, connect, fetcher, capsys):
        """Should print spreadsheets sorted by title."""
        fetcher.list_spreadsheets.return_value = [
            SpreadsheetRef(title="Zeta", id="z", child_feed_url="u1"),
            SpreadsheetRef(title="Alpha", id="a", child_feed_url="u2"),
        ]
        assert cli.main(["list"]) == 0
        assert capsys.readouterr().out.splitlines() == ["Alpha\ta", "Zeta\tz"]

    def test_list_empty(self, connect, fetcher, capsys):
        """Should mention the service account when nothing is shared."""
        fetcher.list_spreadsheets.return_value = []
        assert cli.main(["list"]) == 0
        assert "reader@test-project" in capsys.readouterr().out

    def test_worksheets(self, connect, fetcher, capsys):
        """Should print the worksheet titles of a spreadsheet."""
        fetcher.list_worksheets.return_value = [
            WorksheetRef(title="Sheet1", spreadsheet_id="s", sheet_id=0, index=0, child_feed_url="c")
        ]
        assert cli.main(["worksheets", "Colour Counts"]) == 0
        fetcher.find_spreadsheet.assert_called_once_with(connect.return_value[0], "Colour Counts")
        assert capsys.readouterr().out.strip() == "Sheet1"


class TestImportKey:
    """Test importing service account keys."""

    def test_import(self, tmp_path, monkeypatch, capsys):
        """Should copy a valid key into the configured location."""
        source = tmp_path / "download.json"
        source.write_text(
            json.dumps(
                {
                    "type": "service_account",
                    "client_email": "reader@p.iam.gserviceaccount.com",
                    "project_id": "p",
                }
            )
        )
        destination = tmp_path / "google" / "key.json"
        monkeypatch.setenv("GSHEETS_SERVICE_ACCOUNT_KEY", str(destination))

        assert cli.main(["import-key", str(source)]) == 0
        assert destination.read_text() == source.read_text()
        assert "reader@p.iam.gserviceaccount.com" in capsys.readouterr().out

    def test_wrong_type(self, tmp_path, monkeypatch, capsys):
        """Should refuse OAuth client files."""
        source = tmp_path / "credentials.json"
        source.write_text(json.dumps({"installed": {"client_id": "x"}}))
        monkeypatch.setenv("GSHEETS_SERVICE_ACCOUNT_KEY", str(tmp_path / "key.json"))

        assert cli.main(["import-key", str(source)]) == 1
        assert not (tmp_path / "key.json").exists()
        assert "Invalid service account key format" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        """Should report a missing source file."""
        assert cli.main(["import-key", str(tmp_path / "nope.json")]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_not_utf8(self, tmp_path, monkeypatch, capsys):
        """Should report a binary file as invalid JSON."""
        source = tmp_path / "key.p12"
        source.write_bytes(b"\xff\xfe\x00binary")
        monkeypatch.setenv("GSHEETS_SERVICE_ACCOUNT_KEY", str(tmp_path / "key.json"))

        assert cli.main(["import-key", str(source)]) == 1
        assert "Error: Invalid JSON" in capsys.readouterr().out
        assert not (tmp_path / "key.json").exists()

    def test_directory(self, tmp_path, monkeypatch, capsys):
        """Should report a directory instead of a key file."""
        source = tmp_path / "downloads"
        source.mkdir()
        monkeypatch.setenv("GSHEETS_SERVICE_ACCOUNT_KEY", str(tmp_path / "key.json"))

        assert cli.main(["import-key", str(source)]) == 1
        assert "Error: Cannot read" in capsys.readouterr().out


class TestMain:
    """Test argument handling."""

    def test_no_command(self, capsys):
        """Should print help and exit cleanly."""
        assert cli.main([]) == 0
        assert "gsheets-fetch" in capsys.readouterr().out

    def test_status(self, capsys):
        """Should print the credential status."""
        assert cli.main(["status"]) == 0
        assert "CREDENTIAL STATUS" in capsys.readouterr().out
