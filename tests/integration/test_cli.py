"""Integration tests for CLI commands."""

import json
import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import respx
from rich.logging import RichHandler
from typer.testing import CliRunner

from ohrenbaer_archive import cli
from ohrenbaer_archive.catalog import EpisodeRecord, load_catalog, save_catalog
from ohrenbaer_archive.cli import app
from ohrenbaer_archive.utils.errors import ScrapeError

runner = CliRunner()


def flat(output: str) -> str:
    """Collapse console line wrapping so long paths do not split phrases."""
    return " ".join(output.split())


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Catalog with two episodes."""
    path = tmp_path / "podcasts.json"
    save_catalog(
        path,
        [
            EpisodeRecord(
                title="Teil 1 - komplette Folge",
                release_date="2020-01-01T00:00:00.000Z",
                download_link="http://x/1.mp3",
            ),
            EpisodeRecord(
                title="Teil 2 - Kurzfassung",
                release_date="2021-01-01T00:00:00.000Z",
                download_link="http://x/2.mp3",
            ),
        ],
    )
    return path


class TestCLIVersion:
    """Tests for version command."""

    def test_version_command(self) -> None:
        """Test version command displays version."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "Ohrenbär archive" in flat(result.output)
        assert "0.1.0" in flat(result.output)


class TestCLILogging:
    """Tests for the logging callback."""

    def test_logs_share_progress_console(self) -> None:
        """Test log records render on the console that draws progress bars."""
        root = logging.getLogger()
        handlers = root.handlers[:]
        try:
            runner.invoke(app, ["version"])

            rich_handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
            assert [h.console for h in rich_handlers] == [cli.err_console]
        finally:
            root.handlers = handlers


class TestCLIDownload:
    """Tests for download command."""

    def test_missing_catalog_fails(self, tmp_path: Path) -> None:
        """Test missing input file is a fatal error."""
        result = runner.invoke(app, ["download", "-i", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Catalog file not found" in flat(result.output)

    def test_malformed_catalog_fails(self, tmp_path: Path) -> None:
        """Test unparsable catalog exits with 1."""
        path = tmp_path / "podcasts.json"
        path.write_text("not json", encoding="utf-8")

        result = runner.invoke(app, ["download", "-i", str(path), "-d", str(tmp_path / "dl")])

        assert result.exit_code == 1
        assert "not valid JSON" in flat(result.output)
        assert not (tmp_path / "dl").exists()

    def test_no_matches_is_success(self, catalog_file: Path, tmp_path: Path) -> None:
        """Test empty selection exits 0 without work."""
        download_dir = tmp_path / "dl"

        result = runner.invoke(
            app,
            ["download", "-i", str(catalog_file), "-d", str(download_dir), "-f", "Zauberer"],
        )

        assert result.exit_code == 0
        assert "No podcasts to download" in flat(result.output)
        assert not download_dir.exists()

    def test_invalid_filter_fails(self, catalog_file: Path) -> None:
        """Test invalid regex exits with 1."""
        result = runner.invoke(app, ["download", "-i", str(catalog_file), "-f", "(oops"])

        assert result.exit_code == 1
        assert "Invalid filter pattern" in flat(result.output)

    def test_parallel_must_be_positive(self, catalog_file: Path) -> None:
        """Test --parallel 0 is rejected by option validation."""
        result = runner.invoke(app, ["download", "-i", str(catalog_file), "-p", "0"])

        assert result.exit_code != 0

    def test_dry_run(self, catalog_file: Path, tmp_path: Path) -> None:
        """Test dry run reports work but creates nothing."""
        download_dir = tmp_path / "dl"

        with respx.mock:
            result = runner.invoke(
                app, ["download", "-i", str(catalog_file), "-d", str(download_dir), "-n"]
            )

        assert result.exit_code == 0
        assert "Dry run complete!" in flat(result.output)
        assert "Processed 2 podcasts" in flat(result.output)
        assert not download_dir.exists()

    def test_download_with_filter(self, catalog_file: Path, tmp_path: Path) -> None:
        """Test filtered download writes only the matching episode."""
        download_dir = tmp_path / "dl"

        with respx.mock(assert_all_called=False) as router:
            router.get("http://x/1.mp3").mock(return_value=httpx.Response(200, content=b"one"))
            router.get("http://x/2.mp3").mock(return_value=httpx.Response(200, content=b"two"))
            result = runner.invoke(
                app,
                ["download", "-i", str(catalog_file), "-d", str(download_dir), "-f", "KOMPLETTE"],
            )

        assert result.exit_code == 0
        assert "Downloads complete!" in flat(result.output)
        assert (download_dir / "Teil_1_-_komplette_Folge.mp3").read_bytes() == b"one"
        assert not (download_dir / "Teil_2_-_Kurzfassung.mp3").exists()

    def test_task_failure_keeps_exit_code_zero(self, catalog_file: Path, tmp_path: Path) -> None:
        """Test per-episode failure is reported but not fatal."""
        download_dir = tmp_path / "dl"

        with respx.mock:
            respx.get("http://x/1.mp3").mock(return_value=httpx.Response(200, content=b"one"))
            respx.get("http://x/2.mp3").mock(return_value=httpx.Response(404))
            result = runner.invoke(
                app, ["download", "-i", str(catalog_file), "-d", str(download_dir), "-p", "1"]
            )

        assert result.exit_code == 0
        assert "Processed 2 podcasts" in flat(result.output)
        assert "1 failed" in flat(result.output)
        assert (download_dir / "Teil_1_-_komplette_Folge.mp3").exists()

    def test_convert_without_encoder_fails(self, catalog_file: Path, tmp_path: Path) -> None:
        """Test --convert without ffmpeg is a fatal startup error."""
        with patch("ohrenbaer_archive.audio.transcoder.shutil.which", return_value=None):
            result = runner.invoke(
                app, ["download", "-i", str(catalog_file), "-d", str(tmp_path / "dl"), "-c"]
            )

        assert result.exit_code == 1
        assert "ffmpeg is not installed" in flat(result.output)


class TestCLIScrape:
    """Tests for scrape command."""

    @staticmethod
    def mock_scraper(records: list[EpisodeRecord] | None = None, error: Exception | None = None):
        scraper_class = MagicMock()
        scraper_class.return_value.scrape = AsyncMock(return_value=records, side_effect=error)
        return scraper_class

    def test_scrape_merges_into_existing_catalog(self, catalog_file: Path) -> None:
        """Test new episodes are appended and known ones kept."""
        scraped = [
            EpisodeRecord(
                title="Teil 1 - komplette Folge",
                release_date="2020-01-01T00:00:00.000Z",
                download_link="http://changed/1.mp3",
            ),
            EpisodeRecord(
                title="Teil 3 - Neue Folge",
                release_date="2022-01-01T00:00:00.000Z",
                download_link="http://x/3.mp3",
            ),
        ]

        with patch("ohrenbaer_archive.cli.OhrenbaerScraper", self.mock_scraper(scraped)):
            result = runner.invoke(app, ["scrape", "-o", str(catalog_file)])

        assert result.exit_code == 0
        assert "(1 new)" in flat(result.output)
        catalog = load_catalog(catalog_file)
        assert [r.title for r in catalog] == [
            "Teil 1 - komplette Folge",
            "Teil 2 - Kurzfassung",
            "Teil 3 - Neue Folge",
        ]
        assert catalog[0].download_link == "http://x/1.mp3"

    def test_scrape_creates_catalog(self, tmp_path: Path) -> None:
        """Test scraping into a new file writes the scraped records."""
        output = tmp_path / "new.json"
        scraped = [
            EpisodeRecord(
                title="A", release_date="2020-01-01T00:00:00.000Z", download_link="http://x/a"
            )
        ]

        with patch("ohrenbaer_archive.cli.OhrenbaerScraper", self.mock_scraper(scraped)):
            result = runner.invoke(app, ["scrape", "-o", str(output)])

        assert result.exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))[0]["releaseDate"] == (
            "2020-01-01T00:00:00.000Z"
        )

    def test_no_headless_flag(self, tmp_path: Path) -> None:
        """Test --no-headless reaches the scraper options."""
        scraper_class = self.mock_scraper([])

        with patch("ohrenbaer_archive.cli.OhrenbaerScraper", scraper_class):
            runner.invoke(app, ["scrape", "-o", str(tmp_path / "p.json"), "--no-headless"])

        options = scraper_class.call_args.args[0]
        assert options.headless is False

    def test_scrape_failure_leaves_catalog_untouched(self, catalog_file: Path) -> None:
        """Test scrape error exits 1 without rewriting the catalog."""
        before = catalog_file.read_text(encoding="utf-8")
        scraper_class = self.mock_scraper(error=ScrapeError("browser crashed"))

        with patch("ohrenbaer_archive.cli.OhrenbaerScraper", scraper_class):
            result = runner.invoke(app, ["scrape", "-o", str(catalog_file)])

        assert result.exit_code == 1
        assert "browser crashed" in flat(result.output)
        assert catalog_file.read_text(encoding="utf-8") == before

    def test_malformed_existing_catalog_fails_before_scraping(self, tmp_path: Path) -> None:
        """Test broken catalog aborts before the browser is launched."""
        output = tmp_path / "podcasts.json"
        output.write_text("{broken", encoding="utf-8")
        scraper_class = self.mock_scraper([])

        with patch("ohrenbaer_archive.cli.OhrenbaerScraper", scraper_class):
            result = runner.invoke(app, ["scrape", "-o", str(output)])

        assert result.exit_code == 1
        scraper_class.assert_not_called()
