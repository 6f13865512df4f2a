"""Tests for the command-line interface."""

import io
import json
from unittest.mock import MagicMock

import pytest

from shortlinks.cli import ShortLinksCLI, build_parser, main


def run_json(capsys, argv, config):
    code = main(argv, config=config)
    captured = capsys.readouterr()
    return code, captured


class TestMain:
    """Test the argparse entry point against a real file store."""

    def test_shorten(self, capsys, config):
        code, captured = run_json(capsys, ["shorten", "https://example.com/long", "--custom-code", "cli1"], config)

        assert code == 0
        data = json.loads(captured.out)
        assert data["success"] is True
        assert data["link"]["shortcode"] == "cli1"
        assert data["link"]["status"] == "Active"
        assert data["message"] == "URL shortened successfully! Short URL: http://localhost:3000/cli1"

    def test_shorten_invalid(self, capsys, config):
        code, captured = run_json(capsys, ["shorten", "not-a-url", "--validity", "0"], config)

        assert code == 1
        data = json.loads(captured.err[captured.err.index("{"):])
        assert data["success"] is False
        assert set(data["errors"]) == {"original_url", "validity"}

    def test_state_persists_between_runs(self, capsys, config):
        main(["shorten", "https://example.com/a", "--custom-code", "keep1"], config=config)
        capsys.readouterr()

        code, captured = run_json(capsys, ["visit", "keep1", "--no-open"], config)
        assert code == 0
        assert json.loads(captured.out)["clicks"] == 1

        code, captured = run_json(capsys, ["stats", "keep1"], config)
        data = json.loads(captured.out)
        assert data["links"][0]["clicks"] == 1
        assert len(data["links"][0]["click_events"]) == 1

    def test_duplicate_between_runs(self, capsys, config):
        main(["shorten", "https://example.com/a", "--custom-code", "dup1"], config=config)
        capsys.readouterr()

        code, captured = run_json(capsys, ["shorten", "https://example.com/b", "--custom-code", "dup1"], config)

        assert code == 1
        assert "Shortcode already exists" in captured.err

    def test_visit_unknown(self, capsys, config):
        code, captured = run_json(capsys, ["visit", "nothere", "--no-open"], config)

        assert code == 1
        assert "not found" in captured.err

    def test_storage_dir_override(self, capsys, config, tmp_path):
        other = tmp_path / "other"
        code, _ = run_json(capsys, ["--storage-dir", str(other), "shorten", "https://example.com"], config)

        assert code == 0
        assert (other / "urlShortenerData.json").exists()

    def test_corrupt_store(self, capsys, config, tmp_path):
        store_dir = tmp_path / "store"
        store_dir.mkdir()
        (store_dir / "urlShortenerData.json").write_text("not json", encoding="utf-8")

        code, captured = run_json(capsys, ["recent"], config)

        assert code == 1
        assert "not valid JSON" in captured.err

    def test_no_command(self, capsys, config):
        assert main([], config=config) == 1

    def test_parser(self):
        args = build_parser().parse_args(["--format", "table", "shorten", "https://a.com", "--validity", "5"])

        assert args.format == "table"
        assert args.url == "https://a.com"
        assert args.validity == "5"
        assert args.custom_code is None


class TestShortLinksCLI:
    """Test command handlers with an in-memory registry."""

    @pytest.fixture
    def streams(self):
        return io.StringIO(), io.StringIO()

    def make_cli(self, config, registry, streams, output_format="json", opener=None):
        stdout, stderr = streams
        return ShortLinksCLI(
            config,
            output_format=output_format,
            registry=registry,
            stdout=stdout,
            stderr=stderr,
            opener=opener or MagicMock(),
        )

    def test_visit_opens_target(self, config, registry, streams):
        opener = MagicMock()
        cli = self.make_cli(config, registry, streams, opener=opener)
        record = registry.create("https://example.com/target", 30, "open1")

        assert cli.visit("open1") == 0

        opener.assert_called_once_with("https://example.com/target", new=2)
        assert record.clicks == 1

    def test_visit_by_short_url(self, config, registry, streams):
        cli = self.make_cli(config, registry, streams)
        record = registry.create("https://example.com/target", 30, "url1")

        assert cli.visit(record.short_url) == 0
        assert record.clicks == 1

        assert cli.visit("http://elsewhere.com/url1") == 1
        assert record.clicks == 1

    def test_visit_expired_does_not_open(self, config, registry, clock, streams):
        opener = MagicMock()
        cli = self.make_cli(config, registry, streams, opener=opener)
        registry.create("https://example.com/target", 1, "old1")
        clock.advance(minutes=2)

        assert cli.visit("old1") == 1

        opener.assert_not_called()
        error = json.loads(streams[1].getvalue())
        assert error["error"] == "This short URL has expired"

    def test_blank_custom_code_is_generated(self, config, registry, streams):
        cli = self.make_cli(config, registry, streams)

        assert cli.shorten("https://example.com", 30, "   ") == 0

        data = json.loads(streams[0].getvalue())
        assert len(data["link"]["shortcode"]) == 6

    def test_recent_json(self, config, registry, streams):
        cli = self.make_cli(config, registry, streams)
        codes = [registry.create(f"https://example.com/{i}", 30).shortcode for i in range(6)]

        assert cli.recent() == 0

        data = json.loads(streams[0].getvalue())
        assert data["count"] == 5
        assert [link["shortcode"] for link in data["links"]] == list(reversed(codes))[:5]

    def test_stats_json(self, config, registry, clock, streams):
        cli = self.make_cli(config, registry, streams)
        registry.create("https://example.com/a", 1)
        registry.create("https://example.com/b", 60)
        clock.advance(minutes=5)

        assert cli.stats() == 0

        data = json.loads(streams[0].getvalue())
        assert data["statistics"]["expired_links"] == 1
        assert [link["status"] for link in data["links"]] == ["Expired", "Active"]

    def test_table_output(self, config, registry, streams):
        cli = self.make_cli(config, registry, streams, output_format="table")

        assert cli.shorten("https://example.com", 30, "tbl1") == 0
        for _ in range(7):
            cli.visit("tbl1")
        assert cli.stats("tbl1") == 0

        out = streams[0].getvalue()
        assert "URL shortened successfully" in out
        assert "Your Shortened URLs" in out
        assert "Click Details" in out
        assert "... and 2 more clicks" in out

    def test_table_validation_errors(self, config, registry, streams):
        cli = self.make_cli(config, registry, streams, output_format="table")

        assert cli.shorten("not-a-url", "abc") == 1

        err = streams[1].getvalue()
        assert "Please enter a valid URL" in err
        assert "Validity must be a positive integer" in err

    def test_empty_statistics_table(self, config, registry, streams):
        cli = self.make_cli(config, registry, streams, output_format="table")

        assert cli.stats() == 0
        assert "No URLs have been shortened yet." in streams[0].getvalue()
