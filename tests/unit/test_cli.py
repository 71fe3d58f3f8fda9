"""Unit tests for the command-line interface."""

import json

import pytest
import yaml

from specharvest.cli import load_catalog, main


@pytest.fixture
def result_file(tmp_path):
    path = tmp_path / "result.json"
    path.write_text(
        json.dumps(
            {
                "searchMethod": "auto",
                "products": [
                    {
                        "articleNumber": "4711",
                        "productName": "Drill X100",
                        "properties": {
                            "Power": {"value": "500 W", "confidence": 88}
                        },
                    }
                ],
            }
        )
    )
    return path


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump({"properties": ["Power", "Voltage"]}))
    return path


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config.yaml"


@pytest.mark.unit
class TestCli:
    """Tests for specharvest subcommands."""

    def test_load_catalog_list_and_mapping(self, tmp_path, catalog_file):
        """Catalogs may be a bare list or a mapping with ``properties``."""
        listed = tmp_path / "list.yaml"
        listed.write_text(yaml.safe_dump([{"name": "Weight"}]))

        assert load_catalog(catalog_file).names == ["Power", "Voltage"]
        assert load_catalog(listed).names == ["Weight"]

    def test_reconcile(self, result_file, catalog_file, capsys):
        """Reconcile prints every catalog property."""
        code = main(["reconcile", str(result_file), "--catalog", str(catalog_file)])

        out = capsys.readouterr().out
        assert code == 0
        assert "Drill X100 (1 / 1)" in out
        assert "500 W" in out
        assert "Not found" in out

    def test_export_infers_format(self, tmp_path, result_file, config_file):
        """The output suffix selects the format."""
        output = tmp_path / "out.csv"

        code = main(
            [
                "--config",
                str(config_file),
                "export",
                str(result_file),
                "-o",
                str(output),
            ]
        )

        assert code == 0
        assert output.read_text().startswith("Article Number")

    def test_missing_file_fails(self, tmp_path, catalog_file, capsys):
        """Unreadable inputs exit with status 1."""
        code = main(
            ["reconcile", str(tmp_path / "nope.json"), "--catalog", str(catalog_file)]
        )

        assert code == 1
        assert "Error" in capsys.readouterr().err

    def test_export_column_order(
        self, tmp_path, result_file, catalog_file, config_file
    ):
        """--order moves the named columns to the front."""
        output = tmp_path / "out.csv"

        code = main(
            [
                "--config",
                str(config_file),
                "export",
                str(result_file),
                "--catalog",
                str(catalog_file),
                "--order",
                "Voltage",
                "-o",
                str(output),
            ]
        )

        assert code == 0
        header = output.read_text().splitlines()[0]
        assert header == "Article Number,Product Name,Search Method,Voltage,Power"


@pytest.fixture
def content_file(tmp_path):
    path = tmp_path / "content.json"
    path.write_text(
        json.dumps(
            {
                "products": [
                    {
                        "articleNumber": "4711",
                        "productName": "Drill X100",
                        "__rawContent": [
                            {"sourceLabel": "S1", "title": "Maker", "content": "a" * 50}
                        ],
                    }
                ]
            }
        )
    )
    return path


@pytest.mark.unit
class TestRawContentCommand:
    """Tests for specharvest raw-content."""

    def test_preview_uses_configured_length(self, content_file, config_file, capsys):
        """Previews are cut at the configured length."""
        config_file.write_text(
            yaml.safe_dump({"display": {"raw_content_preview_chars": 10}})
        )

        code = main(["--config", str(config_file), "raw-content", str(content_file)])

        out = capsys.readouterr().out
        assert code == 0
        assert "#1 Maker (50 characters)" in out
        assert "a" * 10 + "..." in out
        assert "a" * 11 not in out

    def test_bundle_written_to_directory(self, tmp_path, content_file, config_file):
        """A directory target gets the product's content filename."""
        code = main(
            [
                "--config",
                str(config_file),
                "raw-content",
                str(content_file),
                "-o",
                str(tmp_path),
            ]
        )

        assert code == 0
        text = (tmp_path / "ai-content-4711.txt").read_text()
        assert text.startswith("---------- CONTENT SOURCE #1 ----------")

    def test_no_content(self, result_file, config_file, capsys):
        code = main(["--config", str(config_file), "raw-content", str(result_file)])
        assert code == 1
        assert "no raw content" in capsys.readouterr().err
