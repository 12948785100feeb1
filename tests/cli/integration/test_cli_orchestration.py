"""CLI orchestration integration tests."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from simple_property_mapper.cli import cli, main
from simple_property_mapper.record_storage.properties_codec import read_records

_MODELS_MODULE = "cli_sample_models"

_MODELS_SOURCE = '''
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from simple_property_mapper.field_conversion import IsoDateConverter
from simple_property_mapper.schema_management import property_field, property_type


@property_type
@dataclass
class Customer:
    name: str = property_field(default="")
    phone: int = property_field(default=0)


@dataclass
class Configuration:
    locale: str = "en_US"
    since: date | None = None
'''


@pytest.fixture(name="config_path")
def _config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    models_dir = tmp_path / "models"
    models_dir.mkdir()
    (models_dir / f"{_MODELS_MODULE}.py").write_text(_MODELS_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(models_dir))
    path = tmp_path / "mapper.yaml"
    path.write_text(
        f"""
record_format:
  comment: "normalized"
  timestamp: false
  sort_keys: true
types:
  - type: "{_MODELS_MODULE}:Customer"
  - type: "{_MODELS_MODULE}:Configuration"
    root: "Config"
    fields:
      - name: locale
      - name: since
        key: start
        converter: "simple_property_mapper.field_conversion:IsoDateConverter"
""",
        encoding="utf-8",
    )
    return path


def _write_properties(tmp_path: Path, contents: str) -> Path:
    path = tmp_path / "input.properties"
    path.write_text(contents, encoding="iso-8859-1")
    return path


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "mapper.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0
    assert output_path.exists()
    assert str(output_path.resolve()) in result.output


def test_generate_config_refuses_to_overwrite(tmp_path: Path, capsys) -> None:
    output_path = tmp_path / "mapper.yaml"
    output_path.write_text("existing", encoding="utf-8")

    exit_code = main(["generate-config", "--output", str(output_path)])

    assert exit_code == 1
    assert "already exists" in capsys.readouterr().err
    assert output_path.read_text(encoding="utf-8") == "existing"


def test_describe_lists_key_patterns(config_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["describe", "--config", str(config_path)])

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "Customer.<instance>.name\tstr",
        "Customer.<instance>.phone\tint",
        "Config.<instance>.locale\tstr",
        "Config.<instance>.start\tconverter IsoDateConverter",
    ]


def test_read_prints_instances_as_json(tmp_path: Path, config_path: Path) -> None:
    input_path = _write_properties(
        tmp_path,
        "#example\n"
        "Customer.dan.name=Daniel\n"
        "Customer.dan.phone=987\n"
        "Customer.charlotte.name=Charlotte\n"
        "Customer.charlotte.phone=6543\n"
        "Config.myConfig.locale=de_DE\n"
        "Config.myConfig.start=2015-06-01\n"
        "Unrelated.key=ignored\n",
    )
    runner = CliRunner()

    result = runner.invoke(
        cli, ["read", "--config", str(config_path), "--input", str(input_path)]
    )

    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "Customer": {
            "dan": {"name": "Daniel", "phone": "987"},
            "charlotte": {"name": "Charlotte", "phone": "6543"},
        },
        "Config": {"myConfig": {"locale": "de_DE", "start": "2015-06-01"}},
    }


def test_read_reports_undeclared_fields(tmp_path: Path, config_path: Path, capsys) -> None:
    input_path = _write_properties(tmp_path, "Customer.dan.nickname=Dan\n")

    exit_code = main(["read", "--config", str(config_path), "--input", str(input_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "No field found for property Customer.dan.nickname" in captured.err
    assert "Traceback" not in captured.err


def test_read_reports_missing_input_file(tmp_path: Path, config_path: Path, capsys) -> None:
    exit_code = main(
        ["read", "--config", str(config_path), "--input", str(tmp_path / "absent.properties")]
    )

    assert exit_code == 1
    assert "absent.properties" in capsys.readouterr().err


def test_read_omits_fields_left_at_a_none_default(tmp_path: Path, config_path: Path) -> None:
    input_path = _write_properties(tmp_path, "Config.main.locale=de_DE\n")
    runner = CliRunner()

    result = runner.invoke(
        cli, ["read", "--config", str(config_path), "--input", str(input_path)]
    )

    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "Customer": {},
        "Config": {"main": {"locale": "de_DE"}},
    }


def test_rewrite_leaves_out_records_for_fields_without_value(
    tmp_path: Path, config_path: Path
) -> None:
    input_path = _write_properties(tmp_path, "Config.main.locale=de_DE\n")
    output_path = tmp_path / "normalized.properties"

    exit_code = main(
        [
            "rewrite",
            "--config",
            str(config_path),
            "--input",
            str(input_path),
            "--output",
            str(output_path),
        ]
    )

    assert exit_code == 0
    written = output_path.read_text(encoding="iso-8859-1")
    assert read_records(io.StringIO(written)) == {"Config.main.locale": "de_DE"}


def test_rewrite_writes_normalized_records_of_configured_types(
    tmp_path: Path, config_path: Path
) -> None:
    input_path = _write_properties(
        tmp_path,
        "Customer.dan.phone = 00987\n"
        "Customer.dan.name: Daniel\n"
        "Config.main.start=2015-06-01\n"
        "Unrelated.key=dropped\n",
    )
    output_path = tmp_path / "normalized.properties"
    runner = CliRunner()

    result = runner.invoke(
        cli,
        [
            "rewrite",
            "--config",
            str(config_path),
            "--input",
            str(input_path),
            "--output",
            str(output_path),
        ],
    )

    assert result.exit_code == 0
    written = output_path.read_text(encoding="iso-8859-1")
    assert written.splitlines()[0] == "#normalized"
    assert read_records(io.StringIO(written)) == {
        "Customer.dan.name": "Daniel",
        "Customer.dan.phone": "987",
        "Config.main.locale": "en_US",
        "Config.main.start": "2015-06-01",
    }


def test_rewrite_accepts_a_comment_override(tmp_path: Path, config_path: Path) -> None:
    input_path = _write_properties(tmp_path, "Customer.dan.name=Daniel\n")
    output_path = tmp_path / "normalized.properties"

    exit_code = main(
        [
            "rewrite",
            "--config",
            str(config_path),
            "--input",
            str(input_path),
            "--output",
            str(output_path),
            "--comment",
            "hand edited",
        ]
    )

    assert exit_code == 0
    assert output_path.read_text(encoding="iso-8859-1").startswith("#hand edited\n")
