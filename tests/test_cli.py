from __future__ import annotations

import json
from pathlib import Path

import matplotlib.pyplot as plt
import pytest

from funscript_heatmap.cli import main
from funscript_heatmap.config import ENV_OVERRIDES


@pytest.fixture
def funscript_file(monkeypatch, tmp_path: Path) -> Path:
    monkeypatch.chdir(tmp_path)
    for env_name in ENV_OVERRIDES:
        monkeypatch.delenv(env_name, raising=False)
    path = tmp_path / "scene.funscript"
    path.write_text(
        json.dumps(
            {
                "version": "1.0",
                "actions": [{"at": 0, "pos": 0}, {"at": 1000, "pos": 100}, {"at": 2000, "pos": 0}],
            }
        ),
        encoding="utf-8",
    )
    return path


def test_cli_writes_explicit_output(funscript_file: Path, tmp_path: Path, capsys) -> None:
    output = tmp_path / "out.png"
    main(["--input", str(funscript_file), "--duration", "3", "--output", str(output)])

    summary = json.loads(capsys.readouterr().out)
    assert summary["interactive_speed"] == 100
    assert summary["action_count"] == 3
    assert summary["heatmap_path"] == str(output)
    assert output.exists()


def test_cli_defaults_output_to_configured_dir(
    monkeypatch, funscript_file: Path, tmp_path: Path, capsys
) -> None:
    monkeypatch.setenv("FUNSCRIPT_HEATMAP_OUTPUT_DIR", str(tmp_path / "heatmaps"))

    main(["--input", str(funscript_file), "--duration", "3"])

    summary = json.loads(capsys.readouterr().out)
    expected = (tmp_path / "heatmaps").resolve() / "scene.png"
    assert summary["heatmap_path"] == str(expected)
    assert expected.exists()


def test_cli_reads_config_file(funscript_file: Path, tmp_path: Path) -> None:
    cfg = tmp_path / "small.yaml"
    cfg.write_text("heatmap:\n  width: 64\n  height: 8\n  num_segments: 16\n", encoding="utf-8")
    output = tmp_path / "small.png"

    main(["--input", str(funscript_file), "--duration", "3", "--output", str(output), "--config", str(cfg)])

    assert plt.imread(output).shape == (8, 64, 4)


def test_cli_requires_duration(funscript_file: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--input", str(funscript_file)])
