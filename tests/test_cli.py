"""Tests for the CLI entry points."""

import json
from pathlib import Path

from click.testing import CliRunner

from lifemap_graph.cli import cli

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"
FAMILY_JSON = EXAMPLES_DIR / "family.json"

BASE = ["alice", "alice-car", "alice-docs", "bob", "bob-docs", "family-root", "rex"]


def test_layout_writes_positions(tmp_path):
    """layout command writes visible ids and positions as JSON."""
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(FAMILY_JSON), "-o", str(out),
                                 "--iterations", "50"])
    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text())
    assert payload["visible"] == BASE
    assert set(BASE) <= set(payload["positions"])
    assert payload["ticks"] == 50
    assert "Laid out" in result.output


def test_layout_default_output(tmp_path):
    """layout command uses input stem + .layout.json when no -o given."""
    snapshot = tmp_path / "test.json"
    snapshot.write_text(FAMILY_JSON.read_text())
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(snapshot), "--iterations", "10"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "test.layout.json").exists()


def test_layout_expand_keeps_pin(tmp_path):
    """Expanding shows pinned children at their stored position."""
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(FAMILY_JSON), "-o", str(out),
                                 "--expand", "bob-docs", "--iterations", "20"])
    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text())
    assert "bob-licence" in payload["visible"]
    assert payload["positions"]["bob-licence"] == {"x": 900.0, "y": 500.0, "fixed": True}


def test_layout_full_and_reset(tmp_path):
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(FAMILY_JSON), "-o", str(out),
                                 "--reset", "--iterations", "20"])
    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text())
    # Reset lays out every node and drops the pin
    assert len(payload["positions"]) == 12
    assert "fixed" not in payload["positions"]["bob-licence"]


def test_layout_reset_keeps_expand(tmp_path):
    """--expand still applies after --reset clears the stored state."""
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(FAMILY_JSON), "-o", str(out),
                                 "--reset", "--expand", "bob-docs",
                                 "--iterations", "20"])
    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text())
    assert "bob-licence" in payload["visible"]
    assert "fixed" not in payload["positions"]["bob-licence"]


def test_layout_radial_start(tmp_path):
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(FAMILY_JSON), "-o", str(out),
                                 "--radial", "--iterations", "0", "--seed", "1"])
    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text())
    assert payload["ticks"] == 0
    assert set(BASE) <= set(payload["positions"])


def test_inject_root_flag(tmp_path):
    """A snapshot without a level-0 node gets a family root on request."""
    snap = tmp_path / "people.json"
    snap.write_text(json.dumps({
        "nodes": [
            {"id": "ann", "type": "person", "level": 1},
            {"id": "ben", "type": "person", "level": 1},
        ],
        "edges": [],
    }))
    runner = CliRunner()
    plain = runner.invoke(cli, ["visible", str(snap)])
    assert plain.exit_code == 0, plain.output
    injected = runner.invoke(cli, ["visible", str(snap), "--inject-root"])
    assert injected.exit_code == 0, injected.output
    assert injected.output.split() == ["ann", "ben", "family-root"]

    out = tmp_path / "people.svg"
    result = runner.invoke(cli, ["render", str(snap), "--inject-root", "-o", str(out),
                                 "--iterations", "10"])
    assert result.exit_code == 0, result.output
    assert "Family" in out.read_text()


def test_layout_unknown_expand_warns(tmp_path):
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(FAMILY_JSON), "-o", str(out),
                                 "--expand", "nobody", "--iterations", "5"])
    assert result.exit_code == 0, result.output
    assert "nobody" in result.output


def test_visible_lists_ids():
    runner = CliRunner()
    result = runner.invoke(cli, ["visible", str(FAMILY_JSON)])
    assert result.exit_code == 0
    assert result.output.split() == BASE


def test_visible_with_expansion():
    runner = CliRunner()
    result = runner.invoke(cli, ["visible", str(FAMILY_JSON), "--expand", "family-root"])
    assert result.exit_code == 0
    assert "family-will" in result.output.split()


def test_validate_success():
    """validate command succeeds on valid input."""
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(FAMILY_JSON)])
    assert result.exit_code == 0
    assert "Valid: 12 nodes, 11 edges, 0 warnings" in result.output


def test_validate_reports_errors(tmp_path):
    snapshot = tmp_path / "two_roots.json"
    snapshot.write_text(json.dumps({"nodes": [
        {"id": "a", "type": "root", "level": 0},
        {"id": "b", "type": "root", "level": 0},
    ]}))
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(snapshot)])
    assert result.exit_code == 1
    assert "Multiple level-0 nodes" in result.output


def test_validate_bad_file(tmp_path):
    """validate command reports parse errors."""
    bad = tmp_path / "bad.json"
    bad.write_text("not json at all")
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(bad)])
    assert result.exit_code == 1
    assert "Parse error" in result.output


def test_info_output():
    """info command prints graph metadata."""
    runner = CliRunner()
    result = runner.invoke(cli, ["info", str(FAMILY_JSON)])
    assert result.exit_code == 0
    assert "Root: family-root" in result.output
    assert "Nodes: 12" in result.output
    assert "Edges: 11" in result.output
    assert "Pinned: 1" in result.output


def test_render_produces_svg(tmp_path):
    """render command produces an SVG file."""
    out = tmp_path / "output.svg"
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(FAMILY_JSON), "-o", str(out),
                                 "--iterations", "30", "--title", "Family"])
    assert result.exit_code == 0, result.output
    content = out.read_text()
    assert "<svg" in content
    assert "Family" in content


def test_render_with_theme(tmp_path):
    """render command accepts --theme flag."""
    out = tmp_path / "output.svg"
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(FAMILY_JSON), "-o", str(out),
                                 "--theme", "dark", "--iterations", "10"])
    assert result.exit_code == 0, result.output
    assert out.exists()


def test_version():
    """--version flag prints version string."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output.lower()
