"""CLI for lifemap-graph."""

from __future__ import annotations

import functools
import json
import logging
from collections import Counter
from pathlib import Path

import click

from lifemap_graph import __version__
from lifemap_graph.layout import LayoutOptions
from lifemap_graph.logging_config import setup_logging
from lifemap_graph.parser import dump_positions, load_snapshot
from lifemap_graph.parser.snapshot import SnapshotData
from lifemap_graph.render import render_svg
from lifemap_graph.session import GraphSession
from lifemap_graph.themes import THEMES
from lifemap_graph.validate import Severity, validate_graph


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", count=True,
              help="Log progress to stderr (-v info, -vv debug)")
def cli(verbose: int) -> None:
    """lifemap-graph: lay out and filter hierarchical entity graphs."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    setup_logging(level)


def _load(path: Path, inject_root: bool = False) -> SnapshotData:
    try:
        return load_snapshot(path, inject_root=inject_root)
    except ValueError as e:
        click.echo(f"Parse error: {e}", err=True)
        raise SystemExit(1)


def layout_options(func):
    """Attach the layout tuning flags shared by layout and render."""

    @click.option("--repulsion", type=float, default=None,
                  help="Node repulsion strength (default: -1000)")
    @click.option("--link-distance", type=float, default=None,
                  help="Rest length of edges (default: 150)")
    @click.option("--iterations", type=int, default=None,
                  help="Maximum simulation ticks (default: 300)")
    @click.option("--level-separation", type=float, default=None,
                  help="Vertical distance between levels (default: 150)")
    @click.option("--padding", type=float, default=None,
                  help="Collision padding around nodes (default: 20)")
    @click.option("--seed", type=int, default=None,
                  help="Seed for randomized initial positions")
    @click.option("--radial", is_flag=True, default=False,
                  help="Start nodes without a position on a radial tree")
    @functools.wraps(func)
    def wrapper(*args, repulsion, link_distance, iterations, level_separation,
                padding, seed, radial, **kwargs):
        overrides = {
            "node_repulsion_strength": repulsion,
            "link_distance": link_distance,
            "max_iterations": iterations,
            "level_separation": level_separation,
            "collision_padding": padding,
            "seed": seed,
        }
        if radial:
            overrides["initial_layout"] = "radial"
        kwargs["overrides"] = {k: v for k, v in overrides.items() if v is not None}
        return func(*args, **kwargs)

    return wrapper


def _build_session(
    data: SnapshotData,
    expand: tuple[str, ...],
    full: bool,
    overrides: dict,
) -> GraphSession:
    options = LayoutOptions.from_mapping(data.options, **overrides)
    expanded = list(data.expanded) + list(expand)
    unknown = [nid for nid in expanded if nid not in data.graph.nodes]
    for nid in unknown:
        click.echo(f"Warning: cannot expand unknown node '{nid}'", err=True)
    return GraphSession(
        data.graph,
        options,
        expanded=expanded,
        relayout_mode="full" if full else "visible",
    )


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON path. Defaults to <input>.layout.json")
@click.option("--expand", "expand", multiple=True,
              help="Node id to expand before laying out (repeatable)")
@click.option("--full", is_flag=True, default=False,
              help="Lay out every node, not only the visible ones")
@click.option("--reset", is_flag=True, default=False,
              help="Drop manual pins and stored positions first")
@click.option("--inject-root", is_flag=True, default=False,
              help="Add a family root when the snapshot has no level-0 node")
@layout_options
def layout(
    snapshot: Path,
    output: Path | None,
    expand: tuple[str, ...],
    full: bool,
    reset: bool,
    inject_root: bool,
    overrides: dict,
) -> None:
    """Compute node positions for a graph snapshot."""
    data = _load(snapshot, inject_root)
    session = _build_session(data, expand, full, overrides)

    if reset:
        # Keep the requested expansion; only pins and positions are dropped
        session.reset(expanded=session.expansion.ids)
        result = session.finish()
    else:
        result = session.layout()

    visible_nodes, visible_edges = session.visible()
    payload = {
        "visible": sorted(n.id for n in visible_nodes),
        "edges": [e.id for e in visible_edges],
        "positions": dump_positions(session.graph.nodes.values()),
        "ticks": result.ticks if result else 0,
        "converged": bool(result and result.converged),
        "warnings": session.warnings,
    }

    if output is None:
        output = snapshot.with_name(snapshot.stem + ".layout.json")
    output.write_text(json.dumps(payload, indent=2) + "\n")
    click.echo(f"Laid out {len(result.nodes) if result else 0} nodes "
               f"({len(visible_nodes)} visible, {len(visible_edges)} edges) "
               f"in {payload['ticks']} ticks -> {output}")


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.option("--expand", "expand", multiple=True,
              help="Node id to expand (repeatable)")
@click.option("--inject-root", is_flag=True, default=False,
              help="Add a family root when the snapshot has no level-0 node")
def visible(snapshot: Path, expand: tuple[str, ...], inject_root: bool) -> None:
    """Print the ids of the nodes currently visible."""
    data = _load(snapshot, inject_root)
    session = _build_session(data, expand, False, {})
    for nid in sorted(session.visible_ids()):
        click.echo(nid)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
def validate(snapshot: Path) -> None:
    """Check a graph snapshot for data-integrity problems."""
    data = _load(snapshot)
    violations = validate_graph(data.graph)

    errors = [v for v in violations if v.severity is Severity.ERROR]
    warnings = [v for v in violations if v.severity is Severity.WARNING]
    for v in warnings:
        click.echo(f"  - {v}", err=True)
    if errors:
        click.echo("Validation errors:", err=True)
        for v in errors:
            click.echo(f"  - {v}", err=True)
        raise SystemExit(1)

    click.echo(f"Valid: {len(data.graph.nodes)} nodes, "
               f"{len(data.graph.edges)} edges, "
               f"{len(warnings)} warnings")


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
def info(snapshot: Path) -> None:
    """Show information about a graph snapshot."""
    data = _load(snapshot)
    graph = data.graph

    click.echo(f"Root: {graph.resolve_root() or '(none)'}")
    click.echo(f"Nodes: {len(graph.nodes)}")
    click.echo(f"Edges: {len(graph.edges)}")
    levels = Counter(n.level for n in graph.nodes.values())
    click.echo("Levels:")
    for level in sorted(levels):
        click.echo(f"  {level}: {levels[level]}")
    types = Counter(n.type.value for n in graph.nodes.values())
    click.echo("Types:")
    for name in sorted(types):
        click.echo(f"  {name}: {types[name]}")
    pinned = sum(1 for n in graph.nodes.values() if n.fixed_position is not None)
    click.echo(f"Pinned: {pinned}")


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="light",
              help="Visual theme (default: light)")
@click.option("--title", default="", help="Title drawn above the graph")
@click.option("--expand", "expand", multiple=True,
              help="Node id to expand before rendering (repeatable)")
@click.option("--inject-root", is_flag=True, default=False,
              help="Add a family root when the snapshot has no level-0 node")
@layout_options
def render(
    snapshot: Path,
    output: Path | None,
    theme: str,
    title: str,
    expand: tuple[str, ...],
    inject_root: bool,
    overrides: dict,
) -> None:
    """Lay out the visible graph and render an SVG preview."""
    data = _load(snapshot, inject_root)
    session = _build_session(data, expand, False, overrides)
    session.layout()
    nodes, edges = session.visible()

    svg = render_svg(nodes, edges, THEMES[theme], title=title)
    if output is None:
        output = snapshot.with_suffix(".svg")
    output.write_text(svg)
    click.echo(f"Rendered {len(nodes)} nodes, {len(edges)} edges -> {output}")
