import json
from pathlib import Path
import click
from fragment_core import FragmentHash
from fragment_core.protocol import DEFAULT_MAX_DEPTH, HARD_MAX_DEPTH
from fragment_core.tags import REGISTRIES
from .logic import verify_fragment_file
from .evidence import scan_store, write_evidence

def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False))

def _parse_hash(ctx, param, value):
    if value is None:
        return None
    try:
        return FragmentHash.fromhex(value)
    except ValueError as e:
        raise click.BadParameter(str(e))

max_depth_option = click.option("--max-depth", type=click.IntRange(1, HARD_MAX_DEPTH), default=DEFAULT_MAX_DEPTH, show_default=True, help="Nesting limit for decoding")

@click.group()
def main():
    pass

@main.command("fragment")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--data", "data_only", is_flag=True, help="Input is a bare FragmentData, not a Fragment")
@click.option("--expect", "expected", callback=_parse_hash, help="Expected fragment hash (hex)")
@max_depth_option
def fragment_cmd(path: Path, data_only: bool, expected, max_depth: int):
    result = verify_fragment_file(path, expected_hash=expected, data_only=data_only, max_depth=max_depth)
    _echo_json(result)

@main.command("store")
@click.argument("store", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("out", type=click.Path(path_type=Path))
@max_depth_option
def store_cmd(store: Path, out: Path, max_depth: int):
    try:
        rows = scan_store(store, max_depth=max_depth)
        target = write_evidence(rows, out)
    except Exception as e:
        # Fail closed with a single-line reason.
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)
    failed = sum(1 for r in rows if r["status"] != "PASS")
    _echo_json({"status":"FAIL" if failed else "PASS","files":len(rows),"failed":failed,"evidence":str(target) if target else None})

@main.command("tags")
def tags_cmd():
    _echo_json({reg.name: reg.describe() for reg in REGISTRIES})

if __name__ == "__main__":
    main()
