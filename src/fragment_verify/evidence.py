from __future__ import annotations

from pathlib import Path
from warnings import warn

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from fragment_core import FragmentHash
from fragment_core.protocol import DEFAULT_MAX_DEPTH

from .const import FRAGMENT_SUFFIX
from .logic import verify_fragment_bytes

EVIDENCE_SCHEMA = pa.schema(
    [
        ("file", pa.string()),
        ("length", pa.int64()),
        ("status", pa.string()),
        ("error_code", pa.string()),
        ("error_offset", pa.int64()),
        ("fragment_hash", pa.string()),
    ]
)


def _expected_hash(path: Path) -> FragmentHash | None:
    try:
        return FragmentHash.fromhex(path.stem)
    except ValueError:
        return None


def scan_store(store_dir: Path, max_depth: int = DEFAULT_MAX_DEPTH) -> list[dict]:
    """Verify every ``<hex-hash>.frag`` file in a store directory.

    Store is truth: the file name is the claimed address and the bytes must
    both decode canonically and hash to it.
    """
    rows: list[dict] = []
    for path in sorted(Path(store_dir).glob(f"*{FRAGMENT_SUFFIX}")):
        expected = _expected_hash(path)
        if expected is None:
            warn(f"Store file {path.name} is not named by a fragment hash. Checking content only.")

        raw = path.read_bytes()
        report = verify_fragment_bytes(raw, expected_hash=expected, max_depth=max_depth)
        first = report["errors"][0] if report["errors"] else {}
        rows.append(
            {
                "file": path.name,
                "length": len(raw),
                "status": report["status"],
                "error_code": first.get("code"),
                "error_offset": first.get("offset"),
                "fragment_hash": report["fragment_hash"],
            }
        )
    return rows


def write_evidence(rows: list[dict], out_path: Path) -> Path | None:
    """Write evidence/fragments.parquet; nothing is written for an empty scan."""
    (Path(out_path) / "evidence").mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(rows)
    if df.empty:
        return None

    df = df.sort_values("file")
    df["error_offset"] = df["error_offset"].astype("Int64")
    target = Path(out_path) / "evidence/fragments.parquet"
    table = pa.Table.from_pandas(df, schema=EVIDENCE_SCHEMA, preserve_index=False)
    pq.write_table(table, target)
    return target
