"""Fragment Verify - conformance checks over encoded fragments."""
from .logic import verify_fragment_bytes, verify_fragment_file
from .evidence import scan_store, write_evidence

__all__ = ["verify_fragment_bytes", "verify_fragment_file", "scan_store", "write_evidence"]
