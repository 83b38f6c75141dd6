"""Output writers for accepted documents, rejection logs and manifests."""

from .writer import append_jsonl, get_docs_writer, write_docs_jsonl, write_docs_parquet, write_manifest

__all__ = [
    "append_jsonl",
    "get_docs_writer",
    "write_docs_jsonl",
    "write_docs_parquet",
    "write_manifest",
]
