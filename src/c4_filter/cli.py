"""CLI entrypoint.

Commands:
- `c4-filter build --config configs/build.yaml`
    run all configured sources through one pipeline, write docs/rejections/manifest
- `c4-filter check [--config pipeline.yaml] [--results] FILE.jsonl ...`
    filter JSONL files in memory and print the batch result as JSON
- `c4-filter report [--out-dir storage] [--run-id ID]`
    render a finished run's manifest as tables
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import List, Optional

from .errors import ConfigurationError
from .logging_ import setup_logging
from .monitor.report import load_manifest, render_report
from .pipeline.build import build_local
from .pipeline.orchestrator import CorpusPipeline
from .policies.loader import load_config, load_yaml
from .sources.base import SourceSpec
from .sources.local_jsonl import LocalJSONLSource

log = logging.getLogger("c4_filter.cli")

def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="c4-filter")
    p.add_argument("--log-level", default="INFO")
    sub = p.add_subparsers(dest="cmd", required=True)

    pb = sub.add_parser("build")
    pb.add_argument("--config", required=True)
    pb.add_argument("--log-dir", default=None, help="Write <run_id>.log here as well as to the console")

    pc = sub.add_parser("check")
    pc.add_argument("--config", default=None, help="YAML with pipeline options (top level or under `pipeline:`)")
    pc.add_argument("--text-field", default=None)
    pc.add_argument("--results", action="store_true", help="Include per-document results")
    pc.add_argument("files", nargs="+")

    pr = sub.add_parser("report")
    pr.add_argument("--out-dir", default="storage")
    pr.add_argument("--run-id", default=None, help="Defaults to the most recent manifest")

    args = p.parse_args(argv)
    level = getattr(logging, str(args.log_level).upper(), logging.INFO)

    try:
        if args.cmd == "build":
            cfg = load_yaml(args.config)
            run_id = str((cfg.get("run") or {}).get("run_id") or "run")
            setup_logging(run_id=run_id, log_dir=args.log_dir, level=level)
            manifest = build_local(cfg)
            print(json.dumps({"stats": manifest["stats"], "pass_rate": manifest["pass_rate"]}, indent=2))
            return 0

        if args.cmd == "report":
            manifest = load_manifest(args.out_dir, args.run_id)
            if manifest is None:
                log.error(f"No manifest found under {args.out_dir}/manifests")
                return 1
            render_report(manifest)
            return 0

        setup_logging(level=level)
        config = load_config(args.config) if args.config else None
        pipeline = CorpusPipeline(config)
        src = LocalJSONLSource(SourceSpec(name="check", dataset=list(args.files), text_field=args.text_field))
        batch = pipeline.process_batch(src.stream())
        out = batch.to_dict(include_results=args.results)
        out["pipeline"] = pipeline.get_stats().to_dict()
        print(json.dumps(out, indent=2, ensure_ascii=False, default=str))
        return 0
    except ConfigurationError as e:
        log.error(str(e))
        return 2

if __name__ == "__main__":
    sys.exit(main())
