import argparse
import json
from pathlib import Path

from yclick.config import load_config
from yclick.data.jsonl import read_jsonl
from yclick.viz.diagnostics import run_diagnostics


def main():
    ap = argparse.ArgumentParser(description="Summary stats and figures for parsed visits.")
    ap.add_argument("--input", default=None, help="visits JSONL; default: io.output_path")
    ap.add_argument("--config", default="configs/dev.yaml")
    args = ap.parse_args()

    cfg = load_config(args.config if Path(args.config).exists() else None)
    dcfg = cfg["diagnostics"]

    in_path = Path(args.input or cfg["io"]["output_path"])
    visits = list(read_jsonl(in_path, dim=int(cfg["parser"]["feature_dim"])))

    figs_dir = Path(dcfg["figs_dir"])
    summary = run_diagnostics(
        visits=visits,
        figs_dir=figs_dir,
        top_k=int(dcfg["top_articles"]),
    )

    summary_path = Path(dcfg["summary_path"])
    summary_path.parent.mkdir(parents=True, exist_ok=True)
    summary_path.write_text(json.dumps(summary.__dict__, indent=2))

    print("Saved figures to:", figs_dir.resolve())
    print("Saved summary to:", summary_path.resolve())
    print(json.dumps(summary.__dict__, indent=2))


if __name__ == "__main__":
    main()
