import argparse
import json
import logging
from pathlib import Path

from yclick.config import load_config
from yclick.data.jsonl import ParseStats, day_from_filename, iter_visits, write_jsonl


def main():
    ap = argparse.ArgumentParser(description="Parse an R6 click log (uncompressed text) into JSONL visits.")
    ap.add_argument("--input", required=True, help="decompressed click log file")
    ap.add_argument("--output", default=None, help="JSONL output path; overrides io.output_path")
    ap.add_argument("--day", default=None, help="day label; default: second dot-separated part of the input name")
    ap.add_argument("--config", default="configs/dev.yaml")
    ap.add_argument("--on-error", choices=["skip", "raise"], default=None,
                    help="overrides parser.on_error")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg = load_config(args.config if Path(args.config).exists() else None)
    pcfg = cfg["parser"]
    on_error = args.on_error or pcfg["on_error"]

    in_path = Path(args.input)
    day = args.day or day_from_filename(in_path)
    out_path = Path(args.output or cfg["io"]["output_path"])

    stats = ParseStats()
    with open(in_path, "rb") as f:
        visits = iter_visits(day, f, on_error=on_error, dim=int(pcfg["feature_dim"]), stats=stats)
        write_jsonl(visits, out_path)

    report = {
        "input": str(in_path),
        "day": day,
        "counts": {
            "n_lines": stats.n_lines,
            "n_visits": stats.n_visits,
            "n_skipped": stats.n_skipped,
            "n_blank": stats.n_blank,
        },
        "output": str(out_path),
    }

    report_path = Path(cfg["io"]["report_path"])
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(json.dumps(report, indent=2))

    print(json.dumps(report, indent=2))
    print(f"\nWrote: {out_path.resolve()}")


if __name__ == "__main__":
    main()
