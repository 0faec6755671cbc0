from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import analysis, data, loader
from .report import response_to_dict

load_dotenv()
logging.basicConfig(level=os.environ.get("SPACE_SAVER_LOG_LEVEL", "INFO"))
logger = logging.getLogger("SpaceSaver")


def output_dir() -> Path:
    configured = os.environ.get("SPACE_SAVER_OUTPUT_DIR")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent.parent / "output"


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    try:
        if args:
            response = analysis.analyze(**loader.load_request_bytes(Path(args[0]).read_bytes()))
        else:
            response = analysis.analyze_request(data.sample_request())
    except ValueError as e:
        logger.error(f"Invalid request: {e}")
        return 1

    out_dir = output_dir()
    out_dir.mkdir(parents=True, exist_ok=True)
    plan_file = out_dir / "plan.json"
    plan_file.write_text(json.dumps(response_to_dict(response), indent=2))
    (out_dir / "moves.csv").write_text(response.csv_text)
    kpis = response.result.kpis
    logger.info(
        f"{len(response.result.moves)} moves, {kpis.bins_freed} bins freed; plan written to {plan_file}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
