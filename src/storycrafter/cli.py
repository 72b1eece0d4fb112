from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from .api.models import StoryApiRequest
from .common.text import slugify
from .common.time_utils import to_iso_z, utc_now
from .config import CrafterConfig
from .exports.formatter import write_exports
from .lexicon.tables import available_genres
from .orchestrator import StorySynthesizer


def build_parser() -> argparse.ArgumentParser:
    genres = ", ".join(key for key, _ in available_genres())
    parser = argparse.ArgumentParser(
        description="Generate a one-minute story and a matching CapCut edit plan."
    )
    parser.add_argument("--genre", help=f"Story genre ({genres}); unknown values use the default")
    parser.add_argument("--setting", help="Where the story takes place")
    parser.add_argument("--protagonist", help="Who the story follows")
    parser.add_argument("--vibe", help="Emotional vibe to weave through the story")
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional path to a configuration JSON/YAML file",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Base directory for exported story files (overrides config)",
    )
    parser.add_argument(
        "--print-json",
        action="store_true",
        help="Print the story result as JSON instead of writing export files",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = CrafterConfig.load(args.config)
    inputs = StoryApiRequest.from_payload(
        {
            "genre": args.genre,
            "setting": args.setting,
            "protagonist": args.protagonist,
            "vibe": args.vibe,
        },
        config,
    )
    synthesizer = StorySynthesizer.default(config)
    result = synthesizer.generate_story(inputs.to_generation_request())

    if args.print_json:
        print(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
        return

    output_dir = args.output_dir or config.output_dir
    run_dir = output_dir / slugify(f"{inputs.genre} {inputs.protagonist} {inputs.setting}")
    paths = write_exports(result, run_dir, to_iso_z(utc_now()))
    print(f"Wrote {len(paths)} files to {run_dir}")


if __name__ == "__main__":
    main()
