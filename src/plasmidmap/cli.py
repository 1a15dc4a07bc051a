"""Command line front end for parsing, laying out and extracting from plasmid maps."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config import VIEWER_CONFIG_TEMPLATE, configure_logging, load_viewer_config
from .extract import extract, extract_feature
from .genbank import is_valid_input
from .model import SelectedRegion
from .session import PlasmidSession
from .tracks import assign_circular_tracks, assign_linear_tracks


def _write_json_output(payload: Dict[str, Any], output_path: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2)
    if output_path:
        out_path = Path(output_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


def _load_session(args: argparse.Namespace) -> PlasmidSession:
    session = PlasmidSession(config=load_viewer_config(args.config))
    session.load_file(args.input)
    for kind in getattr(args, "show", None) or []:
        session.set_visible(kind, True)
    for kind in getattr(args, "hide", None) or []:
        session.set_visible(kind, False)
    return session


def _parse_range(start: int, end: int, length: int) -> SelectedRegion:
    if length <= 0:
        raise ValueError("Plasmid has no length; nothing to select.")
    for value in (start, end):
        if not 1 <= value <= length:
            raise ValueError(f"Position {value} is outside 1..{length}.")
    return SelectedRegion(start=start - 1, end=end - 1)


def command_validate(args: argparse.Namespace) -> None:
    text = Path(args.input).read_text(encoding="utf-8")
    if not is_valid_input(text):
        raise ValueError(f"{args.input}: invalid GenBank format (LOCUS, FEATURES and ORIGIN are required).")
    print(f"{args.input}: OK")


def command_info(args: argparse.Namespace) -> None:
    session = _load_session(args)
    model = session.model
    if args.json:
        payload = {
            "name": model.name,
            "definition": model.definition,
            "length": model.length,
            "sequence_length": len(model.sequence),
            "feature_types": model.feature_types(),
            "visible_types": sorted(session.visible_types),
            "features": [
                {
                    "id": feature.id,
                    "type": feature.type,
                    "label": feature.label,
                    "range": list(feature.display_range()),
                    "complement": feature.complement,
                }
                for feature in model.features
            ],
        }
        _write_json_output(payload, args.out)
        return
    print(f"Name: {model.name or '<unnamed>'}")
    if model.definition:
        print(f"Definition: {model.definition}")
    print(f"Length: {model.length} bp")
    print(f"Features: {len(model.features)}")
    for feature in model.features:
        first, last = feature.display_range()
        strand = "-" if feature.complement else "+"
        label = feature.label or "-"
        print(f"  {feature.id}\t{feature.type}\t{first}..{last}\t{strand}\t{label}")


def command_tracks(args: argparse.Namespace) -> None:
    session = _load_session(args)
    if args.max_tracks is not None:
        limit = args.max_tracks
    elif args.view == "linear":
        limit = session.config.linear_max_tracks
    else:
        limit = session.config.circular_max_tracks
    assign = assign_linear_tracks if args.view == "linear" else assign_circular_tracks
    tracks = assign(session.model.features, session.visible_types, session.model.length, limit)
    payload = {"view": args.view, "max_tracks": limit, "tracks": tracks}
    _write_json_output(payload, args.out)


def command_layout(args: argparse.Namespace) -> None:
    session = _load_session(args)
    if args.select:
        session.engine.select(_parse_range(args.select[0], args.select[1], session.model.length))
    spec = session.linear_layout() if args.view == "linear" else session.circular_layout()
    _write_json_output(spec.to_payload(), args.out)


def command_extract(args: argparse.Namespace) -> None:
    session = _load_session(args)
    model = session.model
    if args.feature:
        feature = model.feature_by_id(args.feature)
        if feature is None:
            raise ValueError(f"Feature '{args.feature}' not found.")
        text = extract_feature(model.sequence, feature, model.length)
    else:
        if args.start is None or args.end is None:
            raise ValueError("extract requires --feature or both --start and --end.")
        region = _parse_range(args.start, args.end, model.length)
        features = model.features if args.codons else ()
        text = extract(model.sequence, region, model.length, features)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


def command_config_template(args: argparse.Namespace) -> None:
    if args.out:
        Path(args.out).write_text(VIEWER_CONFIG_TEMPLATE, encoding="utf-8")
        print(f"Viewer config template written to {args.out}.")
    else:
        print(VIEWER_CONFIG_TEMPLATE, end="")


def _add_input_args(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("input", type=Path, help="GenBank file to load.")
    sub.add_argument("--config", type=Path, help="Viewer config YAML (defaults to $PLASMIDMAP_CONFIG).")
    sub.add_argument("--show", nargs="*", metavar="TYPE", help="Feature types to force visible.")
    sub.add_argument("--hide", nargs="*", metavar="TYPE", help="Feature types to hide.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="plasmidmap: parse GenBank plasmids, lay out annotation tracks and extract selections.",
    )
    parser.add_argument("--log-level", help="Logging level (default: $PLASMIDMAP_LOG_LEVEL or WARNING).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Check that a file has the GenBank section markers.")
    validate.add_argument("input", type=Path, help="GenBank file to check.")
    validate.set_defaults(func=command_validate)

    info = subparsers.add_parser("info", help="Summarize a plasmid record and its features.")
    _add_input_args(info)
    info.add_argument("--json", action="store_true", help="Emit JSON instead of a text table.")
    info.add_argument("--out", type=Path, help="Write JSON output to this path.")
    info.set_defaults(func=command_info)

    tracks = subparsers.add_parser("tracks", help="Assign non-overlapping lanes to visible features.")
    _add_input_args(tracks)
    tracks.add_argument("--view", choices=["circular", "linear"], default="circular", help="Lane policy (default: circular).")
    tracks.add_argument("--max-tracks", type=int, help="Track ceiling (default: from config).")
    tracks.add_argument("--out", type=Path, help="Write JSON output to this path.")
    tracks.set_defaults(func=command_tracks)

    layout = subparsers.add_parser("layout", help="Emit render-ready layout JSON with path descriptors.")
    _add_input_args(layout)
    layout.add_argument("--view", choices=["circular", "linear"], default="circular", help="Layout kind (default: circular).")
    layout.add_argument("--select", nargs=2, type=int, metavar=("START", "END"), help="1-based inclusive selection to draw.")
    layout.add_argument("--out", type=Path, help="Write JSON output to this path.")
    layout.set_defaults(func=command_layout)

    extract_cmd = subparsers.add_parser("extract", help="Print the bases of a selection or feature.")
    _add_input_args(extract_cmd)
    extract_cmd.add_argument("--start", type=int, help="1-based first base of the selection.")
    extract_cmd.add_argument("--end", type=int, help="1-based last base of the selection.")
    extract_cmd.add_argument("--feature", help="Feature id to extract instead of a range.")
    extract_cmd.add_argument("--codons", action="store_true", help="Snap selections inside translations to whole codons.")
    extract_cmd.add_argument("--out", type=Path, help="Write the sequence to this path.")
    extract_cmd.set_defaults(func=command_extract)

    template = subparsers.add_parser("config-template", help="Print a viewer config YAML template.")
    template.add_argument("--out", type=Path, help="Write the template to this path.")
    template.set_defaults(func=command_config_template)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        configure_logging(args.log_level)
        args.func(args)
    except (ValueError, OSError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":  # pragma: no cover - manual invocation path
    main()
