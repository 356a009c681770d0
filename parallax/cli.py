"""
Command-line interface for the parallax window.
"""

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from parallax.core.config import AppConfig, preset
from parallax.core.errors import ParallaxError
from parallax.core.types import PoseSample
from parallax.export.json_export import export_json
from parallax.motion.retarget import MotionRetargeter
from parallax.motion.skeleton import humanoid_skeleton
from parallax.motion.source import load_motion_json
from parallax.render.viewport import ViewportProjector

console = Console()


def load_config(path) -> AppConfig:
    if path is None:
        return AppConfig()
    return AppConfig.from_yaml(path)


def cmd_init_config(args) -> int:
    config = AppConfig()
    config.calibration = preset(args.preset)
    config.to_yaml(args.output)
    console.print(f"[green]✓[/green] Wrote {args.preset} configuration: {args.output}")
    return 0


def cmd_retarget(args) -> int:
    config = load_config(args.config)
    motion = load_motion_json(args.motion)

    retargeter = MotionRetargeter(config.motion_fps)
    clip = retargeter.retarget(
        motion.samples, config.retarget, humanoid_skeleton(), source_fps=motion.frame_rate
    )
    clip.name = motion.name

    export_json(clip, args.output)

    table = Table(title=f"Retargeted: {motion.name}")
    table.add_column("Bone")
    table.add_column("Keys", justify="right")
    table.add_column("Translation")
    for track in clip.tracks.values():
        table.add_row(track.bone.value, str(track.num_keys), "yes" if track.positions is not None else "")
    console.print(table)

    console.print(f"  Matched bones: {clip.matched_channels}")
    console.print(f"  Skipped bones: {clip.unmatched_channels}")
    console.print(f"  Duration: {clip.duration:.2f}s")
    console.print(f"[green]✓[/green] Exported clip: {args.output}")
    return 0


def cmd_project(args) -> int:
    config = load_config(args.config)
    profile = config.calibration
    profile.look_at_center = profile.look_at_center or args.look_at

    projector = ViewportProjector(config.view, base_z=profile.base_z)
    pose = PoseSample(x=args.x, y=args.y, depth=args.depth)

    transform = None
    for _ in range(max(args.frames, 1)):
        transform = projector.project(pose, profile)

    x, y, z = transform.position
    f = transform.frustum
    console.print(f"[bold]Camera[/bold] after {args.frames} frames: ({x:.3f}, {y:.3f}, {z:.3f})")
    console.print(
        f"[bold]Frustum[/bold] l={f.left:.5f} r={f.right:.5f} "
        f"t={f.top:.5f} b={f.bottom:.5f} near={f.near} far={f.far}"
    )
    if transform.look_at is not None:
        console.print("  Looking at origin (symmetric frustum)")
    return 0


def cmd_live(args) -> int:
    from parallax.app import run_live, setup_logging

    setup_logging()
    config = load_config(args.config)
    run_live(config, duration_s=args.duration)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parallax",
        description="Head-tracked parallax window and motion retargeting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write a default configuration
  parallax init-config config.yaml --preset pc

  # Retarget a motion dump onto the humanoid skeleton
  parallax retarget dance.json --output dance_clip.json --config config.yaml

  # Inspect the camera for a head position
  parallax project 0.6 0 1 --frames 60
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-config", help="Write a configuration file")
    p.add_argument("output", type=Path, help="Output YAML path")
    p.add_argument("--preset", choices=["pc", "mobile"], default="pc", help="Calibration preset")
    p.set_defaults(func=cmd_init_config)

    p = sub.add_parser("retarget", help="Retarget a motion dump to a clip")
    p.add_argument("motion", type=Path, help="Motion sample dump (JSON)")
    p.add_argument("--output", type=Path, required=True, help="Output clip (JSON)")
    p.add_argument("--config", type=Path, help="Configuration file (YAML)")
    p.set_defaults(func=cmd_retarget)

    p = sub.add_parser("project", help="Print the camera transform for a pose")
    p.add_argument("x", type=float)
    p.add_argument("y", type=float)
    p.add_argument("depth", type=float)
    p.add_argument("--frames", type=int, default=1, help="Smoothing frames to run")
    p.add_argument("--look-at", action="store_true", help="Use look-at mode")
    p.add_argument("--config", type=Path, help="Configuration file (YAML)")
    p.set_defaults(func=cmd_project)

    p = sub.add_parser("live", help="Track the webcam and log the camera")
    p.add_argument("--config", type=Path, help="Configuration file (YAML)")
    p.add_argument("--duration", type=float, help="Seconds to run")
    p.set_defaults(func=cmd_live)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return args.func(args)
    except ParallaxError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
