"""Command-line entry point: render a scene to a PNG file.

Usage:
    softray [options]
    python -m softray [options]

Options:
    --scene NAME          Built-in scene: three-spheres or mirrors
                          (default: three-spheres)
    --scene-file PATH     JSON scene file (instead of --scene)
    --width WIDTH         Image width in pixels (default: scene's own)
    --height HEIGHT       Image height in pixels (default: scene's own)
    --aa N                Anti-aliasing grid size, N*N samples per pixel
    --light-samples N     Shadow rays per area light
    --max-depth N         Maximum reflection bounces
    --attenuation MODE    linear or inverse_square
    --arch ARCH           cpu or gpu (default: gpu, falls back to cpu)
    --output OUTPUT       Output file path (default: render.png)
    --show                Open a Matplotlib preview after rendering
    --verbose / --quiet   More or less output

Example:
    softray --scene mirrors --width 400 --height 300 --aa 2 --output mirrors.png
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

import taichi as ti

from softray import __version__
from softray.scene.model import Scene, load_scene
from softray.scene.presets import PRESETS

logger = logging.getLogger(__name__)

SCENE_NAMES = tuple(PRESETS)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="softray",
        description="Render a scene with the softray ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--scene",
        choices=SCENE_NAMES,
        default="three-spheres",
        help="Built-in scene to render (default: three-spheres)",
    )
    source.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="Path to a JSON scene file",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: the scene's width)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: the scene's height)",
    )
    parser.add_argument(
        "--aa",
        type=int,
        default=1,
        help="Anti-aliasing grid size; N*N samples per pixel (default: 1)",
    )
    parser.add_argument(
        "--light-samples",
        type=int,
        default=16,
        help="Shadow rays per area light (default: 16)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=3,
        help="Maximum number of reflection bounces (default: 3)",
    )
    parser.add_argument(
        "--attenuation",
        choices=("linear", "inverse_square"),
        default="linear",
        help="Light distance falloff (default: linear)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="gpu",
        help="Taichi backend; gpu falls back to cpu when unavailable (default: gpu)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show a Matplotlib preview after rendering",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging for command-line use."""
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def init_taichi(arch: str, quiet: bool = False) -> None:
    """Initialize Taichi, falling back to the CPU when no GPU is usable."""
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu)
            if not quiet:
                print("Using GPU backend")
            return
        except RuntimeError as exc:
            logger.warning("GPU initialization failed (%s); using CPU", exc)

    ti.init(arch=ti.cpu)
    if not quiet:
        print("Using CPU backend")


def load_scene_from_args(args: argparse.Namespace) -> Scene:
    """Build the Scene selected by the arguments, with size overrides applied."""
    if args.scene_file is not None:
        scene = load_scene(args.scene_file)
    else:
        scene = PRESETS[args.scene]()

    overrides = {}
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    if overrides:
        scene = dataclasses.replace(scene, **overrides)
    return scene


def render_from_args(args: argparse.Namespace) -> Path:
    """Render the scene described by the arguments and save it.

    Taichi must already be initialized.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from softray.core.renderer import RenderSettings, render
    from softray.preview.export import save_png

    scene = load_scene_from_args(args)
    settings = RenderSettings(
        aa_grid=args.aa,
        light_samples=args.light_samples,
        max_depth=args.max_depth,
        attenuation=args.attenuation,
    )

    if not args.quiet:
        source = args.scene_file if args.scene_file is not None else args.scene
        print(f"Rendering {source} ({scene.width}x{scene.height}, {args.aa}x{args.aa} AA)...")

    start_time = time.perf_counter()
    pixels = render(scene, settings)

    output_file = Path(args.output)
    save_png(pixels, str(output_file))

    total_time = time.perf_counter() - start_time
    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if args.show:
        from softray.preview.display import show_preview

        show_preview(pixels, title=output_file.name)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if args.scene_file is not None and not Path(args.scene_file).is_file():
        print(f"Error: scene file not found: {args.scene_file}", file=sys.stderr)
        return 1

    init_taichi(args.arch, quiet=args.quiet)

    try:
        render_from_args(args)
        return 0
    except Exception as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
