"""
Command line entry point for rendering scenes.

Renders one of the built-in scenes (or a YAML/JSON scene file) and writes
the result as PPM (to a file or stdout) or PNG.
"""

from __future__ import annotations
import argparse
import dataclasses
import logging
import sys
import time
from typing import Optional, Sequence

import numpy as np

from .image import ImageBuffer
from .renderer import Renderer, RenderSettings
from .scene_parser import SceneParseError, load_scene
from .scenes import SCENES

logger = logging.getLogger(__name__)

ASPECT_RATIO = 3.0 / 2.0
DEFAULT_WIDTH = 1200
DEFAULT_SAMPLES = 500
DEFAULT_DEPTH = 50


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rtweekend',
        description='Monte Carlo ray tracer for spheres',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  rtweekend > image.ppm
  rtweekend -o render.ppm --width 400 --samples 50
  rtweekend -t png -o render.png --scene simple
  rtweekend -t png -o scene.png --scene-file scene.yaml
        '''
    )

    parser.add_argument('-o', dest='output_path', default='',
                        help='Output file (default: stdout, PPM only)')
    parser.add_argument('-t', dest='output_type', default='ppm', choices=['ppm', 'png'],
                        help='Output file type (default: ppm)')
    parser.add_argument('--width', type=int, default=None,
                        help=f'Image width, height follows a 3:2 aspect (default: {DEFAULT_WIDTH})')
    parser.add_argument('--samples', type=int, default=None,
                        help=f'Samples per pixel (default: {DEFAULT_SAMPLES})')
    parser.add_argument('--depth', type=int, default=None,
                        help=f'Max ray depth (default: {DEFAULT_DEPTH})')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for a reproducible render')
    parser.add_argument('--scene', default='random', choices=sorted(SCENES),
                        help='Built-in scene to render (default: random)')
    parser.add_argument('--scene-file', default=None,
                        help='YAML or JSON scene description, overrides --scene')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log every scanline')
    return parser


def validate(args: argparse.Namespace) -> Optional[str]:
    """Return an error message if the options cannot be honoured together."""
    if args.output_path == '' and args.output_type == 'png':
        return 'Must specify output file with PNG file type'
    for name in ('width', 'samples', 'depth'):
        value = getattr(args, name)
        if value is not None and value < 1:
            return f'--{name} must be positive, got {value}'
    if args.seed is not None and args.seed < 0:
        return f'--seed must be non-negative, got {args.seed}'
    if args.width is not None and int(args.width / ASPECT_RATIO) < 2:
        return f'--width {args.width} is too small'
    return None


def print_config(args: argparse.Namespace) -> None:
    print(f"Output Path: {args.output_path or 'stdout'}", file=sys.stderr)
    print(f"Output Type: {args.output_type.upper()}", file=sys.stderr)
    print(file=sys.stderr)


def _load(args: argparse.Namespace):
    """Build the scene, camera and settings for this invocation."""
    if args.scene_file:
        world, camera, settings = load_scene(args.scene_file)
        overrides = {
            'samples_per_pixel': args.samples,
            'max_depth': args.depth,
            'seed': args.seed,
        }
        # Width alone keeps the file's aspect ratio so the camera still fits
        if args.width is not None:
            overrides['width'] = args.width
            overrides['height'] = max(2, int(args.width / settings.aspect_ratio))
        settings = dataclasses.replace(
            settings, **{k: v for k, v in overrides.items() if v is not None}
        )
        return world, camera, settings

    width = args.width if args.width is not None else DEFAULT_WIDTH
    settings = RenderSettings(
        width=width,
        height=int(width / ASPECT_RATIO),
        samples_per_pixel=args.samples if args.samples is not None else DEFAULT_SAMPLES,
        max_depth=args.depth if args.depth is not None else DEFAULT_DEPTH,
        seed=args.seed
    )
    scene_factory, camera_factory = SCENES[args.scene]
    scene_rng = np.random.default_rng(args.seed)
    return scene_factory(scene_rng), camera_factory(settings.aspect_ratio), settings


def _write(image: ImageBuffer, args: argparse.Namespace) -> bool:
    try:
        if args.output_type == 'png':
            image.write_png(args.output_path)
        elif args.output_path:
            with open(args.output_path, 'w') as fh:
                image.write_ppm(fh)
        else:
            image.write_ppm(sys.stdout)
    except OSError as e:
        logger.error("%s", e)
        print(f"Error writing {args.output_type.upper()}", file=sys.stderr)
        return False
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
        stream=sys.stderr
    )

    error = validate(args)
    if error:
        print(error, file=sys.stderr)
        return 1
    print_config(args)

    try:
        world, camera, settings = _load(args)
    except (SceneParseError, ValueError) as e:
        print(f"Error loading scene: {e}", file=sys.stderr)
        return 1

    logger.info("Objects in scene: %d", len(world))

    renderer = Renderer(settings)
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '#' * filled + '.' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', file=sys.stderr, flush=True)

    if not args.verbose:
        renderer.set_progress_callback(progress_callback)

    print("Rendering...", file=sys.stderr)
    start_time = time.time()
    pixels = renderer.render(world, camera)
    elapsed = time.time() - start_time
    print(file=sys.stderr)
    logger.info("Render completed in %.2f seconds", elapsed)

    image = ImageBuffer(settings.width, settings.height)
    for r, g, b in pixels:
        if not image.add_pixel(r, g, b):
            print(f"Image buffer full: {image!r}", file=sys.stderr)
            return 1

    print("Writing...", file=sys.stderr)
    if not _write(image, args):
        return 1

    print("Done.", file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
