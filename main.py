#!/usr/bin/env python3
"""
PathForge - A Python Path Tracing Renderer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from pathforge.renderer import Renderer
from pathforge.image_io import write_ppm
from pathforge.scene_parser import SceneParseError, read_config_data, parse_config
from pathforge.scenes import SCENES, build_world, default_config, scene_names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='PathForge - A Python Path Tracing Renderer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene cornell_box --output cornell.png
  python main.py --config config.json --output - > image.ppm
  python main.py --scene random --width 200 --samples 20 --seed 7 --output random.ppm
        '''
    )

    parser.add_argument('--config', type=str, default=None, help='Scene parameter file (JSON or YAML)')
    parser.add_argument('--scene', type=str, default=None, choices=scene_names(),
                        help='Scene to render (default: from config, else random)')
    parser.add_argument('--width', type=int, default=None, help='Image width in pixels')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel')
    parser.add_argument('--depth', type=int, default=None, help='Max ray depth')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for a reproducible render')
    parser.add_argument('--output', type=str, default='output/render.ppm',
                        help="Output filename, or '-' for PPM on stdout (default: output/render.ppm)")
    parser.add_argument('--bottom-to-top', action='store_true',
                        help='Write PPM scanlines starting from the bottom of the image')
    parser.add_argument('--list-scenes', action='store_true', help='List built-in scenes and exit')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    if args.list_scenes:
        for name in scene_names():
            print(f"  {name:<20} {SCENES[name].description}")
        return 0

    # Scene defaults < config file < command line
    try:
        data = read_config_data(args.config) if args.config else {}
        scene = args.scene or str(data.get('scene', 'random'))
        if scene not in SCENES:
            raise SceneParseError(f"Unknown scene {scene!r}; choose from: {', '.join(scene_names())}")
        config = parse_config(data, default_config(scene)).with_overrides(
            scene=scene,
            image_width=args.width,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            seed=args.seed
        )
        settings = config.render_settings()
    except (SceneParseError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    log = sys.stderr
    print("=" * 60, file=log)
    print("PathForge Path Tracer", file=log)
    print("=" * 60, file=log)
    print(f"Scene: {config.scene}", file=log)
    print(f"  Resolution: {settings.width}x{settings.height}", file=log)
    print(f"  Samples: {settings.samples_per_pixel}", file=log)
    print(f"  Max Depth: {settings.max_depth}", file=log)

    renderer = Renderer(settings)

    def progress_callback(progress: float):
        remaining = settings.height - round(progress * settings.height)
        bar_len = 40
        filled = int(bar_len * progress)
        bar = '█' * filled + '░' * (bar_len - filled)
        print(f'\rRendering: [{bar}] scanlines remaining: {remaining:<6}', end='', file=log, flush=True)

    renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    # Building the world inside the seeded render keeps random scenes reproducible
    image = renderer.render_scene(lambda: build_world(config.scene), config.make_camera())
    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds", file=log)

    ldr = renderer.to_ldr(image)
    if args.output == '-':
        write_ppm(sys.stdout, ldr, bottom_to_top=args.bottom_to_top)
        sys.stdout.flush()
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        print(f"Saving to: {args.output}", file=log)
        renderer.save_image(ldr, args.output, bottom_to_top=args.bottom_to_top)

    print("Done.", file=log)
    return 0


if __name__ == '__main__':
    sys.exit(main())
