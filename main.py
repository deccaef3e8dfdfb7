#!/usr/bin/env python3
"""
LumenTrace - A Python Whitted-style Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import math
import sys
import time
from pathlib import Path

from lumentrace.materials import GLASS
from lumentrace.environment import SolidColorEnvironment, load_environment
from lumentrace.mesh_loader import MeshLoadError, load_mesh
from lumentrace.renderer import Renderer, RenderSettings, get_platform_info
from lumentrace.scene_parser import SceneParseError, load_scene
from lumentrace.scenes import MESH_OFFSET, create_reference_scene


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='LumenTrace - A Python Whitted-style Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output render.png
  python main.py --width 320 --height 240 --threads 8 --output small.ppm
  python main.py --envmap envmap.jpg --mesh duck.obj --output duck.png
  python main.py --scene scenes/room.yaml --output room.png
        '''
    )

    parser.add_argument('--width', type=int, default=None, help='Image width (default: 1024)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 768)')
    parser.add_argument('--fov', type=float, default=None, help='Vertical field of view in degrees (default: 90)')
    parser.add_argument('--depth', type=int, default=None, help='Max recursion depth (default: 4)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='reference',
                        help="'reference' or a path to a YAML/JSON scene file")
    parser.add_argument('--envmap', type=str, default=None, help='Equirectangular background image')
    parser.add_argument('--mesh', type=str, default=None, help='Mesh file added to the reference scene')
    parser.add_argument('--no-checkerboard', action='store_true', help='Drop the checkerboard floor')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Print header
    print("=" * 60)
    print("LumenTrace Ray Tracer")
    print("=" * 60)

    info = get_platform_info()
    print(f"Platform: {info['system']} {info['machine']}")
    print(f"CPU Cores: {info['cpu_count']}")

    # Create scene
    print(f"\nCreating scene: {args.scene}")
    try:
        if args.scene == 'reference':
            extra = []
            if args.mesh:
                extra.append(load_mesh(args.mesh, GLASS, offset=MESH_OFFSET))
            world = create_reference_scene(
                checkerboard=not args.no_checkerboard, extra_objects=extra
            )
            background = SolidColorEnvironment()
            base_settings = RenderSettings()
        else:
            description = load_scene(args.scene)
            world = description.scene
            background = description.background
            base_settings = description.settings

        if args.envmap:
            background = load_environment(args.envmap)
    except (SceneParseError, MeshLoadError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Command-line values override the scene's render settings
    try:
        settings = RenderSettings(
            width=args.width if args.width is not None else base_settings.width,
            height=args.height if args.height is not None else base_settings.height,
            fov=math.radians(args.fov) if args.fov is not None else base_settings.fov,
            max_depth=args.depth if args.depth is not None else base_settings.max_depth,
            tile_size=base_settings.tile_size,
            num_threads=args.threads if args.threads is not None else base_settings.num_threads
        )
        renderer = Renderer(settings)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  FOV: {math.degrees(settings.fov):.1f} deg")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")
    print(f"  Objects in scene: {len(world)}")
    print(f"  Lights: {len(world.lights)}")

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    # Render
    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(world, background)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Primary rays per second: {(settings.width * settings.height) / max(elapsed, 1e-9):.0f}")

    # Ensure output directory exists
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Save image
    print(f"\nSaving to: {args.output}")
    renderer.save_image(image, output_path)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
