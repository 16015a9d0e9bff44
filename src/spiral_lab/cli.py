"""Command-line interface for spiral_lab."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Smallest table worth drawing; lower --limit values are raised to it.
MIN_LIMIT = 2


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def _context(args: argparse.Namespace):
    from spiral_lab.core.scheduler import FrameLoop
    from spiral_lab.utils.theme import ColorTheme
    from spiral_lab.utils.viewport import HORIZONTAL_PADDING, VERTICAL_PADDING, Viewport

    theme = ColorTheme.load(Path(args.theme) if args.theme else None)
    # The canvas fits the window, so size the window around the requested canvas.
    viewport = Viewport(
        window_width=args.size + HORIZONTAL_PADDING,
        window_height=args.size + VERTICAL_PADDING,
    )
    return FrameLoop(), theme, viewport


def _finish(session, loop, args: argparse.Namespace, title: str, key_bindings=None) -> int:
    from spiral_lab.visualization.renderer import save_surface, show_interactive

    if args.show:
        show_interactive(
            loop,
            lambda: session.surface,
            lambda: session.status_text,
            title=title,
            key_bindings=key_bindings,
        )
        return 0

    loop.run_until_idle()
    if session.failed:
        print(f"Error: {session.status_text}")
        return 1

    output = save_surface(session.surface, args.output)
    print(f"Status: {session.status_text}")
    print(f"Saved to {output}")
    return 0


def cmd_spiral(args: argparse.Namespace) -> int:
    """Render one of the sieve-colored spirals."""
    from spiral_lab.config import ArchimedeanParams, PolygonParams, UlamParams, coerce_int
    from spiral_lab.session import SpiralSession

    loop, theme, viewport = _context(args)

    if args.command == "archimedean":
        params = ArchimedeanParams(frequency_wave=args.wave).with_inputs(
            pitch=args.pitch, wave_slices=args.wave_slices
        )
    elif args.command == "ulam":
        params = UlamParams(pixel_size=max(1, args.pixel_size))
    else:
        params = PolygonParams().with_inputs(sides=getattr(args, "sides", None), spacing=args.spacing)

    print(f"Generating {args.command} spiral: size={viewport.size}")

    limit = None if args.limit is None else coerce_int(args.limit, MIN_LIMIT, minimum=MIN_LIMIT)
    session = SpiralSession(args.command, loop, theme, viewport, params, limit=limit)
    session.start()

    if args.command == "polygon" and not args.show:
        from spiral_lab.visualization.polygon import side_count_color

        loop.run_until_idle()
        if session.renderer is not None:
            r, g, b = side_count_color(session.renderer, params.sides)
            print(f"Sides: {params.sides} (#{r:02x}{g:02x}{b:02x})")

    bindings = {"r": session.reset}
    return _finish(session, loop, args, title=args.command, key_bindings=bindings)


def cmd_explore(args: argparse.Namespace) -> int:
    """Drill into prime gap classes and render the polar view."""
    from spiral_lab.config import PolarParams, coerce_int
    from spiral_lab.session import ExplorerSession

    loop, theme, viewport = _context(args)

    limit = coerce_int(args.limit, MIN_LIMIT, minimum=MIN_LIMIT)
    params = PolarParams(limit=limit).with_modulus(args.modulus)
    session = ExplorerSession(
        loop, theme, viewport, params,
        scoring=args.scoring, min_support=args.min_support, top_k=args.top_k,
    )
    session.start()
    loop.run_until_idle()

    if session.failed:
        print(f"Error: {session.status_text}")
        return 1

    if args.select:
        for gap in [int(g) for g in args.select.split(',') if g.strip()]:
            label = session.select_gap(gap)
            if label is None:
                print(f"Gap {gap} is not a candidate under {session.explorer.current_label}")
                break
            loop.run_until_idle()

    for line in session.options():
        print(line)

    bindings = {str(i): (lambda i=i: session.select_index(i - 1)) for i in range(1, 10)}
    bindings["r"] = session.reset
    bindings["+"] = lambda: session.set_modulus(session.params.modulus + 1)
    bindings["-"] = lambda: session.set_modulus(session.params.modulus - 1)
    return _finish(session, loop, args, title="explorer", key_bindings=bindings)


def cmd_zeta(args: argparse.Namespace) -> int:
    """Animate zeta(1/2 + it) or render a single frame."""
    from spiral_lab.core.scheduler import ChunkedScheduler
    from spiral_lab.visualization.renderer import save_surface, show_interactive
    from spiral_lab.visualization.surface import RasterSurface
    from spiral_lab.visualization.zeta import ZetaTrajectory

    loop, theme, viewport = _context(args)
    surface = RasterSurface(viewport.size)
    status = {"text": ""}
    trajectory = ZetaTrajectory(
        surface, theme, ChunkedScheduler(loop, name="zeta"),
        status=lambda text: status.update(text=text),
    )
    trajectory.set_t(args.t)

    if args.show:
        trajectory.play()
        show_interactive(
            loop,
            lambda: surface,
            lambda: status["text"],
            title="zeta(1/2 + it)",
            key_bindings={" ": trajectory.toggle, "r": trajectory.reset},
        )
        return 0

    trajectory.play()
    loop.run_until_idle(max_frames=max(0, args.frames - 1))
    trajectory.pause()

    value = trajectory.draw()
    print(f"{status['text']}  zeta = {value.real:.6f} {value.imag:+.6f}i")
    output = save_surface(surface, args.output)
    print(f"Saved to {output}")
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Prime, Möbius and prime-gap visualizations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--size", type=int, default=800, help="Canvas size in pixels")
    common.add_argument("--theme", default=None, help="Color theme JSON file")
    common.add_argument("--show", action="store_true", help="Open an interactive window")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    arch_parser = subparsers.add_parser("archimedean", parents=[common], help="Archimedean spiral")
    arch_parser.add_argument("--pitch", type=float, default=1.5, help="Spacing between turns")
    arch_parser.add_argument("--wave", action="store_true", help="Overlay the omega frequency wave")
    arch_parser.add_argument("--wave-slices", type=int, default=72, help="Angular slices of the wave")
    arch_parser.add_argument("--limit", type=int, default=None, help="Sieve size")
    arch_parser.add_argument("--output", "-o", default="archimedean.png", help="Output file")

    ulam_parser = subparsers.add_parser("ulam", parents=[common], help="Square Ulam spiral")
    ulam_parser.add_argument("--pixel-size", type=int, default=2, help="Cell size in pixels")
    ulam_parser.add_argument("--limit", type=int, default=None, help="Sieve size")
    ulam_parser.add_argument("--output", "-o", default="ulam.png", help="Output file")

    poly_parser = subparsers.add_parser("polygon", parents=[common], help="Concentric polygon spiral")
    poly_parser.add_argument("--sides", default="6", help="Polygon side count")
    poly_parser.add_argument("--spacing", default="2", help="Pixels between layers")
    poly_parser.add_argument("--limit", type=int, default=None, help="Sieve size")
    poly_parser.add_argument("--output", "-o", default="polygon.png", help="Output file")

    cube_parser = subparsers.add_parser("cube", parents=[common], help="Hexagonal spiral shaded as a cube")
    cube_parser.add_argument("--spacing", default="2", help="Pixels between layers")
    cube_parser.add_argument("--limit", type=int, default=None, help="Sieve size")
    cube_parser.add_argument("--output", "-o", default="cube.png", help="Output file")

    explore_parser = subparsers.add_parser("explore", parents=[common], help="Prime gap explorer")
    explore_parser.add_argument("--limit", type=int, default=1_000_000, help="Largest prime considered")
    explore_parser.add_argument("--modulus", default="28", help="Number of angular slices (12-144)")
    explore_parser.add_argument("--select", default="", help="Comma-separated gaps to drill into, e.g. 2,6")
    explore_parser.add_argument("--scoring", choices=["count", "bias"], default="count",
                                help="Gap ranking strategy")
    explore_parser.add_argument("--min-support", type=int, default=100, help="Minimum gap occurrences")
    explore_parser.add_argument("--top-k", type=int, default=None, help="Candidates shown")
    explore_parser.add_argument("--output", "-o", default="explore.png", help="Output file")

    zeta_parser = subparsers.add_parser("zeta", parents=[common], help="Zeta trajectory on the critical line")
    zeta_parser.add_argument("--t", default="0", help="Starting imaginary part")
    zeta_parser.add_argument("--frames", type=int, default=200, help="Frames to advance before saving")
    zeta_parser.add_argument("--output", "-o", default="zeta.png", help="Output file")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 1

    _setup_logging(args.verbose)

    commands = {
        "archimedean": cmd_spiral,
        "ulam": cmd_spiral,
        "polygon": cmd_spiral,
        "cube": cmd_spiral,
        "explore": cmd_explore,
        "zeta": cmd_zeta,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
