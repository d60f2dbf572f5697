import argparse
import sys
import os
import logging
import random
import time

# Ensure project root is in path so we can import 'maze_stepper' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.errors import MazeError

# Size range the generator picks from with --random-size
RANDOM_WIDTH = (15, 60)
RANDOM_HEIGHT = (15, 30)

def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Stepper: step-by-step recursive backtracker")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--width", type=int, default=30, help="Maze Width")
    gen_parser.add_argument("--height", type=int, default=20, help="Maze Height")
    gen_parser.add_argument("--random-size", action="store_true", help="Pick width and height at random")
    gen_parser.add_argument("--root-x", type=int, default=None, help="Root cell X (random if omitted)")
    gen_parser.add_argument("--root-y", type=int, default=None, help="Root cell Y (random if omitted)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--visual", action="store_true", help="Show visualization")
    gen_parser.add_argument("--tick", type=int, default=40, help="Milliseconds per step in visual mode")
    gen_parser.add_argument("--cell-size", type=int, default=20, help="Cell size in pixels")
    gen_parser.add_argument("--record", action="store_true", help="Record generation video")
    gen_parser.add_argument("--ascii", action="store_true", help="Print the finished maze as text")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Time full generation at several sizes")
    bench_parser.add_argument("--size", type=int, default=200, help="Largest benchmark size")
    bench_parser.add_argument("--seed", type=int, default=123, help="Random Seed")

    return parser

def generate(args, logger) -> int:
    from maze_stepper.algo.dfs import StepEngine, random_root

    rng = random.Random(args.seed)

    width, height = args.width, args.height
    if args.random_size:
        width = rng.randrange(*RANDOM_WIDTH)
        height = rng.randrange(*RANDOM_HEIGHT)

    visual = args.visual or args.record
    if visual:
        from maze_stepper.viz.renderer import MIN_CELL_SIZE
        if args.cell_size < MIN_CELL_SIZE:
            logger.error(f"Cell size must be at least {MIN_CELL_SIZE} pixels, got {args.cell_size}")
            return 2

    root_x, root_y = args.root_x, args.root_y
    if root_x is None and root_y is None:
        if width > 0 and height > 0:
            root_x, root_y = random_root(width, height, rng)
    else:
        if root_x is None and width > 0:
            root_x = rng.randrange(width)
        if root_y is None and height > 0:
            root_y = rng.randrange(height)

    try:
        engine = StepEngine(width, height, root_x, root_y, rng=rng)
    except MazeError as e:
        logger.error(str(e))
        return 2

    logger.info(f"Generating {width}x{height} maze from root ({root_x}, {root_y})...")

    if visual:
        logger.info("Visual mode enabled - Opening window...")
        from maze_stepper.viz.renderer import Renderer
        renderer = Renderer(engine, cell_size=args.cell_size, tick_ms=args.tick, record=args.record)

        if args.record:
            logger.info(f"Recording video to {renderer.recorder.output_file}")

        renderer.init_window()
        renderer.run_loop()

        if not engine.is_finished:
            logger.info(f"Window closed early after {engine.step_count} steps.")
    else:
        logger.info("Headless generation...")
        for result in engine.run():
            logger.debug(f"Step {engine.step_count}: {result}")
        logger.info(f"Done in {engine.step_count} steps "
                    f"({engine.carve_count} carves, {engine.backtrack_count} backtracks).")

    if args.ascii:
        from maze_stepper.viz.ascii import render_ascii
        print(render_ascii(engine.grid))

    return 0

def benchmark(args, logger) -> int:
    from maze_stepper.algo.dfs import StepEngine

    if args.size <= 0:
        logger.error(f"Benchmark size must be positive, got {args.size}")
        return 2

    sizes = []
    size = 25
    while size < args.size:
        sizes.append(size)
        size *= 2
    sizes.append(args.size)

    logger.info(f"Running generation benchmark (up to {args.size}x{args.size})...")
    print(f"\n{'SIZE':<12} | {'TIME (s)':<10} | {'STEPS':<10} | {'STEPS/SEC':<12}")
    print("-" * 52)

    for s in sizes:
        engine = StepEngine(s, s, 0, 0, seed=args.seed)
        t0 = time.time()
        steps = engine.run_all()
        duration = time.time() - t0
        rate = steps / duration if duration > 0 else float("inf")
        print(f"{f'{s}x{s}':<12} | {duration:<10.4f} | {steps:<10} | {rate:<12,.0f}")

    return 0

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("maze_stepper")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    if args.command == "generate":
        return generate(args, logger)
    elif args.command == "benchmark":
        return benchmark(args, logger)
    return 0

if __name__ == "__main__":
    sys.exit(main())
