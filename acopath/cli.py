import argparse
import logging
import sys

from .core.colony import AntColony
from .core.errors import AcoPathError
from .simulation.config import ColonyConfig

logger = logging.getLogger(__name__)


def build_parser():
    ap = argparse.ArgumentParser(prog='acopath',
                                 description='Find a low-cost path with an Ant System colony.')
    ap.add_argument('topology', help='JSON topology file')
    ap.add_argument('--start', type=int, default=0, help='start node')
    ap.add_argument('--end', type=int, default=5, help='destination node')
    ap.add_argument('--ants', type=int, default=None, help='ants per iteration')
    ap.add_argument('--iterations', type=int, default=None, help='number of iterations')
    ap.add_argument('--seed', type=int, default=None, help='random seed for reproducible runs')
    ap.add_argument('--alpha', type=float, default=None, help='pheromone importance')
    ap.add_argument('--beta', type=float, default=None, help='heuristic importance')
    ap.add_argument('--evaporation-rate', type=float, default=None)
    ap.add_argument('--pheromone-quantity', type=float, default=None)
    ap.add_argument('--workers', type=int, default=None, help='threads per iteration')
    ap.add_argument('--config', default=None, help='JSON file with configuration overrides')
    ap.add_argument('-v', '--verbose', action='store_true', help='log every iteration')
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        config = ColonyConfig.from_json(args.config) if args.config else ColonyConfig()
        for key in ('ants', 'iterations', 'seed', 'alpha', 'beta',
                    'evaporation_rate', 'pheromone_quantity', 'workers'):
            value = getattr(args, key)
            if value is not None:
                config.set(key, value)
        config.validate()

        colony = AntColony.from_file(
            args.topology,
            config.get('ants'),
            config.get('iterations'),
            pheromone_quantity=config.get('pheromone_quantity'),
            evaporation_rate=config.get('evaporation_rate'),
            alpha=config.get('alpha'),
            beta=config.get('beta'),
            seed=config.get('seed'),
            workers=config.get('workers'),
        )
    except AcoPathError as e:
        # Covers TopologyLoadError and bad configuration values
        logger.debug("Setup failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2

    result = colony.solve(args.start, args.end)
    if not result.found:
        print(f"No path found from {args.start} to {args.end}")
        return 1

    print(' '.join(map(str, result.best_path)))
    print(f"length: {result.best_length:g}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
