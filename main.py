import logging
import sys

import yaml

from model_config import ConfigError, load_config
from report import format_replications, format_report
from simulator import Simulator, run_replications

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else "model.yml"
    print(f"Running simulation with '{path}'\n")
    try:
        config = load_config(path)
    except (OSError, yaml.YAMLError, ConfigError) as e:
        logging.error("Cannot load model %s: %s", path, e)
        return 1

    if len(config.seeds) > 1:
        out = format_replications(run_replications(config))
    else:
        out = format_report(Simulator(config).run())
    print(out)
    with open("simulation_result.txt", "w", encoding="utf-8") as f:
        f.write(out)
    print("\nResults saved to 'simulation_result.txt'.")
    return 0

if __name__ == "__main__":
    sys.exit(main())
