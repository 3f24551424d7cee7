# Friis at a fixed distance, simulated duration growing one second per trial.

import logging
import sys

from wifiprop.config import settings
from wifiprop.Ns3 import Ns3Scenario, configure
from wifiprop.Sweeps import RuntimeSweep
from wifiprop.Trials import TrialRunner


if __name__ == "__main__":
    logging.basicConfig(stream=sys.stdout, level=logging.INFO)

    configure(settings)
    runner = TrialRunner(lambda: Ns3Scenario(settings))

    df = RuntimeSweep(runner, settings).run()

    print(f"Written {len(df)} rows to {settings.RUNTIME_OUTPUT_FILE}")
