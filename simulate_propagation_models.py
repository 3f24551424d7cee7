# Compare propagation loss models: for every model, move two ad-hoc Wi-Fi nodes
# apart one meter at a time until the UDP flow between them stops delivering.

import logging
import sys

from wifiprop.config import settings
from wifiprop.Ns3 import Ns3Scenario, configure
from wifiprop.Sweeps import compare_models
from wifiprop.Trials import TrialRunner


if __name__ == "__main__":
    logging.basicConfig(stream=sys.stdout, level=logging.INFO)

    configure(settings)
    runner = TrialRunner(lambda: Ns3Scenario(settings))

    results = compare_models(runner, settings)

    for model, df in results.items():
        print(f"{model}: {len(df)} rows, last distance {df['distanceMeters'].max()}m")
