import copy
import os
import sys

import pytest

# Make ``import wifiprop`` work from a plain checkout.
ROOT_DIR = os.path.dirname(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from wifiprop.config import settings as default_settings  # noqa: E402
from wifiprop.Trials import FlowStats, TrialRunner  # noqa: E402


class FakeScenario:
    """Scripted stand-in for the ns-3 scenario.

    ``samples(params)`` returns the RSS readings delivered to the receive trace,
    ``rx_bytes(params)`` the bytes received by each flow.
    """

    def __init__(self, log, samples, rx_bytes):
        self.log = log
        self.samples = samples
        self.rx_bytes = rx_bytes
        self.params = None
        self.callback = None
        self.destroyed = False

    def build(self, params):
        self.params = params
        self.log.append(self)

    def connect_rx_trace(self, callback):
        self.callback = callback

    def run(self, stop_time):
        self.stop_time = stop_time
        for signal in self.samples(self.params):
            self.callback(signal, -93.9)

    def flow_stats(self):
        return [FlowStats(flow_id=i + 1, tx_bytes=1450 * 100, rx_bytes=rx)
                for i, rx in enumerate(self.rx_bytes(self.params))]

    def serialize_flows(self, filename):
        self.serialized_to = filename

    def destroy(self):
        self.destroyed = True


@pytest.fixture
def settings(tmp_path):
    _settings = copy.deepcopy(default_settings)
    _settings.OUTPUT_DIRECTORY = str(tmp_path)
    _settings.FLOW_MONITOR_FILE = str(tmp_path / "flow.xml")
    return _settings


@pytest.fixture
def make_runner():
    """Build a TrialRunner on FakeScenario; the scenarios it created are in runner.scenarios."""

    def _make_runner(samples=None, rx_bytes=None):
        if samples is None:
            samples = lambda params: [-40.0]
        if rx_bytes is None:
            rx_bytes = lambda params: [1450 * 100]

        log = []
        runner = TrialRunner(lambda: FakeScenario(log, samples, rx_bytes))
        runner.scenarios = log
        return runner

    return _make_runner
