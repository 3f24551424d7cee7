"""
One trial: two ad-hoc Wi-Fi endpoints on a line, a UDP client streaming to a UDP
server, and the two scalars taken out of it (average RSS and per-flow throughput).

The simulator itself is reached through a scenario object (see wifiprop.Ns3) so the
bookkeeping here does not depend on which simulator sits underneath.
"""
from dataclasses import dataclass
import logging

from .Models import LossModelConfig
from .Positions import Position


def throughput_kbps(rx_bytes, duration):
    if duration <= 0:
        raise ValueError(f"Duration must be positive, got {duration}")
    return rx_bytes * 8.0 / duration / 1024


class RssAverage:
    """Running RSS value, halving the weight of every earlier sample on each update."""

    def __init__(self):
        self.value = 0.0
        self.samples = 0

    def reset(self):
        self.value = 0.0
        self.samples = 0

    def update(self, signal, noise=None):
        logging.debug("Received packet with signal: %s, noise: %s", signal, noise)
        self.value = (signal + self.value) / 2.
        self.samples += 1
        return self.value


@dataclass(frozen=True)
class TrialParameters:
    distance: float
    duration: float
    loss: LossModelConfig

    tx_power: float
    tx_gain: float
    rx_gain: float
    antenna_height: float
    data_rate: float
    packet_size: int

    server_start: float = 1.0
    client_start: float = 2.0
    port: int = 9
    flow_monitor_file: str = "flow.xml"

    @classmethod
    def from_settings(cls, settings, loss, distance, duration):
        return cls(distance=distance,
                   duration=duration,
                   loss=loss,
                   tx_power=settings.TX_POWER_DBM,
                   tx_gain=settings.TX_GAIN_DB,
                   rx_gain=settings.RX_GAIN_DB,
                   antenna_height=settings.ANTENNA_HEIGHT_M,
                   data_rate=settings.DATA_RATE_BPS,
                   packet_size=int(settings.PACKET_SIZE_BYTES),
                   server_start=settings.SERVER_START_S,
                   client_start=settings.CLIENT_START_S,
                   port=int(settings.UDP_PORT),
                   flow_monitor_file=settings.FLOW_MONITOR_FILE)

    @property
    def interval(self):
        # delay between packets
        return self.packet_size * 8 / self.data_rate

    @property
    def packet_limit(self):
        return int(self.duration / self.interval)

    def positions(self):
        # server (receiver) at the origin, client offset along x
        return (Position(0.0, 0.0, self.antenna_height),
                Position(float(self.distance), 0.0, self.antenna_height))


@dataclass(frozen=True)
class FlowStats:
    flow_id: int
    tx_bytes: int
    rx_bytes: int
    tx_packets: int = 0
    rx_packets: int = 0
    lost_packets: int = 0


@dataclass(frozen=True)
class TrialResult:
    average_rss: float
    flows: tuple
    duration: float

    def throughputs(self):
        return [throughput_kbps(flow.rx_bytes, self.duration) for flow in self.flows]

    @property
    def total_rx_bytes(self):
        return sum(flow.rx_bytes for flow in self.flows)

    @property
    def total_throughput(self):
        return throughput_kbps(self.total_rx_bytes, self.duration)

    @property
    def connection_possible(self):
        for flow in self.flows:
            if flow.rx_bytes == 0:
                return False
        return True


class TrialRunner:
    """
    Runs one trial per call on a fresh scenario from scenario_factory.

    A scenario provides build(params), connect_rx_trace(callback), run(stop_time),
    flow_stats(), serialize_flows(filename) and destroy().
    """

    def __init__(self, scenario_factory):
        self.scenario_factory = scenario_factory
        self.rss = RssAverage()

    def run(self, params: TrialParameters):
        self.rss.reset()

        scenario = self.scenario_factory()
        try:
            scenario.build(params)
            scenario.connect_rx_trace(self.rss.update)
            scenario.run(params.duration)

            flows = tuple(scenario.flow_stats())
            scenario.serialize_flows(params.flow_monitor_file)
        finally:
            scenario.destroy()

        return TrialResult(average_rss=self.rss.value, flows=flows, duration=params.duration)
