"""
ns-3 scenario for a single trial.

Two nodes with 802.11n ad-hoc Wi-Fi devices share a Yans channel carrying one
propagation loss model. Node 0 runs a UdpServer, node 1 a UdpClient sending
fixed-size packets to it. A FlowMonitor is installed on both nodes and the
MonitorSnifferRx trace of the server's Wi-Fi PHY reports every received frame.

Requires the ns-3 Python bindings (cppyy based, ns-3.37 or newer).
"""
import logging

from ns import ns

from .Trials import FlowStats

ns.cppyy.cppdef("""
    #include <functional>
    using namespace ns3;

    std::function<void(double, double)> g_monitorSnifferRxHandler;

    void SetMonitorSnifferRxHandler(std::function<void(double, double)> handler)
    {
        g_monitorSnifferRxHandler = handler;
    }

    void ClearMonitorSnifferRxHandler()
    {
        g_monitorSnifferRxHandler = nullptr;
    }

    void MonitorSnifferRxTrampoline(Ptr<const Packet> packet,
                                    uint16_t channelFreqMhz,
                                    WifiTxVector txVector,
                                    MpduInfo aMpdu,
                                    SignalNoiseDbm signalNoise,
                                    uint16_t staId)
    {
        if (g_monitorSnifferRxHandler)
        {
            g_monitorSnifferRxHandler(signalNoise.signal, signalNoise.noise);
        }
    }

    Callback<void, Ptr<const Packet>, uint16_t, WifiTxVector, MpduInfo, SignalNoiseDbm, uint16_t>
    MakeMonitorSnifferRxCallback()
    {
        return MakeCallback(&MonitorSnifferRxTrampoline);
    }
""")

_configured = False


def configure(settings):
    """Time resolution may only be set once per process; the RNG is seeded on every call."""
    global _configured
    if not _configured:
        ns.Time.SetResolution(getattr(ns.Time, settings.TIME_RESOLUTION))
        _configured = True

    ns.RngSeedManager.SetSeed(int(settings.SEED))
    ns.RngSeedManager.SetRun(int(settings.RUN))


class Ns3Scenario:
    def __init__(self, settings):
        self.settings = settings

        self.nodes = None
        self.flow_monitor = None
        self.flow_monitor_helper = None
        self._callbacks = []  # keep python callables alive while ns-3 holds them

    def build(self, params):
        self.nodes = ns.NodeContainer()
        self.nodes.Create(2)

        stack = ns.InternetStackHelper()
        stack.Install(self.nodes)

        wifi = ns.WifiHelper()
        wifi.SetStandard(getattr(ns, self.settings.WIFI_STANDARD))

        wifi_phy = ns.YansWifiPhyHelper()
        wifi_phy.Set("TxPowerStart", ns.DoubleValue(params.tx_power))
        wifi_phy.Set("TxPowerEnd", ns.DoubleValue(params.tx_power))
        wifi_phy.Set("RxGain", ns.DoubleValue(params.rx_gain))
        wifi_phy.Set("TxGain", ns.DoubleValue(params.tx_gain))
        wifi_phy.Set("ChannelSettings", ns.StringValue(self.settings.CHANNEL_SETTINGS))

        wifi_channel = ns.YansWifiChannelHelper()
        wifi_channel.SetPropagationDelay(self.settings.PROPAGATION_DELAY_MODEL)

        attributes = []
        for name, value in params.loss.attributes.items():
            attributes += [name, ns.DoubleValue(value)]
        wifi_channel.AddPropagationLoss(params.loss.type_id, *attributes)

        wifi_phy.SetChannel(wifi_channel.Create())

        wifi_mac = ns.WifiMacHelper()
        wifi_mac.SetType(self.settings.WIFI_MAC)

        mobility = ns.MobilityHelper()
        position_alloc = ns.CreateObject[ns.ListPositionAllocator]()
        server_position, client_position = params.positions()
        logging.debug(f"Placing nodes {server_position.distance_to(client_position)}m apart")
        for position in (server_position, client_position):
            position_alloc.Add(ns.Vector(position.x, position.y, position.z))
        mobility.SetPositionAllocator(position_alloc)
        mobility.SetMobilityModel("ns3::ConstantPositionMobilityModel")
        mobility.Install(self.nodes)

        server_device = wifi.Install(wifi_phy, wifi_mac, self.nodes.Get(0))
        client_device = wifi.Install(wifi_phy, wifi_mac, self.nodes.Get(1))

        address = ns.Ipv4AddressHelper()
        address.SetBase(ns.Ipv4Address(self.settings.NETWORK_ADDRESS), ns.Ipv4Mask(self.settings.NETWORK_MASK))

        server_interface = address.Assign(server_device)
        address.Assign(client_device)

        logging.debug("Create UdpServer application on node 0.")
        server = ns.UdpServerHelper(params.port)
        server_app = server.Install(self.nodes.Get(0))
        server_app.Start(ns.Seconds(params.server_start))
        server_app.Stop(ns.Seconds(params.duration))

        client = ns.UdpClientHelper(server_interface.GetAddress(0).ConvertTo(), params.port)
        client.SetAttribute("MaxPackets", ns.UintegerValue(params.packet_limit))
        client.SetAttribute("Interval", ns.TimeValue(ns.Seconds(params.interval)))
        client.SetAttribute("PacketSize", ns.UintegerValue(params.packet_size))

        client_app = client.Install(self.nodes.Get(1))
        client_app.Start(ns.Seconds(params.client_start))
        client_app.Stop(ns.Seconds(params.duration))

        self.flow_monitor_helper = ns.FlowMonitorHelper()
        self.flow_monitor = self.flow_monitor_helper.InstallAll()

    def connect_rx_trace(self, callback):
        def monitor_sniffer_rx(signal, noise):
            callback(float(signal), float(noise))

        # the C++ trampoline forwards signal and noise of every received frame here
        self._callbacks.append(monitor_sniffer_rx)
        ns.cppyy.gbl.SetMonitorSnifferRxHandler(monitor_sniffer_rx)
        ns.Config.ConnectWithoutContext(self.settings.SNIFFER_TRACE_PATH,
                                        ns.cppyy.gbl.MakeMonitorSnifferRxCallback())

    def run(self, stop_time):
        ns.Simulator.Stop(ns.Seconds(stop_time))
        ns.Simulator.Run()

    def flow_stats(self):
        self.flow_monitor.CheckForLostPackets()

        flows = []
        for flow_id, stats in self.flow_monitor.GetFlowStats():
            flows.append(FlowStats(flow_id=int(flow_id),
                                   tx_bytes=int(stats.txBytes),
                                   rx_bytes=int(stats.rxBytes),
                                   tx_packets=int(stats.txPackets),
                                   rx_packets=int(stats.rxPackets),
                                   lost_packets=int(stats.lostPackets)))
        return flows

    def serialize_flows(self, filename):
        self.flow_monitor.SerializeToXmlFile(filename, True, True)

    def destroy(self):
        ns.Simulator.Destroy()
        ns.cppyy.gbl.ClearMonitorSnifferRxHandler()
        self._callbacks = []
        self.flow_monitor = None
        self.flow_monitor_helper = None
        self.nodes = None
