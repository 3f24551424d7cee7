import os

import matplotlib.pyplot as plt

from wifiprop.config import settings
from wifiprop.Models import configured_models
from wifiprop.utils import load_results, load_runtime_results

directory = settings.OUTPUT_DIRECTORY

df = load_results(directory, configured_models(settings))


def plot(param, ylabel):
    fig, ax = plt.subplots(num=param)
    for key, grp in df.groupby("model", sort=False):
        grp.plot(ax=ax, x="distanceMeters", y=param, label=key)

    ax.set_xlabel("Distance (m)")
    ax.set_ylabel(ylabel)
    ax.grid(True)
    plt.title(param)
    plt.savefig(os.path.join(directory, f"{param}_vs_distance.png"))

    plt.show(block=False)


if len(df) > 0:
    plot("rssDBm", "Average RSS (dBm)")
    plot("throughputKbps", "Throughput (Kbps)")

runtime_file = os.path.join(directory, settings.RUNTIME_OUTPUT_FILE)
if os.path.exists(runtime_file):
    runtime = load_runtime_results(runtime_file)

    fig, ax = plt.subplots(num="runtime")
    runtime.plot(ax=ax, x="runtime", y="throughputKbps", label=settings.RUNTIME_MODEL)
    ax.set_xlabel("Simulated time (s)")
    ax.set_ylabel("Throughput (Kbps)")
    ax.grid(True)
    plt.savefig(os.path.join(directory, "throughputKbps_vs_runtime.png"))

plt.show()
print("The end")
