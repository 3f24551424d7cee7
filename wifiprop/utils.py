import os

import numpy as np
import pandas as pd
from tabulate import tabulate

from .Results import output_file_name, DISTANCE_COLUMNS, RUNTIME_COLUMNS


def load_results(directory, models):
    frames = []
    for model in models:
        filename = os.path.join(directory, output_file_name(model))
        if not os.path.exists(filename):
            continue

        df = pd.read_csv(filename)
        df = df[DISTANCE_COLUMNS].copy()  # drop the label column, empty on every data row
        df.insert(0, "model", model.fullname)
        frames.append(df)

    if len(frames) == 0:
        return pd.DataFrame(columns=["model"] + DISTANCE_COLUMNS)
    return pd.concat(frames, ignore_index=True)


def load_runtime_results(filename):
    return pd.read_csv(filename)[RUNTIME_COLUMNS]


def max_connected_distance(df):
    connected = df[df["throughputKbps"] > 0]
    if len(connected) == 0:
        return 0
    return connected["distanceMeters"].max()


def summary_rows(df):
    rows = []
    for model, grp in df.groupby("model", sort=False):
        connected = grp[grp["throughputKbps"] > 0]
        rows.append({
            "model": model,
            "trials": len(grp),
            "max_distance_m": max_connected_distance(grp),
            "mean_rss_dbm": np.mean(connected["rssDBm"]) if len(connected) > 0 else np.nan,
            "peak_throughput_kbps": np.max(grp["throughputKbps"]) if len(grp) > 0 else 0,
        })
    return rows


def summarize(df):
    return tabulate(summary_rows(df), headers="keys", floatfmt=".2f")
