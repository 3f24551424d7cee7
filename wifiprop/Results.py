import os

import pandas as pd

from .Models import PropagationModel

DISTANCE_COLUMNS = ["distanceMeters", "rssDBm", "throughputKbps"]
RUNTIME_COLUMNS = ["runtime", "rssDBm", "throughputKbps"]


def output_file_name(model: PropagationModel):
    return f"output_{model.fullname}.csv"


class ResultRecorder:
    """
    Append-only CSV file. The header is (over)written by start(), every append()
    opens the file, writes one row and closes it again so an interrupted sweep
    still leaves a readable file behind.
    """

    def __init__(self, filename, columns, label=None):
        self.filename = filename
        self.columns = list(columns)
        self.label = label
        if label is not None:
            # trailing column carrying the label in the header only
            self.columns.append(label)
        self.rows = 0

    @classmethod
    def for_model(cls, model: PropagationModel, directory="."):
        return cls(os.path.join(directory, output_file_name(model)), DISTANCE_COLUMNS, label=model.fullname)

    @classmethod
    def for_runtime(cls, filename, directory="."):
        return cls(os.path.join(directory, filename), RUNTIME_COLUMNS)

    def start(self):
        directory = os.path.dirname(self.filename)
        if directory:
            os.makedirs(directory, exist_ok=True)

        pd.DataFrame(columns=self.columns).to_csv(self.filename, mode="w", index=False)
        self.rows = 0

    def append(self, *values):
        row = list(values)
        if self.label is not None:
            row.append("")

        if len(row) != len(self.columns):
            raise ValueError(f"Row {values} does not match columns {self.columns}")

        pd.DataFrame([row], columns=self.columns).to_csv(self.filename, mode="a", header=False, index=False)
        self.rows += 1
