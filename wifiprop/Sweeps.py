import logging

import pandas as pd

from .Models import PropagationModel, configured_models, is_capped, loss_model_config
from .Results import ResultRecorder, DISTANCE_COLUMNS, RUNTIME_COLUMNS
from .Trials import TrialParameters


class SweepState:
    def __init__(self, value):
        self.value = value
        self.connection_possible = True
        self.rows = 0

    def advance(self, step):
        self.value += step


class DistanceSweep:
    """
    Moves the client away from the server one step at a time, one trial per distance,
    until a flow receives nothing. Capped models also stop at DISTANCE_CAP_M.
    """

    def __init__(self, runner, model: PropagationModel, settings, output_directory=None):
        self.runner = runner
        self.model = model
        self.settings = settings
        self.loss = loss_model_config(model, settings)

        if output_directory is None:
            output_directory = settings.OUTPUT_DIRECTORY or "."
        self.recorder = ResultRecorder.for_model(model, output_directory)
        self.records = []

    def keep_sweeping(self, distance, result):
        if not result.connection_possible:
            return False
        if distance >= self.settings.DISTANCE_CAP_M and is_capped(self.model, self.settings):
            return False
        return True

    def run(self):
        logging.info(f"Running with {self.model.fullname}")
        self.recorder.start()
        self.records = []

        state = SweepState(self.settings.DISTANCE_START_M)
        while state.connection_possible:
            distance = state.value
            logging.info(f"Running simulation for distance={distance}m")

            params = TrialParameters.from_settings(self.settings, self.loss,
                                                   distance=distance,
                                                   duration=self.settings.SIMULATION_TIME_S)
            result = self.runner.run(params)

            for throughput in result.throughputs():
                logging.info(f"RSS: {result.average_rss} dBm, Throughput: {throughput} Kbps")
                self.recorder.append(distance, result.average_rss, throughput)
                self.records.append({"distanceMeters": distance,
                                     "rssDBm": result.average_rss,
                                     "throughputKbps": throughput})
                state.rows += 1

            state.connection_possible = self.keep_sweeping(distance, result)
            state.advance(self.settings.DISTANCE_STEP_M)

        logging.info(f"End of simulation with model {self.model.fullname}")
        return pd.DataFrame(self.records, columns=DISTANCE_COLUMNS)


class RuntimeSweep:
    """
    Fixed distance, growing simulated duration. Runs every duration from RUNTIME_START_S
    up to RUNTIME_STOP_S; losing the connection is logged but does not end the sweep.
    """

    def __init__(self, runner, settings, output_directory=None):
        self.runner = runner
        self.settings = settings
        self.model = PropagationModel.from_name(settings.RUNTIME_MODEL)
        self.loss = loss_model_config(self.model, settings)

        if output_directory is None:
            output_directory = settings.OUTPUT_DIRECTORY or "."
        self.recorder = ResultRecorder.for_runtime(settings.RUNTIME_OUTPUT_FILE, output_directory)
        self.records = []

    def durations(self):
        duration = self.settings.RUNTIME_START_S
        while duration <= self.settings.RUNTIME_STOP_S:
            yield duration
            duration += self.settings.RUNTIME_STEP_S

    def run(self):
        logging.info(f"Running with {self.model.fullname} at {self.settings.RUNTIME_DISTANCE_M}m")
        self.recorder.start()
        self.records = []

        state = SweepState(self.settings.RUNTIME_START_S)
        for duration in self.durations():
            state.value = duration
            logging.info(f"Running simulation for {duration}s")

            params = TrialParameters.from_settings(self.settings, self.loss,
                                                   distance=self.settings.RUNTIME_DISTANCE_M,
                                                   duration=duration)
            result = self.runner.run(params)
            throughput = result.total_throughput

            logging.info(f"RSS: {result.average_rss} dBm, Throughput: {throughput} Kbps")
            self.recorder.append(duration, result.average_rss, throughput)
            self.records.append({"runtime": duration,
                                 "rssDBm": result.average_rss,
                                 "throughputKbps": throughput})
            state.rows += 1

            if not result.connection_possible:
                if state.connection_possible:
                    logging.info(f"No packets received after {duration}s")
                state.connection_possible = False

        logging.info(f"End of simulation with model {self.model.fullname}")
        return pd.DataFrame(self.records, columns=RUNTIME_COLUMNS)


def compare_models(runner, settings, models=None, output_directory=None):
    if models is None:
        models = configured_models(settings)

    # fail on a bad parameter block before the first trial runs
    for model in models:
        loss_model_config(model, settings)

    results = {}
    for model in models:
        sweep = DistanceSweep(runner, model, settings, output_directory=output_directory)
        results[model.fullname] = sweep.run()
    return results
