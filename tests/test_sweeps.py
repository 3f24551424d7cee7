import pandas as pd
import pytest

from wifiprop.Models import PropagationModel
from wifiprop.Sweeps import DistanceSweep, RuntimeSweep, SweepState, compare_models


def _lines(filename):
    with open(filename) as f:
        return f.read().splitlines()


def connected_until(max_distance, flows=1):
    """Every flow receives data up to max_distance, nothing beyond."""
    return lambda params: [1450 * 100 if params.distance <= max_distance else 0] * flows


def test_sweep_state():
    state = SweepState(1)
    state.advance(1)

    assert state.value == 2
    assert state.connection_possible
    assert state.rows == 0


def test_distance_sweep_stops_at_first_empty_flow(settings, make_runner):
    runner = make_runner(rx_bytes=connected_until(7))

    df = DistanceSweep(runner, PropagationModel.FRIIS, settings).run()

    # the trial without connectivity is still recorded
    assert list(df["distanceMeters"]) == list(range(1, 9))
    assert df["throughputKbps"].iloc[-1] == 0
    assert (df["throughputKbps"].iloc[:-1] > 0).all()

    lines = _lines(f"{settings.OUTPUT_DIRECTORY}/output_Friis.csv")
    assert lines[0] == "distanceMeters,rssDBm,throughputKbps,Friis"
    assert len(lines) == 1 + 8


def test_distance_sweep_uses_configured_trial_values(settings, make_runner):
    runner = make_runner(rx_bytes=connected_until(2))

    DistanceSweep(runner, PropagationModel.THREE_LOG_DISTANCE, settings).run()

    params = [scenario.params for scenario in runner.scenarios]
    assert [p.distance for p in params] == [1, 2, 3]
    assert all(p.duration == settings.SIMULATION_TIME_S for p in params)
    assert all(p.loss.type_id == "ns3::ThreeLogDistancePropagationLossModel" for p in params)


@pytest.mark.parametrize("model", [PropagationModel.FIXED_RSS, PropagationModel.NAKAGAMI])
def test_capped_models_stop_at_cap(settings, make_runner, model):
    runner = make_runner()

    df = DistanceSweep(runner, model, settings).run()

    assert list(df["distanceMeters"]) == list(range(1, settings.DISTANCE_CAP_M + 1))
    assert len(runner.scenarios) == settings.DISTANCE_CAP_M


def test_capped_model_losing_connection_first(settings, make_runner):
    runner = make_runner(rx_bytes=connected_until(20))

    df = DistanceSweep(runner, PropagationModel.NAKAGAMI, settings).run()

    assert df["distanceMeters"].max() == 21


def test_uncapped_model_passes_cap(settings, make_runner):
    settings.DISTANCE_CAP_M = 5
    runner = make_runner(rx_bytes=connected_until(9))

    df = DistanceSweep(runner, PropagationModel.TWO_RAY_GROUND, settings).run()

    assert df["distanceMeters"].max() == 10


def test_distance_sweep_writes_row_per_flow(settings, make_runner):
    runner = make_runner(rx_bytes=connected_until(2, flows=2))

    df = DistanceSweep(runner, PropagationModel.FRIIS, settings).run()

    assert list(df["distanceMeters"]) == [1, 1, 2, 2, 3, 3]
    lines = _lines(f"{settings.OUTPUT_DIRECTORY}/output_Friis.csv")
    assert len(lines) == 1 + 6
    assert all(len(line.split(",")) == 4 for line in lines)


def test_runtime_sweep_runs_every_duration(settings, make_runner):
    # connectivity is lost early on, the sweep carries on regardless
    runner = make_runner(rx_bytes=lambda params: [1450 * 10] if params.duration < 5 else [0])

    df = RuntimeSweep(runner, settings).run()

    assert list(df["runtime"]) == list(range(1, 201))
    assert (df["throughputKbps"].iloc[4:] == 0).all()

    params = [scenario.params for scenario in runner.scenarios]
    assert all(p.distance == settings.RUNTIME_DISTANCE_M for p in params)
    assert all(p.loss.model is PropagationModel.FRIIS for p in params)
    assert [p.duration for p in params] == list(range(1, 201))

    lines = _lines(f"{settings.OUTPUT_DIRECTORY}/output_runtime.csv")
    assert lines[0] == "runtime,rssDBm,throughputKbps"
    assert len(lines) == 201


def test_runtime_sweep_without_flows(settings, make_runner):
    settings.RUNTIME_STOP_S = 3
    runner = make_runner(samples=lambda params: [], rx_bytes=lambda params: [])

    df = RuntimeSweep(runner, settings).run()

    assert list(df["runtime"]) == [1, 2, 3]
    assert list(df["throughputKbps"]) == [0, 0, 0]
    assert list(df["rssDBm"]) == [0, 0, 0]


def test_runtime_throughput_sums_flows(settings, make_runner):
    settings.RUNTIME_STOP_S = 1
    runner = make_runner(rx_bytes=lambda params: [512, 512])

    df = RuntimeSweep(runner, settings).run()

    assert df["throughputKbps"].iloc[0] == pytest.approx(1024 * 8.0 / 1 / 1024)


def test_compare_models_writes_one_file_per_model(settings, make_runner, tmp_path):
    settings.DISTANCE_CAP_M = 3
    runner = make_runner(rx_bytes=connected_until(4))

    results = compare_models(runner, settings)

    assert list(results) == ["Friis", "FixedRSS", "ThreeLogDistance", "TwoRayGround", "Nakagami"]
    assert results["Friis"]["distanceMeters"].max() == 5
    assert results["FixedRSS"]["distanceMeters"].max() == 3
    assert results["Nakagami"]["distanceMeters"].max() == 3

    for model in results:
        df = pd.read_csv(tmp_path / f"output_{model}.csv")
        assert list(df.columns) == ["distanceMeters", "rssDBm", "throughputKbps", model]
        assert len(df) == len(results[model])


def test_compare_models_checks_parameters_first(settings, make_runner):
    settings.PROPAGATION_MODEL_PARAMETERS.Nakagami = None
    runner = make_runner()

    with pytest.raises(ValueError):
        compare_models(runner, settings)
    assert runner.scenarios == []
