from datetime import date

import pandas as pd

from scripts.generate_mock_data import generate_mock_data
from scripts.run_matching_simulation import load_requests, load_travelers, run_simulation


def test_mock_data_is_reproducible(tmp_path):
    first = generate_mock_data(str(tmp_path / "a"), num_travelers=5, num_trips=20, num_requests=30, seed=7)
    second = generate_mock_data(str(tmp_path / "b"), num_travelers=5, num_trips=20, num_requests=30, seed=7)

    for left, right in zip(first, second):
        pd.testing.assert_frame_equal(left, right)

    travelers, trips, requests = first
    assert len(travelers) == 5 and len(trips) == 20 and len(requests) == 30
    assert set(trips["user_id"]) <= set(travelers["traveler_id"])
    assert (tmp_path / "a" / "requests.csv").exists()


def test_plane_and_boat_trips_carry_the_right_dates(tmp_path):
    _, trips, _ = generate_mock_data(str(tmp_path), num_travelers=5, num_trips=40, num_requests=5, seed=3)

    planes = trips[trips["type"] == "plane"]
    boats = trips[trips["type"] == "boat"]
    assert planes["departure_date"].notna().all()
    assert boats["eta_window_start"].notna().all()
    assert (boats["eta_window_end"] > boats["eta_window_start"]).all()


def test_loaders_build_domain_objects(tmp_path):
    travelers, _, requests = generate_mock_data(str(tmp_path), num_travelers=5, num_trips=5, num_requests=10, seed=11)

    loaded = load_travelers(pd.read_csv(tmp_path / "travelers.csv"))
    assert set(loaded) == set(travelers["traveler_id"])
    assert all(0 <= t.reliability_score <= 100 for t in loaded.values())

    parsed = load_requests(pd.read_csv(tmp_path / "requests.csv"))
    assert all(r.deadline_earliest <= r.deadline_latest for r in parsed)
    assert all(isinstance(r.deadline_latest, date) for r in parsed)


def test_simulation_writes_ranked_results(tmp_path):
    generate_mock_data(str(tmp_path), num_travelers=10, num_trips=80, num_requests=40, seed=21)
    output = tmp_path / "results.csv"

    results = run_simulation(data_dir=str(tmp_path), output_file=str(output))

    assert output.exists()
    if not results.empty:
        assert results["score"].between(0, 100).all()
        assert results["rank"].min() == 1
        assert set(results["confidence"]) <= {"high", "medium", "low"}
        # ranks follow score within each request
        for _, group in results.groupby("request_id"):
            assert group.sort_values("rank")["score"].is_monotonic_decreasing
