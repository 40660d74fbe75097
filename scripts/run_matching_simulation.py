import os
import time
from typing import Dict, List

import numpy as np
import pandas as pd

from listings.models import DeliveryRequest, Dimensions, Traveler, Trip
from matching.policy import MatchingPolicy, default_policy
from matching.smart_matching import find_matches_for_request
from trust.reliability import ReliabilityFactors, calculate_reliability_score

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _clean(row: dict) -> dict:
    """pandas NaN -> None so the dataclasses see missing values."""
    return {k: (None if isinstance(v, float) and np.isnan(v) else v) for k, v in row.items()}


def load_travelers(df: pd.DataFrame) -> Dict[str, Traveler]:
    travelers = {}
    for row in df.to_dict("records"):
        row = _clean(row)
        completed = int(row["completed_deliveries"] or 0)
        cancelled = int(row.get("cancellation_count") or 0)
        total = completed + cancelled
        reliability = calculate_reliability_score(
            ReliabilityFactors(
                completed_deliveries=completed,
                average_rating=row["average_rating"],
                cancellation_count=cancelled,
                completion_rate=(completed / total * 100) if total else 0.0,
            )
        )
        travelers[row["traveler_id"]] = Traveler(
            id=row["traveler_id"],
            id_verified=bool(row["id_verified"]),
            verified_sailor=bool(row["verified_sailor"]),
            average_rating=row["average_rating"],
            completed_deliveries=completed,
            subscribed=bool(row["subscribed"]),
            reliability_score=reliability,
        )
    return travelers


def load_trips(df: pd.DataFrame) -> List[Trip]:
    trips = []
    for row in df.to_dict("records"):
        row = _clean(row)
        trips.append(
            Trip(
                id=row["trip_id"],
                user_id=row["user_id"],
                type=row["type"],
                from_location=row["from_location"],
                to_location=row["to_location"],
                departure_date=row["departure_date"],
                eta_window_start=row["eta_window_start"],
                eta_window_end=row["eta_window_end"],
                spare_kg=row["spare_kg"],
                max_tonnage=row["max_tonnage"],
                spare_cubic_meters=row["spare_cubic_meters"],
                status=row["status"],
            )
        )
    return trips


def load_requests(df: pd.DataFrame) -> List[DeliveryRequest]:
    requests = []
    for row in df.to_dict("records"):
        row = _clean(row)
        requests.append(
            DeliveryRequest(
                id=row["request_id"],
                user_id=row["user_id"],
                title=row["title"],
                from_location=row["from_location"],
                to_location=row["to_location"],
                deadline_earliest=row["deadline_earliest"],
                deadline_latest=row["deadline_latest"],
                weight_kg=float(row["weight_kg"]),
                dimensions=Dimensions(row["length"] or 0, row["width"] or 0, row["height"] or 0),
                value_usd=row["value_usd"] or 0.0,
                max_reward=row["max_reward"] or 0.0,
                preferred_method=row["preferred_method"],
                category=row["category"],
                restricted_items=bool(row["restricted_items"]),
                status=row["status"],
            )
        )
    return requests


def run_simulation(data_dir=None, output_file=None, policy: MatchingPolicy = None) -> pd.DataFrame:
    """
    Matches every request in data_dir against every trip and writes one row
    per suggestion. Returns the results DataFrame.
    """
    print("=== STARTING MATCHING SIMULATION ===")
    data_dir = data_dir or os.path.join(BASE_DIR, "sampledata")
    output_file = output_file or os.path.join(BASE_DIR, "matching_results.csv")
    policy = policy or default_policy()

    # 1. Load Data
    travelers = load_travelers(pd.read_csv(os.path.join(data_dir, "travelers.csv")))
    trips = load_trips(pd.read_csv(os.path.join(data_dir, "trips.csv")))
    requests = load_requests(pd.read_csv(os.path.join(data_dir, "requests.csv")))
    print(f"Loaded {len(requests)} Requests, {len(trips)} Trips and {len(travelers)} Travelers.\n")

    # 2. Match
    start_time = time.time()
    rows = []
    for request in requests:
        for rank, suggestion in enumerate(find_matches_for_request(request, trips, travelers, policy), start=1):
            rows.append({
                "request_id": request.id,
                "trip_id": suggestion.trip.id,
                "traveler_id": suggestion.traveler.id,
                "rank": rank,
                "score": suggestion.score,
                "confidence": suggestion.confidence.value,
                **suggestion.breakdown.as_dict(),
            })
    print(f"Matched in {time.time() - start_time:.2f}s.\n")

    columns = ["request_id", "trip_id", "traveler_id", "rank", "score", "confidence"]
    results = pd.DataFrame(rows, columns=columns + [c for c in (rows[0] if rows else {}) if c not in columns])
    results.to_csv(output_file, index=False)

    # 3. Report
    matched = results["request_id"].nunique() if not results.empty else 0
    print("=== SIMULATION COMPLETE ===")
    print(f"Requests with at least one match: {matched} / {len(requests)}")
    if not results.empty:
        scores = results["score"].to_numpy()
        print(f"Score mean {np.mean(scores):.1f}, p50 {np.percentile(scores, 50):.0f}, p90 {np.percentile(scores, 90):.0f}")
        print(results["confidence"].value_counts().to_string())
    print(f"Results written to '{output_file}'.")
    return results


if __name__ == "__main__":
    run_simulation()
