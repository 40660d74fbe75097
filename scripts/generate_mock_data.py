import os
from datetime import date, timedelta

import numpy as np
import pandas as pd

# (name, ISO2 country, lat, lon). Port cities so boat trips make sense too.
CITIES = [
    ("Brisbane", "AU", -27.4698, 153.0251),
    ("Sydney", "AU", -33.8688, 151.2093),
    ("Auckland", "NZ", -36.8485, 174.7633),
    ("Los Angeles", "US", 34.0522, -118.2437),
    ("Vancouver", "CA", 49.2827, -123.1207),
    ("London", "GB", 51.5074, -0.1278),
    ("Marseille", "FR", 43.2965, 5.3698),
    ("Hamburg", "DE", 53.5511, 9.9937),
    ("Tokyo", "JP", 35.6762, 139.6503),
    ("Dubai", "AE", 25.2048, 55.2708),
]

CATEGORIES = ["electronics", "clothing", "documents", "tools", "food", "medical", "books", None]


def _route(rng, hubs):
    """Pick two distinct cities, biased towards a few busy hubs."""
    weights = np.array([3.0 if c[0] in hubs else 1.0 for c in CITIES])
    weights = weights / weights.sum()
    origin, destination = rng.choice(len(CITIES), size=2, replace=False, p=weights)
    return CITIES[origin], CITIES[destination]


def generate_mock_travelers(num_travelers=40, seed=None):
    rng = np.random.default_rng(seed)
    rows = []
    for traveler_index in range(num_travelers):
        rated = rng.random() < 0.8
        rows.append({
            "traveler_id": f"u_{str(traveler_index + 1).zfill(4)}",
            "id_verified": bool(rng.random() < 0.6),
            "verified_sailor": bool(rng.random() < 0.15),
            "average_rating": float(np.round(rng.uniform(3.0, 5.0), 1)) if rated else None,
            "completed_deliveries": int(rng.poisson(8)),
            "cancellation_count": int(rng.poisson(0.7)),
            "subscribed": bool(rng.random() < 0.2),
        })
    return pd.DataFrame(rows)


def generate_mock_trips(travelers, num_trips=200, seed=None, start=None, hubs=("Brisbane", "Auckland")):
    """
    Plane trips get a single departure date, boat trips a 2-3 week ETA window.
    Routes are concentrated on a few hubs so requests have something to match.
    """
    rng = np.random.default_rng(seed)
    start = start or date.today()
    traveler_ids = travelers["traveler_id"].tolist()

    rows = []
    for trip_index in range(num_trips):
        (from_city, from_cc, _, _), (to_city, to_cc, _, _) = _route(rng, hubs)
        trip_type = rng.choice(["plane", "boat"], p=[0.7, 0.3])
        offset = int(rng.integers(0, 45))

        row = {
            "trip_id": f"t_{str(trip_index + 1).zfill(5)}",
            "user_id": rng.choice(traveler_ids),
            "type": trip_type,
            "from_location": from_city,
            "to_location": to_city,
            "from_country": from_cc,
            "to_country": to_cc,
            "departure_date": None,
            "eta_window_start": None,
            "eta_window_end": None,
            "spare_kg": None,
            "max_tonnage": None,
            "spare_cubic_meters": None,
            "status": "active",
        }
        if trip_type == "plane":
            row["departure_date"] = (start + timedelta(days=offset)).isoformat()
            row["spare_kg"] = float(np.round(rng.uniform(2, 23), 1))
        else:
            row["eta_window_start"] = (start + timedelta(days=offset)).isoformat()
            row["eta_window_end"] = (start + timedelta(days=offset + int(rng.integers(14, 22)))).isoformat()
            row["max_tonnage"] = float(np.round(rng.uniform(50, 500), 0))
            row["spare_cubic_meters"] = float(np.round(rng.uniform(0.5, 3.0), 2))
        rows.append(row)

    return pd.DataFrame(rows)


def generate_mock_requests(num_requests=500, seed=None, start=None, hubs=("Brisbane", "Auckland"), num_requesters=150):
    rng = np.random.default_rng(seed)
    start = start or date.today()

    rows = []
    for request_index in range(num_requests):
        (from_city, from_cc, _, _), (to_city, to_cc, _, _) = _route(rng, hubs)
        earliest = start + timedelta(days=int(rng.integers(0, 30)))
        latest = earliest + timedelta(days=int(rng.integers(3, 30)))
        weight = float(np.round(rng.lognormal(mean=1.2, sigma=0.8), 1))

        rows.append({
            "request_id": f"r_{str(request_index + 1).zfill(5)}",
            "user_id": f"c_{rng.integers(1, num_requesters + 1)}",
            "title": f"Parcel {request_index + 1}",
            "from_location": from_city,
            "to_location": to_city,
            "from_country": from_cc,
            "to_country": to_cc,
            "deadline_earliest": earliest.isoformat(),
            "deadline_latest": latest.isoformat(),
            "weight_kg": max(weight, 0.1),
            "length": float(rng.integers(10, 90)),
            "width": float(rng.integers(10, 60)),
            "height": float(rng.integers(5, 40)),
            "value_usd": float(np.round(rng.uniform(10, 800), 2)),
            "max_reward": float(np.round(rng.uniform(20, 250), 0)),
            "preferred_method": rng.choice(["any", "plane", "boat"], p=[0.6, 0.25, 0.15]),
            "category": CATEGORIES[int(rng.integers(0, len(CATEGORIES)))],
            "restricted_items": bool(rng.random() < 0.05),
            "status": "open",
        })

    return pd.DataFrame(rows)


def generate_mock_data(output_dir="sampledata", num_travelers=40, num_trips=200, num_requests=500, seed=None):
    """
    Writes travelers.csv, trips.csv and requests.csv to output_dir.
    Returns the three DataFrames.
    """
    os.makedirs(output_dir, exist_ok=True)

    travelers = generate_mock_travelers(num_travelers, seed=seed)
    trips = generate_mock_trips(travelers, num_trips, seed=None if seed is None else seed + 1)
    requests = generate_mock_requests(num_requests, seed=None if seed is None else seed + 2)

    travelers.to_csv(os.path.join(output_dir, "travelers.csv"), index=False)
    trips.to_csv(os.path.join(output_dir, "trips.csv"), index=False)
    requests.to_csv(os.path.join(output_dir, "requests.csv"), index=False)

    print(f"✅ Generated {len(travelers)} travelers, {len(trips)} trips, {len(requests)} requests in '{output_dir}'")

    # Quick preview of matching density
    print("\nTop 5 Routes (Matching Potential):")
    counts = requests.groupby(["from_location", "to_location"]).size().sort_values(ascending=False).head(5)
    for (origin, destination), count in counts.items():
        print(f"  {origin} -> {destination}: {count} requests")

    return travelers, trips, requests


if __name__ == "__main__":
    generate_mock_data(num_travelers=40, num_trips=200, num_requests=500)
