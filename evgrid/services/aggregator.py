from collections import Counter

from evgrid.db.models import Vehicle


def compute_vehicle_stats(vehicles: list[Vehicle]) -> dict:
    """Compute aggregate statistics over a set of vehicles."""
    if not vehicles:
        return {}

    prices = [v.price_euro for v in vehicles if v.price_euro]
    ranges = [v.range_km for v in vehicles if v.range_km]
    speeds = [v.top_speed_km for v in vehicles if v.top_speed_km]
    efficiencies = [v.efficiency_kwh_100km for v in vehicles if v.efficiency_kwh_100km]
    accels = [float(v.accel_sec) for v in vehicles if v.accel_sec]
    rapid = sum(1 for v in vehicles if (v.rapid_char or "").strip().lower() == "yes")

    stats = {
        "total_vehicles": len(vehicles),
        "rapid_charge_share": round(rapid / len(vehicles) * 100, 1),
    }

    if prices:
        stats["mean_price_euro"] = round(sum(prices) / len(prices), 2)
        stats["median_price_euro"] = _median(prices)
        stats["min_price_euro"] = min(prices)
        stats["max_price_euro"] = max(prices)

    if ranges:
        stats["mean_range_km"] = round(sum(ranges) / len(ranges), 1)
        stats["median_range_km"] = _median(ranges)

    if speeds:
        stats["max_top_speed_km"] = max(speeds)

    if efficiencies:
        stats["mean_efficiency_kwh_100km"] = round(sum(efficiencies) / len(efficiencies), 1)

    if accels:
        stats["mean_accel_sec"] = round(sum(accels) / len(accels), 2)

    return stats


def count_by_brand(vehicles: list[Vehicle]) -> dict[str, int]:
    counts = Counter(v.brand for v in vehicles if v.brand)
    return dict(counts.most_common())


def _median(values: list[float]) -> float:
    s = sorted(values)
    n = len(s)
    if n % 2 == 1:
        return s[n // 2]
    return round((s[n // 2 - 1] + s[n // 2]) / 2, 2)
