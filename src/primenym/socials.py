"""
Social media handle results for the full report.

These are simulated, not looked up: no platform is contacted. Every entry
carries `simulated: True` so consumers can label it accordingly.
"""

import random

# Platform -> probability that the handle is reported available
SIMULATED_PLATFORMS = {
    "Twitter": 1.0,
    "Instagram": 1.0,
    "Facebook": 0.7,
    "TikTok": 0.6,
}


def simulate_handles(username: str, rng: random.Random | None = None) -> list[dict]:
    """Produce one simulated handle result per platform, in platform order."""
    rng = rng or random.Random()

    results = []
    for platform, chance in SIMULATED_PLATFORMS.items():
        results.append({
            "platform": platform,
            "username": username,
            "available": rng.random() < chance,
            "simulated": True,
        })
    return results
