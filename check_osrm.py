#!/usr/bin/env python3
"""Manual script to verify OSRM connectivity and the blocked-route selection."""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from evacmap.config import settings
from evacmap.services.routing.avoidance import build_candidates, select_unblocked_route
from evacmap.services.routing.osrm_client import OSRMClient, check_health


def main():
    print("=" * 60)
    print("OSRM Connection Test")
    print("=" * 60)
    print()

    print("1. Checking OSRM configuration...")
    if not settings.osrm_base_url:
        print("   [ERROR] OSRM base URL is not configured")
        print("   Please set EVAC_OSRM_BASE_URL in your .env file")
        return 1

    print(f"   [OK] OSRM Base URL: {settings.osrm_base_url}")
    print(f"   [OK] OSRM Profile: {settings.osrm_profile}")
    print()

    print("2. Testing OSRM health check...")
    if check_health():
        print("   [OK] OSRM service is healthy and accessible!")
    else:
        print("   [ERROR] OSRM service is not responding")
        return 1
    print()

    print("3. Testing OSRM route alternatives...")
    try:
        client = OSRMClient()
        # Charbagh fire station to Hazratganj, Lucknow
        payload = client.route([(26.8309, 80.9214), (26.8537, 80.9458)])
        candidates = build_candidates(payload)
        print(f"   [OK] Received {len(candidates)} route alternative(s)")
        for candidate in candidates:
            print(
                f"   [OK] #{candidate.index}: {candidate.distance_m:.0f} m, "
                f"{candidate.duration_s:.0f} s, {len(candidate.coordinates)} points"
            )
        selected = select_unblocked_route(candidates, [], settings.blockage_threshold_m)
        if selected is None:
            print("   [ERROR] No route selected")
            return 1
        print(f"   [OK] Selected alternative #{selected.index}")
    except (ConnectionError, ValueError) as e:
        print(f"   [ERROR] Error during route request: {e}")
        return 1
    print()

    print("=" * 60)
    print("[SUCCESS] OSRM is connected and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
