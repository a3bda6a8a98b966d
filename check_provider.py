#!/usr/bin/env python3
"""Script to verify map provider connectivity and the fallback path."""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from ecoroute.config import settings
from ecoroute.models.domain import Coordinate, OptimizationOptions
from ecoroute.services.routing.fallback import RouteFallback
from ecoroute.services.routing.providers import (
    ProviderFailure,
    ProviderRoute,
    build_provider,
    check_health,
    fetch_distance_and_time,
)


def main():
    print("=" * 60)
    print("Map Provider Connection Test")
    print("=" * 60)
    print()

    # Check configuration
    print("1. Checking provider configuration...")
    print(f"   Provider: {settings.map_provider}")
    provider = build_provider(settings)
    if provider is None:
        print("   [WARN] Provider is not configured, requests will use the fallback")
        if settings.map_provider == "openrouteservice":
            print("   Set ECOROUTE_ORS_API_KEY in your .env file")
        else:
            print("   Set ECOROUTE_OSRM_BASE_URL in your .env file")
    else:
        print(f"   [OK] Base URL: {provider.base_url}")
    print()

    # Test health check
    print("2. Testing provider health check...")
    if check_health(provider):
        print("   [OK] Provider is healthy and accessible!")
    else:
        print("   [ERROR] Provider is not responding")
    print()

    # Test a route request
    print("3. Testing route request (Berlin area)...")
    pickup = Coordinate(52.517037, 13.388860)
    delivery = Coordinate(52.496891, 13.385983)
    outcome = fetch_distance_and_time(provider, pickup, delivery)
    match outcome:
        case ProviderRoute():
            print(f"   [OK] Distance: {outcome.distance_km:.2f} km")
            print(f"   [OK] Duration: {outcome.duration_minutes:.1f} min")
        case ProviderFailure():
            print(f"   [ERROR] {outcome.kind}: {outcome.message}")
    print()

    # Test fallback
    print("4. Testing fallback calculation (New York -> Los Angeles)...")
    fallback = RouteFallback()
    result = fallback.calculate_fallback_route(
        Coordinate(40.7128, -74.0060),
        Coordinate(34.0522, -118.2437),
        OptimizationOptions(),
    )
    print(f"   [OK] Source: {result.provider}")
    print(f"   [OK] Shortest: {result.routes.shortest.distance_km} km")
    print(f"   [OK] Eco: {result.routes.eco.distance_km} km")
    print(f"   [OK] Recommended: {result.recommendation.recommended}")
    print()

    print("=" * 60)
    if isinstance(outcome, ProviderRoute):
        print("[OK] Live provider and fallback are working")
        print("=" * 60)
        return 0
    print("[WARN] Live provider unavailable, fallback is working")
    print("=" * 60)
    return 1


if __name__ == "__main__":
    sys.exit(main())
