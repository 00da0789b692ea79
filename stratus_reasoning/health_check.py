"""Stratus X1 health check.

Tests connectivity to the Stratus API and validates configuration.
Exit code 0 when the API answers the probe, 1 otherwise.

Run with: stratus-health
"""

from __future__ import annotations

import asyncio
import sys
import time

from dotenv import load_dotenv

from stratus_reasoning.config import Credentials, load_config, mask_api_key
from stratus_reasoning.models.stratus_client import StratusClient
from stratus_reasoning.utils.logging import configure_logging


async def run_health_check(credentials: Credentials, client: StratusClient | None = None) -> int:
    """Probe the API and report; returns the process exit code."""
    print("\n2. Testing API connectivity...")
    started = time.perf_counter()
    async with client or StratusClient(credentials) as probe:
        healthy = await probe.health_check()
    duration_ms = (time.perf_counter() - started) * 1000

    if healthy:
        print(f"   OK  API is reachable ({duration_ms:.0f}ms)")
        print("\nStratus X1 is ready to use!")
        return 0

    print("   FAIL  API health check failed", file=sys.stderr)
    print("\n   Possible issues:", file=sys.stderr)
    print("   - Check your internet connection", file=sys.stderr)
    print("   - Verify the API URL is correct", file=sys.stderr)
    print("   - Confirm your API key is valid", file=sys.stderr)
    print(
        f'   - Try: curl -H "Authorization: Bearer {mask_api_key(credentials.api_key)}" '
        f"{credentials.api_url}/v1/chat/completions",
        file=sys.stderr,
    )
    return 1


def main() -> None:
    """Run the health check CLI."""
    load_dotenv()
    configure_logging(level="WARNING")

    print("Stratus X1 Health Check\n")
    print("1. Checking configuration...")
    credentials = load_config()
    if credentials is None:
        print("   FAIL  No configuration found", file=sys.stderr)
        print("   Set STRATUS_API_KEY or create the config file", file=sys.stderr)
        sys.exit(1)

    print(f"   OK  API URL: {credentials.api_url}")
    print(f"   OK  API Key: {mask_api_key(credentials.api_key)}")

    sys.exit(asyncio.run(run_health_check(credentials)))


if __name__ == "__main__":
    main()
