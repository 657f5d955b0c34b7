#!/usr/bin/env python3
"""Run a sustained load simulation against an in-process governance engine.

Every simulated request goes through the full pipeline with synthetic
seats, so each recorded decision carries a real, verifiable proof.

Usage:
    python scripts/run_load_simulation.py [options]

Examples:
    # 20 requests/second for 30 seconds
    python scripts/run_load_simulation.py --rate 20 --duration 30

    # Batch pacing: ceil(rate/10) requests per 1 second tick
    python scripts/run_load_simulation.py --rate 100 --batch

    # Verify the proof of every decision left in the window
    python scripts/run_load_simulation.py --verify
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

from govproof.bootstrap.engine import GovernanceEngine
from govproof.config.governance_config import GovernanceConfig
from govproof.infrastructure.observability.logging import configure_structlog


async def run_simulation(
    rate: float,
    duration: float,
    batch: bool,
    report_every: float,
    verify: bool,
) -> int:
    engine = GovernanceEngine(GovernanceConfig.from_environment())

    print(f"\n{'=' * 60}")
    print("LOAD SIMULATION")
    print(f"{'=' * 60}")
    print(f"Rate: {rate}/s ({'batch' if batch else 'steady'} pacing)")
    print(f"Duration: {duration}s")
    print(f"Policy Pack: {engine.config.policy_pack_version}")
    print(f"Signing Key: {engine.signer.key_id}")
    print(f"{'=' * 60}\n")

    async with engine:
        await engine.start_simulation(rate, batch=batch)
        elapsed = 0.0
        while elapsed < duration:
            step = min(report_every, duration - elapsed)
            await asyncio.sleep(step)
            elapsed += step
            print(f"[{elapsed:6.1f}s] {engine.throughput_snapshot().summary()}")
        await engine.stop_simulation()

        snapshot = engine.throughput_snapshot()
        print(f"\n{'=' * 60}")
        print("SIMULATION COMPLETE")
        print(f"{'=' * 60}")
        for key, value in snapshot.to_dict().items():
            print(f"{key:>20}: {value}")

        failures = 0
        if verify:
            print("\n--- Proof Verification ---")
            for decision in engine.recent_decisions():
                entry = await engine.get_proof(decision.proof_id)
                if entry is None:
                    failures += 1
                    print(f"  {decision.proof_id}: missing")
                    continue
                check = await engine.verify_proof_record(
                    decision.proof_id, entry.record.input_hash
                )
                if not check.valid:
                    failures += 1
                    print(f"  {decision.proof_id}: {check.status.value}")
            print(f"Verified: {len(engine.recent_decisions()) - failures} ok, {failures} failed")

    print(f"{'=' * 60}\n")
    return 1 if failures else 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run a sustained governance load simulation"
    )
    parser.add_argument("--rate", type=float, default=10.0, help="Requests per second")
    parser.add_argument(
        "--duration", type=float, default=10.0, help="Seconds to run (default: 10)"
    )
    parser.add_argument(
        "--batch", action="store_true", help="Submit ceil(rate/10) requests per 1s tick"
    )
    parser.add_argument(
        "--report-every", type=float, default=2.0, help="Seconds between progress lines"
    )
    parser.add_argument(
        "--verify", action="store_true", help="Verify every proof left in the window"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Console logging instead of JSON"
    )
    args = parser.parse_args()

    configure_structlog("development" if args.verbose else "production")
    sys.exit(
        asyncio.run(
            run_simulation(
                rate=args.rate,
                duration=args.duration,
                batch=args.batch,
                report_every=args.report_every,
                verify=args.verify,
            )
        )
    )


if __name__ == "__main__":
    main()
