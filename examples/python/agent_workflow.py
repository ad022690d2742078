#!/usr/bin/env python3
"""
AgentLedger - Event Monitor Workflow Example

This example runs a ledger and a monitor side by side:
1. Start a monitor after the current tip
2. Register agents, exchange messages and rate them
3. Watch the events arrive through subscribers
4. Run a filtered historical query over the same range

Set AGENTLEDGER_RPC_URL to watch a remote node instead of the local ledger.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

# Add SDK to path for development
sdk_path = Path(__file__).parent.parent.parent / "sdk" / "python"
sys.path.insert(0, str(sdk_path))

from agentledger import (
    AgentLedger,
    AgentLedgerError,
    AgentRole,
    EventFilter,
    EventMonitor,
    Identity,
    RPCEventSource,
    configure_logging,
)


async def run(ledger: AgentLedger) -> None:
    if os.environ.get("AGENTLEDGER_RPC_URL"):
        source = RPCEventSource.from_env()
    else:
        source = ledger.event_source()

    monitor = EventMonitor.from_env(source)
    monitor.on_agent_registered(lambda e: print(f"   [{e.position}] registered #{e.agent_id} {e.name}"))
    monitor.on_message_sent(
        lambda e: print(f"   [{e.position}] message {e.message_id}: {e.sender_agent_id} -> {e.receiver_agent_id}")
    )
    monitor.on_message_responded(
        lambda e: print(f"   [{e.position}] reply to {e.message_id} from {e.responder_agent_id}")
    )
    monitor.on_trust_score_updated(
        lambda e: print(f"   [{e.position}] trust #{e.agent_id} = {e.trust_score}")
    )
    monitor.on_error(lambda error: print(f"   monitor error: {error}"))

    # Step 1: Start after the current tip
    print("1. Starting monitor...")
    await monitor.start("latest", poll_interval_ms=200)
    start_block = monitor.cursor
    print(f"   Watching after block {start_block}")

    # Step 2: Drive the ledger
    print("\n2. Driving the ledger...")
    identities = [Identity.generate()[0].address for _ in range(3)]
    ids = [
        ledger.register(name, role, f"ipfs://{name}", identity)
        for name, role, identity in zip(
            ("planner", "coder", "reviewer"),
            (AgentRole.CHAT, AgentRole.GENERIC, AgentRole.GENERIC),
            identities,
        )
    ]
    message_id = ledger.send(ids[1], "implement the parser", identities[0])
    ledger.respond(message_id, ids[0], "parser merged", identities[1])
    ledger.rate(ids[1], True, "clean code", identities[0])
    ledger.rate(ids[1], True, "good tests", identities[2])
    ledger.rate(ids[0], False, "vague brief", identities[1])

    # Step 3: Let the monitor catch up
    print("\n3. Live events:")
    await asyncio.sleep(0.5)
    monitor.stop()
    await monitor.wait_closed()

    # Step 4: Historical query for the coder
    print("\n4. Historical query for agent #1:")
    history = await monitor.historical_query(
        start_block + 1, "latest", EventFilter(agent_id=ids[1])
    )
    for event in history.agent_rated:
        print(f"   rated {'+' if event.positive else '-'} by #{event.rater_agent_id}")
    print(f"   Final reputation: {ledger.reputation(ids[1])}")

    await source.close()


def main() -> None:
    """Run the monitor workflow example."""
    print("=== AgentLedger Monitor Example ===\n")
    configure_logging(level=logging.WARNING)

    try:
        asyncio.run(run(AgentLedger()))
    except AgentLedgerError as e:
        print(f"\nError: [{e.code}] {e.message}")
        sys.exit(1)

    print("\n=== Workflow Complete ===")


if __name__ == "__main__":
    main()
