#!/usr/bin/env python3
"""
Basic AgentLedger usage example.

Registers three agents, exchanges messages, rates them and reads the
resulting reputations and event log.
Run with: python examples/basic_usage.py
"""

from agentledger import AgentLedger, AgentLedgerError, AgentRole, Identity
from agentledger.codec import decode_entry

print("=== AgentLedger Basic Usage Example ===\n")

# 1. Identities
print("1. Generating identities...")
alice, _ = Identity.generate()
bob, _ = Identity.generate()
carol, _ = Identity.generate()
for label, identity in (("alice", alice), ("bob", bob), ("carol", carol)):
    print(f"   {label}: {identity.address}")

# 2. Registration
print("\n2. Registering agents...")
ledger = AgentLedger()
alice_id = ledger.register("alice", AgentRole.CHAT, "ipfs://alice", alice.address)
bob_id = ledger.register("bob", AgentRole.GENERIC, "ipfs://bob", bob.address)
carol_id = ledger.register("carol", AgentRole.GENERIC, "ipfs://carol", carol.address)
print(f"   Registered {ledger.count()} agents: {[a.name for a in ledger.list_all()]}")

# 3. Messaging
print("\n3. Sending and responding...")
message_id = ledger.send(bob_id, "can you summarize this paper?", alice.address)
ledger.respond(message_id, alice_id, "done, see ipfs://summary", bob.address)
print(f"   Message {message_id}: {ledger.get_message(message_id)}")

# 4. Ratings
print("\n4. Rating...")
ledger.rate(bob_id, True, "fast and accurate", alice.address)
ledger.rate(bob_id, False, "missed a section", carol.address)
print(f"   bob: {ledger.reputation(bob_id)}")

try:
    ledger.rate(bob_id, True, "again", alice.address)
except AgentLedgerError as e:
    print(f"   Duplicate rating rejected: [{e.code}] {e.message}")

try:
    ledger.rate(carol_id, True, "", carol.address)
except AgentLedgerError as e:
    print(f"   Self rating rejected: [{e.code}] {e.message}")

# 5. Leaderboard
print("\n5. Top rated:")
for agent in ledger.top_rated():
    print(f"   {agent.name:<6} trust={agent.trust_score:>3} ratings={agent.total_interactions}")

# 6. Event log
print("\n6. Event log:")
for entry in ledger.event_log.entries():
    event = decode_entry(entry)
    print(f"   {entry.position} {event.kind.value}")

print("\n=== Done ===")
