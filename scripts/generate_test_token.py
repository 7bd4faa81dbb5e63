#!/usr/bin/env python3
"""Print signed bearer tokens for poking at the API by hand.

Run with:
    python scripts/generate_test_token.py
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rateplate.core.auth import create_access_token
from rateplate.domain import Principal

SAMPLE_PRINCIPALS = [
    Principal(
        user_id="00000000-0000-0000-0000-00000000a001",
        email="admin@rateplate.local",
        first_name="Admin",
        roles=["admin"],
    ),
    Principal(
        user_id="00000000-0000-0000-0000-00000000c001",
        email="critic@rateplate.local",
        first_name="Carla",
        last_name="Critic",
        claims=[("tier", "gold")],
    ),
]

for principal in SAMPLE_PRINCIPALS:
    issued = create_access_token(principal)
    print(f"{principal.email} (expires {issued.expires_at.isoformat()}):\n{issued.token}\n")
