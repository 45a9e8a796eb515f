"""
Pytest configuration and fixtures for the seller analyst test suite

Markers:
    - unit: Fast unit tests
    - property: Property-based tests (Hypothesis)
    - integration: Tests that drive the HTTP app end to end
    - golden: Golden projection regression tests
"""

import asyncio
import json
import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agents.reasoning.flows import MARKET_ENTRY_FLOW, STRATEGIC_RECOMMENDATIONS_FLOW
from projection_models import BusinessAssumptions


# ═══════════════════════════════════════════════════════════════════════════════
# PYTEST CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "property: Property-based tests (Hypothesis)")
    config.addinivalue_line("markers", "integration: Tests that drive the HTTP app end to end")
    config.addinivalue_line("markers", "golden: Golden projection regression tests")


# ═══════════════════════════════════════════════════════════════════════════════
# ASSUMPTION FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def scenario_a_payload():
    """Chili sambal seller: healthy margins, positive cash"""
    return {
        "productName": "Sambal Roa Nona Manis",
        "targetSegment": "Office workers who like spicy food",
        "sellPrice": 150000,
        "costOfGoods": 80000,
        "adCost": 20000,
        "otherCostsPercentage": 15,
        "fixedCostsPerMonth": 5000000,
        "avgSalesPerMonth": 200,
        "totalMarketingBudget": 1000000,
        "initialMarketingBudget": 10000000,
        "useSocialMediaAds": True,
        "useKOLs": True,
        "useVideoContent": False,
    }


@pytest.fixture
def scenario_a(scenario_a_payload):
    return BusinessAssumptions.model_validate(scenario_a_payload)


@pytest.fixture
def make_assumptions(scenario_a_payload):
    """Build assumptions from scenario A with field overrides (camelCase keys)"""
    def _make(**overrides):
        payload = dict(scenario_a_payload)
        payload.update(overrides)
        return BusinessAssumptions.model_validate(payload)
    return _make


@pytest.fixture(scope="session")
def golden_manifest():
    """Expected projection values for scenario A"""
    manifest_path = Path(__file__).parent / "fixtures" / "golden_projection.json"
    with open(manifest_path) as f:
        return json.load(f, parse_float=Decimal)


# ═══════════════════════════════════════════════════════════════════════════════
# FLOW BACKEND FAKE
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_RESPONSES = {
    MARKET_ENTRY_FLOW: {
        "evaluation": "This has real potential!",
        "keyConsiderations": "Margins are healthy and the segment is well defined.",
    },
    STRATEGIC_RECOMMENDATIONS_FLOW: {
        "recommendations": [
            "Put 20% of monthly profit back into ads for Sambal Roa Nona Manis.",
            "Film short testimonial videos aimed at office workers.",
            "Test a smaller trial-size jar to lower the first purchase barrier.",
        ],
    },
}


class FakeFlowBackend:
    """
    In-memory FlowBackend.

    Flows can be told to fail with a given exception, or held until released
    so tests can control completion order.
    """

    def __init__(self):
        self.responses = {name: dict(resp) for name, resp in DEFAULT_RESPONSES.items()}
        self.failures = {}
        self.held = set()
        self.calls = []
        self.completed = []
        self._gates = {}
        self._done = {}

    def fail(self, name, error):
        self.failures[name] = error

    def hold(self, name):
        self.held.add(name)

    def release(self, name):
        self._gate(name).set()

    def done(self, name) -> asyncio.Event:
        if name not in self._done:
            self._done[name] = asyncio.Event()
        return self._done[name]

    def _gate(self, name) -> asyncio.Event:
        if name not in self._gates:
            self._gates[name] = asyncio.Event()
        return self._gates[name]

    async def invoke(self, name, payload):
        self.calls.append((name, payload))
        try:
            if name in self.held:
                await self._gate(name).wait()
            if name in self.failures:
                raise self.failures[name]
            self.completed.append(name)
            return dict(self.responses[name])
        finally:
            self.done(name).set()


@pytest.fixture
def fake_backend():
    return FakeFlowBackend()
