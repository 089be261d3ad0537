"""
Pytest configuration and fixtures.

Provides reusable test fixtures for all test modules.
"""

import copy

import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.models.baseline import Precedent
from src.models.decision import Decision
from tests.fixtures.sample_decisions import (
    LEGAL_BREACH_BASELINES,
    LEGAL_BREACH_DECISION,
    LEGAL_BREACH_TEMPLATES,
    STRIKE_BASELINES,
    STRIKE_DECISION,
    STRIKE_PRECEDENTS,
    STRIKE_TEMPLATES,
    parse_baselines,
    parse_templates,
)


@pytest.fixture
def client():
    """
    FastAPI test client.

    Returns:
        TestClient: FastAPI test client for making requests
    """
    return TestClient(app)


@pytest.fixture
def strike_decision():
    """Strike authorization decision with four options."""
    return Decision.model_validate(copy.deepcopy(STRIKE_DECISION))


@pytest.fixture
def strike_templates():
    """Consequence templates of the strike decision."""
    return parse_templates(copy.deepcopy(STRIKE_TEMPLATES))


@pytest.fixture
def strike_baselines():
    """Dimension baselines of the strike decision."""
    return parse_baselines(STRIKE_BASELINES)


@pytest.fixture
def strike_precedents():
    """Historical strike decisions."""
    return [Precedent.model_validate(p) for p in STRIKE_PRECEDENTS]


@pytest.fixture
def legal_breach_decision():
    """Two-option decision where the higher-scoring option breaches legal."""
    return Decision.model_validate(copy.deepcopy(LEGAL_BREACH_DECISION))


@pytest.fixture
def legal_breach_templates():
    return parse_templates(copy.deepcopy(LEGAL_BREACH_TEMPLATES))


@pytest.fixture
def legal_breach_baselines():
    return parse_baselines(LEGAL_BREACH_BASELINES)


@pytest.fixture
def strike_request_body():
    """Analyze request body (camelCase wire format) for the strike decision."""
    return {
        "decision": copy.deepcopy(STRIKE_DECISION),
        "consequenceTemplates": copy.deepcopy(STRIKE_TEMPLATES),
        "baselines": copy.deepcopy(STRIKE_BASELINES),
        "precedents": copy.deepcopy(STRIKE_PRECEDENTS),
        "timeOnDuty": 738,
    }
