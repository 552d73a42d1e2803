"""
Pytest configuration and shared fixtures for the quickpulse test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the quickpulse project.
"""

import io
import sys
import tempfile
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional
from unittest.mock import Mock

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from urllib3 import HTTPResponse

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fixed_clock():
    """A clock frozen at FIXED_NOW."""
    from quickpulse.system.clock import FixedClock

    return FixedClock(FIXED_NOW)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "service": {
            "endpoint": "https://collector.example.com/QuickPulseService.svc",
            "timeout_seconds": 2.5,
        },
        "identity": {
            "instance_name": "web-01",
            "machine_name": "host-01",
            "stream_id": "stream-abc",
            "version": "test:1.0",
            "is_web_app": True,
        },
        "logging": {
            "level": "debug",
        },
    }


# ============================================================================
# HTTP Fixtures
# ============================================================================


def build_response(
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
    body: bytes = b"",
) -> requests.Response:
    """Build a real, still unread requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    response.raw = HTTPResponse(body=io.BytesIO(body), status=status_code, preload_content=False)
    response.url = "https://collector.example.com/QuickPulseService.svc"
    response.encoding = "utf-8"
    return response


@pytest.fixture
def make_response():
    """Factory for collector responses."""
    return build_response


@pytest.fixture
def mock_session(make_response):
    """A requests.Session whose request() returns an unsubscribed 200 response."""
    session = Mock(spec=requests.Session)
    session.request.return_value = make_response(headers={"x-ms-qps-subscribed": "false"})
    return session


@pytest.fixture
def transport(mock_session, fixed_clock):
    """HttpTransport bound to the mock session and fixed clock."""
    from quickpulse.transport import HttpTransport

    return HttpTransport(
        service_uri="https://collector.example.com/QuickPulseService.svc/",
        instance_name="web-01",
        stream_id="stream-abc",
        machine_name="host-01",
        clock=fixed_clock,
        session=mock_session,
    )


@pytest.fixture
def service_client(transport):
    """QuickPulseServiceClient over the mock transport."""
    from quickpulse.service import QuickPulseServiceClient

    return QuickPulseServiceClient(transport=transport, version="test:1.0", is_web_app=False)


# ============================================================================
# Sample Fixtures
# ============================================================================


@pytest.fixture
def data_sample():
    """A fully populated sample with counters, accumulators and documents."""
    from quickpulse.models import (
        AccumulatedValue,
        AggregationType,
        ExceptionTelemetryDocument,
        QuickPulseDataSample,
        RequestTelemetryDocument,
    )

    return QuickPulseDataSample(
        end_timestamp=FIXED_NOW,
        ai_requests=4,
        ai_requests_per_second=2.123456,
        ai_request_duration_ave_in_ms=150.25,
        ai_requests_failed_per_second=0.5,
        ai_requests_succeeded_per_second=1.623456,
        ai_dependency_calls=2,
        ai_dependency_calls_per_second=1.0,
        ai_dependency_call_duration_ave_in_ms=20.0,
        ai_dependency_calls_failed_per_second=0.0,
        ai_dependency_calls_succeeded_per_second=1.0,
        ai_exceptions_per_second=0.25,
        perf_counters={
            r"\Processor(_Total)\% Processor Time": 12.34567,
            r"\Memory\Committed Bytes": 1024.0,
        },
        metric_accumulators=[
            AccumulatedValue("Metric1", AggregationType.AVG, [1.0, 2.0, 4.0]),
            AccumulatedValue("Metric2", "Sum", [1.5, 2.5]),
        ],
        telemetry_documents=[
            RequestTelemetryDocument(
                id="r1",
                timestamp=FIXED_NOW - timedelta(seconds=2),
                name="GET /",
                success=True,
                duration=timedelta(milliseconds=500),
                response_code="200",
            ),
            ExceptionTelemetryDocument(
                id="e1",
                timestamp=FIXED_NOW - timedelta(seconds=1),
                exception_type="ValueError",
                exception_message="bad value",
            ),
        ],
        top_cpu_data=[("python", 42.5), ("nginx", 3.25)],
        top_cpu_data_access_denied=False,
    )


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write sample_config_data to a temporary config.toml."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump(sample_config_data, f)
    return path


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield

    from quickpulse.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(original_config_path)
