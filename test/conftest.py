from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

# Load dotenv files early so settings-based fixtures can read overrides via os.getenv
try:  # pragma: no cover
    from dotenv import load_dotenv

    TEST_ROOT = Path(__file__).resolve().parent
    load_dotenv(TEST_ROOT / ".env", override=False)
    load_dotenv(TEST_ROOT / ".env.example", override=False)
except ImportError:
    pass

from plan_orchestrator.core.config import ExecutorConfig, Settings
from plan_orchestrator.engine.functions.local import LocalFunctionProvider


@pytest.fixture(scope="session")
def test_config() -> Settings:
    """Settings built from the test environment."""
    return Settings()


@pytest.fixture
def executor_config() -> ExecutorConfig:
    """Executor configuration with a short function timeout for tests."""
    return ExecutorConfig(step_timeout_ms=2000)


@pytest.fixture
def calculator() -> LocalFunctionProvider:
    """Local provider with the arithmetic functions used across the engine tests."""
    provider = LocalFunctionProvider()

    def add(a, b):
        return a + b

    def subtract(a, b):
        return a - b

    def multiply(a, b):
        return a * b

    def divide(a, b):
        if b == 0:
            raise ZeroDivisionError("Division by zero")
        return a / b

    async def slow(seconds: float = 1.0, value=None):
        await asyncio.sleep(seconds)
        return value

    provider.register("add", add, description="Add two numbers")
    provider.register("subtract", subtract, description="Subtract b from a")
    provider.register("multiply", multiply, description="Multiply two numbers")
    provider.register("divide", divide, description="Divide a by b")
    provider.register("slow", slow, description="Sleep then return value")
    return provider
