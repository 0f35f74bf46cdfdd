from __future__ import annotations

from plan_orchestrator.core.config import ExecutorConfig
from plan_orchestrator.engine.runtime.timeouts import ConfigurableTimeoutStrategy, NoTimeoutStrategy
from plan_orchestrator.engine.schemas.plan import (
    ConditionStep,
    FieldType,
    FormField,
    FormInputSchema,
    FunctionCallStep,
    UserInputStep,
)

FUNCTION_STEP = FunctionCallStep(step_id=1, function_name="add")
INPUT_STEP = UserInputStep(
    step_id=2,
    field_schema=FormInputSchema(fields=[FormField(id="name", type=FieldType.text, label="Name")]),
)
CONDITION_STEP = ConditionStep(step_id=3, condition="true")


def test_no_timeout_strategy():
    strategy = NoTimeoutStrategy()

    assert strategy.get_timeout(FUNCTION_STEP) is None
    assert strategy.get_timeout(INPUT_STEP) is None
    assert strategy.get_timeout(CONDITION_STEP) is None


def test_configurable_defaults():
    strategy = ConfigurableTimeoutStrategy()

    assert strategy.get_timeout(FUNCTION_STEP) == 30.0
    assert strategy.get_timeout(INPUT_STEP) is None
    assert strategy.get_timeout(CONDITION_STEP) is None


def test_zero_disables_limit():
    strategy = ConfigurableTimeoutStrategy(function_call=0, user_input=0, default=0)

    assert strategy.get_timeout(FUNCTION_STEP) is None
    assert strategy.get_timeout(INPUT_STEP) is None


def test_from_config_converts_milliseconds():
    config = ExecutorConfig(step_timeout_ms=1500, user_input_timeout_ms=60000, default_timeout_ms=250)

    strategy = ConfigurableTimeoutStrategy.from_config(config)

    assert strategy.get_timeout(FUNCTION_STEP) == 1.5
    assert strategy.get_timeout(INPUT_STEP) == 60.0
    assert strategy.get_timeout(CONDITION_STEP) == 0.25
