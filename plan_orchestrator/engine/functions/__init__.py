"""Function providers used to execute function call steps."""

from .base import FunctionExecutionResult, FunctionMetadata, FunctionProvider
from .composite import CompositeFunctionProvider
from .local import LocalFunctionProvider

__all__ = [
    "CompositeFunctionProvider",
    "FunctionExecutionResult",
    "FunctionMetadata",
    "FunctionProvider",
    "LocalFunctionProvider",
]
