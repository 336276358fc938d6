"""
Calculator Tool

The four basic arithmetic operations on two numbers.
"""

import operator

from ..errors import ToolExecutionError
from .registry import CapabilityDescriptor, ToolDefinition, object_schema

OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
}


def _to_number(value, name: str) -> float:
    if isinstance(value, bool):
        raise ToolExecutionError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ToolExecutionError(f"{name} must be a number, got {value!r}") from e


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def calculate(operation: str, a, b) -> dict:
    """
    Apply ``operation`` to ``a`` and ``b``.

    Raises:
        ToolExecutionError: unknown operation, non-numeric operand, or division by zero.
    """
    if operation not in OPERATIONS:
        raise ToolExecutionError(
            f"unknown operation: {operation} (expected one of {', '.join(OPERATIONS)})"
        )
    x = _to_number(a, "a")
    y = _to_number(b, "b")
    if operation == "divide" and y == 0:
        raise ToolExecutionError("division by zero")
    return {"operation": operation, "a": x, "b": y, "result": OPERATIONS[operation](x, y)}


def format_result_for_llm(result: dict) -> str:
    return (
        f"{_format_number(result['a'])} {result['operation']} "
        f"{_format_number(result['b'])} = {_format_number(result['result'])}"
    )


def create_tool() -> ToolDefinition:
    def handle(params: dict) -> dict:
        return calculate(str(params.get("operation", "")), params.get("a"), params.get("b"))

    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name="calculate",
            description="Perform basic arithmetic (add, subtract, multiply, divide).",
            parameters=object_schema(
                {
                    "operation": {
                        "type": "string",
                        "enum": list(OPERATIONS),
                        "description": "Operation to perform",
                    },
                    "a": {"type": "number", "description": "First number"},
                    "b": {"type": "number", "description": "Second number"},
                },
                required=["operation", "a", "b"],
            ),
        ),
        handler=handle,
        formatter=format_result_for_llm,
    )
