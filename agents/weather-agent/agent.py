"""
weather-agent — Strands agent with weather and calculator tools.

The model is Claude 3.5 Haiku on Amazon Bedrock unless MODEL_ID overrides it.
build_agent() is called once per process by the handler; the agent it returns
is shared by every request.
"""

import os
from typing import Literal

from aws_lambda_powertools import Logger
from strands import Agent, tool
from strands.models import BedrockModel

logger = Logger(service="weather-agent")

DEFAULT_MODEL_ID = "us.anthropic.claude-3-5-haiku-20241022-v1:0"
SYSTEM_PROMPT = "You're a helpful assistant. You can tell the weather and perform calculations."
DIVIDE_BY_ZERO_MESSAGE = "Cannot divide by zero"

Operation = Literal["add", "subtract", "multiply", "divide"]


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------


def current_weather(location: str | None = None) -> str:
    # Fixed forecast; a real provider is outside this agent's scope.
    return "sunny"


def calculate(operation: Operation, a: float, b: float) -> float | str:
    if operation == "add":
        return a + b
    if operation == "subtract":
        return a - b
    if operation == "multiply":
        return a * b
    if operation == "divide":
        return a / b if b != 0 else DIVIDE_BY_ZERO_MESSAGE
    raise ValueError(f"Unsupported operation: {operation!r}")


# ---------------------------------------------------------------------------
# Tools exposed to the model
# ---------------------------------------------------------------------------


@tool
def weather(location: str | None = None) -> str:
    """Get current weather information.

    Args:
        location: Location to get weather for.
    """
    return current_weather(location)


@tool
def calculator(operation: Operation, a: float, b: float) -> float | str:
    """Perform basic arithmetic operations.

    Args:
        operation: One of add, subtract, multiply, divide.
        a: Left operand.
        b: Right operand.
    """
    return calculate(operation, a, b)


def build_agent() -> Agent:
    model_id = os.environ.get("MODEL_ID", DEFAULT_MODEL_ID)
    logger.info("Building agent", model_id=model_id)
    return Agent(
        model=BedrockModel(model_id=model_id),
        tools=[weather, calculator],
        system_prompt=SYSTEM_PROMPT,
    )
