"""
Exchange Rate Tool

Live currency conversion via open.er-api.com (free, no key required).
"""

import logging

import requests

from ..errors import ToolExecutionError
from ..models import ToolsConfig
from .registry import CapabilityDescriptor, ToolDefinition, object_schema

logger = logging.getLogger(__name__)

RATES_URL = "https://open.er-api.com/v6/latest/{base}"


def convert_currency(
    from_currency: str,
    to_currency: str,
    amount: float = 1,
    timeout: int = 15,
) -> dict:
    """
    Convert ``amount`` from one currency to another at the current rate.

    Raises:
        ToolExecutionError: missing codes, unknown currency, or a failed request.
    """
    if not from_currency or not to_currency:
        raise ToolExecutionError(
            'from and to currency codes are required. Expected JSON: {"from": "USD", "to": "KRW"}'
        )
    base = from_currency.strip().upper()
    target = to_currency.strip().upper()

    try:
        response = requests.get(RATES_URL.format(base=base), timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"Exchange rate lookup failed for {base}: {e}")
        raise ToolExecutionError(f"exchange rate service unavailable: {e}") from e
    except ValueError as e:
        raise ToolExecutionError(f"unexpected exchange rate response: {e}") from e

    if data.get("result") != "success":
        raise ToolExecutionError(
            f"exchange rate lookup failed: {data.get('error-type', 'unknown error')}"
        )

    rate = (data.get("rates") or {}).get(target)
    if rate is None:
        raise ToolExecutionError(f"currency not found: {target}")

    return {
        "from": base,
        "to": target,
        "rate": rate,
        "amount": amount,
        "converted": round(amount * rate, 2),
    }


def format_result_for_llm(result: dict) -> str:
    return (
        f"{result['from']} -> {result['to']}\n"
        f"Rate: 1 {result['from']} = {result['rate']} {result['to']}\n"
        f"{result['amount']} {result['from']} = {result['converted']:.2f} {result['to']}"
    )


def create_tool(tools_config: ToolsConfig) -> ToolDefinition:
    def handle(params: dict) -> dict:
        amount = params.get("amount")
        try:
            amount = 1 if amount is None else float(amount)
        except (TypeError, ValueError) as e:
            raise ToolExecutionError(f"amount must be a number, got {amount!r}") from e
        return convert_currency(
            str(params.get("from", "")),
            str(params.get("to", "")),
            amount=amount,
            timeout=tools_config.http_timeout,
        )

    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name="exchange_rate",
            description="Get the live exchange rate between two currencies and convert an amount.",
            parameters=object_schema(
                {
                    "from": {
                        "type": "string",
                        "description": "Source currency code (e.g. USD, KRW, EUR, JPY)",
                    },
                    "to": {"type": "string", "description": "Target currency code"},
                    "amount": {
                        "type": "number",
                        "description": "Amount to convert (default 1)",
                    },
                },
                required=["from", "to"],
            ),
        ),
        handler=handle,
        formatter=format_result_for_llm,
    )
