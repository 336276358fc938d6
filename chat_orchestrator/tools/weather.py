"""
Weather Tool

Current conditions for a city via the Open-Meteo geocoding and forecast APIs
(free, no key required).
"""

import logging

import requests

from ..errors import ToolExecutionError
from ..models import ToolsConfig
from .registry import CapabilityDescriptor, ToolDefinition, object_schema

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

# WMO weather interpretation codes
WEATHER_CODES = {
    0: "clear sky",
    1: "mainly clear",
    2: "partly cloudy",
    3: "overcast",
    45: "fog",
    48: "depositing rime fog",
    51: "light drizzle",
    53: "drizzle",
    55: "dense drizzle",
    61: "light rain",
    63: "rain",
    65: "heavy rain",
    71: "light snow",
    73: "snow",
    75: "heavy snow",
    80: "light rain showers",
    81: "rain showers",
    82: "violent rain showers",
    95: "thunderstorm",
    96: "thunderstorm with hail",
    99: "thunderstorm with heavy hail",
}


def describe_weather_code(code) -> str:
    return WEATHER_CODES.get(code, f"code {code}")


def get_weather(city: str, timeout: int = 15) -> dict:
    """
    Look up the current weather for a city.

    Raises:
        ToolExecutionError: empty city, unknown city, or a failed request.
    """
    if not city or not city.strip():
        raise ToolExecutionError('city is empty. Expected JSON: {"city": "Seoul"}')

    try:
        geo_response = requests.get(
            GEOCODING_URL, params={"name": city, "count": 1}, timeout=timeout
        )
        geo_response.raise_for_status()
        places = geo_response.json().get("results") or []
        if not places:
            raise ToolExecutionError(f"city not found: {city}")
        place = places[0]

        forecast_response = requests.get(
            FORECAST_URL,
            params={
                "latitude": place["latitude"],
                "longitude": place["longitude"],
                "current": "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code",
            },
            timeout=timeout,
        )
        forecast_response.raise_for_status()
        current = forecast_response.json()["current"]
    except requests.exceptions.RequestException as e:
        logger.error(f"Weather lookup failed for {city!r}: {e}")
        raise ToolExecutionError(f"weather service unavailable: {e}") from e
    except (KeyError, ValueError) as e:
        raise ToolExecutionError(f"unexpected weather service response: {e}") from e

    return {
        "city": place.get("name", city),
        "country": place.get("country", ""),
        "temperature": current.get("temperature_2m"),
        "humidity": current.get("relative_humidity_2m"),
        "wind_speed": current.get("wind_speed_10m"),
        "condition": describe_weather_code(current.get("weather_code")),
    }


def format_result_for_llm(result: dict) -> str:
    location = f"{result['city']}, {result['country']}" if result["country"] else result["city"]
    return (
        f"Location: {location}\n"
        f"Temperature: {result['temperature']}°C\n"
        f"Humidity: {result['humidity']}%\n"
        f"Wind speed: {result['wind_speed']} km/h\n"
        f"Condition: {result['condition']}"
    )


def create_tool(tools_config: ToolsConfig) -> ToolDefinition:
    def handle(params: dict) -> dict:
        return get_weather(str(params.get("city", "")), timeout=tools_config.http_timeout)

    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name="weather",
            description=(
                "Get the current weather for a city: temperature, humidity, "
                "wind speed and conditions."
            ),
            parameters=object_schema(
                {
                    "city": {
                        "type": "string",
                        "description": "City name (e.g. Seoul, Tokyo, New York)",
                    }
                },
                required=["city"],
            ),
        ),
        handler=handle,
        formatter=format_result_for_llm,
    )
