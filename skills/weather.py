"""Current-weather skill using the OpenWeatherMap API."""
from __future__ import annotations

import math
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from core.errors import InvalidArgument, UpstreamUnavailable
from core.skills import SkillResult, command_pattern
from services.http_client import JSONClient
from skills.base import LookupSkill

OPENWEATHER_BASE = "https://api.openweathermap.org/data/2.5"

SYNTHETIC_CONDITIONS = (
    ("Clear", "clear sky"),
    ("Clouds", "few clouds"),
    ("Clouds", "scattered clouds"),
    ("Clouds", "broken clouds"),
    ("Rain", "light rain"),
    ("Rain", "moderate rain"),
    ("Thunderstorm", "thunderstorm"),
    ("Snow", "light snow"),
    ("Mist", "mist"),
)

SYNTHETIC_NOTE = "(Note: live weather data is unavailable, showing simulated conditions.)"


def _round(value: float) -> int:
    """Round half up, so 2.5 -> 3 and -2.5 -> -2."""
    return int(math.floor(value + 0.5))


@dataclass
class WeatherData:
    location: str
    temperature: int
    feels_like: int
    description: str
    humidity: int
    wind_speed: int
    clouds: int
    timestamp: int
    synthetic: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class WeatherSkill(LookupSkill):
    """Report current conditions for a city.

    Live data requires an OpenWeatherMap ``api_key``. Without one the skill
    answers from a deterministic synthetic dataset derived from the city name.
    """

    name = "weather"
    description = "Get current weather information for a city"
    triggers = (command_pattern("weather"),)
    natural_language_triggers = (
        "what's the weather in",
        "what is the weather in",
        "how's the weather in",
        "weather in",
        "weather for",
        "temperature in",
    )
    default_base_url = OPENWEATHER_BASE

    def __init__(
        self,
        *,
        config: Optional[Dict[str, Any]] = None,
        http_client: Optional[JSONClient] = None,
        api_key: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(config=config, http_client=http_client)
        self.api_key = api_key if api_key is not None else (self.config.get("api_key") or None)
        self.units = self.config.get("units", "metric")
        self._clock = clock

    @property
    def usage(self) -> str:
        return "/weather [city]"

    @property
    def live_enabled(self) -> bool:
        return bool(self.api_key) and super().live_enabled

    def execute(self, query: str) -> SkillResult:
        city = self.require_argument(query, "City name").rstrip("?!.,")
        if not city:
            raise InvalidArgument("City name is required", skill=self.name)
        data, synthetic = self.lookup(city)
        response = (
            f"Current weather in {data.location}: {data.temperature}°C, {data.description}. "
            f"Feels like {data.feels_like}°C with {data.humidity}% humidity."
        )
        if synthetic:
            response = f"{response}\n{SYNTHETIC_NOTE}"
        return SkillResult(response=response, data=data)

    # ------------------------------------------------------------------
    def fetch_live(self, query: str) -> WeatherData:
        if self.http_client is None:
            raise UpstreamUnavailable("No HTTP client configured", skill=self.name)
        payload = self.http_client.get_json(
            f"{self.base_url}/weather",
            params={"q": query, "units": self.units, "appid": self.api_key},
        )
        try:
            return self._parse(payload, synthetic=False)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise UpstreamUnavailable("Malformed weather payload", skill=self.name) from exc

    def synthesize(self, query: str) -> WeatherData:
        return self._parse(self.synthetic_payload(query), synthetic=True)

    def synthetic_payload(self, city: str) -> Dict[str, Any]:
        """Build an OpenWeatherMap-shaped payload derived from ``city``."""
        city_hash = sum(ord(char) for char in city.lower())
        base_temp = 15 + city_hash % 20
        main, description = SYNTHETIC_CONDITIONS[city_hash % len(SYNTHETIC_CONDITIONS)]
        return {
            "name": city,
            "sys": {"country": "XX"},
            "main": {
                "temp": base_temp,
                "feels_like": base_temp - 2 + city_hash % 5,
                "humidity": 30 + city_hash % 50,
                "pressure": 1000 + city_hash % 30,
            },
            "weather": [{"main": main, "description": description}],
            "wind": {"speed": 2 + city_hash % 8},
            "clouds": {"all": city_hash % 100},
            "dt": int(self._clock()),
        }

    @staticmethod
    def _parse(payload: Dict[str, Any], *, synthetic: bool) -> WeatherData:
        main = payload["main"]
        return WeatherData(
            location=f"{payload['name']}, {payload['sys']['country']}",
            temperature=_round(float(main["temp"])),
            feels_like=_round(float(main["feels_like"])),
            description=str(payload["weather"][0]["description"]),
            humidity=int(main["humidity"]),
            # m/s to km/h
            wind_speed=_round(float(payload["wind"]["speed"]) * 3.6),
            clouds=int(payload["clouds"]["all"]),
            timestamp=int(payload["dt"]) * 1000,
            synthetic=synthetic,
        )
