from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from trip_calendar.errors import ConfigurationError


@dataclass(frozen=True)
class Settings:
    provider: str
    timezone: str
    input_path: Path
    output_path: Path
    runtime_dir: Path
    log_level: str

    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown time zone: {self.timezone}") from exc


def load_settings() -> Settings:
    load_dotenv(override=False)

    return Settings(
        provider=os.getenv("TRIP_PROVIDER", "travelperk").strip().lower(),
        timezone=os.getenv("TRIP_TIMEZONE", "Etc/UTC"),
        input_path=Path(os.getenv("INPUT_PATH", "./data/travelperk-trip.ics")),
        output_path=Path(os.getenv("OUTPUT_PATH", "./out/travelperk-trip.ics")),
        runtime_dir=Path(os.getenv("RUNTIME_DIR", "./runtime")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
