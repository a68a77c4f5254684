"""Configuration utilities.

Central place to load environment driven settings (data mode, mock data location, output).
Avoids scattering os.getenv calls around the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env once on module import
load_dotenv()


@dataclass(slots=True)
class Settings:
    data_mode: str = os.getenv("DATA_MODE", "MOCK").upper()
    mock_data_dir: Path = Path(os.getenv("MOCK_DATA_DIR", "mock-data"))
    mock_delay_ms: int = int(os.getenv("MOCK_DELAY_MS", "0"))
    output_html: Path = Path(os.getenv("OUTPUT_HTML", "flights.html"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def is_mock(self) -> bool:
        return self.data_mode == "MOCK"


settings = Settings()
