"""
config/settings.py
Central configuration: reads from environment variables and .env file.
"""
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings:

    def __init__(self):
        self._load()

    def _load(self):
        import os
        env_file = BASE_DIR / ".env"
        if env_file.exists():
            for line in env_file.read_text().splitlines():
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, _, val = line.partition("=")
                    os.environ.setdefault(key.strip(), val.strip())

        self.project_title   = "Offshore Logistics KPI Engine"
        self.project_version = "1.0.0"

        # Optional JSON overrides for facilities / vessels / keyword tables
        self.reference_data_path = os.environ.get(
            "REFERENCE_DATA_PATH", str(BASE_DIR / "data" / "reference_data.json")
        )

        self.metrics_port = int(os.environ.get("METRICS_PORT", "9090"))
        self.log_level    = os.environ.get("LOG_LEVEL", "INFO")

        # Trend baselines: used only when the prior period has no records.
        self.synthetic_baseline_multiplier = float(
            os.environ.get("SYNTHETIC_BASELINE_MULTIPLIER", "0.9")
        )

        # Load/offload pairing
        self.pairing_window_hours = float(os.environ.get("PAIRING_WINDOW_HOURS", "72"))
        self.volume_tolerance_bbls = 0.01

        self.cache_size = int(os.environ.get("CACHE_SIZE", "128"))

        # Vessel day rates (USD) applied when an event carries no cost of its own.
        # (start_date inclusive, end_date exclusive, daily_rate, description)
        self.vessel_daily_rates = [
            ("2024-01-01", "2025-04-01", 33000.0, "Jan 2024 - Mar 2025 Rate"),
            ("2025-04-01", "2099-12-31", 37800.0, "Apr 2025 onward Rate"),
        ]

        self.all_sentinels = {"", "all", "all months", "all locations", "all types", "all departments"}

        self.departments = ["Drilling", "Production", "Logistics"]


settings = Settings()
