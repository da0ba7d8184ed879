"""
Configuration Manager Module

Handles loading, saving, and managing application configuration.
Provides bi-directional mapping between the settings store and JSON persistence.
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Iterable, Mapping, Optional

from infrastructure.logger import get_logger

logger = get_logger("ConfigManager")


@dataclass
class SystemSettings:
    """Company attendance policy, mirrored from the backend settings table."""
    company_name: str = "PT. Talenta Traincom Indonesia"
    clock_in_start: str = "08:00"
    attendance_start_date: str = ""  # YYYY-MM-DD, empty = no lower bound

    @classmethod
    def from_key_values(
        cls,
        rows: Iterable[Mapping],
        base: Optional["SystemSettings"] = None
    ) -> "SystemSettings":
        """
        Build settings from backend ``system_settings`` rows.

        Each row has ``key`` and ``value`` (always a string). Unknown keys are
        ignored, empty or missing values keep the value from ``base`` (or the
        defaults).
        """
        values = {}
        for row in rows:
            key = str(row.get("key") or "").strip()
            if key:
                values[key] = row.get("value")

        defaults = base or cls()

        def text(key: str, default: str) -> str:
            value = values.get(key)
            return str(value).strip() if value not in (None, "") else default

        return cls(
            company_name=text("company_name", defaults.company_name),
            clock_in_start=text("clock_in_start", defaults.clock_in_start),
            attendance_start_date=text("attendance_start_date", defaults.attendance_start_date),
        )


@dataclass
class Paths:
    """File paths configuration."""
    employees_csv: str = ""
    records_file: str = ""
    leaves_file: str = ""
    settings_file: str = ""  # Backend system_settings key/value export
    custom_font_path: str = ""  # Custom TTF font for PDF generation


@dataclass
class Roster:
    """Which employees appear in attendance reports."""
    required_roles: list = field(default_factory=lambda: ["karyawan", "magang", "pkwt"])
    excluded_names: list = field(default_factory=lambda: [
        "Eko Winarni", "Super Admin", "Administrator", "Admin", "admin", "Manager", "manager"
    ])


@dataclass
class ReportPrefs:
    """Evaluation thresholds and ordering for reports."""
    rate_threshold: int = 80
    sort_by: str = "attendance_rate"  # "attendance_rate" or "name"
    absent_alert_days: int = 2        # remarks flag when absent > this
    frequent_late_days: int = 4       # remarks flag when late > this


@dataclass
class OutputSettings:
    """Output settings for generated reports."""
    output_dir: str = ""  # Default empty = project root
    filename_pattern: str = "Laporan_Kehadiran_{year}_{month}.xlsx"
    generate_pdf: bool = True
    pdf_output_dir: str = ""  # Empty = same directory as xlsx
    pdf_filename_pattern: str = "Laporan_Kehadiran_{year}_{month}.pdf"


@dataclass
class AppConfig:
    """Main application configuration container."""
    paths: Paths = field(default_factory=Paths)
    system_settings: SystemSettings = field(default_factory=SystemSettings)
    roster: Roster = field(default_factory=Roster)
    report_prefs: ReportPrefs = field(default_factory=ReportPrefs)
    output_settings: OutputSettings = field(default_factory=OutputSettings)


def _build(cls, data: Optional[Mapping]):
    """Instantiate a settings dataclass from a dict, ignoring unknown keys."""
    defaults = asdict(cls())
    data = data if isinstance(data, Mapping) else {}
    return cls(**{key: data.get(key, default) for key, default in defaults.items()})


class ConfigManager:
    """
    Manages application configuration with JSON persistence.

    Responsibilities:
    - Load configuration from JSON file
    - Save configuration to JSON file
    - Provide default configuration
    - Convert between dataclass and dict representations
    """

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._config: AppConfig = AppConfig()

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from JSON file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._config = self._dict_to_config(data)
            except (json.JSONDecodeError, TypeError, AttributeError) as e:
                logger.warning(f"Failed to load config, using defaults. Error: {e}")
                self._config = AppConfig()
        else:
            self._config = AppConfig()
        return self._config

    def save(self) -> None:
        """Save current configuration to JSON file."""
        data = self._config_to_dict(self._config)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.debug(f"Config saved: {self.config_path}")

    def update(self, **kwargs) -> None:
        """Update specific configuration values."""
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
        self.save()

    def _config_to_dict(self, config: AppConfig) -> dict:
        """Convert AppConfig dataclass to dictionary."""
        return asdict(config)

    def _dict_to_config(self, data: dict) -> AppConfig:
        """Convert dictionary to AppConfig dataclass."""
        return AppConfig(
            paths=_build(Paths, data.get("paths")),
            system_settings=_build(SystemSettings, data.get("system_settings")),
            roster=_build(Roster, data.get("roster")),
            report_prefs=_build(ReportPrefs, data.get("report_prefs")),
            output_settings=_build(OutputSettings, data.get("output_settings")),
        )
