"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import Provider, Service, TimeOfDay, WeeklySchedule, Weekday, WorkingWindow


def _validate_time_string(value: str) -> str:
    # Raises ValueError for anything that is not HH:MM
    return str(TimeOfDay.parse(value))


class DefaultsConfig(BaseModel):
    """Default settings for slot generation."""
    slot_duration_minutes: int = 30
    open: str = "09:00"
    close: str = "17:00"

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("slot_duration_minutes must be greater than zero")
        return value

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        return _validate_time_string(value)

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the default window opens before it closes."""
        if TimeOfDay.parse(self.close) <= TimeOfDay.parse(self.open):
            raise ValueError("close must be later than open")
        return self

    def get_default_window(self) -> WorkingWindow:
        """Working window used for weekdays a provider has not configured."""
        return WorkingWindow(
            open=TimeOfDay.parse(self.open),
            close=TimeOfDay.parse(self.close),
            is_open=True
        )


class WorkingHoursConfig(BaseModel):
    """Opening hours of a single weekday."""
    open: str = "09:00"
    close: str = "17:00"
    is_open: bool = True

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        return _validate_time_string(value)

    def to_window(self) -> WorkingWindow:
        return WorkingWindow(
            open=TimeOfDay.parse(self.open),
            close=TimeOfDay.parse(self.close),
            is_open=self.is_open
        )


class ServiceConfig(BaseModel):
    """Bookable service configuration."""
    id: str
    name: str
    duration_minutes: int
    price: float = 0.0

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    def to_service(self) -> Service:
        return Service(
            id=self.id,
            name=self.name,
            duration_minutes=self.duration_minutes,
            price=self.price
        )


class ProviderConfig(BaseModel):
    """Provider (doctor/barber) configuration."""
    id: str
    name: str
    email: str = ""
    working_hours: Dict[str, WorkingHoursConfig] = Field(default_factory=dict)
    service_ids: List[str] = Field(default_factory=list)

    @field_validator("working_hours")
    @classmethod
    def validate_weekdays(cls, value: Dict[str, WorkingHoursConfig]) -> Dict[str, WorkingHoursConfig]:
        """Normalize weekday keys to lowercase names and reject unknown ones."""
        normalized: Dict[str, WorkingHoursConfig] = {}
        for name, hours in value.items():
            normalized[Weekday.from_name(name).label] = hours
        return normalized

    def to_provider(self, default_window: WorkingWindow) -> Provider:
        """Convert to the domain Provider with a complete weekly schedule."""
        windows = {
            Weekday.from_name(name): hours.to_window()
            for name, hours in self.working_hours.items()
        }
        return Provider(
            id=self.id,
            name=self.name,
            email=self.email,
            schedule=WeeklySchedule.from_mapping(windows, default=default_window),
            service_ids=list(self.service_ids)
        )


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    timezone: str = "Europe/Berlin"
    services: List[ServiceConfig] = Field(default_factory=list)
    providers: List[ProviderConfig] = Field(default_factory=list)
    data_file: Optional[Path] = None

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[ServiceConfig]) -> List[ServiceConfig]:
        """Ensure service ids are unique."""
        seen: set[str] = set()
        for service in value:
            if service.id in seen:
                raise ValueError(f"Duplicate service id detected: {service.id}")
            seen.add(service.id)
        return value

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, value: List[ProviderConfig]) -> List[ProviderConfig]:
        """Ensure provider ids are unique."""
        seen: set[str] = set()
        for provider in value:
            if provider.id in seen:
                raise ValueError(f"Duplicate provider id detected: {provider.id}")
            seen.add(provider.id)
        return value

    @model_validator(mode="after")
    def validate_service_references(self) -> "AppConfig":
        """Ensure providers only reference configured services."""
        known = {service.id for service in self.services}
        for provider in self.providers:
            unknown = [service_id for service_id in provider.service_ids if service_id not in known]
            if unknown:
                raise ValueError(
                    f"Provider '{provider.id}' references unknown service(s): {', '.join(unknown)}"
                )
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's
        directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file
        return config

    def get_domain_providers(self) -> List[Provider]:
        """Providers as domain objects, with defaults filled in."""
        default_window = self.defaults.get_default_window()
        return [provider.to_provider(default_window) for provider in self.providers]

    def get_domain_services(self) -> List[Service]:
        return [service.to_service() for service in self.services]


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
