"""Telemetry configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

from .logger import init_logging
from .metrics import init_metrics
from .tracer import init_tracing

_TRUTHY = {"1", "true", "yes", "on"}


class TelemetryConfig(BaseModel):
    """Runtime configuration for telemetry exporters."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "seabattle"
    service_namespace: str = "game"
    log_level: str = "INFO"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Construct config from env vars (`SEABATTLE_*` + `OTEL_*`)."""

        data: Dict[str, Any] = {}

        switches = {
            "enable_tracing": ("SEABATTLE_ENABLE_TRACING", "OTEL_TRACES_ENABLED"),
            "enable_metrics": ("SEABATTLE_ENABLE_METRICS", "OTEL_METRICS_ENABLED"),
            "enable_logging": ("SEABATTLE_ENABLE_LOGGING", "OTEL_LOGS_ENABLED"),
        }
        for field, env_names in switches.items():
            for name in env_names:
                value = os.getenv(name)
                if value is not None:
                    data[field] = value.strip().lower() in _TRUTHY
                    break

        base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for field, signal in (
            ("otlp_traces_endpoint", "traces"),
            ("otlp_metrics_endpoint", "metrics"),
            ("otlp_logs_endpoint", "logs"),
        ):
            endpoint = os.getenv(f"OTEL_EXPORTER_OTLP_{signal.upper()}_ENDPOINT")
            if not endpoint and base_endpoint:
                endpoint = f"{base_endpoint.rstrip('/')}/v1/{signal}"
            if endpoint:
                data[field] = endpoint

        service_name = os.getenv("OTEL_SERVICE_NAME")
        service_namespace = os.getenv("OTEL_SERVICE_NAMESPACE")
        log_level = os.getenv("SEABATTLE_LOG_LEVEL")
        if service_name:
            data["service_name"] = service_name
        if service_namespace:
            data["service_namespace"] = service_namespace
        if log_level:
            data["log_level"] = log_level.strip().upper()

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            attrs: dict[str, str] = {}
            for part in resource_env.split(","):
                if "=" not in part:
                    continue
                key, value = part.split("=", 1)
                attrs[key.strip()] = value.strip()
            data["resource_attributes"] = attrs

        # An exporter endpoint switches its signal on unless explicitly disabled.
        for endpoint_field, switch in (
            ("otlp_traces_endpoint", "enable_tracing"),
            ("otlp_metrics_endpoint", "enable_metrics"),
            ("otlp_logs_endpoint", "enable_logging"),
        ):
            if data.get(endpoint_field) and switch not in data:
                data[switch] = True

        data.update(overrides)
        return cls(**data)

    def resource_attributes_with_service(self) -> dict[str, str]:
        """Resource attributes shared by every exporter."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return attributes


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Initialise only the telemetry subsystems the config enables."""

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
