"""Shared configuration for route modules."""

from dataclasses import dataclass

from ragfolio.service.bootstrap import Services


@dataclass
class RouteConfig:
    """Configuration container for Flask route dependencies.

    This replaces global variables with a proper configuration object
    that can be passed around and tested more easily.
    """

    services: Services | None = None
    show_stack_traces: bool = False

    def require_services(self) -> Services:
        if self.services is None:
            raise RuntimeError("Services not initialized; call init_config() first")
        return self.services


# Single shared config instance
_config = RouteConfig()


def get_config() -> RouteConfig:
    """Get the shared route configuration.

    Returns:
        RouteConfig instance with current settings
    """
    return _config


def init_config(services: Services | None = None, show_stack_traces: bool | None = None) -> None:
    """Initialize the shared route configuration.

    Args:
        services: Pipeline objects built by ``build_services``
        show_stack_traces: Include stack traces in 500 responses (development only)
    """
    if services is not None:
        _config.services = services
    if show_stack_traces is not None:
        _config.show_stack_traces = show_stack_traces
