from __future__ import annotations

from typing import Dict, Optional

from .models import EndpointAddress


class EndpointScannerError(RuntimeError):
    """Base class for errors raised by the endpoint scanner."""


class ConfigError(EndpointScannerError):
    """Endpoint configuration could not be read or is malformed."""


class ProbeInvocationError(EndpointScannerError):
    """The probe could not be run or its output could not be understood."""

    def __init__(self, endpoint: EndpointAddress, reason: str):
        super().__init__(f"probe of {endpoint} failed: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class NoEndpointAvailable(EndpointScannerError):
    def __init__(self, message: str = "No endpoint available!", failures: Optional[Dict[EndpointAddress, str]] = None):
        super().__init__(message)
        self.failures = dict(failures or {})
