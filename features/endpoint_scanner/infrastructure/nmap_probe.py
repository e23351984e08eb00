from __future__ import annotations

import logging
import subprocess
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import List, Optional

from features.endpoint_scanner.application.ports import EndpointProbe, ProbeReporter
from features.endpoint_scanner.domain.errors import ProbeInvocationError
from features.endpoint_scanner.domain.models import (
    UNREACHABLE_PERFORMANCE,
    EndpointAddress,
    HostPerformance,
)

from .nmap_parser import parse_nmap_xml


logger = logging.getLogger(__name__)


@dataclass
class NmapProbe(EndpointProbe):
    """Probes a single TCP port with nmap and reads the XML report from stdout."""

    nmap_path: str = "nmap"
    timeout: Optional[float] = None
    reporter: Optional[ProbeReporter] = None

    def probe(self, endpoint: EndpointAddress) -> HostPerformance:
        output = self._run(endpoint)
        try:
            performance = parse_nmap_xml(output)
        except (ET.ParseError, ValueError) as exc:
            raise ProbeInvocationError(endpoint, f"unparsable nmap output: {exc}") from exc

        reachable = performance is not None
        if performance is None:
            performance = UNREACHABLE_PERFORMANCE
        if self.reporter is not None:
            self.reporter.probe_result(endpoint, performance, reachable)
        return performance

    def command(self, endpoint: EndpointAddress) -> List[str]:
        return [self.nmap_path, endpoint.host, "-oX", "-", "-p", endpoint.port]

    def _run(self, endpoint: EndpointAddress) -> bytes:
        cmd = self.command(endpoint)
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ProbeInvocationError(endpoint, f"nmap executable not found: {self.nmap_path}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ProbeInvocationError(endpoint, f"nmap timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise ProbeInvocationError(endpoint, str(exc)) from exc

        if proc.returncode != 0:
            detail = (proc.stderr or b"").decode("utf-8", errors="replace").strip() or f"exit status {proc.returncode}"
            raise ProbeInvocationError(endpoint, detail)
        # raw bytes; the XML parser honours the document encoding
        return proc.stdout or b""
