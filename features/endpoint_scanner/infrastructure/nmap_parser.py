from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Optional, Union

from ..domain.models import HostPerformance, PortState


def parse_port_state(raw: Optional[str]) -> PortState:
    value = (raw or "").strip().lower()
    if value == "open":
        return PortState.OPEN
    if value == "closed":
        return PortState.CLOSED
    # nmap also reports open|filtered, closed|filtered and unfiltered
    if "filtered" in value:
        return PortState.FILTERED
    return PortState.UNAVAILABLE


def _parse_srtt(raw: Optional[str]) -> int:
    try:
        value = int((raw or "").strip())
    except ValueError:
        return 0
    return max(0, value)


def parse_nmap_xml(document: Union[str, bytes]) -> Optional[HostPerformance]:
    """Extract port state and smoothed RTT (us) of the first scanned host.

    Returns None when nmap saw no host or no port for it. Raises
    ET.ParseError when the document is not well-formed XML in its
    declared encoding.
    """
    root = ET.fromstring(document)
    host = root.find("host")
    if host is None:
        return None
    port_state = host.find("ports/port/state")
    if port_state is None:
        return None
    times = host.find("times")
    latency = _parse_srtt(times.get("srtt") if times is not None else None)
    return HostPerformance(latency_micros=latency, state=parse_port_state(port_state.get("state")))
