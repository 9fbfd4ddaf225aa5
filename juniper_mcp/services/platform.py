"""Platform detection for Juniper devices.

Structured `| display xml` output is preferred; free text is parsed when
the XML variant is unavailable. Every extractor returns None when it finds
nothing, and detection degrades to configured fallbacks.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Final

from juniper_mcp.models.platform import DEFAULT_ARCHITECTURE, PlatformInfo

if TYPE_CHECKING:
    from juniper_mcp.services.executor import CommandExecutor
    from juniper_mcp.services.session import SSHSessionManager

logger = logging.getLogger(__name__)

# Most to least specific; first match wins
VERSION_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"Software Release \[([\w.-]+)\]"),
    re.compile(r"Junos:\s+([\w.-]+)"),
    re.compile(r"junos version ([\w.-]+)", re.IGNORECASE),
    re.compile(r"JUNOS Base OS boot \[([\w.-]+)\]"),
    re.compile(r"(\d+\.\d+[\w.-]*)"),
)

MODEL_ARCHITECTURES: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    (re.compile(r"^v?srx", re.IGNORECASE), "x86_64"),
    (re.compile(r"^v?mx", re.IGNORECASE), "x86_64"),
    (re.compile(r"^qfx", re.IGNORECASE), "x86_64"),
    (re.compile(r"^ptx", re.IGNORECASE), "x86_64"),
    (re.compile(r"^ex", re.IGNORECASE), "arm64"),
    (re.compile(r"^acx", re.IGNORECASE), "arm64"),
)

RAW_ARCHITECTURES: Final = frozenset({"x86_64", "amd64", "i386", "arm64", "aarch64", "sparc", "mips"})

HOSTNAME_LINE: Final = re.compile(r"^Hostname:\s*(\S+)", re.MULTILINE)
MODEL_LINE: Final = re.compile(r"^Model:\s*(\S+)", re.MULTILINE)
CHASSIS_LINE: Final = re.compile(r"^Chassis\s+(\S+)\s+\S+", re.MULTILINE)


def extract_version(text: str | None) -> str | None:
    """Extract the software version from `show version` text."""
    if not text:
        return None
    for pattern in VERSION_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def map_architecture(model: str | None) -> str:
    """Map a model (or raw architecture name) to an architecture tag.

    Unrecognized values map to DEFAULT_ARCHITECTURE.
    """
    if not model:
        return DEFAULT_ARCHITECTURE
    value = model.strip()
    if value.lower() in RAW_ARCHITECTURES:
        return value.lower()
    for pattern, arch in MODEL_ARCHITECTURES:
        if pattern.match(value):
            return arch
    return DEFAULT_ARCHITECTURE


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_xml(text: str | None) -> ET.Element | None:
    """Parse device XML output, ignoring anything before the root element."""
    if not text:
        return None
    start = text.find("<")
    if start < 0:
        return None
    try:
        return ET.fromstring(text[start:].strip())
    except ET.ParseError as e:
        logger.debug("Could not parse device XML: %s", e)
        return None


def find_text(root: ET.Element, name: str) -> str | None:
    """First non-empty text of an element with this local name, any namespace."""
    for elem in root.iter():
        if _local_name(elem.tag) == name and elem.text and elem.text.strip():
            return elem.text.strip()
    return None


def parse_version_xml(text: str | None) -> dict[str, str | None] | None:
    """Extract hostname, model and version from `show version | display xml`."""
    root = parse_xml(text)
    if root is None:
        return None
    version = find_text(root, "junos-version")
    if version is None:
        for elem in root.iter():
            if _local_name(elem.tag) == "comment" and elem.text:
                version = extract_version(elem.text)
                if version:
                    break
    facts = {
        "hostname": find_text(root, "host-name"),
        "model": find_text(root, "product-model"),
        "version": version,
    }
    if not any(facts.values()):
        return None
    return facts


def parse_version_text(text: str | None) -> dict[str, str | None]:
    """Extract hostname, model and version from `show version` text."""
    text = text or ""
    hostname = HOSTNAME_LINE.search(text)
    model = MODEL_LINE.search(text)
    return {
        "hostname": hostname.group(1) if hostname else None,
        "model": model.group(1) if model else None,
        "version": extract_version(text),
    }


def parse_chassis_xml(text: str | None) -> str | None:
    """Chassis serial number from `show chassis hardware | display xml`."""
    root = parse_xml(text)
    if root is None:
        return None
    for elem in root.iter():
        if _local_name(elem.tag) != "chassis":
            continue
        for child in elem:
            if _local_name(child.tag) == "serial-number" and child.text and child.text.strip():
                return child.text.strip()
    return None


def parse_chassis_text(text: str | None) -> str | None:
    """Chassis serial number from the text chassis line."""
    match = CHASSIS_LINE.search(text or "")
    return match.group(1) if match else None


class PlatformDetector:
    """Detects and caches device identity."""

    def __init__(self, executor: "CommandExecutor") -> None:
        self.executor = executor
        self._cached: PlatformInfo | None = None

    @property
    def session(self) -> "SSHSessionManager":
        return self.executor.session

    def reset(self) -> None:
        """Forget cached identity."""
        self._cached = None

    async def detect(
        self,
        fallback_hostname: str | None = None,
        fallback_version: str | None = None,
    ) -> PlatformInfo:
        """Detect device identity.

        Args:
            fallback_hostname: Hostname when the device does not report one
                (default: configured host)
            fallback_version: Version when none can be parsed

        Returns:
            PlatformInfo; fallbacks fill every field not detected
        """
        if self._cached is not None:
            return self._cached

        hostname = fallback_hostname or self.session.options.host
        if self.session.mock or not self.session.is_connected():
            logger.debug("Skipping platform detection for %s", hostname)
            return PlatformInfo(hostname=hostname, software_version=fallback_version)

        facts = await self._version_facts()
        serial = await self._serial_number()
        model = facts.get("model")
        info = PlatformInfo(
            hostname=facts.get("hostname") or hostname,
            model=model,
            software_version=facts.get("version") or fallback_version,
            serial_number=serial,
            architecture=map_architecture(model),
        )
        logger.debug(
            "Detected platform for %s: model=%s release=%s arch=%s",
            info.hostname,
            info.model,
            info.software_version,
            info.architecture,
        )
        self._cached = info
        return info

    async def _version_facts(self) -> dict[str, str | None]:
        result = await self.executor.execute("show version", display="xml")
        if result.ok:
            facts = parse_version_xml(result.stdout)
            if facts is not None:
                return facts

        result = await self.executor.execute("show version")
        if not result.ok:
            logger.debug("show version failed: %s", result.stderr)
            return {}
        return parse_version_text(result.stdout)

    async def _serial_number(self) -> str | None:
        result = await self.executor.execute("show chassis hardware", display="xml")
        if result.ok:
            serial = parse_chassis_xml(result.stdout)
            if serial:
                return serial

        result = await self.executor.execute("show chassis hardware")
        if not result.ok:
            return None
        return parse_chassis_text(result.stdout)
