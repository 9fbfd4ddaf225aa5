"""Platform identity data models."""

from dataclasses import dataclass

PLATFORM_NAME = "juniper"
PLATFORM_TITLE = "Juniper JunOS"
# JunOS is FreeBSD based
PLATFORM_FAMILY = "bsd"
PLATFORM_FAMILIES = ("bsd", "unix", "os")

DEFAULT_ARCHITECTURE = "unknown"


@dataclass(frozen=True)
class PlatformInfo:
    """Identity of a Juniper device.

    Only `hostname` is guaranteed; it falls back to the configured host
    when the device could not be queried.
    """

    hostname: str
    model: str | None = None
    software_version: str | None = None
    serial_number: str | None = None
    architecture: str = DEFAULT_ARCHITECTURE
    name: str = PLATFORM_NAME
    family: str = PLATFORM_FAMILY
    families: tuple[str, ...] = PLATFORM_FAMILIES

    @property
    def identifier(self) -> str:
        """Stable device identifier: serial number, else hostname."""
        return self.serial_number or self.hostname

    def to_dict(self) -> dict[str, object]:
        """Serialize for tool responses."""
        return {
            "name": self.name,
            "title": PLATFORM_TITLE,
            "family": self.family,
            "families": list(self.families),
            "hostname": self.hostname,
            "model": self.model,
            "release": self.software_version,
            "serial_number": self.serial_number,
            "arch": self.architecture,
        }
