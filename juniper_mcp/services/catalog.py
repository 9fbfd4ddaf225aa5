"""Canned device responses for mock mode.

Lets the whole stack run without a device. Lookups match the first
catalog entry contained in the command, so `show configuration system`
answers with the `show configuration` response.
"""

from typing import Final

from juniper_mcp.models.command import CommandResult

SHOW_VERSION: Final = """\
Hostname: lab-srx
Model: SRX240H2
Junos: 12.1X47-D15.4
JUNOS Software Release [12.1X47-D15.4]
"""

SHOW_CHASSIS_HARDWARE: Final = """\
Hardware inventory:
Item             Version  Part number  Serial number     Description
Chassis                                JN123456          SRX240H2
"""

SHOW_VERSION_XML: Final = """\
<rpc-reply xmlns:junos="http://xml.juniper.net/junos/12.1X47/junos">
  <software-information>
    <host-name>lab-srx</host-name>
    <product-model>SRX240H2</product-model>
    <product-name>srx240h2</product-name>
    <junos-version>12.1X47-D15.4</junos-version>
  </software-information>
</rpc-reply>
"""

SHOW_CHASSIS_HARDWARE_XML: Final = """\
<rpc-reply xmlns:junos="http://xml.juniper.net/junos/12.1X47/junos">
  <chassis-inventory xmlns="http://xml.juniper.net/junos/12.1X47/junos-chassis">
    <chassis junos:style="inventory">
      <name>Chassis</name>
      <serial-number>JN123456</serial-number>
      <description>SRX240H2</description>
    </chassis>
  </chassis-inventory>
</rpc-reply>
"""

TEXT_RESPONSES: Final[dict[str, str]] = {
    "show version": SHOW_VERSION,
    "show chassis hardware": SHOW_CHASSIS_HARDWARE,
    "show configuration": "interfaces {\n    ge-0/0/0 {\n        unit 0;\n    }\n}",
    "show route": "inet.0: 5 destinations, 5 routes\n0.0.0.0/0       *[Static/5] 00:00:01\n",
    "show system information": "Hardware: SRX240H2\nOS: JUNOS 12.1X47-D15.4\n",
    "show interfaces": "Physical interface: ge-0/0/0, Enabled, Physical link is Up\n",
}

XML_RESPONSES: Final[dict[str, str]] = {
    "show version": SHOW_VERSION_XML,
    "show chassis hardware": SHOW_CHASSIS_HARDWARE_XML,
}

XML_MODIFIER: Final = "| display xml"


def unknown_command(command: str) -> str:
    return f"% Unknown command: {command}"


def response_for(command: str) -> CommandResult:
    """Look up the canned response for a command.

    Args:
        command: Full command, possibly with a display modifier

    Returns:
        CommandResult with status 0, or status 1 for unknown commands
    """
    if XML_MODIFIER in command:
        base = command.split("|", 1)[0].strip()
        if base in XML_RESPONSES:
            return CommandResult(XML_RESPONSES[base], "", 0)

    for pattern, output in TEXT_RESPONSES.items():
        if pattern in command:
            return CommandResult(output, "", 0)

    return CommandResult(unknown_command(command), "", 1)
