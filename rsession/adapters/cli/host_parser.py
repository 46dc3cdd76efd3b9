"""
Host string parser for session commands

Handles parsing of target strings in various formats:
- hostname
- user@hostname
- user@hostname:port
"""
from typing import Optional, Tuple


def parse_host_string(
    target: str,
    user: Optional[str] = None,
    port: Optional[int] = None,
) -> Tuple[str, Optional[str], Optional[int]]:
    """
    Parse target string into components.

    Explicit user/port arguments win over values embedded in the target.

    Args:
        target: Target string (may include user and port)
        user: Optional user override
        port: Optional port override

    Returns:
        Tuple of (hostname, user, port)

    Examples:
        parse_host_string("server") -> ("server", None, None)
        parse_host_string("deploy@server") -> ("server", "deploy", None)
        parse_host_string("deploy@server:2222") -> ("server", "deploy", 2222)
        parse_host_string("server:2222", port=3333) -> ("server", None, 3333)
    """
    parsed_user = user
    parsed_port = port
    host_part = target

    if "@" in target:
        target_user, host_part = target.split("@", 1)
        parsed_user = user or target_user or None

    # A single colon separates the port; more than one means a bare IPv6 address
    if host_part.count(":") == 1:
        name, port_text = host_part.split(":", 1)
        if port_text.isdigit():
            host_part = name
            parsed_port = port or int(port_text)

    return host_part, parsed_user, parsed_port
