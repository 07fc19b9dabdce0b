"""
Network utilities for c_http_easy.
"""

from typing import Union


def validate_port(port: Union[int, str]) -> int:
    """
    Validate and convert port to integer.

    Args:
        port: Port number (int or string)

    Returns:
        Port as integer

    Raises:
        ValueError: If port is invalid
    """
    if isinstance(port, str) and not port.isdigit():
        raise ValueError(f"Invalid port: {port}")

    try:
        port_int = int(port)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid port: {port}")

    if not (1 <= port_int <= 65535):
        raise ValueError(f"Port must be between 1 and 65535, got {port_int}")

    return port_int


def format_host_header(host: str, port: int, default_port: int = 80) -> str:
    """
    Format the Host header value for a request.

    Args:
        host: Hostname or IP address
        port: Port number
        default_port: Port that may be left implicit

    Returns:
        Formatted host header string
    """
    if ":" in host:
        host = f"[{host}]"  # IPv6 literal
    if port == default_port:
        return host
    return f"{host}:{port}"
