"""
Built-in Variables

Resolves %-prefixed variable references (e.g. %hostname, %date) to
current system values. Resolution never raises: OS query failures become
an inline "Error: ..." string and unknown names a fixed placeholder, so a
bad variable cannot abort a block tick.
"""

import getpass
import ipaddress
import socket
from datetime import datetime
from typing import Callable

import psutil

from dazibao import APP_NAME, __version__

UNKNOWN_VARIABLE = "Unknown variable"
NOT_AVAILABLE = "N/A"


class VariableResolver:
    """Maps built-in variable names to current system values"""

    def __init__(
        self,
        now: Callable[[], datetime] = datetime.now,
        app_name: str = APP_NAME,
        app_version: str = __version__,
    ):
        self._now = now
        self.app_name = app_name
        self.app_version = app_version

        self._variables: dict[str, Callable[[], str]] = {
            "hostname": socket.gethostname,
            "time": lambda: self._now().strftime("%H:%M:%S"),
            "date": lambda: self._now().strftime("%Y-%m-%d"),
            "year": lambda: self._now().strftime("%Y"),
            "month": lambda: self._now().strftime("%m"),
            "day": lambda: self._now().strftime("%d"),
            "dayname": lambda: self._now().strftime("%A"),
            "hours": lambda: self._now().strftime("%H"),
            "minutes": lambda: self._now().strftime("%M"),
            "seconds": lambda: self._now().strftime("%S"),
            "username": getpass.getuser,
            "ip_address": self._get_ip_address,
            "app_name": lambda: self.app_name,
            "app_version": lambda: self.app_version,
        }

    @property
    def names(self) -> list[str]:
        """Names of all recognized variables"""
        return list(self._variables)

    def resolve(self, name: str) -> str:
        """
        Resolve a variable name to its current value.

        Args:
            name: Variable identifier, without the % sentinel

        Returns:
            Current value, "Error: ..." if the OS query failed, or
            "Unknown variable" for unrecognized names
        """
        getter = self._variables.get(name)
        if getter is None:
            return UNKNOWN_VARIABLE

        try:
            return getter()
        except Exception as e:
            return f"Error: {e}"

    def _get_ip_address(self) -> str:
        """First non-loopback IPv4 address of the host"""
        for addresses in psutil.net_if_addrs().values():
            for addr in addresses:
                if addr.family != socket.AF_INET:
                    continue
                if ipaddress.ip_address(addr.address).is_loopback:
                    continue
                return addr.address
        return NOT_AVAILABLE
