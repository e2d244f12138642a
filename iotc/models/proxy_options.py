# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""
This module represents the proxy settings a device can be configured with.
"""
from azure.iot.device import ProxyOptions


class HttpProxyOptions(object):
    """
    Proxy settings for sending device traffic through an HTTP proxy server.
    """

    def __init__(self, host_address, port, username=None, password=None, proxy_type="HTTP"):
        """
        Initializer for HttpProxyOptions.
        :param str host_address: IP address or DNS name of the proxy server
        :param int port: The port of the proxy server
        :param str username: (optional) username for the proxy server
        :param str password: (optional) password for the proxy server
        :param str proxy_type: (optional) "HTTP", "SOCKS4" or "SOCKS5". Defaults to "HTTP"
        """
        if not host_address:
            raise ValueError("Proxy host address must be provided")
        self.host_address = host_address
        self.port = int(port)
        self.username = username
        self.password = password
        self.proxy_type = proxy_type

    @classmethod
    def create_from_dict(cls, options):
        """Create proxy options from a mapping of the form
        {"host_address", "port", "credentials": {"username", "password"}}
        """
        try:
            host_address = options["host_address"]
            port = options["port"]
        except KeyError as e:
            raise ValueError("Proxy options missing required key: {}".format(e)) from e
        credentials = options.get("credentials") or {}
        return cls(
            host_address,
            port,
            username=credentials.get("username"),
            password=credentials.get("password"),
            proxy_type=options.get("proxy_type", "HTTP"),
        )

    def to_proxy_options(self):
        """Return the equivalent device library ProxyOptions"""
        return ProxyOptions(
            proxy_type=self.proxy_type,
            proxy_addr=self.host_address,
            proxy_port=self.port,
            proxy_username=self.username,
            proxy_password=self.password,
        )
