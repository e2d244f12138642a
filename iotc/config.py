# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the configuration of the IoT Central device client
"""
import logging
from azure.iot.device import X509
from iotc import constant
from .models.enums import IOTCConnectType, IOTCTransport, LEGACY_TRANSPORTS, coerce_enum
from .models.proxy_options import HttpProxyOptions

logger = logging.getLogger(__name__)


def _create_x509(key_or_cert):
    if isinstance(key_or_cert, X509):
        return key_or_cert
    try:
        return X509(
            cert_file=key_or_cert["cert_file"],
            key_file=key_or_cert["key_file"],
            pass_phrase=key_or_cert.get("pass_phrase"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(
            "X509 credentials must be an X509 or a mapping with 'cert_file' and 'key_file'"
        ) from e


class IoTCClientConfig(object):
    """Settings the IoT Central client connects with.

    Values may be changed through the client's setters until the client connects.
    """

    def __init__(
        self,
        device_id,
        scope_id,
        cred_type,
        key_or_cert,
        model_id=None,
        global_endpoint=constant.DEFAULT_GLOBAL_ENDPOINT,
        transport=IOTCTransport.MQTT,
        proxy_options=None,
        keep_alive=None,
    ):
        """Initializer for IoTCClientConfig

        :param str device_id: The id of the device. Also used as the provisioning registration id.
        :param str scope_id: The ID scope of the IoT Central application.
            Not needed for connection string authentication.
        :param cred_type: How the device authenticates.
        :type cred_type: :class:`iotc.IOTCConnectType` or str
        :param key_or_cert: The group key, device key or connection string (str), or the X509
            certificate details (a :class:`azure.iot.device.X509`, or a mapping with
            "cert_file", "key_file" and optional "pass_phrase").
        :param str model_id: The id of the device model, for automatic device approval.
        :param str global_endpoint: The hostname of the provisioning service.
        :param transport: The transport protocol.
        :type transport: :class:`iotc.IOTCTransport` or str
        :param proxy_options: Details of proxy configuration.
        :type proxy_options: :class:`iotc.HttpProxyOptions`
        :param int keep_alive: Maximum period in seconds between MQTT communications.

        :raises: ValueError if a value is missing or not recognised.
        """
        self.cred_type = coerce_enum(IOTCConnectType, cred_type)
        if self.cred_type is not IOTCConnectType.CONNECTION_STRING:
            if not device_id:
                raise ValueError("Device id must be provided")
            if not scope_id:
                raise ValueError("Scope id must be provided")
        if not key_or_cert:
            raise ValueError("Key or certificate must be provided")

        self.device_id = device_id
        self.scope_id = scope_id
        if self.cred_type is IOTCConnectType.X509_CERT:
            self.x509 = _create_x509(key_or_cert)
            self.key = None
        else:
            self.x509 = None
            self.key = key_or_cert
        self.model_id = model_id
        self.global_endpoint = global_endpoint
        self.transport = self.sanitize_transport(transport)
        self.proxy_options = self.sanitize_proxy_options(proxy_options)
        self.keep_alive = keep_alive

    @property
    def websockets(self):
        return self.transport is IOTCTransport.MQTT_WS

    @staticmethod
    def sanitize_transport(transport):
        if isinstance(transport, str) and transport.lower() in LEGACY_TRANSPORTS:
            replacement = LEGACY_TRANSPORTS[transport.lower()]
            logger.warning(
                "Transport '{}' is not supported, using '{}' instead".format(
                    transport, replacement.value
                )
            )
            return replacement
        return coerce_enum(IOTCTransport, transport)

    @staticmethod
    def sanitize_proxy_options(proxy_options):
        if proxy_options is None or isinstance(proxy_options, HttpProxyOptions):
            return proxy_options
        if isinstance(proxy_options, dict):
            return HttpProxyOptions.create_from_dict(proxy_options)
        raise TypeError("Invalid type for 'proxy_options'")

    def get_client_kwargs(self):
        """Return the keyword arguments shared by the hub and provisioning client factories"""
        kwargs = {"websockets": self.websockets}
        if self.proxy_options is not None:
            kwargs["proxy_options"] = self.proxy_options.to_proxy_options()
        return kwargs
