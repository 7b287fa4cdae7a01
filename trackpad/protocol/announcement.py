"""Discovery announcement messages broadcast by the server"""

import json
from dataclasses import dataclass
from typing import Any, Dict

from trackpad.common.types import Endpoint


@dataclass(frozen=True)
class AnnouncementMessage:
    """Wire form of an Endpoint: {"name", "ip", "port"}"""

    name: str
    ip: str
    port: int

    @staticmethod
    def endpoint_wrap(endpoint: Endpoint) -> "AnnouncementMessage":
        """
        Build an announcement from an endpoint

        Args:
            endpoint: Server identity and listening endpoint

        Returns:
            Announcement carrying the same triple
        """
        return AnnouncementMessage(name=endpoint.name, ip=endpoint.ip, port=endpoint.port)

    def endpoint_get(self) -> Endpoint:
        """
        Get the announced endpoint

        Returns:
            Endpoint with the announced triple
        """
        return Endpoint(name=self.name, ip=self.ip, port=self.port)

    def json_serialize(self) -> str:
        """
        Serialize announcement to JSON string

        Returns:
            JSON object text
        """
        data: Dict[str, Any] = {"name": self.name, "ip": self.ip, "port": self.port}
        return json.dumps(data, ensure_ascii=False)

    def datagram_encode(self) -> bytes:
        """
        Encode announcement as a UTF-8 datagram payload

        Returns:
            Datagram bytes
        """
        return self.json_serialize().encode("utf-8")

    @staticmethod
    def json_deserialize(data: str) -> "AnnouncementMessage":
        """
        Deserialize announcement from JSON string

        Args:
            data: JSON string

        Returns:
            Deserialized AnnouncementMessage

        Raises:
            ValueError: If the JSON is malformed or a field is missing or mistyped
        """
        parsed = json.loads(data)
        if not isinstance(parsed, dict):
            raise ValueError("Announcement must be a JSON object")
        try:
            name = parsed["name"]
            ip = parsed["ip"]
            port = parsed["port"]
        except KeyError as e:
            raise ValueError(f"Announcement missing field {e}") from e
        if not isinstance(name, str) or not isinstance(ip, str):
            raise ValueError("Announcement 'name' and 'ip' must be strings")
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("Announcement 'port' must be an integer")
        return AnnouncementMessage(name=name, ip=ip, port=port)

    @staticmethod
    def datagram_decode(payload: bytes) -> "AnnouncementMessage":
        """
        Decode a received datagram payload

        Args:
            payload: Datagram bytes

        Returns:
            Decoded AnnouncementMessage

        Raises:
            ValueError: If the payload is not a valid announcement
        """
        return AnnouncementMessage.json_deserialize(payload.decode("utf-8"))
