"""
Example record types.

ServiceConfig is the configuration of a small service talking to a
Cassandra cluster and a StatsD daemon:

    export DEBUG="false"
    export CASSANDRA_PORT="9042"
    export CASSANDRA_HOSTS_1="10.0.0.1"
    export CASSANDRA_HOSTS_2="10.0.0.2"
    export STATSD="localhost:8125"

Hosts are a sequence field (every CASSANDRA_HOSTS* variable), STATSD uses
a custom parser, and HOME is kept by clear().
"""
from dataclasses import dataclass, field
from typing import List

from envcfg.schema import env_field


@dataclass(frozen=True)
class Endpoint:
    """host:port pair."""

    host: str
    port: int

    @classmethod
    def parse(cls, text: str) -> "Endpoint":
        host, sep, port = text.rpartition(":")
        if not sep or not host:
            raise ValueError(f"expected host:port, got {text!r}")
        return cls(host=host, port=int(port))

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class ServiceConfig:
    DEBUG: bool = False

    CASSANDRA_PORT: int = 9042
    CASSANDRA_HOSTS: List[str] = field(default_factory=list)

    statsd: Endpoint = env_field(key="STATSD", parser=Endpoint.parse,
                                 default=Endpoint("localhost", 8125))

    home: str = env_field(key="HOME", keep=True, default="")


__all__ = ["Endpoint", "ServiceConfig"]
