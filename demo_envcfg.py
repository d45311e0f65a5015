#!/usr/bin/env python3
"""
Demo: bind the example ServiceConfig, print it, then clear the variables.
"""

import os

from envcfg import bind, clear, resolve
from envcfg.examples import ServiceConfig
from envcfg.serialization import record_to_yaml, schema_to_yaml


def main():
    os.environ.update({
        "DEBUG": "false",
        "CASSANDRA_PORT": "9042",
        "CASSANDRA_HOSTS_1": "10.0.0.1",
        "CASSANDRA_HOSTS_2": "10.0.0.2",
        "STATSD_HOST": "localhost",
        "STATSD": "${STATSD_HOST}:8125",
    })

    print("=" * 80)
    print("SCHEMA")
    print("-" * 80)
    print(schema_to_yaml(resolve(ServiceConfig)))

    config = bind(ServiceConfig)
    print("CONFIG")
    print("-" * 80)
    print(record_to_yaml(config))

    clear(config)
    print("After clear:")
    for key in ("DEBUG", "CASSANDRA_PORT", "CASSANDRA_HOSTS", "STATSD", "HOME"):
        print(f"  {key}={os.environ.get(key)!r}")
    print("=" * 80)


if __name__ == "__main__":
    main()
