"""In-memory directory shared by the demos (ldap3 offline mock)."""
from __future__ import annotations

from ldap3 import MOCK_SYNC, Connection, Server

from timedldap.client.ldap3_client import Ldap3DirectoryClient

ROOT = "dc=example,dc=com"
ADMIN = "cn=admin,dc=example,dc=com"
PASSWORD = "password"

_ENTRIES = [
    (ROOT, {"objectClass": ["top", "domain"], "dc": "example"}),
    (ADMIN, {"objectClass": ["person"], "cn": "admin", "sn": "admin", "userPassword": PASSWORD}),
    (f"ou=users,{ROOT}", {"objectClass": ["top", "organizationalUnit"], "ou": "users"}),
    (
        f"uid=john.doe,ou=users,{ROOT}",
        {"objectClass": ["inetOrgPerson"], "cn": "John Doe", "sn": "Doe", "uid": "john.doe"},
    ),
    (
        f"uid=jane.doe,ou=users,{ROOT}",
        {"objectClass": ["inetOrgPerson"], "cn": "Jane Doe", "sn": "Doe", "uid": "jane.doe"},
    ),
]


def build_client() -> Ldap3DirectoryClient:
    server = Server("in_memory_directory")
    seed = Connection(server, user=ADMIN, password=PASSWORD, client_strategy=MOCK_SYNC)
    for dn, attrs in _ENTRIES:
        seed.strategy.add_entry(dn, attrs)
    return Ldap3DirectoryClient(server, user=ADMIN, password=PASSWORD, base=ROOT, client_strategy=MOCK_SYNC)


def print_metrics(metrics: dict[str, int]) -> None:
    print("LDAP Metrics:")
    for key, value in metrics.items():
        print(f"{key}: {value} ms")
