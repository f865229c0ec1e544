"""Run an arbitrary callback on a timed, bound connection.

Run: python examples/execute_demo.py
"""
from __future__ import annotations

from ldap3 import SUBTREE

from timedldap import TimedDirectoryTemplate, TimedLdapError

from _directory import ROOT, build_client, print_metrics


def _find_dn(conn):  # noqa: ANN001, ANN201
    conn.search(f"ou=users,{ROOT}", "(uid=john.doe)", search_scope=SUBTREE, attributes=["cn"])
    if conn.entries:
        return conn.entries[0].entry_dn
    return None


def main() -> int:
    template = TimedDirectoryTemplate(build_client())
    try:
        dn = template.execute_with_result(_find_dn)
        print(f"Search Result: {dn}" if dn else "No result found.")
        print_metrics(template.get_metrics())
    except TimedLdapError as e:
        print(f"Error during LDAP operation: {e}")
        return 1
    finally:
        template.reset_metrics()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
