"""Mapped search with phase timings.

Run: python examples/mapped_search_demo.py
"""
from __future__ import annotations

from timedldap import SearchOptions, SearchScope, TimedDirectoryTemplate, TimedLdapError

from _directory import build_client, print_metrics


def main() -> int:
    template = TimedDirectoryTemplate(build_client())
    options = SearchOptions(scope=SearchScope.SUBTREE)
    try:
        results = template.search_for_list(
            "ou=users", "(uid=john.doe)", options, lambda hit: f"User: {hit.first('cn')}"
        )
        for line in results:
            print(line)
        print_metrics(template.get_metrics())
    except TimedLdapError as e:
        print(f"Error during LDAP operation: {e}")
        return 1
    finally:
        template.reset_metrics()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
