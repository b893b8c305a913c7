#!/usr/bin/env python3
"""Run readiness checks and report pass/fail per item. Exit 0 if all required checks pass, 1 otherwise."""
import sys

from foro.readiness import is_ready, run_all_checks


def main() -> int:
    checks = run_all_checks()
    ready, summary = is_ready(checks)
    for name, msg in summary.items():
        status = "OK" if checks[name][0] else "FAIL"
        print(f"  {name}: {status}  {msg}")
    print("")
    if ready:
        print("Readiness: READY (all required checks passed)")
        return 0
    print("Readiness: NOT READY (one or more required checks failed)")
    return 1


if __name__ == "__main__":
    sys.exit(main())
