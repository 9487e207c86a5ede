"""Example: Build a Partition Inventory from Saved K2 Responses.

This example demonstrates how records from separate responses are joined
through their relationships:
1. ManagedSystem entry -> system record -> UUIDs of its partitions
2. LogicalPartition feed -> partition records -> owning system UUID

Usage:
    python examples/inventory_report.py managed_system.xml lpars_feed.xml
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from hmc_k2 import K2ParserError, object_from_document, objects_from_document
from hmc_k2.domain import LogicalPartition, ManagedSystem


def build_inventory(system_body: bytes, lpars_body: bytes) -> dict:
    """Join a system with the partitions it reports."""
    system = object_from_document(system_body, ManagedSystem)
    if system is None:
        raise ValueError("First document does not hold a ManagedSystem entry")

    lpars = {lpar.uuid: lpar for lpar in objects_from_document(lpars_body, LogicalPartition)}

    inventory = {"system": system, "partitions": [], "missing": []}
    for uuid in system.lpars_uuids():
        lpar = lpars.get(uuid)
        if lpar is None:
            inventory["missing"].append(uuid)
        else:
            inventory["partitions"].append(lpar)
    return inventory


def print_inventory(inventory: dict) -> None:
    system = inventory["system"]
    print(f"System: {system.name} ({system.mtype}-{system.model} {system.serial})")
    print(f"  State: {system.state}, memory {system.avail_mem}/{system.memory} MB free")
    print(f"  I/O adapters: {len(system.io_adapters())}")

    for lpar in inventory["partitions"]:
        print(f"  LPAR {lpar.id or '-':>3} {lpar.name or '-':<20} {lpar.state or '-':<16} RMC {lpar.rmc_state}")

    for uuid in inventory["missing"]:
        print(f"  WARNING: partition {uuid} not found in the feed")


def main() -> int:
    if len(sys.argv) != 3:
        print(__doc__)
        return 2

    try:
        inventory = build_inventory(Path(sys.argv[1]).read_bytes(), Path(sys.argv[2]).read_bytes())
    except (K2ParserError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    print_inventory(inventory)
    return 0


if __name__ == "__main__":
    sys.exit(main())
