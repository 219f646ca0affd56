#!/usr/bin/env python3
"""
Example usage of the task manager.

This script demonstrates adding, editing, completing, searching and
persisting categorized tasks.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "mcp_server"))

from task_manager import StoreIOError, Task, TaskStore


def main():
    """Demonstrate task manager functionality."""
    print("🎯 Task Manager Example")
    print("=" * 50)

    store_path = Path("example_tasks.json")
    if store_path.exists():
        store_path.unlink()  # Start fresh

    store = TaskStore()

    print("\n1. Adding tasks...")
    milk = Task(name="Buy milk", priority=3)
    release = Task(name="Ship release", description="Tag, build and publish", priority=1)
    store.add("Personal", milk)
    store.add("Work", release)
    review = store.create("Work", "Review pull requests", priority=3)
    print(f"✅ Added {len(store)} tasks in {len(store.categories())} categories")

    print("\n2. Tasks by priority:")
    for task in store.list_by_priority():
        print(f"  • [{task.priority}] {task}")

    print("\n3. Work tasks:")
    for task in store.list_by_category("Work"):
        print(f"  • {task}")

    print("\n4. Editing and completing...")
    store.edit(review, review.name, "Two open reviews", 2)
    store.complete(release)
    for task in store.list_by_priority():
        print(f"  • [{task.priority}] {task}")

    print("\n5. Searching for 'SHIP':")
    for task in store.search("SHIP"):
        print(f"  • {task}")

    print("\n6. Saving and loading...")
    store.save(store_path)
    reloaded = TaskStore()
    reloaded.load(store_path)
    print(f"✅ Reloaded {len(reloaded)} tasks: {[t.name for t in reloaded.list_by_priority()]}")

    print("\n7. Loading a missing file leaves the store as it was...")
    try:
        reloaded.load(Path("does-not-exist.json"))
    except StoreIOError as e:
        print(f"❌ {e}")
    print(f"   Still holding {len(reloaded)} tasks")

    print("\n8. Task statistics:")
    for key, value in reloaded.get_stats().items():
        print(f"  {key.replace('_', ' ').title()}: {value}")

    print(f"\n🎉 Task manager example completed!")
    print(f"Tasks saved to: {store_path.absolute()}")
    print("\nNext steps:")
    print("1. Install the package: pip install -e .")
    print("2. Use CLI: task-manager list")
    print("3. Serve over MCP: task-manager-mcp")


if __name__ == "__main__":
    main()
