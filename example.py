"""Example usage of the tasklist library."""

from tasklist import MemoryStorage, TaskStore, completed, counts, pending


def main():
    """Demonstrate basic task list functionality."""
    store = TaskStore(MemoryStorage())
    store.load()
    store.subscribe(lambda snapshot: print(f"  (saved {len(snapshot)} tasks)"))

    # Add some tasks
    milk = store.add("Buy milk")
    store.add("Walk dog")
    store.add("Write documentation")

    print(store)
    print()

    # Complete a task
    store.update(milk.id, completed=True)
    print("After completing 'Buy milk':")
    print(store)
    print()

    snapshot = store.snapshot()
    print("Pending tasks:")
    for task in pending(snapshot):
        print(f"  - {task}")
    print()

    print("Completed tasks:")
    for task in completed(snapshot):
        print(f"  - {task}")
    print()

    print(counts(snapshot).as_dict())


if __name__ == "__main__":
    main()
