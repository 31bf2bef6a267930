"""
Key-value persistence for the task store.

- errors.py: persistence failure taxonomy
- kv_store.py: JSON-file and in-memory key-value backends
"""
