"""Data models — catalog, ledgers, and the dataset bundle."""
