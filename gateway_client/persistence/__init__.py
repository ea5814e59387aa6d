"""Access-data persistence: repository protocols and the SQLite adapter."""
