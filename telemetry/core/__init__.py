"""Server core: configuration, app factory, audit logging."""
