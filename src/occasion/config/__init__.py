"""Process configuration: config file location, settings, logging."""
