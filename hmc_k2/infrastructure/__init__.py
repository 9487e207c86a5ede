"""Infrastructure layer for hmc-k2: configuration, settings and logging."""
