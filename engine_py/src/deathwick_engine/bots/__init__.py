"""Bot controllers."""
