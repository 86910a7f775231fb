"""Search backends and the shared result cache."""
