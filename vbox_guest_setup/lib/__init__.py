"""Low-level helpers (commands, packages, kernel modules, GDM, ISO, desktop)."""
