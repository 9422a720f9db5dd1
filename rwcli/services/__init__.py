"""External tool integrations (git, node toolchain)."""
