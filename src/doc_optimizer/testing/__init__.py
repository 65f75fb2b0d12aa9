"""Testing – deterministic doubles for clocks, sleeps and metrics."""
