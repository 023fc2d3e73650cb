"""HTTP adapter for the Org Chart Kernel."""
