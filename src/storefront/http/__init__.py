"""HTTP helpers shared by navigation, rendering, and the data endpoint."""
