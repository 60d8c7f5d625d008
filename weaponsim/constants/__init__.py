"""Rule constants grouped by area."""
