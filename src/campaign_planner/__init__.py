"""Campaign planning engine: allocation tree, benchmark-driven estimates, setup wizard."""
