"""Family contact scheduling and risk assessment service."""
