"""Host integrations for the correction engine."""
