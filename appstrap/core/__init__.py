"""Core — domain models, configuration, services and the step engine."""
