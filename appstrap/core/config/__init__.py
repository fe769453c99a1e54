"""Configuration — installer settings, prompters and the resolver."""
