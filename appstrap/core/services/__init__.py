"""Services — environment, database, Docker, Git and telemetry work for one project."""
