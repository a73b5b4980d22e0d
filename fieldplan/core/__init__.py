"""Domain packages: calendar engine, planning, directory and location collaborators."""
