"""User commands: filtering, tool availability and the manager that ties them together."""
