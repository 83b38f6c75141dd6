"""Pipeline data model, orchestrator and local build runner."""
