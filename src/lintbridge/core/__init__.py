"""Core building blocks shared by the orchestrator and the CLI."""
