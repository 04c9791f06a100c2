"""Application services: release orchestration and project scaffolding."""
