"""AgentForward API Layer."""
