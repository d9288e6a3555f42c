"""
AgentForward
Per-agent proxy forward compiler and telemetry reconciliation service.
"""

__version__ = "0.1.0"
