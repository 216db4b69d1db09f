"""Raw-socket build orchestrator."""

__app_name__ = "Raw-socket Build Orchestrator"
__version__ = "0.1.0"
