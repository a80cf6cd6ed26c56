"""
The Supervisor package.
Launches the clients, reports memory usage while they run and kills them on demand.
"""
from .backend import ProcessBackend, PsutilBackend
from .supervisor import ClientSupervisor, LauncherState

__all__ = ['ProcessBackend', 'PsutilBackend', 'ClientSupervisor', 'LauncherState']
