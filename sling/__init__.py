"""
Slingshot arcade framework.

Engine, recording/replay and host scheduling for the drag-to-shoot
arcade game. See sling.engine for the simulation core and
sling.logging for the logging system.
"""

__version__ = "1.0.0"

__all__ = ['__version__']
