"""classslots - weekly class-slot scheduling and capacity engine."""

__version__ = "0.1.0"
