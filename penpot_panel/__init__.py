"""NiceGUI control panel for a local Penpot stack."""

__version__ = "0.1.0"
