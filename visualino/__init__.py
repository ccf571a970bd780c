"""Visualino: a desktop shell around the Blockly editor for Arduino sketches."""

__version__ = "0.2.0"
