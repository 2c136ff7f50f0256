"""
TextCompare: side-by-side word diff editor.

Two editable panes with word-level differences highlighted and
vertical scrolling kept in lockstep.
"""

__version__ = "1.0.0"
