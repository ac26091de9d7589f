"""
BioTutor backend: accounts, sessions, lesson progress and streaming tutor chat.
"""

__version__ = "1.0.0"
