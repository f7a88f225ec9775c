"""
k8sexec - execute a command in every running container of a namespace.
"""

__version__ = "1.0.0"
