"""Domain layer — pure package facts and name resolution.

Modules here never touch subprocesses, configuration or output.
"""
