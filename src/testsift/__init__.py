"""testsift - test discovery and selection.

Loads engine configuration, scans classpath roots for test classes and
resources, and narrows the discovery set with ordered filter rules.
"""

__version__ = "0.1.0"
