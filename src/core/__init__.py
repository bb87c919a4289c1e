"""Director chat core"""
__version__ = "0.1.0"
