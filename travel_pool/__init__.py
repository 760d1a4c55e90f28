"""
Travel Pool: подбор попутчиков и управление группами поездок.
"""

__version__ = "1.0.0"
