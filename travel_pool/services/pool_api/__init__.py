"""
HTTP API подбора попутчиков и управления группами.
"""
