"""
Service implementations for deptrace.
"""
