"""
HTTP transport for the kernel.
"""
