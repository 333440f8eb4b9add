"""
Tagstore: tag-indexed project/record repository with rolling session tokens.
"""
