"""
Newsroom Modules
================

Flask blueprint modules for the news site and its admin API.
"""

__all__ = ['auth', 'content', 'news', 'news_public', 'upload']
