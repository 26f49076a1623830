"""Collaborators that live outside the analysis core: explorer fetch and summarization."""

from .explorer import ExplorerClient, flatten_source, is_valid_address
from .summarizer import OpenAISummarizer, build_summarizer

__all__ = [
    'ExplorerClient',
    'OpenAISummarizer',
    'build_summarizer',
    'flatten_source',
    'is_valid_address',
]
