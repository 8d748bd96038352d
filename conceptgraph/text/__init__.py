"""
Text utilities: sentence splitting, recursive compression and summarization.
"""

from conceptgraph.text.compressor import CompressionResult, TextCompressor
from conceptgraph.text.sentences import SentenceSequence, leading_sentences, split_sentences
from conceptgraph.text.summarizer import SummaryResult, Summarizer, fallback_summary

__all__ = [
    "CompressionResult",
    "TextCompressor",
    "SentenceSequence",
    "leading_sentences",
    "split_sentences",
    "SummaryResult",
    "Summarizer",
    "fallback_summary",
]
