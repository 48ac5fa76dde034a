"""Presentation layer: payloads, Markdown/JSON reports and plots."""

from .plots import plot_distribution
from .serializer import build_payload, generate_markdown, save_results

__all__ = ["build_payload", "generate_markdown", "plot_distribution", "save_results"]
