"""Smart simulator: deterministic stand-in for the external coding agent."""

from gencomputer.runtime.simulator.classifier import RULES, classify, extract_items, match_category
from gencomputer.runtime.simulator.writer import ExperienceWriter, note_filename

__all__ = ["RULES", "ExperienceWriter", "classify", "extract_items", "match_category", "note_filename"]
