"""
Q&A Checker - LLM-assisted grading of numbered question papers.

This package reads a solution key and a student's answer sheet, pairs
every student answer with its canonical answer, and asks a scoring
oracle (an LLM) for a 0-100 score and feedback per question.
"""

__version__ = "1.0.0"
__author__ = "Q&A Checker Team"
