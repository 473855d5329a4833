"""
tender_questions — Tender question extraction engine

Recovers the ordered list of questions a bidder has to answer from the
plain text of a tender document, linking lettered sub-questions to their
parent and dropping near-duplicates and non-question prose.
"""

__version__ = "1.0.0"
__author__ = "tender-questions"
