"""Kanban boards service - boards, lists, cards, members, labels and activity"""

__version__ = "1.0.0"
