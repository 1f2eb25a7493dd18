"""
HanziPath - Learn Chinese characters through their components.

Recommends the next character to learn from a learner's known set and a
character decomposition graph, and finds "i+1" example sentences that
introduce exactly one new character.

Packages:
- hanzipath.data: id mapping, corpus snapshot, source file loader
- hanzipath.classroom: recommendations, sentence filter, learner state
- hanzipath.schemas: persisted progress and settings models
- hanzipath.utils: settings loading
"""

__version__ = "0.1.0"
