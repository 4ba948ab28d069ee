"""
Snapshot History

Modules:
- snapshots: Match window, snapshot assembly, and export
- analysis: pandas analytics over snapshot and leaderboard tables
- report: Batch report over the newest snapshot file
"""
